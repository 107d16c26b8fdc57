"""TOON (Token-Oriented Object Notation) encoding system.

This package renders tool output as schema-headed, comma-separated sections
that reference workspace entities by short key.
"""

from .encoder import (
    encode_response,
    encode_simple_section,
    encode_toon,
    encode_toon_meta,
    encode_toon_row,
    encode_toon_section,
    encode_toon_value,
    format_cycle_toon,
    format_estimate_toon,
    format_priority_toon,
    safe_encode,
    validate_row_against_schema,
)
from .errors import (
    ToonEncodingError,
    ToonError,
    ToonRegistryError,
    ToonResolutionError,
    unknown_short_key_error,
)
from .models import (
    ToonEncodingOptions,
    ToonEncodingResult,
    ToonMeta,
    ToonResponse,
    ToonRow,
    ToonSchema,
    ToonSection,
    ToonValue,
    make_row,
)
from .text import strip_issue_urls, strip_markdown_images, strip_project_urls

__all__ = [
    "encode_response",
    "encode_simple_section",
    "encode_toon",
    "encode_toon_meta",
    "encode_toon_row",
    "encode_toon_section",
    "encode_toon_value",
    "format_cycle_toon",
    "format_estimate_toon",
    "format_priority_toon",
    "safe_encode",
    "validate_row_against_schema",
    "ToonEncodingError",
    "ToonError",
    "ToonRegistryError",
    "ToonResolutionError",
    "unknown_short_key_error",
    "ToonEncodingOptions",
    "ToonEncodingResult",
    "ToonMeta",
    "ToonResponse",
    "ToonRow",
    "ToonSchema",
    "ToonSection",
    "ToonValue",
    "make_row",
    "strip_issue_urls",
    "strip_markdown_images",
    "strip_project_urls",
]
