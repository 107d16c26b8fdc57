"""
TOON encoder.

Encodes structured data into the TOON format for token-efficient model output.
Handles escaping, truncation, and fallback to JSON when encoding fails.

Format:
- Schema header: ``name[count]{field1,field2,...}:``
- Data rows: ``  value1,value2,...`` (indented with two spaces)
- Lookup tables are prefixed with ``_`` (``_users``, ``_states``)
"""

import json
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from loguru import logger

from .errors import ToonEncodingError
from .models import (
    ToonEncodingOptions,
    ToonEncodingResult,
    ToonMeta,
    ToonResponse,
    ToonRow,
    ToonSchema,
    ToonSection,
    ToonValue,
)
from .text import strip_issue_urls, strip_markdown_images, strip_project_urls

# Characters that force a value to be quoted.
_QUOTE_TRIGGERS = re.compile(r'[,"\n\r\\]')
_NEWLINES = re.compile(r"\r\n|[\r\n]")

_TITLE_FIELDS = frozenset({"title"})
_DESC_FIELDS = frozenset({"desc", "description"})
_BODY_FIELDS = frozenset({"desc", "description", "body"})

_DEFAULT_OPTIONS = ToonEncodingOptions()


def _escape(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return _NEWLINES.sub("\\\\n", escaped)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def encode_toon_value(value: ToonValue) -> str:
    """
    Encode a single value for TOON output.

    Rules:
        - None, NaN and infinities encode as an empty string
        - Booleans encode as ``true``/``false``
        - Dates encode as ISO-8601 (datetimes in UTC with milliseconds)
        - Lists drop None items, join on commas, and are quoted only when the
          joined text contains a comma
        - Strings containing a comma, quote, backslash or newline are escaped
          (backslash, then quote, then newline to a literal ``\\n``) and
          wrapped in double quotes
    """
    if value is None:
        return ""

    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ""
        return _format_number(value)

    if isinstance(value, datetime):
        return _format_datetime(value)

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, (list, tuple)):
        parts = []
        for item in value:
            if item is None:
                continue
            if isinstance(item, str):
                parts.append(_escape(item))
            else:
                parts.append(encode_toon_value(item))
        joined = ",".join(parts)
        if "," in joined:
            return f'"{joined}"'
        return joined

    text = str(value)
    if text == "":
        return ""

    if _QUOTE_TRIGGERS.search(text):
        return f'"{_escape(text)}"'

    return text


def _truncation_limit(field_name: str, options: ToonEncodingOptions) -> Optional[int]:
    if field_name in _TITLE_FIELDS:
        return options.title_max
    if field_name in _DESC_FIELDS:
        return options.desc_max
    return options.default_max


def _truncate(value: str, max_length: Optional[int], indicator: str) -> str:
    if max_length is None or len(value) <= max_length:
        return value
    cut = max_length - len(indicator)
    if cut <= 0:
        return indicator
    return value[:cut] + indicator


def encode_toon_row(
    row: ToonRow,
    schema: ToonSchema,
    options: ToonEncodingOptions = _DEFAULT_OPTIONS,
) -> str:
    """
    Encode one row in schema field order (without the leading indent).

    Description-class fields are cleaned (issue URLs, images, project URLs)
    and long text is truncated before escaping.

    Rows are expected to come from ``ToonSchema.row`` or ``make_row``, which
    reject a missing field with FIELD_MISMATCH. A hand-built row missing a
    field encodes that field empty; use ``safe_encode`` to report it instead.
    """
    values = []
    for field_name in schema.fields:
        value = row.get(field_name)

        if isinstance(value, str):
            if field_name in _BODY_FIELDS:
                value = strip_issue_urls(value)
                value = strip_markdown_images(value)
                if options.project_slug_map:
                    value = strip_project_urls(value, options.project_slug_map)

            value = _truncate(
                value,
                _truncation_limit(field_name, options),
                options.truncation_indicator,
            )

        values.append(encode_toon_value(value))

    return ",".join(values)


def encode_toon_section(
    section: ToonSection, options: ToonEncodingOptions = _DEFAULT_OPTIONS
) -> str:
    """Encode a section header plus its indented rows.

    Empty sections encode as an empty string unless
    ``options.include_empty_sections`` is set.
    """
    if not section.items and not options.include_empty_sections:
        return ""

    lines = [section.schema.header(len(section.items))]
    for item in section.items:
        lines.append(f"{options.indent}{encode_toon_row(item, section.schema, options)}")
    return "\n".join(lines)


def encode_toon_meta(meta: ToonMeta, options: ToonEncodingOptions = _DEFAULT_OPTIONS) -> str:
    """Encode ``_meta{fields}:`` followed by its single value row."""
    header = f"_meta{{{','.join(meta.fields)}}}:"
    values = ",".join(encode_toon_value(meta.values.get(name)) for name in meta.fields)
    return f"{header}\n{options.indent}{values}"


def encode_toon(response: ToonResponse, options: ToonEncodingOptions = _DEFAULT_OPTIONS) -> str:
    """
    Encode a complete response.

    Order is meta, then lookups, then data; non-empty blocks are joined by a
    blank line.
    """
    blocks = []

    if response.meta is not None:
        blocks.append(encode_toon_meta(response.meta, options))

    for section in [*response.lookups, *response.data]:
        encoded = encode_toon_section(section, options)
        if encoded:
            blocks.append(encoded)

    return "\n\n".join(blocks)


def encode_response(
    data: Any,
    response: ToonResponse,
    options: ToonEncodingOptions = _DEFAULT_OPTIONS,
) -> str:
    """
    Encode a response, falling back to JSON if TOON encoding fails.

    The fallback document is ``{"_fallback": "json", "_reason": ..., "data": ...}``
    so the caller always receives usable output. Data that JSON cannot
    serialize (e.g. a self-referencing dict) is dropped from the fallback.
    """
    try:
        return encode_toon(response, options)
    except Exception as e:
        reason = str(e) or "Unknown encoding error"
        logger.error(f"TOON encoding failed, falling back to JSON: {e}")
        try:
            return json.dumps(
                {"_fallback": "json", "_reason": reason, "data": data},
                indent=2,
                default=str,
            )
        except Exception as dump_error:
            logger.error(f"JSON fallback could not serialize data: {dump_error}")
            return json.dumps({"_fallback": "json", "_reason": reason}, indent=2)


def encode_simple_section(
    schema_name: str,
    fields: list[str],
    items: list[ToonRow],
    options: ToonEncodingOptions = _DEFAULT_OPTIONS,
) -> str:
    """Encode a single section from a name, field list and rows."""
    return encode_toon_section(ToonSection(ToonSchema(schema_name, fields), items), options)


def validate_row_against_schema(row: ToonRow, schema: ToonSchema) -> list[str]:
    """Return the schema fields missing from ``row`` (empty when valid)."""
    return [name for name in schema.fields if name not in row]


def safe_encode(
    response: ToonResponse, options: ToonEncodingOptions = _DEFAULT_OPTIONS
) -> ToonEncodingResult:
    """
    Validate every row against its schema, then encode.

    Never raises; failures are reported through ``ToonEncodingResult.error``.
    """
    try:
        for section in [*response.lookups, *response.data]:
            for index, row in enumerate(section.items):
                missing = validate_row_against_schema(row, section.schema)
                if missing:
                    raise ToonEncodingError(
                        f"Row {index} in section '{section.schema.name}' is missing "
                        f"fields: {', '.join(missing)}",
                        code="FIELD_MISMATCH",
                        hint="Ensure data objects have all fields defined in schema",
                        schema_name=section.schema.name,
                        row_index=index,
                    )

        return ToonEncodingResult(success=True, output=encode_toon(response, options))
    except Exception as e:
        logger.warning(f"TOON safe encode failed: {e}")
        return ToonEncodingResult(success=False, error=str(e) or "Unknown error")


def format_priority_toon(priority: Optional[int]) -> Optional[str]:
    """``1`` -> ``"p1"``."""
    return f"p{priority}" if priority is not None else None


def format_estimate_toon(estimate: Optional[float]) -> Optional[str]:
    """``5`` -> ``"e5"``."""
    if estimate is None:
        return None
    return f"e{encode_toon_value(estimate)}"


def format_cycle_toon(cycle_number: Optional[int]) -> Optional[str]:
    """``5`` -> ``"c5"``."""
    return f"c{cycle_number}" if cycle_number is not None else None
