"""Linear MCP - short-key registry and TOON encoding for Linear tool output."""

__version__ = "0.1.0"

from .context import build_registry_context
from .registry import RegistryStore, ShortKeyRegistry, build_registry
from .toon import encode_response, encode_toon

__all__ = [
    "build_registry_context",
    "RegistryStore",
    "ShortKeyRegistry",
    "build_registry",
    "encode_response",
    "encode_toon",
    "__version__",
]
