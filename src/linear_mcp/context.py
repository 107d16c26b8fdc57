"""Runtime context helpers for tool invocation."""

from typing import Optional

from fastmcp import Context

from .config import Config
from .registry.models import TransportType
from .registry.store import RegistryInitContext

DEFAULT_SESSION_ID = "default"


def resolve_transport(value: Optional[str] = None) -> Optional[TransportType]:
    """TransportType for ``value`` (default ``Config.TRANSPORT``); None if unknown."""
    raw = (value or Config.TRANSPORT).lower()
    try:
        return TransportType(raw)
    except ValueError:
        return None


def build_registry_context(
    ctx: Optional[Context], force_refresh: bool = False, transport: Optional[str] = None
) -> RegistryInitContext:
    """Build a RegistryInitContext from the FastMCP Context."""
    session_value = getattr(ctx, "session_id", None)
    if session_value is None:
        session_value = getattr(ctx, "client_id", None)
    session_id = str(session_value) if session_value is not None else DEFAULT_SESSION_ID

    return RegistryInitContext(
        session_id=session_id,
        transport=resolve_transport(transport),
        force_refresh=force_refresh,
    )
