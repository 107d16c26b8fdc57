"""
Session-scoped registry storage with TTL and single-flight initialization.

A RegistryStore is an explicit object owned by the server; tests create their
own instance instead of sharing module state.
"""

import asyncio
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from ..config import Config
from ..toon.errors import ToonRegistryError
from .builder import build_registry
from .models import EntityType, RegistryBuildData, ShortKeyRegistry, TransportType

FetchWorkspaceData = Callable[[], Awaitable[RegistryBuildData]]


def _coerce_transport(transport: TransportType | str | None) -> TransportType | None:
    if transport is None or isinstance(transport, TransportType):
        return transport
    try:
        return TransportType(transport)
    except ValueError:
        return None


def get_registry_age(registry: ShortKeyRegistry) -> float:
    """Seconds since the registry was generated."""
    return (datetime.now(timezone.utc) - registry.generated_at).total_seconds()


def is_stale(
    registry: ShortKeyRegistry, transport: TransportType | str | None = None
) -> bool:
    """
    Whether the registry should be rebuilt.

    ``transport`` overrides the registry's own transport. Only http expires;
    stdio and unknown transports never do.
    """
    effective = _coerce_transport(transport) or registry.transport
    if effective is TransportType.HTTP:
        return get_registry_age(registry) > Config.REGISTRY_HTTP_TTL_SECONDS
    return False


def get_remaining_ttl(registry: ShortKeyRegistry) -> float:
    """Seconds until expiry under http (floored at 0); ``math.inf`` otherwise."""
    if registry.transport is TransportType.HTTP:
        return max(0.0, Config.REGISTRY_HTTP_TTL_SECONDS - get_registry_age(registry))
    return math.inf


def get_registry_stats(registry: ShortKeyRegistry) -> dict[str, Any]:
    return {
        "user_count": len(registry.keys[EntityType.USER]),
        "state_count": len(registry.keys[EntityType.STATE]),
        "project_count": len(registry.keys[EntityType.PROJECT]),
        "age_seconds": get_registry_age(registry),
        "is_stale": is_stale(registry),
        "transport": registry.transport.value if registry.transport else None,
    }


@dataclass(frozen=True)
class RegistryInitContext:
    """Per-call initialization context supplied by the tool layer."""

    session_id: str
    transport: TransportType | None = None
    force_refresh: bool = False


class RegistryStore:
    """
    Session id -> ShortKeyRegistry, plus in-flight initialization tasks.

    Concurrent callers for the same session share one initialization. A forced
    refresh waits for any in-flight initialization, then starts its own.
    Failed initializations are not cached.
    """

    def __init__(self):
        self._registries: dict[str, ShortKeyRegistry] = {}
        self._init_tasks: dict[str, asyncio.Task] = {}

    def store_registry(self, session_id: str, registry: ShortKeyRegistry) -> None:
        self._registries[session_id] = registry

    def get_stored_registry(self, session_id: str) -> ShortKeyRegistry | None:
        return self._registries.get(session_id)

    def clear_registry(self, session_id: str) -> None:
        """Forget a session's registry and any in-flight initialization handle."""
        self._registries.pop(session_id, None)
        self._init_tasks.pop(session_id, None)

    def clear_all_registries(self) -> None:
        self._registries.clear()
        self._init_tasks.clear()

    async def get_or_init_registry(
        self, context: RegistryInitContext, fetch_workspace_data: FetchWorkspaceData
    ) -> ShortKeyRegistry:
        """
        Return the session's registry, building it if missing, stale or forced.

        Raises:
            ToonRegistryError: REGISTRY_INIT_FAILED when fetching or building fails
        """
        session_id = context.session_id

        existing = self._registries.get(session_id)
        if (
            existing is not None
            and not context.force_refresh
            and not is_stale(existing, context.transport)
        ):
            return existing

        in_flight = self._init_tasks.get(session_id)
        if in_flight is not None:
            if not context.force_refresh:
                return await asyncio.shield(in_flight)
            try:
                await asyncio.shield(in_flight)
            except ToonRegistryError as e:
                logger.debug(f"Ignoring failed in-flight init for {session_id}: {e.message}")

        task = asyncio.create_task(self._initialize(context, fetch_workspace_data))
        self._init_tasks[session_id] = task
        return await asyncio.shield(task)

    async def _initialize(
        self, context: RegistryInitContext, fetch_workspace_data: FetchWorkspaceData
    ) -> ShortKeyRegistry:
        session_id = context.session_id
        try:
            data = await fetch_workspace_data()
            registry = build_registry(data)
            registry.transport = context.transport
            self._registries[session_id] = registry
            logger.info(f"Initialized short key registry for session {session_id}")
            return registry
        except Exception as e:
            logger.error(f"Registry initialization failed for session {session_id}: {e}")
            raise ToonRegistryError(
                "Failed to initialize short key registry",
                code="REGISTRY_INIT_FAILED",
                cause=str(e),
                hint="Check Linear API connectivity and authentication",
                session_id=session_id,
            ) from e
        finally:
            if self._init_tasks.get(session_id) is asyncio.current_task():
                del self._init_tasks[session_id]
