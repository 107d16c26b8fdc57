"""
Short key resolution.

Encoding direction (UUID -> key) always yields the canonical key. Decoding
direction (key -> UUID) accepts flexible input: with DEFAULT_TEAM=SQT,
``s0`` and ``sqt:s0`` resolve to the same state, and any team prefix on a
user or project key is ignored.
"""

from loguru import logger

from ..toon.errors import ToonResolutionError, unknown_short_key_error
from .keys import parse_short_key
from .models import (
    EntityType,
    ProjectMetadata,
    ShortKeyRegistry,
    StateMetadata,
    UserMetadata,
)

_GLOBAL_TYPES = frozenset({EntityType.USER, EntityType.PROJECT})


def normalize_short_key(
    registry: ShortKeyRegistry, entity_type: EntityType, short_key: str
) -> str:
    """Map flexible input onto the canonical key used for lookup."""
    parsed = parse_short_key(short_key)
    if parsed is None or parsed.team_prefix is None:
        return short_key

    default_team_key = registry.default_team_key
    if default_team_key and parsed.team_prefix == default_team_key:
        return parsed.bare

    if entity_type in _GLOBAL_TYPES:
        return parsed.bare

    return short_key.lower()


def get_short_key(registry: ShortKeyRegistry, entity_type: EntityType, uuid: str) -> str:
    """
    Canonical short key for ``uuid``.

    Raises:
        ToonResolutionError: ENTITY_NOT_FOUND when the UUID is not registered
    """
    uuid_map = registry.uuid_map(entity_type)
    short_key = uuid_map.get(uuid)
    if short_key:
        return short_key

    sample = ", ".join(list(uuid_map)[:5])
    if len(uuid_map) > 5:
        sample += "..."
    raise ToonResolutionError(
        f"UUID '{uuid}' not found in {entity_type.value} registry",
        code="ENTITY_NOT_FOUND",
        hint=(
            f"Registry contains {len(uuid_map)} {entity_type.value}(s). "
            f"Sample UUIDs: {sample}"
        ),
        suggestion=(
            "The entity may have been created after registry initialization. "
            "Call workspace_metadata with forceRefresh=true to refresh."
        ),
        entity_type=entity_type.value,
    )


def resolve_short_key(registry: ShortKeyRegistry, entity_type: EntityType, short_key: str) -> str:
    """
    UUID for ``short_key`` after normalization.

    Raises:
        ToonResolutionError: UNKNOWN_SHORT_KEY listing every valid key
    """
    key_map = registry.key_map(entity_type)
    uuid = key_map.get(normalize_short_key(registry, entity_type, short_key))
    if uuid:
        return uuid

    logger.debug(f"Unknown {entity_type.value} key '{short_key}'")
    raise unknown_short_key_error(entity_type.value, short_key, list(key_map))


def try_get_short_key(
    registry: ShortKeyRegistry, entity_type: EntityType, uuid: str | None
) -> str | None:
    if not uuid:
        return None
    return registry.uuid_map(entity_type).get(uuid)


def try_resolve_short_key(
    registry: ShortKeyRegistry, entity_type: EntityType, short_key: str | None
) -> str | None:
    if not short_key:
        return None
    return registry.key_map(entity_type).get(
        normalize_short_key(registry, entity_type, short_key)
    )


def get_user_metadata(registry: ShortKeyRegistry, uuid: str) -> UserMetadata | None:
    return registry.user_metadata.get(uuid)


def get_state_metadata(registry: ShortKeyRegistry, uuid: str) -> StateMetadata | None:
    return registry.state_metadata.get(uuid)


def get_project_metadata(registry: ShortKeyRegistry, uuid: str) -> ProjectMetadata | None:
    return registry.project_metadata.get(uuid)


def get_project_slug_map(registry: ShortKeyRegistry) -> dict[str, str]:
    """The live slug index (not a copy), for project URL stripping."""
    return registry.projects_by_slug_id


def get_user_status_label(registry: ShortKeyRegistry, uuid: str) -> str:
    """
    Label for a user UUID that has no short key.

    ``(deactivated)`` when the registry knows the user as inactive,
    ``(departed)`` when the user is not in the workspace data at all. Reflects
    the registry as of its last refresh.
    """
    meta = registry.user_metadata.get(uuid)
    if meta is not None and meta.active is False:
        return "(deactivated)"
    return "(departed)"


def _index_of(short_key: str) -> int:
    parsed = parse_short_key(short_key)
    return parsed.index if parsed else 0


def list_short_keys(registry: ShortKeyRegistry, entity_type: EntityType) -> list[str]:
    """All keys of ``entity_type``, ordered by numeric index (u0, u1, u2...)."""
    return sorted(registry.key_map(entity_type), key=_index_of)


def has_short_key(registry: ShortKeyRegistry, entity_type: EntityType, short_key: str) -> bool:
    """Exact key membership (no normalization)."""
    return short_key in registry.key_map(entity_type)


def has_uuid(registry: ShortKeyRegistry, entity_type: EntityType, uuid: str) -> bool:
    return uuid in registry.uuid_map(entity_type)
