"""Short key registry package."""

from .builder import build_registry, create_empty_registry, register_new_project
from .formatting import (
    build_lookup_sections,
    build_project_lookup,
    build_state_lookup,
    build_team_lookup,
    build_user_lookup,
    format_user_ref,
)
from .keys import (
    ParsedLabelKey,
    ParsedShortKey,
    get_team_prefix,
    parse_label_key,
    parse_short_key,
)
from .models import (
    EntityType,
    ProjectEntity,
    ProjectMetadata,
    RegistryBuildData,
    ShortKeyRegistry,
    StateEntity,
    StateMetadata,
    TeamRef,
    TransportType,
    UserEntity,
    UserMetadata,
)
from .resolver import (
    get_project_metadata,
    get_project_slug_map,
    get_short_key,
    get_state_metadata,
    get_user_metadata,
    get_user_status_label,
    has_short_key,
    has_uuid,
    list_short_keys,
    resolve_short_key,
    try_get_short_key,
    try_resolve_short_key,
)
from .store import (
    RegistryInitContext,
    RegistryStore,
    get_registry_age,
    get_registry_stats,
    get_remaining_ttl,
    is_stale,
)

__all__ = [
    "build_registry",
    "create_empty_registry",
    "register_new_project",
    "build_lookup_sections",
    "build_project_lookup",
    "build_state_lookup",
    "build_team_lookup",
    "build_user_lookup",
    "format_user_ref",
    "ParsedLabelKey",
    "ParsedShortKey",
    "get_team_prefix",
    "parse_label_key",
    "parse_short_key",
    "EntityType",
    "ProjectEntity",
    "ProjectMetadata",
    "RegistryBuildData",
    "ShortKeyRegistry",
    "StateEntity",
    "StateMetadata",
    "TeamRef",
    "TransportType",
    "UserEntity",
    "UserMetadata",
    "get_project_metadata",
    "get_project_slug_map",
    "get_short_key",
    "get_state_metadata",
    "get_user_metadata",
    "get_user_status_label",
    "has_short_key",
    "has_uuid",
    "list_short_keys",
    "resolve_short_key",
    "try_get_short_key",
    "try_resolve_short_key",
    "RegistryInitContext",
    "RegistryStore",
    "get_registry_age",
    "get_registry_stats",
    "get_remaining_ttl",
    "is_stale",
]
