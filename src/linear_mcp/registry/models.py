"""
Short key registry data models.

Defines the entity inputs used to build a registry, the per-entity metadata it
keeps, and the ShortKeyRegistry itself.

Short keys:
- Users: u0, u1, ... (workspace-global)
- States: s0, s1, ... for the default team, ``<teamkey>:s0`` for other teams
- Projects: pr0, pr1, ... (workspace-global)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class EntityType(str, Enum):
    """Entity types that carry short keys."""

    USER = "user"
    STATE = "state"
    PROJECT = "project"

    @property
    def prefix(self) -> str:
        """Short key letter prefix: ``u``, ``s`` or ``pr``."""
        return _KEY_PREFIXES[self]

    @classmethod
    def from_prefix(cls, prefix: str) -> "EntityType":
        for entity_type, letters in _KEY_PREFIXES.items():
            if letters == prefix:
                return entity_type
        raise ValueError(f"Unknown short key prefix: {prefix}")


_KEY_PREFIXES = {
    EntityType.USER: "u",
    EntityType.STATE: "s",
    EntityType.PROJECT: "pr",
}


class TransportType(str, Enum):
    """
    Transport the server runs under; selects the registry TTL.

    - stdio: desktop client, never auto-expires (user controls refresh)
    - http: shared server, expires after Config.REGISTRY_HTTP_TTL_SECONDS
    """

    STDIO = "stdio"
    HTTP = "http"


# Input entities


@dataclass
class TeamRef:
    """Team identity used for state key prefixes and the ``_teams`` lookup."""

    id: str
    key: str
    name: str = ""
    cycles_enabled: bool = False
    cycle_duration: int | None = None  # weeks
    estimation_type: str = ""


@dataclass
class UserEntity:
    id: str
    created_at: datetime | str
    name: str
    display_name: str
    email: str
    active: bool = True
    role: str | None = None  # from user profiles
    skills: list[str] | None = None
    focus_area: str | None = None
    teams: list[str] | None = None  # team keys, e.g. ["SQT", "SQM"]


@dataclass
class StateEntity:
    id: str
    created_at: datetime | str
    name: str
    type: str  # triage, backlog, unstarted, started, completed, canceled
    team_id: str | None = None


@dataclass
class ProjectEntity:
    id: str
    created_at: datetime | str
    name: str
    state: str  # backlog, planned, started, paused, completed, canceled
    icon: str | None = None
    priority: int | None = None  # 0-4, 0 = none, 1 = urgent
    progress: float | None = None  # 0..1
    lead_id: str | None = None
    target_date: str | None = None  # YYYY-MM-DD
    team_keys: list[str] | None = None
    slug_id: str | None = None


@dataclass
class RegistryBuildData:
    """
    Workspace data a registry is built from.

    ``team_id`` is the legacy single-team filter on states. ``teams`` plus
    ``default_team_id`` enable per-team state keys.
    """

    users: list[UserEntity]
    states: list[StateEntity]
    projects: list[ProjectEntity]
    workspace_id: str
    team_id: str | None = None
    teams: list[TeamRef] | None = None
    default_team_id: str | None = None
    url_key: str | None = None  # workspace URL slug for building links
    organization_name: str | None = None


# Stored metadata


@dataclass
class UserMetadata:
    name: str
    display_name: str
    email: str
    active: bool
    role: str | None = None
    skills: list[str] | None = None
    focus_area: str | None = None
    teams: list[str] | None = None


@dataclass
class StateMetadata:
    name: str
    type: str
    team_id: str  # "" when the state has no team


@dataclass
class ProjectMetadata:
    name: str
    state: str
    icon: str | None = None
    priority: int | None = None
    progress: float | None = None
    lead_id: str | None = None
    target_date: str | None = None
    team_keys: list[str] | None = None
    slug_id: str | None = None


def _empty_type_maps() -> dict[EntityType, dict[str, str]]:
    return {entity_type: {} for entity_type in EntityType}


@dataclass
class ShortKeyRegistry:
    """
    Session-scoped bidirectional mapping between short keys and UUIDs.

    Invariants:
    - ``keys[t]`` and ``uuids[t]`` are exact inverses for every entity type
    - every key in ``keys[EntityType.USER]`` belongs to an active user
    - ``projects_by_slug_id`` values are keys present in ``keys[EntityType.PROJECT]``
    """

    workspace_id: str = ""
    keys: dict[EntityType, dict[str, str]] = field(default_factory=_empty_type_maps)  # key -> uuid
    uuids: dict[EntityType, dict[str, str]] = field(default_factory=_empty_type_maps)  # uuid -> key

    user_metadata: dict[str, UserMetadata] = field(default_factory=dict)
    state_metadata: dict[str, StateMetadata] = field(default_factory=dict)
    project_metadata: dict[str, ProjectMetadata] = field(default_factory=dict)

    # slugId, slug hash suffix and lower-cased name -> project key
    projects_by_slug_id: dict[str, str] = field(default_factory=dict)
    # Lower-cased names shared by more than one project
    ambiguous_project_names: set[str] = field(default_factory=set)

    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    transport: TransportType | None = None

    team_keys: dict[str, str] = field(default_factory=dict)  # team uuid -> lower-cased key
    teams: list[TeamRef] = field(default_factory=list)
    default_team_id: str | None = None
    url_key: str | None = None
    organization_name: str | None = None

    def key_map(self, entity_type: EntityType) -> dict[str, str]:
        """Short key -> UUID map for ``entity_type``."""
        return self.keys[entity_type]

    def uuid_map(self, entity_type: EntityType) -> dict[str, str]:
        """UUID -> short key map for ``entity_type``."""
        return self.uuids[entity_type]

    @property
    def default_team_key(self) -> str | None:
        """Lower-cased key of the default team, if one is configured."""
        if not self.default_team_id:
            return None
        return self.team_keys.get(self.default_team_id)
