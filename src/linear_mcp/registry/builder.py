"""Registry construction from workspace data."""

from datetime import datetime, timezone
from typing import Iterable, TypeVar

from loguru import logger

from .keys import get_team_prefix, slug_hash_suffix
from .models import (
    EntityType,
    ProjectEntity,
    ProjectMetadata,
    RegistryBuildData,
    ShortKeyRegistry,
    StateEntity,
    StateMetadata,
    TransportType,
    UserEntity,
    UserMetadata,
)

E = TypeVar("E", UserEntity, StateEntity, ProjectEntity)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def create_empty_registry(
    workspace_id: str = "", transport: TransportType | None = None
) -> ShortKeyRegistry:
    """Registry with no entities, generated now."""
    return ShortKeyRegistry(workspace_id=workspace_id, transport=transport)


def _created_at_sort_key(value: datetime | str) -> datetime:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable createdAt '{value}', ordering it first")
            return _EPOCH
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def sort_by_created_at(entities: Iterable[E]) -> list[E]:
    """Stable ascending sort by ``created_at``; the input is not mutated."""
    return sorted(entities, key=lambda entity: _created_at_sort_key(entity.created_at))


def _assign_sequential(
    entities: list[E], prefix: str, key_prefix: str = ""
) -> tuple[dict[str, str], dict[str, str]]:
    key_to_uuid: dict[str, str] = {}
    uuid_to_key: dict[str, str] = {}
    for index, entity in enumerate(sort_by_created_at(entities)):
        short_key = f"{key_prefix}{prefix}{index}"
        key_to_uuid[short_key] = entity.id
        uuid_to_key[entity.id] = short_key
    return key_to_uuid, uuid_to_key


def _assign_state_keys(
    states: list[StateEntity],
    default_team_id: str,
    team_keys: dict[str, str],
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Per-team state indices; non-default teams get a ``<teamkey>:`` prefix.

    States without a team, or whose team is missing from ``team_keys``, share
    the default team sequence so every key stays unique.
    """
    by_team: dict[str, list[StateEntity]] = {}
    unknown_teams: set[str] = set()
    for state in sort_by_created_at(states):
        team_id = state.team_id or default_team_id
        if team_id != default_team_id and not team_keys.get(team_id):
            unknown_teams.add(team_id)
            team_id = default_team_id
        by_team.setdefault(team_id, []).append(state)

    if unknown_teams:
        logger.warning(
            f"States reference teams missing from the team list: "
            f"{', '.join(sorted(unknown_teams))}; keying them with the default team"
        )

    key_to_uuid: dict[str, str] = {}
    uuid_to_key: dict[str, str] = {}
    for team_id, team_states in by_team.items():
        team_prefix = get_team_prefix(team_id, default_team_id, team_keys)
        team_key_to_uuid, team_uuid_to_key = _assign_sequential(
            team_states, EntityType.STATE.prefix, team_prefix
        )
        key_to_uuid.update(team_key_to_uuid)
        uuid_to_key.update(team_uuid_to_key)
    return key_to_uuid, uuid_to_key


def _user_metadata(users: list[UserEntity]) -> dict[str, UserMetadata]:
    return {
        user.id: UserMetadata(
            name=user.name,
            display_name=user.display_name,
            email=user.email,
            active=user.active,
            role=user.role,
            skills=user.skills,
            focus_area=user.focus_area,
            teams=user.teams,
        )
        for user in users
    }


def _state_metadata(states: list[StateEntity]) -> dict[str, StateMetadata]:
    return {
        state.id: StateMetadata(name=state.name, type=state.type, team_id=state.team_id or "")
        for state in states
    }


def _project_metadata(projects: list[ProjectEntity]) -> dict[str, ProjectMetadata]:
    return {
        project.id: ProjectMetadata(
            name=project.name,
            state=project.state,
            icon=project.icon,
            priority=project.priority,
            progress=project.progress,
            lead_id=project.lead_id,
            target_date=project.target_date,
            team_keys=project.team_keys,
            slug_id=project.slug_id,
        )
        for project in projects
    }


def _index_project_slugs(registry: ShortKeyRegistry, projects: list[ProjectEntity]) -> None:
    """Index projects by slugId, slug hash suffix and lower-cased name."""
    project_keys = registry.uuids[EntityType.PROJECT]
    slug_index = registry.projects_by_slug_id

    for project in projects:
        short_key = project_keys.get(project.id)
        if not project.slug_id or not short_key:
            continue
        slug_index[project.slug_id] = short_key
        suffix = slug_hash_suffix(project.slug_id)
        if suffix:
            slug_index[suffix] = short_key

    for uuid, meta in registry.project_metadata.items():
        short_key = project_keys.get(uuid)
        if not meta.name or not short_key:
            continue
        name_key = meta.name.lower()
        if name_key in registry.ambiguous_project_names:
            continue
        existing = slug_index.get(name_key)
        if existing is None:
            slug_index[name_key] = short_key
        elif existing != short_key:
            # Two projects share this name; resolve neither of them by name.
            del slug_index[name_key]
            registry.ambiguous_project_names.add(name_key)


def build_registry(data: RegistryBuildData) -> ShortKeyRegistry:
    """
    Build a registry from workspace data.

    Entities are sorted by createdAt (ascending, stable) and assigned
    sequential keys:
    - Users: u0, u1, ... (active users only; inactive users keep metadata)
    - States: s0, s1, ... for the default team, ``sqm:s0`` for other teams
      when a default team and team list are given; one flat sequence otherwise
    - Projects: pr0, pr1, ...

    Identical input in any order yields identical key assignment.
    """
    team_keys = {team.id: team.key.lower() for team in data.teams or []}

    states = data.states
    if data.team_id:
        states = [state for state in states if state.team_id == data.team_id]

    registry = ShortKeyRegistry(
        workspace_id=data.workspace_id,
        team_keys=team_keys,
        teams=list(data.teams or []),
        default_team_id=data.default_team_id,
        url_key=data.url_key,
        organization_name=data.organization_name,
    )

    active_users = [user for user in data.users if user.active is not False]
    (
        registry.keys[EntityType.USER],
        registry.uuids[EntityType.USER],
    ) = _assign_sequential(active_users, EntityType.USER.prefix)

    (
        registry.keys[EntityType.PROJECT],
        registry.uuids[EntityType.PROJECT],
    ) = _assign_sequential(data.projects, EntityType.PROJECT.prefix)

    if data.default_team_id and data.teams:
        state_maps = _assign_state_keys(states, data.default_team_id, team_keys)
    else:
        state_maps = _assign_sequential(states, EntityType.STATE.prefix)
    registry.keys[EntityType.STATE], registry.uuids[EntityType.STATE] = state_maps

    registry.user_metadata = _user_metadata(data.users)
    registry.state_metadata = _state_metadata(states)
    registry.project_metadata = _project_metadata(data.projects)

    _index_project_slugs(registry, data.projects)

    logger.debug(
        f"Built registry for workspace {data.workspace_id}: "
        f"{len(registry.keys[EntityType.USER])} users, "
        f"{len(registry.keys[EntityType.STATE])} states, "
        f"{len(registry.keys[EntityType.PROJECT])} projects"
    )
    return registry


def register_new_project(
    registry: ShortKeyRegistry, project_id: str, metadata: ProjectMetadata
) -> str:
    """
    Add a newly created project and return its key.

    The key is one past the highest existing project index (pr0, pr1, pr5 ->
    pr6); gaps are never reused. The slugId and hash suffix entries are
    overwritten; the name entry is only added when the name is unclaimed.
    """
    max_index = -1
    for key in registry.keys[EntityType.PROJECT]:
        digits = key[len(EntityType.PROJECT.prefix) :]
        if digits.isdigit():
            max_index = max(max_index, int(digits))
    next_key = f"{EntityType.PROJECT.prefix}{max_index + 1}"

    registry.keys[EntityType.PROJECT][next_key] = project_id
    registry.uuids[EntityType.PROJECT][project_id] = next_key
    registry.project_metadata[project_id] = metadata

    if metadata.slug_id:
        registry.projects_by_slug_id[metadata.slug_id] = next_key
        suffix = slug_hash_suffix(metadata.slug_id)
        if suffix:
            registry.projects_by_slug_id[suffix] = next_key

    if metadata.name:
        name_key = metadata.name.lower()
        if (
            name_key not in registry.projects_by_slug_id
            and name_key not in registry.ambiguous_project_names
        ):
            registry.projects_by_slug_id[name_key] = next_key

    logger.info(f"Registered new project {project_id} as {next_key}")
    return next_key
