"""Formatting helpers turning a registry into TOON lookup sections."""

from ..toon.models import ToonSection
from ..toon.schemas import (
    PROJECT_LOOKUP_SCHEMA,
    STATE_LOOKUP_SCHEMA,
    TEAM_LOOKUP_SCHEMA,
    USER_LOOKUP_SCHEMA,
)
from .keys import parse_short_key
from .models import EntityType, ShortKeyRegistry
from .resolver import get_user_status_label, list_short_keys


def _state_order(short_key: str) -> tuple[str, int]:
    parsed = parse_short_key(short_key)
    if parsed is None:
        return ("", 0)
    return (parsed.team_prefix or "", parsed.index)


def format_user_ref(registry: ShortKeyRegistry, uuid: str | None) -> str:
    """
    Render a user reference for a data row.

    Returns the user's short key, the status label for users without one
    (``(deactivated)`` / ``(departed)``), or ``""`` when there is no user.
    """
    if not uuid:
        return ""
    short_key = registry.uuids[EntityType.USER].get(uuid)
    return short_key or get_user_status_label(registry, uuid)


def build_team_lookup(registry: ShortKeyRegistry) -> ToonSection:
    items = [
        TEAM_LOOKUP_SCHEMA.row(
            key=team.key,
            name=team.name,
            cyclesEnabled=team.cycles_enabled,
            cycleDuration=team.cycle_duration,
            estimationType=team.estimation_type,
        )
        for team in registry.teams
    ]
    return ToonSection(TEAM_LOOKUP_SCHEMA, items)


def build_user_lookup(registry: ShortKeyRegistry) -> ToonSection:
    """``_users`` rows for every keyed (active) user, in key order."""
    keys = registry.keys[EntityType.USER]
    items = []
    for short_key in list_short_keys(registry, EntityType.USER):
        meta = registry.user_metadata.get(keys[short_key])
        if meta is None:
            continue
        items.append(
            USER_LOOKUP_SCHEMA.row(
                key=short_key,
                name=meta.name,
                displayName=meta.display_name,
                email=meta.email,
                role=meta.role,
            )
        )
    return ToonSection(USER_LOOKUP_SCHEMA, items)


def build_state_lookup(registry: ShortKeyRegistry) -> ToonSection:
    """``_states`` rows, default-team states first, then each prefixed team."""
    keys = registry.keys[EntityType.STATE]
    items = []
    for short_key in sorted(keys, key=_state_order):
        meta = registry.state_metadata.get(keys[short_key])
        if meta is None:
            continue
        items.append(STATE_LOOKUP_SCHEMA.row(key=short_key, name=meta.name, type=meta.type))
    return ToonSection(STATE_LOOKUP_SCHEMA, items)


def build_project_lookup(registry: ShortKeyRegistry) -> ToonSection:
    keys = registry.keys[EntityType.PROJECT]
    items = []
    for short_key in list_short_keys(registry, EntityType.PROJECT):
        meta = registry.project_metadata.get(keys[short_key])
        if meta is None:
            continue
        items.append(PROJECT_LOOKUP_SCHEMA.row(key=short_key, name=meta.name, state=meta.state))
    return ToonSection(PROJECT_LOOKUP_SCHEMA, items)


def build_lookup_sections(registry: ShortKeyRegistry) -> list[ToonSection]:
    """All registry-backed lookup sections: teams, users, states, projects."""
    return [
        build_team_lookup(registry),
        build_user_lookup(registry),
        build_state_lookup(registry),
        build_project_lookup(registry),
    ]
