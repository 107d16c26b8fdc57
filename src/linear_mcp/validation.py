"""
Cross-team validation for state and label keys.

Issues live in one team; states are always team-scoped and labels are either
team-scoped or workspace-wide. These checks catch a key from the wrong team
before (prefix checks) or after (membership checks) resolution, and return a
result with an actionable suggestion instead of raising.

All checks are non-blocking for unknown data: when the registry has no team
information the key is treated as valid and the API gets the final say.
"""

from dataclasses import dataclass

from .registry.keys import parse_label_key, parse_short_key
from .registry.models import EntityType, ShortKeyRegistry


@dataclass(frozen=True)
class CrossTeamValidationResult:
    valid: bool
    error: str | None = None
    suggestion: str | None = None


VALID = CrossTeamValidationResult(valid=True)


def _team_key(registry: ShortKeyRegistry, team_id: str | None) -> str | None:
    if not team_id:
        return None
    return registry.team_keys.get(team_id)


def _state_key_suggestion(target_key: str, target_display: str) -> str:
    return (
        f"Use '{target_key}:s0', '{target_key}:s1', etc. for team {target_display} "
        "states, or check workspace_metadata for available states"
    )


def validate_state_key_prefix(
    state_key: str, target_team_id: str, registry: ShortKeyRegistry
) -> CrossTeamValidationResult:
    """
    Pre-resolution check that a state key can belong to the target team.

    An unprefixed key names a default-team state, so it is rejected for any
    other team. A prefixed key must carry the target team's prefix. Anything
    that is not a state key is left for normal resolution.
    """
    parsed = parse_short_key(state_key)
    if parsed is None or parsed.entity_type is not EntityType.STATE:
        return VALID

    target_key = _team_key(registry, target_team_id)

    if parsed.team_prefix is None:
        if not registry.default_team_id or target_team_id == registry.default_team_id:
            return VALID

        default_key = _team_key(registry, registry.default_team_id)
        target_display = target_key.upper() if target_key else "the target team"
        default_display = default_key.upper() if default_key else "the default team"
        return CrossTeamValidationResult(
            valid=False,
            error=(
                f"State '{state_key}' is a {default_display} state key, "
                f"but the issue is in team {target_display}"
            ),
            suggestion=(
                _state_key_suggestion(target_key, target_display)
                if target_key
                else f"Check workspace_metadata to see state keys for team {target_display}"
            ),
        )

    if target_key and parsed.team_prefix != target_key.lower():
        target_display = target_key.upper()
        return CrossTeamValidationResult(
            valid=False,
            error=(
                f"State '{state_key}' belongs to team {parsed.team_prefix.upper()}, "
                f"but the issue is in team {target_display}"
            ),
            suggestion=_state_key_suggestion(target_key, target_display),
        )

    return VALID


def validate_state_belongs_to_team(
    state_key: str,
    resolved_state_id: str,
    target_team_id: str,
    registry: ShortKeyRegistry,
) -> CrossTeamValidationResult:
    """Post-resolution check against the resolved state's recorded team."""
    metadata = registry.state_metadata.get(resolved_state_id)
    if metadata is None or not metadata.team_id or metadata.team_id == target_team_id:
        return VALID

    state_team_key = _team_key(registry, metadata.team_id)
    target_key = _team_key(registry, target_team_id)
    state_display = state_team_key.upper() if state_team_key else "another team"
    target_display = target_key.upper() if target_key else "the target team"

    suggestion = None
    if parse_short_key(state_key) is not None and target_key:
        suggestion = f"Use workspace_metadata to see available states for team {target_display}"

    return CrossTeamValidationResult(
        valid=False,
        error=(
            f"State '{state_key}' belongs to team {state_display}, "
            f"but the issue is in team {target_display}"
        ),
        suggestion=suggestion,
    )


def validate_label_key_prefix(
    label_key: str, target_team_id: str, registry: ShortKeyRegistry
) -> CrossTeamValidationResult:
    """
    Pre-resolution check of a ``team:Label`` key's prefix.

    Unprefixed names may be workspace labels, so they pass here and are checked
    by :func:`validate_label_belongs_to_team` once resolved.
    """
    parsed = parse_label_key(label_key)
    if parsed.team_prefix is None:
        return VALID

    target_key = _team_key(registry, target_team_id)
    if target_key and parsed.team_prefix != target_key.lower():
        target_display = target_key.upper()
        return CrossTeamValidationResult(
            valid=False,
            error=(
                f"Label '{label_key}' has team prefix {parsed.team_prefix.upper()}, "
                f"but the issue is in team {target_display}"
            ),
            suggestion=(
                f"Use '{target_key}:{parsed.label_name}' for team {target_display}, "
                "or use the label name without a prefix if it's a workspace label"
            ),
        )

    return VALID


def validate_label_belongs_to_team(
    label_key: str,
    resolved_label_id: str,
    target_team_id: str,
    registry: ShortKeyRegistry,
    label_team_id: str | None = None,
) -> CrossTeamValidationResult:
    """Workspace labels (no team) pass; team labels must match the target team."""
    if not label_team_id or label_team_id == target_team_id:
        return VALID

    label_team_key = _team_key(registry, label_team_id)
    target_key = _team_key(registry, target_team_id)
    label_display = label_team_key.upper() if label_team_key else "another team"
    target_display = target_key.upper() if target_key else "the target team"

    return CrossTeamValidationResult(
        valid=False,
        error=(
            f"Label '{label_key}' belongs to team {label_display}, "
            f"but the issue is in team {target_display}"
        ),
        suggestion=(
            f"Use workspace_metadata to see available labels for team {target_display}, "
            "or use a workspace-level label"
        ),
    )
