"""Short key and label key parsing."""

import re
from dataclasses import dataclass

from .models import EntityType

_SHORT_KEY_PATTERN = re.compile(r"^(u|s|pr)(\d+)$")
_HASH_SUFFIX_PATTERN = re.compile(r"^[a-f0-9]+$")


@dataclass(frozen=True)
class ParsedShortKey:
    entity_type: EntityType
    index: int
    team_prefix: str | None = None

    @property
    def bare(self) -> str:
        """The key without any team prefix (``s0`` for ``sqm:s0``)."""
        return f"{self.entity_type.prefix}{self.index}"


@dataclass(frozen=True)
class ParsedLabelKey:
    label_name: str
    team_prefix: str | None = None


def parse_short_key(key: str) -> ParsedShortKey | None:
    """
    Parse a short key into its components.

    Examples:
        "sqm:s0" -> team_prefix "sqm", STATE, 0
        "u0"     -> no prefix, USER, 0
        "pr10"   -> no prefix, PROJECT, 10
        "eng:u5" -> team_prefix "eng", USER, 5

    Returns None for anything that is not a short key. The team prefix is
    lower-cased; the key body is matched case-sensitively.
    """
    team_prefix = None
    body = key

    colon = key.find(":")
    if colon > 0:
        team_prefix = key[:colon].lower()
        body = key[colon + 1 :]

    match = _SHORT_KEY_PATTERN.match(body)
    if not match:
        return None

    return ParsedShortKey(
        entity_type=EntityType.from_prefix(match.group(1)),
        index=int(match.group(2)),
        team_prefix=team_prefix,
    )


def parse_label_key(key: str) -> ParsedLabelKey:
    """
    Split ``"sqm:Bugs"`` into team prefix ``sqm`` and label name ``Bugs``.

    Only the first colon separates; label names may contain colons.
    """
    colon = key.find(":")
    if colon > 0:
        return ParsedLabelKey(label_name=key[colon + 1 :], team_prefix=key[:colon].lower())
    return ParsedLabelKey(label_name=key)


def get_team_prefix(
    team_id: str,
    default_team_id: str | None,
    team_keys: dict[str, str] | None,
) -> str:
    """
    Key prefix for states of ``team_id``.

    Empty for the default team, when no default team is set, or when the team
    key is unknown; otherwise ``"<teamkey lower>:"``.
    """
    if not default_team_id or team_id == default_team_id:
        return ""
    team_key = (team_keys or {}).get(team_id)
    return f"{team_key.lower()}:" if team_key else ""


def slug_hash_suffix(slug_id: str) -> str | None:
    """Hex hash after the last hyphen of a project slugId, if any."""
    last_hyphen = slug_id.rfind("-")
    if last_hyphen > 0:
        suffix = slug_id[last_hyphen + 1 :]
        if _HASH_SUFFIX_PATTERN.match(suffix):
            return suffix
    return None
