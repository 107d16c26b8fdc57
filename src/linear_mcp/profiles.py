"""
User profile configuration.

Optional per-user metadata (role, skills, focus area) that helps the model
decide who should be assigned what work. Profiles are matched by email,
case-insensitively, and loaded from a YAML/JSON file or a JSON string in the
environment:

    version: 1
    profiles:
      dev@example.com:
        role: Senior Developer
        skills: [Python, PostgreSQL]
        focusArea: API development
    defaults:
      role: Member

Loading never fails: a missing file or malformed content logs a warning and
yields the empty default config.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .config import Config
from .registry.models import UserEntity


@dataclass
class UserProfile:
    role: str = ""
    skills: list[str] = field(default_factory=list)
    focus_area: str = ""


@dataclass
class UserProfilesConfig:
    version: int = 1
    profiles: dict[str, UserProfile] = field(default_factory=dict)
    defaults: UserProfile = field(default_factory=UserProfile)


def _text(value: Any) -> str:
    """String values only; anything else counts as unset."""
    return value if isinstance(value, str) else ""


def _profile_from_dict(data: dict[str, Any]) -> UserProfile:
    skills = data.get("skills") or []
    return UserProfile(
        role=_text(data.get("role")),
        skills=[str(skill) for skill in skills if skill is not None]
        if isinstance(skills, list)
        else [],
        focus_area=_text(data.get("focusArea")) or _text(data.get("focus_area")),
    )


def _config_from_dict(data: Any, source: str) -> UserProfilesConfig:
    if not isinstance(data, dict) or not isinstance(data.get("profiles"), dict):
        logger.warning(f"Invalid user profiles structure in {source}, using defaults")
        return UserProfilesConfig()

    try:
        version = int(data.get("version", 1))
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid user profiles version {data.get('version')!r} in {source}, using defaults"
        )
        return UserProfilesConfig()

    profiles = {
        str(email).lower(): _profile_from_dict(entry)
        for email, entry in data["profiles"].items()
        if isinstance(entry, dict)
    }
    defaults = data.get("defaults")
    return UserProfilesConfig(
        version=version,
        profiles=profiles,
        defaults=_profile_from_dict(defaults) if isinstance(defaults, dict) else UserProfile(),
    )


def load_user_profiles_from_file(path: str | Path) -> UserProfilesConfig:
    """Load profiles from a YAML or JSON file (JSON is valid YAML)."""
    profiles_file = Path(path)
    if not profiles_file.exists():
        logger.debug(f"User profiles file not found: {profiles_file}")
        return UserProfilesConfig()

    try:
        with open(profiles_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load user profiles from {profiles_file}: {e}")
        return UserProfilesConfig()

    return _config_from_dict(data, str(profiles_file))


def load_user_profiles_from_env(json_string: str | None) -> UserProfilesConfig:
    """Load profiles from a JSON string (e.g. ``USER_PROFILES_JSON``)."""
    if not json_string:
        return UserProfilesConfig()

    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse user profiles JSON: {e}")
        return UserProfilesConfig()

    return _config_from_dict(data, "USER_PROFILES_JSON")


def load_user_profiles(
    env_json: str | None = None, file_path: str | Path | None = None
) -> UserProfilesConfig:
    """
    Load profiles from the environment JSON if given, otherwise from a file.

    Falls back to ``Config.USER_PROFILES_JSON`` / ``Config.USER_PROFILES_PATH``.
    """
    env_json = env_json if env_json is not None else Config.USER_PROFILES_JSON
    if env_json:
        return load_user_profiles_from_env(env_json)

    file_path = file_path if file_path is not None else Config.USER_PROFILES_PATH
    if file_path:
        return load_user_profiles_from_file(file_path)

    return UserProfilesConfig()


def get_user_profile(config: UserProfilesConfig, email: str | None) -> UserProfile:
    """Profile for ``email`` (case-insensitive), else the config defaults."""
    if not email:
        return config.defaults
    return config.profiles.get(email.lower(), config.defaults)


def format_profile_for_toon(profile: UserProfile) -> str:
    """
    Compact role string for the ``_users`` lookup.

        Tech Lead + Backend -> "Tech Lead (Backend)"
        Developer           -> "Developer"
        Frontend only       -> "(Frontend)"
    """
    parts = []
    if profile.role:
        parts.append(profile.role)
    if profile.focus_area:
        parts.append(f"({profile.focus_area})")
    return " ".join(parts)


def apply_user_profiles(
    users: list[UserEntity], config: UserProfilesConfig
) -> list[UserEntity]:
    """
    Return copies of ``users`` enriched with role, skills and focus area.

    The formatted profile role wins; a user's existing role is kept when the
    profile has none.
    """
    enriched = []
    for user in users:
        profile = get_user_profile(config, user.email)
        enriched.append(
            replace(
                user,
                role=format_profile_for_toon(profile) or user.role,
                skills=list(profile.skills) or user.skills,
                focus_area=profile.focus_area or user.focus_area,
            )
        )
    return enriched
