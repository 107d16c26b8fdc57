"""Centralized configuration for the Linear MCP short-key layer."""

import os


class Config:
    """
    Linear MCP configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables.
    """

    @staticmethod
    def _parse_int(name: str, default: str) -> int:
        """Parse an integer from the environment."""
        raw = os.getenv(name, default)
        try:
            value = int(raw)
        except ValueError as e:
            raise ValueError(f"Invalid {name} environment variable: {e}")
        return value

    # ========================================================================
    # Workspace Configuration
    # ========================================================================
    DEFAULT_TEAM: str | None = os.getenv("DEFAULT_TEAM") or None
    TRANSPORT: str = os.getenv("MCP_TRANSPORT", "stdio").lower()
    VALID_TRANSPORTS: tuple[str, ...] = ("stdio", "http")

    # ========================================================================
    # Registry Configuration
    # ========================================================================
    REGISTRY_HTTP_TTL_SECONDS: int = _parse_int.__func__(
        "REGISTRY_HTTP_TTL_SECONDS", "1800"
    )  # 30 minutes

    # ========================================================================
    # TOON Encoding
    # ========================================================================
    TOON_INDENT: str = "  "
    TOON_TITLE_MAX: int = _parse_int.__func__("TOON_TITLE_MAX", "500")
    TOON_DESC_MAX: int = _parse_int.__func__("TOON_DESC_MAX", "3000")
    TOON_TRUNCATION_INDICATOR: str = "... [truncated]"

    # ========================================================================
    # User Profiles
    # ========================================================================
    USER_PROFILES_PATH: str | None = os.getenv("USER_PROFILES_PATH") or None
    USER_PROFILES_JSON: str | None = os.getenv("USER_PROFILES_JSON") or None

    # ========================================================================
    # Logging
    # ========================================================================
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Checks:
        - TTL and truncation limits are > 0
        - Transport is one of the supported values

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if cls.REGISTRY_HTTP_TTL_SECONDS <= 0:
            errors.append(
                f"REGISTRY_HTTP_TTL_SECONDS must be > 0, got {cls.REGISTRY_HTTP_TTL_SECONDS}"
            )

        if cls.TOON_TITLE_MAX <= 0:
            errors.append(f"TOON_TITLE_MAX must be > 0, got {cls.TOON_TITLE_MAX}")

        if cls.TOON_DESC_MAX <= 0:
            errors.append(f"TOON_DESC_MAX must be > 0, got {cls.TOON_DESC_MAX}")

        if cls.TRANSPORT not in cls.VALID_TRANSPORTS:
            errors.append(
                f"MCP_TRANSPORT must be one of {list(cls.VALID_TRANSPORTS)}, got '{cls.TRANSPORT}'"
            )

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True
