"""
Error classes for TOON encoding and short key resolution.

Every error carries a machine-readable code plus an optional hint and
suggestion so callers can surface actionable messages to the model.
"""

from typing import Any, Optional


class ToonError(Exception):
    """
    Base error class for TOON-related errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message
        hint: Context that helps resolve the error
        suggestion: Suggested corrective action
        cause: Message of the underlying failure (if any)
    """

    code: str = "TOON_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.hint = hint
        self.suggestion = suggestion
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Return a structured error object for API responses."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "hint": self.hint,
            "suggestion": self.suggestion,
            "cause": self.cause,
        }


class ToonResolutionError(ToonError):
    """
    Raised when a short key cannot be resolved to a UUID (or vice versa).

    Codes: UNKNOWN_SHORT_KEY, ENTITY_NOT_FOUND, AMBIGUOUS_KEY
    """

    code = "UNKNOWN_SHORT_KEY"

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_SHORT_KEY",
        hint: Optional[str] = None,
        suggestion: Optional[str] = None,
        entity_type: Optional[str] = None,
        short_key: Optional[str] = None,
        available_keys: Optional[list[str]] = None,
    ):
        super().__init__(message, code=code, hint=hint, suggestion=suggestion)
        self.entity_type = entity_type
        self.short_key = short_key
        self.available_keys = available_keys

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "entityType": self.entity_type,
                "shortKey": self.short_key,
                "availableKeys": self.available_keys,
            }
        )
        return data


class ToonRegistryError(ToonError):
    """
    Raised when the short key registry fails to initialize or is unavailable.

    Codes: REGISTRY_INIT_FAILED, REGISTRY_STALE, REGISTRY_CORRUPT,
    WORKSPACE_FETCH_FAILED, SESSION_NOT_FOUND
    """

    code = "REGISTRY_INIT_FAILED"

    def __init__(
        self,
        message: str,
        code: str = "REGISTRY_INIT_FAILED",
        hint: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        super().__init__(
            message, code=code, hint=hint, suggestion=suggestion, cause=cause
        )
        self.session_id = session_id

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["sessionId"] = self.session_id
        return data


class ToonEncodingError(ToonError):
    """
    Raised when TOON encoding fails.

    Codes: ENCODING_FAILED, INVALID_SCHEMA, INVALID_DATA, FIELD_MISMATCH,
    UNSUPPORTED_TYPE
    """

    code = "ENCODING_FAILED"

    def __init__(
        self,
        message: str,
        code: str = "ENCODING_FAILED",
        hint: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[str] = None,
        schema_name: Optional[str] = None,
        field_name: Optional[str] = None,
        row_index: Optional[int] = None,
    ):
        super().__init__(
            message, code=code, hint=hint, suggestion=suggestion, cause=cause
        )
        self.schema_name = schema_name
        self.field_name = field_name
        self.row_index = row_index

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "schemaName": self.schema_name,
                "fieldName": self.field_name,
                "rowIndex": self.row_index,
            }
        )
        return data


def unknown_short_key_error(
    entity_type: str, short_key: str, available_keys: list[str]
) -> ToonResolutionError:
    """Build the error raised for a short key missing from the registry."""
    shown = ", ".join(available_keys[:10])
    if len(available_keys) > 10:
        shown += "..."
    return ToonResolutionError(
        f"Unknown {entity_type} key '{short_key}'",
        code="UNKNOWN_SHORT_KEY",
        hint=f"Available keys: {shown}",
        suggestion="Call workspace_metadata to refresh available options",
        entity_type=entity_type,
        short_key=short_key,
        available_keys=available_keys,
    )
