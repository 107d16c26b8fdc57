"""
TOON (Token-Oriented Object Notation) data models.

TOON is a dense text format for tool output: each section is a schema header
followed by one comma-separated line per row.

    _users[2]{key,name,email}:
      u0,Alice,alice@example.com
      u1,Bob,bob@example.com
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from ..config import Config
from .errors import ToonEncodingError

ToonScalar = Union[str, int, float, bool, None, datetime, date]
ToonValue = Union[ToonScalar, list[ToonScalar], tuple[ToonScalar, ...]]
ToonRow = dict[str, ToonValue]


@dataclass(frozen=True)
class ToonSchema:
    """
    Schema definition for a TOON section.

    Lookup tables are prefixed with an underscore (``_users``, ``_states``).
    Data rows must provide values for every field, in this order.
    """

    name: str
    fields: tuple[str, ...]

    def __init__(self, name: str, fields: Union[list[str], tuple[str, ...]]):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fields", tuple(fields))

    def header(self, count: int) -> str:
        """Render ``name[count]{f1,f2,...}:``."""
        return f"{self.name}[{count}]{{{','.join(self.fields)}}}:"

    def row(self, **values: ToonValue) -> ToonRow:
        """
        Build a row holding exactly this schema's fields, in declared order.

        Raises:
            ToonEncodingError: FIELD_MISMATCH when a declared field is missing,
                INVALID_DATA when an undeclared field is supplied
        """
        missing = [name for name in self.fields if name not in values]
        if missing:
            raise ToonEncodingError(
                f"Row for section '{self.name}' is missing fields: {', '.join(missing)}",
                code="FIELD_MISMATCH",
                hint="Ensure data objects have all fields defined in schema",
                schema_name=self.name,
                field_name=missing[0],
            )
        extra = [name for name in values if name not in self.fields]
        if extra:
            raise ToonEncodingError(
                f"Row for section '{self.name}' has undeclared fields: {', '.join(extra)}",
                code="INVALID_DATA",
                hint=f"Declared fields: {', '.join(self.fields)}",
                schema_name=self.name,
                field_name=extra[0],
            )
        return {name: values[name] for name in self.fields}


def make_row(schema: ToonSchema, values: dict[str, ToonValue]) -> ToonRow:
    """Mapping-based form of :meth:`ToonSchema.row`."""
    return schema.row(**values)


@dataclass
class ToonSection:
    """A schema plus its data rows. Used for both lookup and data tables."""

    schema: ToonSchema
    items: list[ToonRow] = field(default_factory=list)


@dataclass
class ToonMeta:
    """
    Metadata section; always rendered first, as a single row with no count.

        _meta{team,generated}:
          SQT,2026-01-27T12:00:00Z
    """

    fields: list[str]
    values: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToonResponse:
    """Complete response: meta block, then lookup sections, then data sections."""

    meta: Optional[ToonMeta] = None
    lookups: list[ToonSection] = field(default_factory=list)
    data: list[ToonSection] = field(default_factory=list)


@dataclass
class ToonEncodingOptions:
    """Configuration options for TOON encoding."""

    indent: str = Config.TOON_INDENT
    include_empty_sections: bool = False
    title_max: Optional[int] = Config.TOON_TITLE_MAX
    desc_max: Optional[int] = Config.TOON_DESC_MAX
    default_max: Optional[int] = None
    truncation_indicator: str = Config.TOON_TRUNCATION_INDICATOR
    # slugId / hash suffix / lowercased name -> project short key.
    # None disables project URL stripping.
    project_slug_map: Optional[dict[str, str]] = None


@dataclass
class ToonEncodingResult:
    """Result of :func:`safe_encode`."""

    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
