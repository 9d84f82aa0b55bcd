"""Shared utility functions for timestamp parsing, day arithmetic and enum coercion."""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_ABBR = tuple(m[:3] for m in MONTH_NAMES)

SECONDS_PER_DAY = 24 * 60 * 60

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a backend ISO 8601 date or date-time into a naive datetime.

    Supported formats:
    - YYYY-MM-DD (date only, read as local midnight): "2024-03-15"
    - YYYY-MM-DDTHH:MM[:SS[.ffffff]]: "2024-03-15T10:30:00"
    - the above with an offset or "Z": "2024-03-15T10:30:00+05:30"

    The offset is dropped and the wall-clock time kept, so the date portion
    always matches the date written in the source string.

    Returns None for empty input. Raises ValueError for anything else.
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    m = _ISO_DATE.match(s)
    if m:
        return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    if not _ISO_DATETIME.match(s):
        raise ValueError(f"Unrecognized timestamp: {value!r}")
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    return dt.replace(tzinfo=None)


def parse_iso_date(value: str | None) -> date | None:
    """Extract the calendar date from an ISO date or date-time string."""
    ts = parse_timestamp(value)
    return ts.date() if ts else None


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed from earlier to later, floored (negative when reversed)."""
    return int((later - earlier).total_seconds() // SECONDS_PER_DAY)


def coerce_enum(enum_cls: type[E], value: object) -> E | str | None:
    """Map a raw value onto enum_cls, keeping unknown values as raw strings."""
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value))
    except ValueError:
        return str(value)


def enum_value(value: object) -> object:
    """Return the plain value of an enum member, or the value unchanged."""
    return value.value if isinstance(value, Enum) else value


def format_number(value: int | float) -> str:
    """Render 12.0 as "12" and 12.5 as "12.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
