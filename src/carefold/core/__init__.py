"""Core utilities for timestamp handling and enum coercion."""

from carefold.core.utils import (
    MONTH_ABBR,
    MONTH_NAMES,
    coerce_enum,
    days_between,
    enum_value,
    format_number,
    parse_iso_date,
    parse_timestamp,
)
