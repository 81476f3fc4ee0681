"""
Dates - Parsing, Formatting and Calendar Arithmetic

Turns heterogeneous date strings (ISO-8601, free-form Gregorian, BCE years,
epoch milliseconds) into TimeValues and back.
"""

from .calendar import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    MS_PER_WEEK,
    CivilDateTime,
    add_months,
    days_in_month,
    from_fields,
    is_leap_year,
    start_of_year,
    to_datetime,
    to_fields,
)
from .normalizer import (
    DateNormalizer,
    add_interval,
    format_date,
    interval_description,
    is_bce_date,
    is_valid_date,
    parse_date,
    try_parse_date,
)

__all__ = [
    # Normalizer
    "DateNormalizer",
    "parse_date",
    "try_parse_date",
    "is_valid_date",
    "is_bce_date",
    "format_date",
    "add_interval",
    "interval_description",
    # Calendar
    "CivilDateTime",
    "from_fields",
    "to_fields",
    "to_datetime",
    "add_months",
    "start_of_year",
    "is_leap_year",
    "days_in_month",
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
    "MS_PER_WEEK",
]
