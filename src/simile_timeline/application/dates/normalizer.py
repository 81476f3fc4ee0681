"""
DateNormalizer - Heterogeneous Date Strings to Time Values

Parses the date representations found in timeline data files into a single
comparable ``TimeValue`` (epoch milliseconds) and formats time values back
to display strings.

Grammars, tried in priority order:
1. BCE markers: "-500", "500 BC", "500 BCE", "500 B.C.", "500 B.C.E."
2. ISO-8601 extended form: "2006-06-28", "2006-06-28T12:30:45.120+05:00"
3. Bare integers: up to 4 digits is a year, 5+ digits is epoch milliseconds
4. Free-form Gregorian via dateutil: "June 28th, 2006", "28-Jun-2006",
   "6/28/2006 10:30 AM", ... The year must be explicit; naive results are UTC.

Year convention:
    Astronomical numbering, N BCE = year 1 - N. So "1 BCE" is year 0 and
    "500 BCE" is year -499. "-N" means "N BCE". Formatting reverses this:
    any year <= 0 renders as "<1 - year> BCE".

Example:
    >>> normalizer = DateNormalizer()
    >>> t = normalizer.parse("June 28, 2006")
    >>> normalizer.format(t, "MMM d, yyyy")
    'Jun 28, 2006'
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from dateutil import parser as date_parser

from simile_timeline.core.exceptions import (
    DateFormatError,
    DateParseError,
    InvalidParameterError,
)
from simile_timeline.domain.entities.timeline import IntervalUnit, TimeValue

from .calendar import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    MS_PER_WEEK,
    add_months,
    from_datetime,
    from_fields,
    start_of_year,
    to_fields,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Grammar Tables
# =============================================================================

_BCE_MARKER = r"(?:B\.C\.E\.|B\.C\.|BCE|BC)"
_BCE_SUFFIX_RE = re.compile(rf"(?:\d\s*|\s+){_BCE_MARKER}$", re.IGNORECASE)
_BCE_FULL_RE = re.compile(rf"^(\d+)\s*{_BCE_MARKER}$", re.IGNORECASE)
_BCE_NEGATIVE_RE = re.compile(r"^-(\d+)$")

_ISO_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_ISO_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?"
    r"(?:Z|[+-]\d{2}(?::?\d{2})?)?$"
)

_DIGITS_RE = re.compile(r"^\d+$")
_TZ_NAME_RE = re.compile(r"\s*\([^)]*\)$")

# "GMT-0500" is UTC-5 in Date.toString() output. dateutil inverts a prefixed offset.
_GMT_OFFSET_RE = re.compile(r"\b(?:GMT|UTC)(?=[+-]\d)", re.IGNORECASE)

# A string without a year resolves differently under these two defaults.
_DEFAULT_A = datetime(2000, 1, 1, tzinfo=timezone.utc)
_DEFAULT_B = datetime(2001, 1, 1, tzinfo=timezone.utc)

# Up to this many digits a bare numeral is a year, beyond it epoch ms.
YEAR_ONLY_MAX_DIGITS = 4

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_FIXED_UNIT_MS: dict[IntervalUnit, int] = {
    IntervalUnit.MILLISECOND: 1,
    IntervalUnit.SECOND: MS_PER_SECOND,
    IntervalUnit.MINUTE: MS_PER_MINUTE,
    IntervalUnit.HOUR: MS_PER_HOUR,
    IntervalUnit.DAY: MS_PER_DAY,
    IntervalUnit.WEEK: MS_PER_WEEK,
}

_UNIT_MONTHS: dict[IntervalUnit, int] = {
    IntervalUnit.MONTH: 1,
    IntervalUnit.YEAR: 12,
    IntervalUnit.DECADE: 120,
    IntervalUnit.CENTURY: 1200,
    IntervalUnit.MILLENNIUM: 12000,
}

_UNIT_PLURALS: dict[IntervalUnit, str] = {
    IntervalUnit.CENTURY: "centuries",
    IntervalUnit.MILLENNIUM: "millennia",
}


# =============================================================================
# Format Pattern Tokenizer
# =============================================================================

# Letter -> allowed repeat counts
_TOKEN_WIDTHS: dict[str, frozenset[int]] = {
    "y": frozenset({1, 2, 3, 4}),
    "M": frozenset({1, 2, 3, 4}),
    "d": frozenset({1, 2}),
    "E": frozenset({1, 2, 3, 4}),
    "H": frozenset({1, 2}),
    "h": frozenset({1, 2}),
    "m": frozenset({1, 2}),
    "s": frozenset({1, 2}),
    "S": frozenset({1, 2, 3}),
    "a": frozenset({1, 2, 3}),
}


@lru_cache(maxsize=128)
def _tokenize(pattern: str) -> tuple[tuple[bool, str], ...]:
    """Split a pattern into (is_field, text) tokens."""
    tokens: list[tuple[bool, str]] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "'":
            # '' is a literal quote, inside or outside a quoted run
            if pattern.startswith("''", i):
                tokens.append((False, "'"))
                i += 2
                continue
            j = i + 1
            literal: list[str] = []
            while True:
                if j >= n:
                    raise DateFormatError(pattern, pattern[i:])
                if pattern[j] == "'":
                    if pattern.startswith("''", j):
                        literal.append("'")
                        j += 2
                        continue
                    break
                literal.append(pattern[j])
                j += 1
            tokens.append((False, "".join(literal)))
            i = j + 1
        elif ch.isalpha():
            j = i
            while j < n and pattern[j] == ch:
                j += 1
            run = pattern[i:j]
            if len(run) not in _TOKEN_WIDTHS.get(ch, frozenset()):
                raise DateFormatError(pattern, run)
            tokens.append((True, run))
            i = j
        else:
            tokens.append((False, ch))
            i += 1
    return tuple(tokens)


# =============================================================================
# DateNormalizer
# =============================================================================


class DateNormalizer:
    """
    Parse, format and step timeline dates.

    Stateless apart from its options; safe to share between threads.
    """

    def __init__(
        self,
        year_only_max_digits: int = YEAR_ONLY_MAX_DIGITS,
        default_pattern: str = "yyyy-MM-dd",
    ) -> None:
        """
        Initialize the normalizer.

        Args:
            year_only_max_digits: Longest bare numeral read as a year
            default_pattern: Pattern used by format() when none is given
        """
        self.year_only_max_digits = year_only_max_digits
        self.default_pattern = default_pattern

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def parse(self, value: Any) -> TimeValue:
        """
        Parse a date string into a TimeValue.

        Raises:
            DateParseError: empty/non-string input, or no grammar matched
        """
        if not isinstance(value, str) or not value.strip():
            raise DateParseError(value, "Invalid date string: must be a non-empty string")

        trimmed = value.strip()

        if is_bce_date(trimmed):
            return self._parse_bce(trimmed)

        for parser in (self._parse_iso, self._parse_integer, self._parse_free_form):
            result = parser(trimmed)
            if result is not None:
                return result

        raise DateParseError(value)

    def try_parse(self, value: Any) -> TimeValue | None:
        """Parse, returning None instead of raising."""
        try:
            return self.parse(value)
        except DateParseError:
            return None

    def is_valid(self, value: Any) -> bool:
        return self.try_parse(value) is not None

    def _parse_bce(self, text: str) -> TimeValue:
        match = _BCE_NEGATIVE_RE.match(text) or _BCE_FULL_RE.match(text)
        if not match:
            raise DateParseError(text, f"Invalid BCE date format: {text!r}")
        bce_year = int(match.group(1))
        if bce_year < 1:
            raise DateParseError(text, f"Invalid BCE year: {text!r}")
        return start_of_year(1 - bce_year)

    def _parse_iso(self, text: str) -> TimeValue | None:
        # ISO-shaped text is decided here, never handed to the looser parsers
        match = _ISO_YEAR_MONTH_RE.match(text)
        try:
            if match:
                return from_fields(int(match.group(1)), int(match.group(2)))
            if not _ISO_RE.match(text):
                return None
            return from_datetime(datetime.fromisoformat(text))
        except ValueError as e:
            raise DateParseError(text, f"Invalid ISO-8601 date: {text!r}") from e

    def _parse_free_form(self, text: str) -> TimeValue | None:
        cleaned = _GMT_OFFSET_RE.sub("", _TZ_NAME_RE.sub("", text))
        try:
            first = date_parser.parse(cleaned, default=_DEFAULT_A)
            if first.year != date_parser.parse(cleaned, default=_DEFAULT_B).year:
                logger.debug(f"Rejected date without a year: {text!r}")
                return None
        except (ValueError, OverflowError):
            return None
        return from_datetime(first)

    def _parse_integer(self, text: str) -> TimeValue | None:
        if not _DIGITS_RE.match(text):
            return None
        if len(text) <= self.year_only_max_digits:
            return start_of_year(int(text))
        return int(text)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format(self, t: TimeValue, pattern: str | None = None) -> str:
        """
        Render a TimeValue with a symbolic pattern.

        BCE values render as "<N> BCE" whatever the pattern, but the pattern
        is still validated.

        Raises:
            DateFormatError: pattern contains an unknown token
        """
        tokens = _tokenize(pattern if pattern is not None else self.default_pattern)
        fields = to_fields(t)
        if fields.is_bce:
            return f"{1 - fields.year} BCE"

        parts: list[str] = []
        for is_field, text in tokens:
            parts.append(_render_token(text, fields) if is_field else text)
        return "".join(parts)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add_interval(self, t: TimeValue, amount: float, unit: IntervalUnit | str) -> TimeValue:
        """
        Add ``amount`` units to an instant.

        Sub-month units are exact millisecond arithmetic; month and larger
        units are calendar arithmetic that clamps the day of month
        (Jan 31 + 1 month -> Feb 28/29).
        """
        unit = IntervalUnit.parse(unit)
        if amount == 0:
            return t

        if unit in _FIXED_UNIT_MS:
            return t + round(amount * _FIXED_UNIT_MS[unit])

        if isinstance(amount, float) and not amount.is_integer():
            raise InvalidParameterError("amount", amount, f"a whole number of {unit.value}s")
        return add_months(t, int(amount) * _UNIT_MONTHS[unit])


def _render_token(token: str, f: Any) -> str:
    letter, width = token[0], len(token)
    if letter == "y":
        if width == 2:
            return f"{f.year % 100:02d}"
        return f"{f.year:0{width}d}"
    if letter == "M":
        if width == 4:
            return MONTH_NAMES[f.month - 1]
        if width == 3:
            return MONTH_NAMES[f.month - 1][:3]
        return f"{f.month:0{width}d}"
    if letter == "d":
        return f"{f.day:0{width}d}"
    if letter == "E":
        name = WEEKDAY_NAMES[f.weekday]
        return name if width == 4 else name[:3]
    if letter == "H":
        return f"{f.hour:0{width}d}"
    if letter == "h":
        return f"{f.hour % 12 or 12:0{width}d}"
    if letter == "m":
        return f"{f.minute:0{width}d}"
    if letter == "s":
        return f"{f.second:0{width}d}"
    if letter == "S":
        return f"{f.millisecond:03d}"[:width]
    # "a"
    return "AM" if f.hour < 12 else "PM"


# =============================================================================
# Module-level helpers
# =============================================================================


def is_bce_date(value: str) -> bool:
    """Whether a string carries a BCE marker (leading '-' or BC/BCE suffix)."""
    text = value.strip()
    return text.startswith("-") or bool(_BCE_SUFFIX_RE.search(text))


def interval_description(amount: float, unit: IntervalUnit | str) -> str:
    """Human-readable interval, e.g. "3 days" or "1 century"."""
    unit = IntervalUnit.parse(unit)
    abs_amount = abs(amount)
    if isinstance(abs_amount, float) and abs_amount.is_integer():
        abs_amount = int(abs_amount)
    if abs_amount == 1:
        return f"1 {unit.value}"
    return f"{abs_amount} {_UNIT_PLURALS.get(unit, unit.value + 's')}"


_default_normalizer = DateNormalizer()


def parse_date(value: Any) -> TimeValue:
    """Parse with the default normalizer."""
    return _default_normalizer.parse(value)


def try_parse_date(value: Any) -> TimeValue | None:
    return _default_normalizer.try_parse(value)


def is_valid_date(value: Any) -> bool:
    return _default_normalizer.is_valid(value)


def format_date(t: TimeValue, pattern: str | None = None) -> str:
    """Format with the default normalizer (pattern defaults to yyyy-MM-dd)."""
    return _default_normalizer.format(t, pattern)


def add_interval(t: TimeValue, amount: float, unit: IntervalUnit | str) -> TimeValue:
    return _default_normalizer.add_interval(t, amount, unit)
