"""
Proleptic Gregorian calendar arithmetic on epoch milliseconds.

``datetime`` stops at year 1, so instants before the Common Era are handled
here with day-count arithmetic that is valid for any (including negative,
astronomical) year. Year 0 is 1 BCE, year -1 is 2 BCE, and so on.

All instants are UTC; a day is exactly 86 400 000 ms.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY

# Days from 0000-03-01 to 1970-01-01
_EPOCH_SHIFT_DAYS = 719_468
_DAYS_PER_ERA = 146_097  # 400 Gregorian years

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True)
class CivilDateTime:
    """Broken-down UTC calendar fields of an instant."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0

    @property
    def weekday(self) -> int:
        """Day of week, 0 = Sunday ... 6 = Saturday."""
        return (days_from_civil(self.year, self.month, self.day) + 4) % 7

    @property
    def is_bce(self) -> bool:
        """Astronomical year 0 and earlier are BCE years."""
        return self.year <= 0


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap-year rule (valid for negative years)."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date."""
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * _DAYS_PER_ERA + doe - _EPOCH_SHIFT_DAYS


def civil_from_days(days: int) -> tuple[int, int, int]:
    """(year, month, day) for a day count since 1970-01-01."""
    z = days + _EPOCH_SHIFT_DAYS
    era = z // _DAYS_PER_ERA
    doe = z - era * _DAYS_PER_ERA
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def from_fields(
    year: int,
    month: int = 1,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Epoch milliseconds for UTC calendar fields."""
    if not 1 <= month <= 12:
        msg = f"month out of range: {month}"
        raise ValueError(msg)
    if not 1 <= day <= days_in_month(year, month):
        msg = f"day out of range for {year}-{month:02d}: {day}"
        raise ValueError(msg)
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60 and 0 <= millisecond < 1000):
        msg = f"time of day out of range: {hour:02d}:{minute:02d}:{second:02d}.{millisecond:03d}"
        raise ValueError(msg)
    return (
        days_from_civil(year, month, day) * MS_PER_DAY
        + hour * MS_PER_HOUR
        + minute * MS_PER_MINUTE
        + second * MS_PER_SECOND
        + millisecond
    )


def to_fields(t: int) -> CivilDateTime:
    """Break an instant into UTC calendar fields."""
    days, ms_of_day = divmod(int(t), MS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, rem = divmod(ms_of_day, MS_PER_HOUR)
    minute, rem = divmod(rem, MS_PER_MINUTE)
    second, millisecond = divmod(rem, MS_PER_SECOND)
    return CivilDateTime(year, month, day, hour, minute, second, millisecond)


def from_datetime(dt: datetime) -> int:
    """Epoch milliseconds for a ``datetime``; naive values are read as UTC."""
    offset = dt.utcoffset()
    t = from_fields(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.microsecond // 1000)
    if offset is not None:
        t -= int(offset.total_seconds() * MS_PER_SECOND)
    return t


def to_datetime(t: int) -> datetime:
    """Aware UTC ``datetime`` for an instant in years 1..9999."""
    f = to_fields(t)
    if not 1 <= f.year <= 9999:
        msg = f"year {f.year} is outside the datetime range"
        raise ValueError(msg)
    return datetime(f.year, f.month, f.day, f.hour, f.minute, f.second, f.millisecond * 1000, tzinfo=timezone.utc)


def add_months(t: int, months: int) -> int:
    """Add calendar months, clamping the day to the target month's length."""
    if months == 0:
        return int(t)
    f = to_fields(t)
    year, month0 = divmod(f.year * 12 + (f.month - 1) + months, 12)
    month = month0 + 1
    day = min(f.day, days_in_month(year, month))
    return from_fields(year, month, day, f.hour, f.minute, f.second, f.millisecond)


def start_of_year(year: int) -> int:
    """Jan 1 00:00:00.000 UTC of an astronomical year."""
    return days_from_civil(year, 1, 1) * MS_PER_DAY
