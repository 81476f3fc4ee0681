"""
Tests for proleptic Gregorian calendar arithmetic.

Tests cover:
- Day-count conversion around the epoch and before the Common Era
- Field validation
- Month arithmetic with day clamping
- datetime interop
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from simile_timeline.application.dates.calendar import (
    MS_PER_DAY,
    add_months,
    civil_from_days,
    days_from_civil,
    days_in_month,
    from_datetime,
    from_fields,
    is_leap_year,
    start_of_year,
    to_datetime,
    to_fields,
)

# =============================================================================
# Day Counts
# =============================================================================


class TestDayCounts:
    def test_epoch_is_day_zero(self):
        assert days_from_civil(1970, 1, 1) == 0
        assert civil_from_days(0) == (1970, 1, 1)

    def test_known_instant(self):
        assert from_fields(2000, 1, 1) == 946_684_800_000
        assert from_fields(2006, 6, 28) == 1_151_452_800_000

    def test_day_before_epoch(self):
        assert civil_from_days(-1) == (1969, 12, 31)

    @pytest.mark.parametrize(
        "date",
        [(1, 1, 1), (0, 2, 29), (-499, 1, 1), (-4713, 11, 24), (1582, 10, 15), (9999, 12, 31)],
    )
    def test_round_trip(self, date):
        assert civil_from_days(days_from_civil(*date)) == date

    def test_consecutive_days(self):
        assert days_from_civil(0, 3, 1) - days_from_civil(0, 2, 28) == 2  # year 0 is leap


class TestLeapYears:
    @pytest.mark.parametrize(
        ("year", "leap"),
        [(2000, True), (1900, False), (2004, True), (2006, False), (0, True), (-4, True), (-100, False)],
    )
    def test_is_leap_year(self, year, leap):
        assert is_leap_year(year) is leap

    def test_days_in_february(self):
        assert days_in_month(2004, 2) == 29
        assert days_in_month(2006, 2) == 28
        assert days_in_month(2006, 4) == 30


# =============================================================================
# Fields
# =============================================================================


class TestFields:
    def test_to_fields_breaks_down_time_of_day(self):
        f = to_fields(from_fields(2006, 6, 28, 14, 5, 9, 7))
        assert (f.year, f.month, f.day) == (2006, 6, 28)
        assert (f.hour, f.minute, f.second, f.millisecond) == (14, 5, 9, 7)

    def test_negative_instant(self):
        f = to_fields(-1)
        assert (f.year, f.month, f.day) == (1969, 12, 31)
        assert (f.hour, f.minute, f.second, f.millisecond) == (23, 59, 59, 999)

    def test_weekday_sunday_zero(self):
        assert to_fields(0).weekday == 4  # Thursday
        assert to_fields(from_fields(2006, 6, 28)).weekday == 3  # Wednesday
        assert to_fields(from_fields(2006, 6, 25)).weekday == 0

    def test_bce_flag(self):
        assert to_fields(start_of_year(0)).is_bce
        assert not to_fields(start_of_year(1)).is_bce

    @pytest.mark.parametrize(
        "args",
        [(2006, 13, 1), (2006, 0, 1), (2006, 2, 29), (2006, 1, 32), (2006, 1, 1, 24), (2006, 1, 1, 0, 60)],
    )
    def test_invalid_fields(self, args):
        with pytest.raises(ValueError):
            from_fields(*args)

    def test_start_of_year(self):
        assert start_of_year(1970) == 0
        assert to_fields(start_of_year(-499)).year == -499


# =============================================================================
# Month Arithmetic
# =============================================================================


class TestAddMonths:
    def test_clamps_to_end_of_february(self):
        assert add_months(from_fields(2006, 1, 31), 1) == from_fields(2006, 2, 28)
        assert add_months(from_fields(2004, 1, 31), 1) == from_fields(2004, 2, 29)

    def test_backwards(self):
        assert add_months(from_fields(2006, 3, 31), -1) == from_fields(2006, 2, 28)

    def test_across_year_boundary(self):
        assert add_months(from_fields(2006, 11, 15, 8), 3) == from_fields(2007, 2, 15, 8)

    def test_across_common_era(self):
        assert add_months(from_fields(1, 1, 1), -12) == from_fields(0, 1, 1)

    def test_zero_is_identity(self):
        t = from_fields(2006, 6, 28, 1, 2, 3, 4)
        assert add_months(t, 0) == t


# =============================================================================
# datetime Interop
# =============================================================================


class TestDatetimeInterop:
    def test_naive_is_utc(self):
        assert from_datetime(datetime(2006, 6, 28)) == from_fields(2006, 6, 28)

    def test_offset_is_subtracted(self):
        dt = datetime(2006, 6, 28, 5, 0, tzinfo=timezone(timedelta(hours=5)))
        assert from_datetime(dt) == from_fields(2006, 6, 28)

    def test_sub_millisecond_truncated(self):
        assert from_datetime(datetime(1970, 1, 1, 0, 0, 0, 1999)) == 1

    def test_to_datetime(self):
        dt = to_datetime(from_fields(2006, 6, 28, 12, 0, 0, 250))
        assert dt == datetime(2006, 6, 28, 12, 0, 0, 250_000, tzinfo=timezone.utc)

    def test_to_datetime_rejects_bce(self):
        with pytest.raises(ValueError, match="outside the datetime range"):
            to_datetime(start_of_year(0))

    def test_day_length(self):
        assert from_fields(2006, 6, 29) - from_fields(2006, 6, 28) == MS_PER_DAY
