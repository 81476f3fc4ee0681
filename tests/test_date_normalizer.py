"""
Tests for DateNormalizer - parse / format / add_interval

Tests cover:
- Grammar priority: BCE markers, ISO-8601, free-form Gregorian, bare integers
- BCE convention (N BCE = astronomical year 1 - N) in both directions
- Pattern formatting and token validation
- Exact vs calendar interval arithmetic
"""

from __future__ import annotations

import pytest

from simile_timeline.application.dates.calendar import MS_PER_DAY, MS_PER_HOUR, from_fields, start_of_year, to_fields
from simile_timeline.application.dates.normalizer import (
    DateNormalizer,
    add_interval,
    format_date,
    interval_description,
    is_bce_date,
    is_valid_date,
    parse_date,
    try_parse_date,
)
from simile_timeline.core.exceptions import DateFormatError, DateParseError, InvalidParameterError
from simile_timeline.domain.entities.timeline import IntervalUnit

JUNE_28 = from_fields(2006, 6, 28)

# =============================================================================
# Parsing
# =============================================================================


class TestParseIso:
    def test_date_only(self):
        assert parse_date("2006-06-28") == JUNE_28

    def test_date_time_utc(self):
        assert parse_date("2006-06-28T12:30:45Z") == from_fields(2006, 6, 28, 12, 30, 45)

    def test_fraction_and_offset(self):
        expected = from_fields(2006, 6, 28, 7, 30, 45, 120)
        assert parse_date("2006-06-28T12:30:45.120+05:00") == expected

    def test_naive_date_time_is_utc(self):
        assert parse_date("2006-06-28 12:00") == from_fields(2006, 6, 28, 12)

    def test_year_month(self):
        assert parse_date("2006-06") == from_fields(2006, 6, 1)

    def test_surrounding_whitespace(self):
        assert parse_date("  2006-06-28 \n") == JUNE_28

    def test_invalid_calendar_date_rejected(self):
        with pytest.raises(DateParseError):
            parse_date("2006-13-01")


class TestParseGregorian:
    @pytest.mark.parametrize(
        "text",
        [
            "June 28, 2006",
            "Jun 28, 2006",
            "June 28 2006",
            "Jun 28 2006",
            "28 June 2006",
            "28 Jun 2006",
            "06/28/2006",
            "2006/06/28",
            "Wed Jun 28 2006",
            "jun 28 2006",
        ],
    )
    def test_date_forms(self, text):
        assert parse_date(text) == JUNE_28

    def test_month_and_year(self):
        assert parse_date("June 2006") == from_fields(2006, 6, 1)

    def test_rfc_1123(self):
        assert parse_date("Wed, 28 Jun 2006 00:00:00 GMT") == JUNE_28

    def test_legacy_gmt_offset(self):
        assert parse_date("Jun 28 2006 00:00:00 GMT-0500") == from_fields(2006, 6, 28, 5)

    def test_trailing_zone_name_ignored(self):
        text = "Wed Jun 28 2006 00:00:00 GMT-0500 (Central Daylight Time)"
        assert parse_date(text) == from_fields(2006, 6, 28, 5)

    def test_twelve_hour_clock(self):
        assert parse_date("June 28, 2006 2:15 PM") == from_fields(2006, 6, 28, 14, 15)

    @pytest.mark.parametrize(
        "text",
        ["June 28th, 2006", "2006-6-28", "28-Jun-2006", "Jun. 28, 2006", "Wednesday, June 28, 2006"],
    )
    def test_loose_date_forms(self, text):
        assert parse_date(text) == JUNE_28

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("June 28 2006 10:30", from_fields(2006, 6, 28, 10, 30)),
            ("6/28/2006 10:30 AM", from_fields(2006, 6, 28, 10, 30)),
            ("2006-06-28 10:30:00 UTC", from_fields(2006, 6, 28, 10, 30)),
        ],
    )
    def test_loose_date_times(self, text, expected):
        assert parse_date(text) == expected

    @pytest.mark.parametrize("text", ["June 28", "10:30", "Wednesday"])
    def test_year_required(self, text):
        with pytest.raises(DateParseError):
            parse_date(text)

    def test_iso_shape_not_reinterpreted(self):
        with pytest.raises(DateParseError, match="Invalid ISO-8601 date"):
            parse_date("2006-13-01")


class TestParseIntegers:
    def test_four_digits_is_year(self):
        assert parse_date("2006") == start_of_year(2006)

    def test_short_year(self):
        assert to_fields(parse_date("44")).year == 44

    def test_long_numeral_is_epoch_ms(self):
        assert parse_date("1151452800000") == JUNE_28

    def test_threshold_is_configurable(self):
        normalizer = DateNormalizer(year_only_max_digits=3)
        assert normalizer.parse("2006") == 2006


class TestParseBce:
    def test_astronomical_year(self):
        assert to_fields(parse_date("500 BCE")).year == -499

    def test_leading_minus_equals_suffix(self):
        assert parse_date("-500") == parse_date("500 BCE")

    @pytest.mark.parametrize("text", ["500 BC", "500 B.C.", "500 B.C.E.", "500bc", "500 bce"])
    def test_suffix_forms(self, text):
        assert parse_date(text) == parse_date("500 BCE")

    def test_one_bce_is_year_zero(self):
        assert parse_date("1 BCE") == start_of_year(0)

    def test_jan_first_midnight(self):
        f = to_fields(parse_date("44 BC"))
        assert (f.month, f.day, f.hour) == (1, 1, 0)

    @pytest.mark.parametrize("text", ["0 BCE", "-0", "-abc", "-2006-06-28", "about 500 BC"])
    def test_rejected(self, text):
        with pytest.raises(DateParseError):
            parse_date(text)

    def test_is_bce_date(self):
        assert is_bce_date("500 BC")
        assert is_bce_date("-500")
        assert not is_bce_date("2006")
        assert not is_bce_date("Abc")


class TestParseFailures:
    @pytest.mark.parametrize("value", ["", "   ", None, 2006, ["2006"]])
    def test_non_strings_and_empty(self, value):
        with pytest.raises(DateParseError):
            parse_date(value)

    def test_message_names_input(self):
        with pytest.raises(DateParseError, match="Unable to parse date: not a date") as exc_info:
            parse_date("not a date")
        assert exc_info.value.value == "not a date"
        assert exc_info.value.context.operation == "parse"

    def test_try_parse(self):
        assert try_parse_date("garbage") is None
        assert try_parse_date("2006-06-28") == JUNE_28

    def test_is_valid_date(self):
        assert is_valid_date("June 28, 2006")
        assert not is_valid_date("June 31st")


# =============================================================================
# Formatting
# =============================================================================


class TestFormat:
    T = from_fields(2006, 6, 28, 14, 5, 9, 7)

    def test_default_pattern(self):
        assert format_date(self.T) == "2006-06-28"

    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("yyyy-MM-dd HH:mm:ss.SSS", "2006-06-28 14:05:09.007"),
            ("MMM d, yyyy", "Jun 28, 2006"),
            ("MMMM", "June"),
            ("M/d/yy", "6/28/06"),
            ("EEE", "Wed"),
            ("EEEE", "Wednesday"),
            ("h:mm a", "2:05 PM"),
            ("hh 'o''clock'", "02 o'clock"),
            ("yyyy 'year'", "2006 year"),
            ("''", "'"),
            ("S", "0"),
        ],
    )
    def test_patterns(self, pattern, expected):
        assert format_date(self.T, pattern) == expected

    def test_midnight_twelve_hour(self):
        assert format_date(from_fields(2006, 6, 28), "h a") == "12 AM"

    def test_small_year_padded(self):
        assert format_date(start_of_year(44), "yyyy") == "0044"

    def test_bce_ignores_pattern(self):
        assert format_date(parse_date("500 BCE"), "MMM d, yyyy") == "500 BCE"
        assert format_date(start_of_year(0)) == "1 BCE"

    def test_bce_parse_format_agree(self):
        for text in ("1 BCE", "44 BCE", "500 BCE", "3000 BCE"):
            assert format_date(parse_date(text), "yyyy") == text
            assert parse_date(format_date(parse_date(text), "yyyy")) == parse_date(text)

    @pytest.mark.parametrize("pattern", ["Q", "yyyyy", "ddd", "MMMMM", "yyyy-MM-dd 'open"])
    def test_unknown_token(self, pattern):
        with pytest.raises(DateFormatError):
            format_date(self.T, pattern)

    def test_unknown_token_checked_for_bce(self):
        with pytest.raises(DateFormatError) as exc_info:
            format_date(parse_date("500 BCE"), "yyyy Q")
        assert exc_info.value.token == "Q"

    def test_instance_default_pattern(self):
        assert DateNormalizer(default_pattern="d MMM yyyy").format(self.T) == "28 Jun 2006"


# =============================================================================
# Interval Arithmetic
# =============================================================================


class TestAddInterval:
    def test_exact_units(self):
        assert add_interval(JUNE_28, 1, IntervalUnit.DAY) == JUNE_28 + MS_PER_DAY
        assert add_interval(JUNE_28, 1.5, "hour") == JUNE_28 + 90 * 60_000
        assert add_interval(JUNE_28, -2, "week") == JUNE_28 - 14 * MS_PER_DAY
        assert add_interval(JUNE_28, 250, "millisecond") == JUNE_28 + 250

    def test_zero_is_identity(self):
        for unit in IntervalUnit:
            assert add_interval(JUNE_28 + 123, 0, unit) == JUNE_28 + 123

    def test_month_clamps(self):
        assert add_interval(from_fields(2006, 1, 31), 1, "month") == from_fields(2006, 2, 28)
        assert add_interval(from_fields(2004, 1, 31), 1, "MONTH") == from_fields(2004, 2, 29)

    def test_year_from_leap_day(self):
        assert add_interval(from_fields(2004, 2, 29), 1, "year") == from_fields(2005, 2, 28)

    def test_keeps_time_of_day(self):
        t = from_fields(2006, 6, 28, 13)
        assert add_interval(t, 2, "month") == from_fields(2006, 8, 28, 13)
        assert add_interval(t, 1, "day") - t == 24 * MS_PER_HOUR

    def test_large_units(self):
        assert to_fields(add_interval(JUNE_28, 1, "decade")).year == 2016
        assert to_fields(add_interval(JUNE_28, -1, "century")).year == 1906
        assert to_fields(add_interval(JUNE_28, 3, "millennium")).year == 5006

    def test_across_common_era(self):
        t = add_interval(start_of_year(500), -1, "millennium")
        assert format_date(t) == "501 BCE"

    def test_fractional_calendar_amount_rejected(self):
        with pytest.raises(InvalidParameterError):
            add_interval(JUNE_28, 1.5, "month")

    def test_integral_float_calendar_amount_accepted(self):
        assert add_interval(JUNE_28, 2.0, "year") == from_fields(2008, 6, 28)

    def test_unknown_unit(self):
        with pytest.raises(ValueError, match="Unknown interval unit"):
            add_interval(JUNE_28, 1, "fortnight")


class TestIntervalDescription:
    @pytest.mark.parametrize(
        ("amount", "unit", "expected"),
        [
            (3, "day", "3 days"),
            (1, "century", "1 century"),
            (2, "century", "2 centuries"),
            (5, "millennium", "5 millennia"),
            (-2, "week", "2 weeks"),
            (2.0, IntervalUnit.HOUR, "2 hours"),
            (1.5, "year", "1.5 years"),
        ],
    )
    def test_description(self, amount, unit, expected):
        assert interval_description(amount, unit) == expected
