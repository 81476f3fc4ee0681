"""
Tests for Ether strategies (linear and logarithmic).

Tests cover:
- Unit lengths
- Linear mapping, round trip within 1 ms, monotonicity
- Logarithmic mapping, exact inverse, symmetry
- Construction-time validation (ConfigError)
- Factory
"""

from __future__ import annotations

import dataclasses
import math

import pytest

from simile_timeline.application.dates.calendar import MS_PER_DAY, from_fields
from simile_timeline.application.ether import (
    MS_PER_AVERAGE_MONTH,
    MS_PER_AVERAGE_YEAR,
    Ether,
    HotZoneEther,
    LinearEther,
    LogarithmicEther,
    create_ether,
    milliseconds_per_unit,
)
from simile_timeline.core.exceptions import ConfigError
from simile_timeline.domain.entities.timeline import HotZone, IntervalUnit

ORIGIN = from_fields(2006, 6, 28)

SAMPLE_OFFSETS = [
    0,
    1,
    -1,
    999,
    123_456,
    -7 * MS_PER_DAY + 17,
    45 * MS_PER_DAY,
    -3_650 * MS_PER_DAY,
    40_000 * MS_PER_DAY + 5,
]

# =============================================================================
# Unit Lengths
# =============================================================================


class TestMillisecondsPerUnit:
    def test_exact_units(self):
        assert milliseconds_per_unit(IntervalUnit.SECOND) == 1000
        assert milliseconds_per_unit(IntervalUnit.DAY) == MS_PER_DAY
        assert milliseconds_per_unit("week") == 7 * MS_PER_DAY

    def test_average_units(self):
        assert milliseconds_per_unit("month") == pytest.approx(30.436875 * MS_PER_DAY)
        assert milliseconds_per_unit("year") == pytest.approx(365.25 * MS_PER_DAY)
        assert milliseconds_per_unit("century") == pytest.approx(100 * MS_PER_AVERAGE_YEAR)

    def test_month_and_year_averages_are_independent(self):
        # Gregorian mean month, Julian mean year
        assert 12 * MS_PER_AVERAGE_MONTH == pytest.approx(365.2425 * MS_PER_DAY)
        assert MS_PER_AVERAGE_YEAR - 12 * MS_PER_AVERAGE_MONTH == pytest.approx(0.0075 * MS_PER_DAY)


# =============================================================================
# Linear
# =============================================================================


class TestLinearEther:
    def test_one_unit_is_interval_pixels(self, day_ether):
        assert day_ether.date_to_pixel(ORIGIN + MS_PER_DAY, ORIGIN) == pytest.approx(100)
        assert day_ether.date_to_pixel(ORIGIN - MS_PER_DAY // 2, ORIGIN) == pytest.approx(-50)

    def test_origin_maps_to_zero(self, day_ether):
        assert day_ether.date_to_pixel(ORIGIN, ORIGIN) == 0

    def test_pixel_to_date(self, day_ether):
        assert day_ether.pixel_to_date(250, ORIGIN) == ORIGIN + int(2.5 * MS_PER_DAY)

    @pytest.mark.parametrize("unit", [IntervalUnit.MINUTE, IntervalUnit.DAY, IntervalUnit.MONTH, IntervalUnit.CENTURY])
    def test_round_trip_within_one_ms(self, unit):
        ether = LinearEther(unit, 73.5)
        for offset in SAMPLE_OFFSETS:
            t = ORIGIN + offset
            assert abs(ether.pixel_to_date(ether.date_to_pixel(t, ORIGIN), ORIGIN) - t) <= 1

    def test_monotonic(self, day_ether):
        times = sorted(ORIGIN + o for o in SAMPLE_OFFSETS)
        pixels = [day_ether.date_to_pixel(t, ORIGIN) for t in times]
        assert pixels == sorted(pixels)
        assert len(set(pixels)) == len(pixels)

    def test_pixel_width_is_signed(self, day_ether):
        assert day_ether.get_pixel_width(ORIGIN, ORIGIN + MS_PER_DAY) == pytest.approx(100)
        assert day_ether.get_pixel_width(ORIGIN + MS_PER_DAY, ORIGIN) == pytest.approx(-100)

    def test_accessors(self, day_ether):
        assert day_ether.get_interval_unit() is IntervalUnit.DAY
        assert day_ether.get_interval_pixels() == 100
        assert day_ether.ms_per_pixel == MS_PER_DAY / 100

    def test_unit_given_as_string(self):
        assert LinearEther("Month", 200).interval_unit is IntervalUnit.MONTH

    def test_immutable(self, day_ether):
        with pytest.raises(dataclasses.FrozenInstanceError):
            day_ether.interval_pixels = 5

    @pytest.mark.parametrize("pixels", [0, -1, math.nan, math.inf, "100", True])
    def test_invalid_pixels(self, pixels):
        with pytest.raises(ConfigError):
            LinearEther(IntervalUnit.DAY, pixels)

    def test_invalid_unit(self):
        with pytest.raises(ConfigError, match="Unknown interval unit"):
            LinearEther("fortnight", 100)


# =============================================================================
# Logarithmic
# =============================================================================


class TestLogarithmicEther:
    @pytest.fixture
    def log_ether(self):
        return LogarithmicEther(IntervalUnit.DAY, 100, base=10)

    def test_origin_maps_to_zero(self, log_ether):
        assert log_ether.date_to_pixel(ORIGIN, ORIGIN) == 0

    def test_known_value(self, log_ether):
        # log10(999 + 1) * 100
        assert log_ether.date_to_pixel(ORIGIN + 999, ORIGIN) == pytest.approx(300)
        assert log_ether.pixel_to_date(300, ORIGIN) == ORIGIN + 999

    def test_symmetric(self, log_ether):
        for d in (1, 5000, 3 * MS_PER_DAY):
            assert log_ether.date_to_pixel(ORIGIN - d, ORIGIN) == pytest.approx(-log_ether.date_to_pixel(ORIGIN + d, ORIGIN))

    def test_round_trip_within_one_ms(self, log_ether):
        for offset in SAMPLE_OFFSETS:
            t = ORIGIN + offset
            assert abs(log_ether.pixel_to_date(log_ether.date_to_pixel(t, ORIGIN), ORIGIN) - t) <= 1

    def test_monotonic(self, log_ether):
        times = sorted(ORIGIN + o for o in SAMPLE_OFFSETS)
        pixels = [log_ether.date_to_pixel(t, ORIGIN) for t in times]
        assert all(a < b for a, b in zip(pixels, pixels[1:]))

    def test_compresses_distance(self, log_ether):
        near = log_ether.date_to_pixel(ORIGIN + MS_PER_DAY, ORIGIN)
        far = log_ether.date_to_pixel(ORIGIN + 100 * MS_PER_DAY, ORIGIN)
        assert far < 100 * near

    def test_pixel_width_uses_midpoint(self, log_ether):
        t0, t1 = ORIGIN, ORIGIN + 2 * MS_PER_DAY
        width = log_ether.get_pixel_width(t0, t1)
        assert width == pytest.approx(2 * log_ether.date_to_pixel(ORIGIN + MS_PER_DAY, ORIGIN))
        assert log_ether.get_pixel_width(t1, t0) == pytest.approx(-width)

    @pytest.mark.parametrize("base", [1, 0.5, 0, -3, math.nan])
    def test_invalid_base(self, base):
        with pytest.raises(ConfigError):
            LogarithmicEther(IntervalUnit.DAY, 100, base=base)

    def test_invalid_pixels(self):
        with pytest.raises(ConfigError):
            LogarithmicEther(IntervalUnit.DAY, 0)


# =============================================================================
# Base class and factory
# =============================================================================


class TestEtherContract:
    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            Ether()

    def test_all_strategies_share_contract(self):
        for ether in (
            LinearEther(IntervalUnit.DAY, 100),
            LogarithmicEther(IntervalUnit.DAY, 100),
            HotZoneEther(IntervalUnit.DAY, 100, (HotZone(ORIGIN, ORIGIN + MS_PER_DAY),)),
        ):
            assert isinstance(ether, Ether)
            assert ether.date_to_pixel(ORIGIN, ORIGIN) == 0
            assert ether.get_pixel_width(ORIGIN, ORIGIN + MS_PER_DAY) > 0


class TestCreateEther:
    def test_linear(self):
        assert isinstance(create_ether("linear", "day", 100), LinearEther)

    @pytest.mark.parametrize("kind", ["logarithmic", "log", "Logarithmic"])
    def test_logarithmic(self, kind):
        ether = create_ether(kind, "day", 100, base=2)
        assert isinstance(ether, LogarithmicEther)
        assert ether.base == 2

    @pytest.mark.parametrize("kind", ["hotzone", "hot_zone", "hot-zone"])
    def test_hot_zone(self, kind):
        zone = HotZone(ORIGIN, ORIGIN + MS_PER_DAY, 3)
        ether = create_ether(kind, "day", 100, hot_zones=[zone])
        assert isinstance(ether, HotZoneEther)
        assert ether.get_hot_zones() == [zone]

    def test_unknown(self):
        with pytest.raises(ConfigError, match="Unknown ether type"):
            create_ether("spiral", "day", 100)
