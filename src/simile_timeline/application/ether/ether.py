"""
Ether - Time to Pixel Mapping Strategies

An ether maps a TimeValue to a one-dimensional pixel offset relative to an
origin instant (the viewport center), and back.

Strategies:
    - LinearEther: constant pixel density
    - LogarithmicEther: density falls off with distance from the origin
    - HotZoneEther: linear with magnified (or compressed) time ranges

Every ether is an immutable value; construct once and share freely.

Example:
    >>> ether = LinearEther(IntervalUnit.DAY, 100)
    >>> ether.date_to_pixel(86_400_000, 0)
    100.0
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from simile_timeline.core.exceptions import ConfigError, InvalidParameterError
from simile_timeline.domain.entities.timeline import HotZone, IntervalUnit, TimeValue

from ..dates.calendar import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND, MS_PER_WEEK

logger = logging.getLogger(__name__)

# =============================================================================
# Unit Lengths
# =============================================================================

MS_PER_AVERAGE_MONTH = 30.436875 * MS_PER_DAY
MS_PER_AVERAGE_YEAR = 365.25 * MS_PER_DAY

_MS_PER_UNIT: dict[IntervalUnit, float] = {
    IntervalUnit.MILLISECOND: 1,
    IntervalUnit.SECOND: MS_PER_SECOND,
    IntervalUnit.MINUTE: MS_PER_MINUTE,
    IntervalUnit.HOUR: MS_PER_HOUR,
    IntervalUnit.DAY: MS_PER_DAY,
    IntervalUnit.WEEK: MS_PER_WEEK,
    IntervalUnit.MONTH: MS_PER_AVERAGE_MONTH,
    IntervalUnit.YEAR: MS_PER_AVERAGE_YEAR,
    IntervalUnit.DECADE: 10 * MS_PER_AVERAGE_YEAR,
    IntervalUnit.CENTURY: 100 * MS_PER_AVERAGE_YEAR,
    IntervalUnit.MILLENNIUM: 1000 * MS_PER_AVERAGE_YEAR,
}


def milliseconds_per_unit(unit: IntervalUnit | str) -> float:
    """Fixed length of one unit; months and years use Gregorian averages."""
    return _MS_PER_UNIT[IntervalUnit.parse(unit)]


# =============================================================================
# Base Strategy
# =============================================================================


class Ether(ABC):
    """Common contract of all time-to-pixel strategies."""

    interval_unit: IntervalUnit
    interval_pixels: float

    @abstractmethod
    def date_to_pixel(self, t: TimeValue, origin: TimeValue) -> float:
        """Pixel offset of ``t`` from ``origin`` (0 at the origin)."""

    @abstractmethod
    def pixel_to_date(self, pixel: float, origin: TimeValue) -> TimeValue:
        """Instant at pixel offset ``pixel`` from ``origin``."""

    @abstractmethod
    def get_pixel_width(self, t0: TimeValue, t1: TimeValue) -> float:
        """Signed pixel span from ``t0`` to ``t1`` (negative if t1 < t0)."""

    def get_interval_unit(self) -> IntervalUnit:
        return self.interval_unit

    def get_interval_pixels(self) -> float:
        return self.interval_pixels

    @property
    def ms_per_unit(self) -> float:
        return _MS_PER_UNIT[self.interval_unit]

    @property
    def ms_per_pixel(self) -> float:
        """Milliseconds covered by one pixel at the base density."""
        return self.ms_per_unit / self.interval_pixels

    def _check_base_params(self) -> None:
        try:
            unit = IntervalUnit.parse(self.interval_unit)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        object.__setattr__(self, "interval_unit", unit)

        pixels = self.interval_pixels
        if isinstance(pixels, bool) or not isinstance(pixels, (int, float)):
            raise ConfigError(f"interval_pixels must be a number, got {pixels!r}")
        if not math.isfinite(pixels) or pixels <= 0:
            raise ConfigError(f"interval_pixels must be positive, got {pixels!r}")


# =============================================================================
# Linear
# =============================================================================


@dataclass(frozen=True)
class LinearEther(Ether):
    """Constant density: ``interval_pixels`` per ``interval_unit``."""

    interval_unit: IntervalUnit
    interval_pixels: float

    def __post_init__(self) -> None:
        self._check_base_params()

    def date_to_pixel(self, t: TimeValue, origin: TimeValue) -> float:
        return (t - origin) / self.ms_per_unit * self.interval_pixels

    def pixel_to_date(self, pixel: float, origin: TimeValue) -> TimeValue:
        return origin + round(pixel * self.ms_per_pixel)

    def get_pixel_width(self, t0: TimeValue, t1: TimeValue) -> float:
        return (t1 - t0) / self.ms_per_unit * self.interval_pixels


# =============================================================================
# Logarithmic
# =============================================================================


@dataclass(frozen=True)
class LogarithmicEther(Ether):
    """
    Logarithmic density around the origin.

    ``pixel = sign(d) * log_base(|d| + 1) * interval_pixels`` with ``d`` the
    distance from the origin in milliseconds. Near events stay readable
    while distant ones are compressed.
    """

    interval_unit: IntervalUnit
    interval_pixels: float
    base: float = 10.0

    def __post_init__(self) -> None:
        self._check_base_params()
        if isinstance(self.base, bool) or not isinstance(self.base, (int, float)):
            raise ConfigError(f"base must be a number, got {self.base!r}")
        if not math.isfinite(self.base) or self.base <= 1:
            raise ConfigError(f"base must be greater than 1, got {self.base!r}")

    def date_to_pixel(self, t: TimeValue, origin: TimeValue) -> float:
        delta = t - origin
        if delta == 0:
            return 0.0
        magnitude = math.log(abs(delta) + 1, self.base) * self.interval_pixels
        return math.copysign(magnitude, delta)

    def pixel_to_date(self, pixel: float, origin: TimeValue) -> TimeValue:
        if pixel == 0:
            return origin
        try:
            magnitude = math.pow(self.base, abs(pixel) / self.interval_pixels) - 1
        except OverflowError:
            raise InvalidParameterError(
                "pixel", pixel, "a pixel offset within the representable time range"
            ) from None
        return origin + round(math.copysign(magnitude, pixel))

    def get_pixel_width(self, t0: TimeValue, t1: TimeValue) -> float:
        midpoint = t0 + (t1 - t0) / 2
        return self.date_to_pixel(t1, midpoint) - self.date_to_pixel(t0, midpoint)


# =============================================================================
# Hot Zones
# =============================================================================


@dataclass(frozen=True)
class HotZoneEther(LinearEther):
    """
    Linear ether with magnified ranges.

    A zone is active for an origin before or inside it (``zone.end >= origin``);
    zones wholly before the origin are ignored. Targets inside an active zone
    are spread over its expanded width (``linear_width * magnify``) starting
    from the zone's linear start position, targets past it are shifted by the
    full expansion ``linear_width * (magnify - 1)``, targets before it are
    untouched. The mapping is continuous and strictly increasing, and
    ``pixel_to_date`` is its exact inverse.

    With the origin inside a zone the origin itself lands at the expansion of
    the part of the zone before it, not at 0.
    """

    hot_zones: tuple[HotZone, ...] = field(default=())

    def __post_init__(self) -> None:
        super().__post_init__()
        zones = sorted(self.hot_zones, key=lambda z: (z.start, z.end))
        for zone in zones:
            if zone.start >= zone.end:
                raise ConfigError(f"Hot zone start must be before end: {zone.start} >= {zone.end}")
            if not math.isfinite(zone.magnify) or zone.magnify <= 0:
                raise ConfigError(f"Hot zone magnify must be positive, got {zone.magnify!r}")
        for prev, cur in zip(zones, zones[1:]):
            if cur.start < prev.end:
                raise ConfigError(
                    f"Hot zones overlap: [{prev.start}, {prev.end}] and [{cur.start}, {cur.end}]"
                )
        object.__setattr__(self, "hot_zones", tuple(zones))

    def get_hot_zones(self) -> list[HotZone]:
        return list(self.hot_zones)

    def _linear_width(self, duration: float) -> float:
        return duration / self.ms_per_unit * self.interval_pixels

    def _regions(self, origin: TimeValue) -> Iterable[tuple[TimeValue, TimeValue, float]]:
        for zone in self.hot_zones:
            if zone.end >= origin:
                yield zone.start, zone.end, zone.magnify

    def date_to_pixel(self, t: TimeValue, origin: TimeValue) -> float:
        pixel = self._linear_width(t - origin)
        for region_start, region_end, magnify in self._regions(origin):
            if t <= region_start:
                break
            covered = min(t, region_end) - region_start
            pixel += self._linear_width(covered) * (magnify - 1)
        return pixel

    def pixel_to_date(self, pixel: float, origin: TimeValue) -> TimeValue:
        cursor_t: TimeValue = origin
        cursor_px = 0.0
        for region_start, region_end, magnify in self._regions(origin):
            gap_px = self._linear_width(region_start - cursor_t)
            if pixel <= cursor_px + gap_px:
                return cursor_t + round((pixel - cursor_px) * self.ms_per_pixel)
            cursor_px += gap_px

            zone_px = self._linear_width(region_end - region_start) * magnify
            if pixel <= cursor_px + zone_px:
                return region_start + round((pixel - cursor_px) * self.ms_per_pixel / magnify)
            cursor_px += zone_px
            cursor_t = region_end

        return cursor_t + round((pixel - cursor_px) * self.ms_per_pixel)

    def get_pixel_width(self, t0: TimeValue, t1: TimeValue) -> float:
        lo, hi = min(t0, t1), max(t0, t1)
        width = self.date_to_pixel(hi, lo) - self.date_to_pixel(lo, lo)
        return width if t1 >= t0 else -width


# =============================================================================
# Factory
# =============================================================================

ETHER_TYPES = ("linear", "logarithmic", "hotzone")


def create_ether(
    kind: str,
    interval_unit: IntervalUnit | str,
    interval_pixels: float,
    *,
    base: float = 10.0,
    hot_zones: Iterable[HotZone] = (),
) -> Ether:
    """
    Build an ether by name.

    Raises:
        ConfigError: unknown kind or invalid parameters
    """
    name = kind.strip().lower().replace("_", "").replace("-", "")
    if name == "linear":
        return LinearEther(interval_unit, interval_pixels)
    if name in ("logarithmic", "log"):
        return LogarithmicEther(interval_unit, interval_pixels, base)
    if name == "hotzone":
        return HotZoneEther(interval_unit, interval_pixels, tuple(hot_zones))
    raise ConfigError(f"Unknown ether type {kind!r}; expected one of {', '.join(ETHER_TYPES)}")
