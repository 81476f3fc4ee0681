"""
ScaleTickGenerator - Adaptive Time Scale Labels

Chooses a tick granularity for the current zoom level and emits the tick
marks visible in a viewport.

Granularity selection:
    Walk a finest-to-coarsest table (1 minute ... 1 century) and take the
    first entry whose tick spacing leaves room for its label. Spacing is
    measured on the shortest real span of one step (28-day months,
    365-day years), so labels never collide even in February.

Tick placement:
    Start one step before the visible range, aligned to the unit boundary,
    and step by ``interval`` units until past the range end. Only ticks
    within the viewport plus an overscan margin are kept, and a hard cap
    bounds the loop.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any

from simile_timeline.core.exceptions import ConfigError, InvalidParameterError
from simile_timeline.domain.entities.timeline import (
    IntervalUnit,
    ScaleConfig,
    ScaleTick,
    TimeValue,
    Viewport,
    VisibleRange,
)

from ..dates.calendar import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, MS_PER_WEEK, from_fields, to_fields
from ..dates.normalizer import add_interval, format_date
from ..ether.ether import Ether, milliseconds_per_unit

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_MIN_LABEL_SPACING = 80
DEFAULT_MAX_TICKS = 200
DEFAULT_OVERSCAN = 100

LABEL_PADDING = 10
LABEL_CHAR_WIDTH = 7

LABEL_WIDTHS: dict[str, float] = {
    "HH:mm": 40,
    "MMM d": 50,
    "MMM d HH:mm": 90,
    "MMM yyyy": 70,
    "yyyy": 40,
}

# (unit, interval, label format), finest first
SCALE_TABLE: tuple[tuple[IntervalUnit, int, str], ...] = (
    (IntervalUnit.MINUTE, 1, "HH:mm"),
    (IntervalUnit.MINUTE, 5, "HH:mm"),
    (IntervalUnit.MINUTE, 15, "HH:mm"),
    (IntervalUnit.MINUTE, 30, "HH:mm"),
    (IntervalUnit.HOUR, 1, "HH:mm"),
    (IntervalUnit.HOUR, 3, "HH:mm"),
    (IntervalUnit.HOUR, 6, "HH:mm"),
    (IntervalUnit.HOUR, 12, "MMM d HH:mm"),
    (IntervalUnit.DAY, 1, "MMM d"),
    (IntervalUnit.DAY, 3, "MMM d"),
    (IntervalUnit.WEEK, 1, "MMM d"),
    (IntervalUnit.WEEK, 2, "MMM d"),
    (IntervalUnit.MONTH, 1, "MMM yyyy"),
    (IntervalUnit.MONTH, 3, "MMM yyyy"),
    (IntervalUnit.MONTH, 6, "MMM yyyy"),
    (IntervalUnit.YEAR, 1, "yyyy"),
    (IntervalUnit.YEAR, 5, "yyyy"),
    (IntervalUnit.DECADE, 1, "yyyy"),
    (IntervalUnit.CENTURY, 1, "yyyy"),
)

# Shortest real length of one unit
_MIN_UNIT_MS: dict[IntervalUnit, int] = {
    IntervalUnit.MINUTE: MS_PER_MINUTE,
    IntervalUnit.HOUR: MS_PER_HOUR,
    IntervalUnit.DAY: MS_PER_DAY,
    IntervalUnit.WEEK: MS_PER_WEEK,
    IntervalUnit.MONTH: 28 * MS_PER_DAY,
    IntervalUnit.YEAR: 365 * MS_PER_DAY,
    IntervalUnit.DECADE: 3652 * MS_PER_DAY,
    IntervalUnit.CENTURY: 36524 * MS_PER_DAY,
}


@dataclass(frozen=True)
class ScaleSettings:
    """Tick generation limits."""

    min_label_spacing: float = DEFAULT_MIN_LABEL_SPACING
    max_ticks: int = DEFAULT_MAX_TICKS
    overscan: float = DEFAULT_OVERSCAN

    def __post_init__(self) -> None:
        if not _is_number(self.min_label_spacing) or self.min_label_spacing <= 0:
            raise ConfigError(f"min_label_spacing must be positive, got {self.min_label_spacing!r}")
        if isinstance(self.max_ticks, bool) or not isinstance(self.max_ticks, int) or self.max_ticks < 1:
            raise ConfigError(f"max_ticks must be a positive integer, got {self.max_ticks!r}")
        if not _is_number(self.overscan) or self.overscan < 0:
            raise ConfigError(f"overscan must not be negative, got {self.overscan!r}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _is_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def _check_pixels_per_ms(pixels_per_ms: float) -> None:
    if not _is_number(pixels_per_ms) or pixels_per_ms <= 0:
        raise InvalidParameterError("pixels_per_ms", pixels_per_ms, "a positive number")


# =============================================================================
# Granularity
# =============================================================================


def estimate_label_width(fmt: str) -> float:
    """Rendered label width in pixels for a format pattern."""
    return LABEL_WIDTHS.get(fmt, len(fmt) * LABEL_CHAR_WIDTH)


def get_scale_config(
    pixels_per_ms: float,
    min_label_spacing: float = DEFAULT_MIN_LABEL_SPACING,
) -> ScaleConfig:
    """
    Pick the finest tick granularity that leaves room for its labels.

    Raises:
        InvalidParameterError: pixels_per_ms is not positive
    """
    _check_pixels_per_ms(pixels_per_ms)

    chosen = SCALE_TABLE[-1]
    for entry in SCALE_TABLE:
        unit, interval, fmt = entry
        spacing = _MIN_UNIT_MS[unit] * interval * pixels_per_ms
        if spacing >= max(min_label_spacing, estimate_label_width(fmt) + LABEL_PADDING):
            chosen = entry
            break

    unit, interval, fmt = chosen
    config = ScaleConfig(
        unit=unit,
        interval=interval,
        format=fmt,
        tick_ms=milliseconds_per_unit(unit) * interval,
    )
    logger.debug(f"Scale for {pixels_per_ms:.3g} px/ms: every {interval} {unit.value} ({fmt})")
    return config


# =============================================================================
# Alignment and Majors
# =============================================================================


def align_to_unit(t: TimeValue, unit: IntervalUnit | str, interval: int = 1) -> TimeValue:
    """
    Floor an instant to a unit boundary.

    Minutes, hours, months and years also snap to multiples of ``interval``;
    weeks start on Sunday. Floor division keeps negative years aligned.
    """
    unit = IntervalUnit.parse(unit)
    step = max(int(interval), 1)
    f = to_fields(t)

    if unit is IntervalUnit.MILLISECOND:
        return t
    if unit is IntervalUnit.SECOND:
        return from_fields(f.year, f.month, f.day, f.hour, f.minute, f.second // step * step)
    if unit is IntervalUnit.MINUTE:
        return from_fields(f.year, f.month, f.day, f.hour, f.minute // step * step)
    if unit is IntervalUnit.HOUR:
        return from_fields(f.year, f.month, f.day, f.hour // step * step)
    if unit is IntervalUnit.DAY:
        return from_fields(f.year, f.month, f.day)
    if unit is IntervalUnit.WEEK:
        return from_fields(f.year, f.month, f.day) - f.weekday * MS_PER_DAY
    if unit is IntervalUnit.MONTH:
        return from_fields(f.year, (f.month - 1) // step * step + 1)
    if unit is IntervalUnit.YEAR:
        return from_fields(f.year // step * step)

    span = {IntervalUnit.DECADE: 10, IntervalUnit.CENTURY: 100, IntervalUnit.MILLENNIUM: 1000}[unit]
    return from_fields(f.year // span * span)


def is_major_tick(t: TimeValue, unit: IntervalUnit | str) -> bool:
    """Whether a tick sits on the next coarser boundary."""
    unit = IntervalUnit.parse(unit)
    f = to_fields(t)
    if unit in (IntervalUnit.MINUTE, IntervalUnit.HOUR):
        return f.hour == 0 and f.minute == 0
    if unit in (IntervalUnit.DAY, IntervalUnit.WEEK):
        return f.day == 1
    if unit is IntervalUnit.MONTH:
        return f.month == 1
    if unit in (IntervalUnit.YEAR, IntervalUnit.DECADE):
        return f.year % 10 == 0
    if unit is IntervalUnit.CENTURY:
        return f.year % 100 == 0
    if unit is IntervalUnit.MILLENNIUM:
        return f.year % 1000 == 0
    return False


# =============================================================================
# Viewport Helpers
# =============================================================================


def pixels_per_ms(ether: Ether) -> float:
    """Base pixel density of an ether."""
    return ether.get_interval_pixels() / milliseconds_per_unit(ether.get_interval_unit())


def get_visible_range(center: TimeValue, viewport_width: float, px_per_ms: float) -> VisibleRange:
    """Time range covered by a linear viewport centered on ``center``."""
    _check_pixels_per_ms(px_per_ms)
    half = round(viewport_width / 2 / px_per_ms)
    return VisibleRange(start=center - half, end=center + half)


# =============================================================================
# Tick Generation
# =============================================================================


def generate_ticks(
    visible_range: VisibleRange,
    scale_config: ScaleConfig,
    pixels_per_ms: float,
    origin: TimeValue,
    viewport_width: float,
    *,
    ether: Ether | None = None,
    max_ticks: int = DEFAULT_MAX_TICKS,
    overscan: float = DEFAULT_OVERSCAN,
) -> list[ScaleTick]:
    """
    Emit the ticks visible in a viewport.

    Args:
        visible_range: Time range to cover
        scale_config: Granularity from get_scale_config
        pixels_per_ms: Linear density (ignored for placement when ``ether`` is given)
        origin: Instant at the viewport center
        viewport_width: Viewport width in pixels
        ether: Optional non-linear projection for tick positions
        max_ticks: Hard cap on loop iterations
        overscan: Margin kept beyond each viewport edge

    Returns:
        Ticks with x measured from the viewport's left edge
    """
    _check_pixels_per_ms(pixels_per_ms)
    half_width = viewport_width / 2
    left_ms = origin - half_width / pixels_per_ms

    current = align_to_unit(
        visible_range.start - round(scale_config.tick_ms),
        scale_config.unit,
        scale_config.interval,
    )

    ticks: list[ScaleTick] = []
    steps = 0
    while current <= visible_range.end and steps < max_ticks:
        if ether is not None:
            x = ether.date_to_pixel(current, origin) + half_width
        else:
            x = (current - left_ms) * pixels_per_ms

        if -overscan <= x <= viewport_width + overscan:
            ticks.append(
                ScaleTick(
                    time=current,
                    label=format_date(current, scale_config.format),
                    pixel_x=x,
                    is_major=is_major_tick(current, scale_config.unit),
                )
            )

        current = add_interval(current, scale_config.interval, scale_config.unit)
        steps += 1

    return ticks


class ScaleTickGenerator:
    """
    Scale helpers bound to a set of ScaleSettings.

    Example:
        >>> generator = ScaleTickGenerator()
        >>> ticks = generator.ticks_for_viewport(ether, Viewport(origin_time=t, pixel_width=800))
    """

    def __init__(self, settings: ScaleSettings | None = None) -> None:
        self.settings = settings or ScaleSettings()

    def get_scale_config(self, px_per_ms: float) -> ScaleConfig:
        return get_scale_config(px_per_ms, self.settings.min_label_spacing)

    def generate_ticks(
        self,
        visible_range: VisibleRange,
        scale_config: ScaleConfig,
        px_per_ms: float,
        origin: TimeValue,
        viewport_width: float,
        ether: Ether | None = None,
    ) -> list[ScaleTick]:
        return generate_ticks(
            visible_range,
            scale_config,
            px_per_ms,
            origin,
            viewport_width,
            ether=ether,
            max_ticks=self.settings.max_ticks,
            overscan=self.settings.overscan,
        )

    def visible_range_for(self, ether: Ether, viewport: Viewport) -> VisibleRange:
        """Time range under the viewport, measured through the ether."""
        half = viewport.pixel_width / 2
        return VisibleRange(
            start=ether.pixel_to_date(-half, viewport.origin_time),
            end=ether.pixel_to_date(half, viewport.origin_time),
        )

    def ticks_for_viewport(self, ether: Ether, viewport: Viewport) -> list[ScaleTick]:
        """Scale ticks for one band's viewport."""
        density = pixels_per_ms(ether)
        return self.generate_ticks(
            self.visible_range_for(ether, viewport),
            self.get_scale_config(density),
            density,
            viewport.origin_time,
            viewport.pixel_width,
            ether=ether,
        )
