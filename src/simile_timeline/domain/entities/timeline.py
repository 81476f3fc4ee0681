"""
Timeline Entities - Coordinate Layer Domain Model

This module defines the value types shared by the date normalizer, the
ethers, the layout engine and the scale tick generator.

Key Entities:
    - TimeValue: signed epoch milliseconds (proleptic Gregorian, astronomical years)
    - IntervalUnit: calendar granularity from millisecond to millennium
    - IntervalRecord: one point or duration record ready for layout
    - LayoutItem: a record's track and pixel footprint
    - ScaleConfig / ScaleTick: axis label granularity and tick marks
    - HotZone: a magnified time range

Architecture:
    Frozen dataclasses throughout; every entity is immutable and serializable.

Example:
    >>> record = IntervalRecord(start_time=0, end_time=86_400_000, title="Day one")
    >>> record.is_duration
    True
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .events import is_duration_event

# Milliseconds since 1970-01-01T00:00:00Z, negative before the epoch.
TimeValue = int


class IntervalUnit(Enum):
    """Calendar granularities, finest first."""

    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    DECADE = "decade"
    CENTURY = "century"
    MILLENNIUM = "millennium"

    @classmethod
    def parse(cls, value: IntervalUnit | str) -> IntervalUnit:
        """Accept an enum member or its name/value in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            msg = f"Unknown interval unit: {value!r}"
            raise ValueError(msg) from None

    @property
    def is_calendar_unit(self) -> bool:
        """Whether adding this unit needs month/year calendar arithmetic."""
        return self in _CALENDAR_UNITS


_CALENDAR_UNITS = frozenset(
    {
        IntervalUnit.MONTH,
        IntervalUnit.YEAR,
        IntervalUnit.DECADE,
        IntervalUnit.CENTURY,
        IntervalUnit.MILLENNIUM,
    }
)


@dataclass(frozen=True)
class IntervalRecord:
    """
    One logical timeline record.

    Attributes:
        start_time: Start instant
        end_time: End instant, or None for a point record
        title: Label text (drives label-width estimation)
        manual_track: Forced lane index, or None for automatic placement
        event_id: Identifier of the source event, if any
        data: The source event mapping, passed through untouched
    """

    start_time: TimeValue
    end_time: TimeValue | None = None
    title: str = ""
    manual_track: int | None = None
    event_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_duration(self) -> bool:
        """Duration records span [start_time, end_time]."""
        return self.end_time is not None

    @property
    def duration_ms(self) -> int:
        """Length of the record, 0 for point records."""
        if self.end_time is None:
            return 0
        return self.end_time - self.start_time

    @property
    def sort_key(self) -> tuple[int, int]:
        """Layout order: earlier first, then shorter first."""
        return (self.start_time, self.duration_ms)

    @classmethod
    def from_event(
        cls,
        event: Mapping[str, Any],
        parse: Callable[[Any], TimeValue] | None = None,
    ) -> IntervalRecord:
        """
        Build a record from a raw event mapping.

        A duration flag (``isDuration`` or ``durationEvent``) without an ``end``
        yields a zero-length duration record.

        Args:
            event: Mapping with at least ``start`` (and usually ``title``)
            parse: Date parser, defaults to the shared DateNormalizer

        Raises:
            DateParseError: ``start`` or ``end`` cannot be parsed
        """
        if parse is None:
            from simile_timeline.application.dates.normalizer import parse_date

            parse = parse_date

        start = parse(event.get("start"))
        end_raw = event.get("end")
        if end_raw is not None:
            end: TimeValue | None = parse(end_raw)
        elif is_duration_event(event):
            end = start
        else:
            end = None

        track = event.get("track")
        if isinstance(track, bool) or not isinstance(track, int) or track < 0:
            track = None

        event_id = event.get("id")
        return cls(
            start_time=start,
            end_time=end,
            title=str(event.get("title") or ""),
            manual_track=track,
            event_id=str(event_id) if event_id is not None else None,
            data=dict(event),
        )


@dataclass(frozen=True)
class LayoutItem:
    """A record placed on a track, in band pixel space."""

    record: IntervalRecord
    track: int
    pixel_x: float
    pixel_width: float
    pixel_y: float
    pixel_height: float

    @property
    def is_duration(self) -> bool:
        return self.record.is_duration

    @property
    def start_time(self) -> TimeValue:
        return self.record.start_time

    @property
    def end_time(self) -> TimeValue:
        """End instant; equals start for point records."""
        if self.record.end_time is None:
            return self.record.start_time
        return self.record.end_time

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.record.event_id,
            "title": self.record.title,
            "start": self.start_time,
            "end": self.record.end_time,
            "is_duration": self.is_duration,
            "track": self.track,
            "x": self.pixel_x,
            "width": self.pixel_width,
            "y": self.pixel_y,
            "height": self.pixel_height,
        }


@dataclass(frozen=True)
class Viewport:
    """The visible window: origin (center) instant and pixel width."""

    origin_time: TimeValue
    pixel_width: float


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive time range covered by a viewport."""

    start: TimeValue
    end: TimeValue

    def contains(self, t: TimeValue) -> bool:
        return self.start <= t <= self.end


@dataclass(frozen=True)
class ScaleConfig:
    """Tick granularity chosen for a zoom level."""

    unit: IntervalUnit
    interval: int
    format: str
    tick_ms: float


@dataclass(frozen=True)
class ScaleTick:
    """A single tick mark on the time scale."""

    time: TimeValue
    label: str
    pixel_x: float
    is_major: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "label": self.label,
            "x": self.pixel_x,
            "major": self.is_major,
        }


@dataclass(frozen=True)
class HotZone:
    """
    A bounded time range with extra pixel density.

    magnify > 1 zooms in (more pixels per unit time), magnify < 1 zooms out.
    """

    start: TimeValue
    end: TimeValue
    magnify: float = 2.0
    label: str | None = None

    @property
    def duration_ms(self) -> int:
        return self.end - self.start

    def contains(self, t: TimeValue) -> bool:
        return self.start <= t <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "magnify": self.magnify,
            "label": self.label,
        }


@dataclass(frozen=True)
class HotZoneTransition:
    """A boundary where the effective magnification changes."""

    position: float
    time: TimeValue
    from_zone: HotZone | None
    to_zone: HotZone | None

    @property
    def from_magnification(self) -> float:
        return self.from_zone.magnify if self.from_zone else 1.0

    @property
    def to_magnification(self) -> float:
        return self.to_zone.magnify if self.to_zone else 1.0


@dataclass(frozen=True)
class DateBounds:
    """Earliest and latest instants covered by a set of events."""

    min_time: TimeValue
    max_time: TimeValue
    has_events: bool

    def clamp(self, t: TimeValue) -> TimeValue:
        """Clamp an instant into [min_time, max_time]."""
        return max(self.min_time, min(t, self.max_time))


@dataclass(frozen=True)
class RecordSkipped:
    """Soft report for a record dropped from a layout pass."""

    title: str
    reason: str
    event_id: str | None = None
