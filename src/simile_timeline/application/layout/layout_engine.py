"""
LayoutEngine - Track Assignment for Timeline Records

Places interval records on non-overlapping horizontal tracks and computes
each record's pixel footprint in band space.

Algorithm:
    1. Project each record through the ether (x relative to the viewport origin)
    2. Sort by (start, duration), shorter first on ties
    3. Greedy assignment: manual track if set, else the first track with no
       collision, else a new track. With max_tracks set and every allowed
       track taken, the record joins the track whose right edge is leftmost
    4. Collisions are tested on label-padded ranges, so point labels never
       stack on top of each other
    5. y = track_offset + track * (track_height + track_gap)

Records that cannot be parsed or projected are skipped and reported; they
never abort the pass.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from simile_timeline.core.exceptions import ConfigError, TimelineError
from simile_timeline.domain.entities.timeline import (
    IntervalRecord,
    LayoutItem,
    RecordSkipped,
    TimeValue,
    Viewport,
    VisibleRange,
)

from ..dates.calendar import MS_PER_DAY
from ..ether.ether import Ether

logger = logging.getLogger(__name__)

SkipCallback = Callable[[RecordSkipped], None]
PaddedRange = tuple[float, float]

DEFAULT_VISIBLE_BUFFER_MS = MS_PER_DAY


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class LayoutConfig:
    """
    Layout parameters, in pixels.

    Attributes:
        track_height: Height of one track
        track_gap: Vertical gap between tracks
        track_offset: Space above the first track (scale labels live there)
        min_tape_width: Narrowest rendered duration tape
        respect_manual_tracks: Honor IntervalRecord.manual_track
        label_buffer: Padding around every collision range
        label_char_width: Average label character width
        max_tracks: Most tracks automatic assignment may use (0 = unlimited)
    """

    track_height: float = 30
    track_gap: float = 5
    track_offset: float = 35
    min_tape_width: float = 2
    respect_manual_tracks: bool = True
    label_buffer: float = 10
    label_char_width: float = 6
    max_tracks: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "respect_manual_tracks":
                continue
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigError(f"Layout {f.name} must be a number, got {value!r}")
            if value < 0:
                raise ConfigError(f"Layout {f.name} must not be negative, got {value!r}")
        if self.track_height <= 0:
            raise ConfigError(f"Layout track_height must be positive, got {self.track_height!r}")
        if not isinstance(self.max_tracks, int):
            raise ConfigError(f"Layout max_tracks must be an integer, got {self.max_tracks!r}")

    @property
    def track_pitch(self) -> float:
        """Vertical distance between consecutive track tops."""
        return self.track_height + self.track_gap

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Helpers
# =============================================================================


def events_overlap(start1: TimeValue, end1: TimeValue, start2: TimeValue, end2: TimeValue) -> bool:
    """Strict overlap of two time ranges; touching ranges do not overlap."""
    return start1 < end2 and end1 > start2


def filter_visible_records(
    records: Iterable[IntervalRecord | Mapping[str, Any]],
    visible_range: VisibleRange,
    buffer_ms: int = DEFAULT_VISIBLE_BUFFER_MS,
) -> list[IntervalRecord | Mapping[str, Any]]:
    """
    Keep the records that reach into ``visible_range`` widened by ``buffer_ms``.

    Durations are kept when any part overlaps the widened range, points when
    they fall inside it. Records come back in their input form and order;
    unparsable ones are dropped here and left for ``layout`` to report.
    """
    lo = visible_range.start - buffer_ms
    hi = visible_range.end + buffer_ms
    visible: list[IntervalRecord | Mapping[str, Any]] = []
    for raw in records:
        try:
            record = raw if isinstance(raw, IntervalRecord) else IntervalRecord.from_event(raw)
        except (TimelineError, ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Not filtering unparsable record: {e}")
            continue
        end = record.end_time if record.end_time is not None else record.start_time
        if record.start_time <= hi and end >= lo:
            visible.append(raw)
    return visible


def _collides(lo: float, hi: float, occupied: list[PaddedRange]) -> bool:
    return any(lo < end and hi > start for start, end in occupied)


@dataclass(frozen=True)
class _Projected:
    record: IntervalRecord
    x: float
    width: float


# =============================================================================
# Layout Engine
# =============================================================================


class LayoutEngine:
    """
    Assign records to tracks and compute their pixel footprints.

    The engine holds only its config; ``layout`` is a pure function of its
    arguments, so repeated calls with the same input give identical output.

    Example:
        >>> engine = LayoutEngine()
        >>> items = engine.layout(records, LinearEther(IntervalUnit.DAY, 100), Viewport(now, 800))
        >>> engine.get_minimum_band_height(items)
    """

    def __init__(self, config: LayoutConfig | None = None, **overrides: Any) -> None:
        base = config or LayoutConfig()
        self._config = replace(base, **overrides) if overrides else base

    def get_config(self) -> LayoutConfig:
        return self._config

    def update_config(self, **changes: Any) -> LayoutConfig:
        """Replace the config with a modified copy; returns the new config."""
        unknown = set(changes) - {f.name for f in fields(LayoutConfig)}
        if unknown:
            raise ConfigError(f"Unknown layout option(s): {', '.join(sorted(unknown))}")
        self._config = replace(self._config, **changes)
        return self._config

    # -------------------------------------------------------------------------
    # Main pass
    # -------------------------------------------------------------------------

    def layout(
        self,
        records: Iterable[IntervalRecord | Mapping[str, Any]],
        ether: Ether,
        viewport: Viewport,
        on_skip: SkipCallback | None = None,
    ) -> list[LayoutItem]:
        """
        Lay out records for one band.

        Args:
            records: IntervalRecords or raw event mappings
            ether: Time-to-pixel strategy of the band
            viewport: Origin instant (x = 0) and pixel width
            on_skip: Called once per skipped record

        Returns:
            LayoutItems in placement order (sorted by start, then duration)
        """
        cfg = self._config
        projected: list[_Projected] = []
        for raw in records:
            p = self._project(raw, ether, viewport.origin_time, on_skip)
            if p is not None:
                projected.append(p)
        projected.sort(key=lambda p: p.record.sort_key)

        lanes: list[list[PaddedRange]] = []
        items: list[LayoutItem] = []

        for p in projected:
            lo, hi = self._padded_range(p.record, p.x, p.width)
            manual = p.record.manual_track if cfg.respect_manual_tracks else None

            if manual is not None and manual >= 0:
                track = manual
                while len(lanes) <= track:
                    lanes.append([])
            else:
                track = self._free_lane(lo, hi, lanes)
                if track == len(lanes):
                    lanes.append([])

            lanes[track].append((lo, hi))
            items.append(
                LayoutItem(
                    record=p.record,
                    track=track,
                    pixel_x=p.x,
                    pixel_width=p.width,
                    pixel_y=cfg.track_offset + track * cfg.track_pitch,
                    pixel_height=cfg.track_height,
                )
            )

        logger.debug(f"Laid out {len(items)} records on {len(lanes)} tracks")
        return items

    def _project(
        self,
        raw: IntervalRecord | Mapping[str, Any],
        ether: Ether,
        origin: TimeValue,
        on_skip: SkipCallback | None,
    ) -> _Projected | None:
        try:
            record = raw if isinstance(raw, IntervalRecord) else IntervalRecord.from_event(raw)
            x = ether.date_to_pixel(record.start_time, origin)
            if record.end_time is None:
                return _Projected(record, x, 0.0)
            width = abs(ether.date_to_pixel(record.end_time, origin) - x)
            return _Projected(record, x, max(width, self._config.min_tape_width))
        except (TimelineError, ArithmeticError, ValueError, TypeError, AttributeError) as e:
            title, event_id = _describe(raw)
            logger.warning(f"Skipping record {title!r}: {e}")
            if on_skip is not None:
                on_skip(RecordSkipped(title=title, reason=str(e), event_id=event_id))
            return None

    def _free_lane(self, lo: float, hi: float, lanes: list[list[PaddedRange]]) -> int:
        """First lane the range fits in, a new lane index, or the best fit when capped."""
        limit = self._config.max_tracks
        allowed = lanes[:limit] if limit else lanes
        for i, occupied in enumerate(allowed):
            if not _collides(lo, hi, occupied):
                return i
        if not limit or len(lanes) < limit:
            return len(lanes)
        ends = [max((end for _, end in occupied), default=-math.inf) for occupied in allowed]
        return ends.index(min(ends))

    # -------------------------------------------------------------------------
    # Collision ranges
    # -------------------------------------------------------------------------

    def _padded_range(self, record: IntervalRecord, x: float, width: float) -> PaddedRange:
        cfg = self._config
        if record.is_duration:
            buffer = cfg.label_buffer
        else:
            buffer = len(record.title) * cfg.label_char_width / 2 + cfg.label_buffer
        return (x - buffer, x + width + buffer)

    def collision_range(self, item: LayoutItem) -> PaddedRange:
        """The label-padded pixel range an item occupies on its track."""
        return self._padded_range(item.record, item.pixel_x, item.pixel_width)

    # -------------------------------------------------------------------------
    # Band metrics
    # -------------------------------------------------------------------------

    @staticmethod
    def get_track_count(items: Iterable[LayoutItem]) -> int:
        return max((item.track for item in items), default=-1) + 1

    def get_minimum_band_height(self, items: Iterable[LayoutItem]) -> float:
        """Height needed to show every used track (at least one)."""
        cfg = self._config
        return cfg.track_offset + max(self.get_track_count(items), 1) * cfg.track_pitch


def _describe(raw: IntervalRecord | Mapping[str, Any]) -> tuple[str, str | None]:
    if isinstance(raw, IntervalRecord):
        return raw.title, raw.event_id
    if isinstance(raw, Mapping):
        event_id = raw.get("id")
        return str(raw.get("title") or ""), str(event_id) if event_id is not None else None
    return repr(raw), None
