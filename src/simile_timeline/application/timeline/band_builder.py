"""
BandBuilder - Records to Positioned Bands

Runs the per-band pipeline of a timeline:

    records ──► Ether (per band) ──► LayoutEngine ──► LayoutItems
                     │
                     └──────────► ScaleTickGenerator ──► ScaleTicks

All bands share one origin instant, so panning one band pans them all.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from simile_timeline.domain.entities.timeline import (
    IntervalRecord,
    LayoutItem,
    RecordSkipped,
    ScaleTick,
    TimeValue,
    Viewport,
)

from ..ether.ether import Ether
from ..layout.layout_engine import LayoutEngine
from ..scale.tick_generator import ScaleTickGenerator

if TYPE_CHECKING:
    from simile_timeline.config import TimelineConfig

logger = logging.getLogger(__name__)


@dataclass
class BandView:
    """Computed geometry of one band."""

    index: int
    ether: Ether
    items: list[LayoutItem] = field(default_factory=list)
    ticks: list[ScaleTick] = field(default_factory=list)
    height: float = 0.0
    track_count: int = 0
    skipped: list[RecordSkipped] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "interval_unit": self.ether.get_interval_unit().value,
            "interval_pixels": self.ether.get_interval_pixels(),
            "height": self.height,
            "track_count": self.track_count,
            "items": [item.to_dict() for item in self.items],
            "ticks": [tick.to_dict() for tick in self.ticks],
            "skipped": [{"title": s.title, "reason": s.reason, "id": s.event_id} for s in self.skipped],
        }


class BandBuilder:
    """
    Build every band of a timeline for one viewport.

    Example:
        >>> builder = BandBuilder(TimelineConfig())
        >>> views = builder.build(source.to_records(), center_time=t, viewport_width=1000)
        >>> [v.track_count for v in views]
    """

    def __init__(self, config: TimelineConfig | None = None) -> None:
        if config is None:
            from simile_timeline.config import get_timeline_config

            config = get_timeline_config()
        self.config = config
        self._ethers = [band.build_ether() for band in config.bands]
        self._engines = [
            LayoutEngine(config.layout, **band.layout_overrides()) for band in config.bands
        ]
        self._ticks = ScaleTickGenerator(config.scale)

    @property
    def ethers(self) -> list[Ether]:
        return list(self._ethers)

    def build(
        self,
        records: Iterable[IntervalRecord | Mapping[str, Any]],
        center_time: TimeValue,
        viewport_width: float,
    ) -> list[BandView]:
        """
        Lay out and scale every band around ``center_time``.

        Args:
            records: IntervalRecords or raw event mappings
            center_time: Shared origin of all bands (the viewport center)
            viewport_width: Viewport width in pixels

        Returns:
            One BandView per configured band, in band order
        """
        records = list(records)
        viewport = Viewport(origin_time=center_time, pixel_width=viewport_width)
        views: list[BandView] = []

        for index, (ether, engine) in enumerate(zip(self._ethers, self._engines)):
            view = BandView(index=index, ether=ether)
            view.items = engine.layout(records, ether, viewport, on_skip=view.skipped.append)
            view.track_count = engine.get_track_count(view.items)
            view.height = engine.get_minimum_band_height(view.items)
            view.ticks = self._ticks.ticks_for_viewport(ether, viewport)
            views.append(view)

            logger.debug(
                f"Band {index} ({ether.get_interval_unit().value}): "
                f"{len(view.items)} items, {view.track_count} tracks, {len(view.ticks)} ticks"
            )

        return views
