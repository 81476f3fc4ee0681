"""
Domain Entities

Value objects shared across the coordinate layer.
"""

from __future__ import annotations

from .events import DateTimeFormat, EventDataset, EventModel, is_duration_event
from .timeline import (
    DateBounds,
    HotZone,
    HotZoneTransition,
    IntervalRecord,
    IntervalUnit,
    LayoutItem,
    RecordSkipped,
    ScaleConfig,
    ScaleTick,
    TimeValue,
    Viewport,
    VisibleRange,
)

__all__ = [
    # Timeline entities
    "TimeValue",
    "IntervalUnit",
    "IntervalRecord",
    "LayoutItem",
    "Viewport",
    "VisibleRange",
    "ScaleConfig",
    "ScaleTick",
    "HotZone",
    "HotZoneTransition",
    "DateBounds",
    "RecordSkipped",
    # Input schema
    "EventModel",
    "EventDataset",
    "is_duration_event",
    "DateTimeFormat",
]
