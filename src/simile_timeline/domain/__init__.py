"""
Domain Layer - Core Value Types

Contains:
- entities: time values, records, layout items, ticks, hot zones, input schema
"""

from .entities import (
    HotZone,
    IntervalRecord,
    IntervalUnit,
    LayoutItem,
    ScaleConfig,
    ScaleTick,
    TimeValue,
)

__all__ = [
    "TimeValue",
    "IntervalUnit",
    "IntervalRecord",
    "LayoutItem",
    "ScaleConfig",
    "ScaleTick",
    "HotZone",
]
