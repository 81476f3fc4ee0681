"""
Layout - Track Assignment

Greedy, label-aware placement of interval records on horizontal tracks.
"""

from .layout_engine import LayoutConfig, LayoutEngine, events_overlap, filter_visible_records

# Alias used by callers that think of the engine as an interval scheduler
IntervalScheduler = LayoutEngine

__all__ = [
    "LayoutEngine",
    "IntervalScheduler",
    "LayoutConfig",
    "events_overlap",
    "filter_visible_records",
]
