"""
Application Layer - Coordinate Computations

Contains:
- dates: date normalization and calendar arithmetic
- ether: time <-> pixel mapping strategies and hot zones
- layout: track assignment
- scale: adaptive tick generation
- events: dataset loading, validation and queries
- timeline: multi-band assembly
"""

from .dates import DateNormalizer, add_interval, format_date, parse_date
from .ether import Ether, HotZoneEther, LinearEther, LogarithmicEther, create_ether
from .events import EventSource, validate_dataset, validate_event
from .layout import IntervalScheduler, LayoutConfig, LayoutEngine
from .scale import ScaleSettings, ScaleTickGenerator, generate_ticks, get_scale_config
from .timeline import BandBuilder, BandView

__all__ = [
    # Dates
    "DateNormalizer",
    "parse_date",
    "format_date",
    "add_interval",
    # Ether
    "Ether",
    "LinearEther",
    "LogarithmicEther",
    "HotZoneEther",
    "create_ether",
    # Layout
    "LayoutEngine",
    "IntervalScheduler",
    "LayoutConfig",
    # Scale
    "ScaleTickGenerator",
    "ScaleSettings",
    "get_scale_config",
    "generate_ticks",
    # Events
    "EventSource",
    "validate_event",
    "validate_dataset",
    # Timeline
    "BandBuilder",
    "BandView",
]
