"""
Simile Timeline - Coordinate Layer for Historical Timelines

Turns timeline data into geometry: parses heterogeneous dates (BCE years
included), maps time to pixels under linear, logarithmic and hot-zone
ethers, packs events into tracks and generates adaptive scale ticks.
Rendering is left to the caller.

Usage:
    from simile_timeline import EventSource, BandBuilder, TimelineConfig

    source = EventSource.from_json(text)
    views = BandBuilder(TimelineConfig()).build(
        source.to_records(),
        center_time=source.get_median_time(),
        viewport_width=1200,
    )
    for view in views:
        print(view.index, view.track_count, [t.label for t in view.ticks])

Features:
    - ISO-8601, free-form Gregorian, BCE and epoch-ms date parsing
    - Linear, logarithmic and hot-zone time/pixel mapping
    - Greedy label-aware track assignment
    - Zoom-adaptive scale ticks
    - Event validation and in-memory queries
"""

from .application import (
    BandBuilder,
    BandView,
    DateNormalizer,
    Ether,
    EventSource,
    HotZoneEther,
    IntervalScheduler,
    LayoutConfig,
    LayoutEngine,
    LinearEther,
    LogarithmicEther,
    ScaleSettings,
    ScaleTickGenerator,
    add_interval,
    create_ether,
    format_date,
    generate_ticks,
    get_scale_config,
    parse_date,
)
from .config import BandConfig, TimelineConfig
from .core import ConfigError, DateFormatError, DateParseError, TimelineError
from .domain import (
    HotZone,
    IntervalRecord,
    IntervalUnit,
    LayoutItem,
    ScaleConfig,
    ScaleTick,
    TimeValue,
)

__version__ = "0.1.0"

__all__ = [
    # Values
    "TimeValue",
    "IntervalUnit",
    "IntervalRecord",
    "LayoutItem",
    "ScaleConfig",
    "ScaleTick",
    "HotZone",
    # Dates
    "DateNormalizer",
    "parse_date",
    "format_date",
    "add_interval",
    # Ethers
    "Ether",
    "LinearEther",
    "LogarithmicEther",
    "HotZoneEther",
    "create_ether",
    # Layout and scale
    "LayoutEngine",
    "IntervalScheduler",
    "LayoutConfig",
    "ScaleTickGenerator",
    "ScaleSettings",
    "get_scale_config",
    "generate_ticks",
    # Data and assembly
    "EventSource",
    "BandBuilder",
    "BandView",
    "BandConfig",
    "TimelineConfig",
    # Errors
    "TimelineError",
    "DateParseError",
    "DateFormatError",
    "ConfigError",
]
