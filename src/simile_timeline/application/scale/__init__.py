"""
Scale - Adaptive Tick Marks and Labels
"""

from .tick_generator import (
    LABEL_PADDING,
    SCALE_TABLE,
    ScaleSettings,
    ScaleTickGenerator,
    align_to_unit,
    estimate_label_width,
    generate_ticks,
    get_scale_config,
    get_visible_range,
    is_major_tick,
    pixels_per_ms,
)

__all__ = [
    "ScaleTickGenerator",
    "ScaleSettings",
    "get_scale_config",
    "generate_ticks",
    "align_to_unit",
    "is_major_tick",
    "estimate_label_width",
    "get_visible_range",
    "pixels_per_ms",
    "SCALE_TABLE",
    "LABEL_PADDING",
]
