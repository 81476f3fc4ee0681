"""
Ether - Time/Pixel Coordinate Mapping

Strategies:
- LinearEther: constant density
- LogarithmicEther: log falloff around the origin
- HotZoneEther: linear with magnified ranges
"""

from .ether import (
    ETHER_TYPES,
    MS_PER_AVERAGE_MONTH,
    MS_PER_AVERAGE_YEAR,
    Ether,
    HotZoneEther,
    LinearEther,
    LogarithmicEther,
    create_ether,
    milliseconds_per_unit,
)
from .hot_zones import (
    calculate_transitions,
    find_zones_at,
    find_zones_in_range,
    get_active_zone_at,
    hot_zone_from_dict,
    is_time_in_zone,
    magnification_at,
    merge_overlapping_zones,
    validate_hot_zone,
)

__all__ = [
    # Strategies
    "Ether",
    "LinearEther",
    "LogarithmicEther",
    "HotZoneEther",
    "create_ether",
    "milliseconds_per_unit",
    "ETHER_TYPES",
    "MS_PER_AVERAGE_MONTH",
    "MS_PER_AVERAGE_YEAR",
    # Hot zone helpers
    "is_time_in_zone",
    "find_zones_at",
    "get_active_zone_at",
    "magnification_at",
    "find_zones_in_range",
    "calculate_transitions",
    "validate_hot_zone",
    "merge_overlapping_zones",
    "hot_zone_from_dict",
]
