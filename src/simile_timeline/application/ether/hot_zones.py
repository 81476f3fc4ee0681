"""
Hot zone helpers: lookups, transitions, validation and merging.

Zones here may overlap (for instance user presets before they are merged);
``HotZoneEther`` itself only accepts a non-overlapping set, which
``merge_overlapping_zones`` produces.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from simile_timeline.core.exceptions import ConfigError, DateParseError
from simile_timeline.domain.entities.timeline import HotZone, HotZoneTransition, TimeValue

from ..dates.normalizer import parse_date

logger = logging.getLogger(__name__)


def is_time_in_zone(t: TimeValue, zone: HotZone) -> bool:
    return zone.contains(t)


def find_zones_at(t: TimeValue, zones: Iterable[HotZone]) -> list[HotZone]:
    """All zones containing ``t`` (inclusive bounds)."""
    return [zone for zone in zones if zone.contains(t)]


def get_active_zone_at(t: TimeValue, zones: Iterable[HotZone]) -> HotZone | None:
    """The zone governing ``t``; the highest magnification wins on overlap."""
    best: HotZone | None = None
    for zone in find_zones_at(t, zones):
        if best is None or zone.magnify > best.magnify:
            best = zone
    return best


def magnification_at(t: TimeValue, zones: Iterable[HotZone], base: float = 1.0) -> float:
    zone = get_active_zone_at(t, zones)
    return zone.magnify if zone else base


def find_zones_in_range(start: TimeValue, end: TimeValue, zones: Iterable[HotZone]) -> list[HotZone]:
    """Zones intersecting [start, end] (touching counts)."""
    return [zone for zone in zones if zone.start <= end and zone.end >= start]


def calculate_transitions(
    start: TimeValue,
    end: TimeValue,
    zones: Iterable[HotZone],
    date_to_pixel: Callable[[TimeValue], float],
) -> list[HotZoneTransition]:
    """
    Boundaries inside [start, end] where the magnification changes.

    Args:
        start: Range start
        end: Range end
        zones: Candidate zones
        date_to_pixel: Projection of an instant, e.g. ``lambda t: ether.date_to_pixel(t, origin)``

    Returns:
        Transitions sorted by pixel position
    """
    all_zones = list(zones)
    transitions: list[HotZoneTransition] = []

    for zone in sorted(find_zones_in_range(start, end, all_zones), key=lambda z: z.start):
        if start <= zone.start <= end:
            transitions.append(
                HotZoneTransition(
                    position=date_to_pixel(zone.start),
                    time=zone.start,
                    from_zone=get_active_zone_at(zone.start - 1, all_zones),
                    to_zone=zone,
                )
            )
        if start <= zone.end <= end:
            transitions.append(
                HotZoneTransition(
                    position=date_to_pixel(zone.end),
                    time=zone.end,
                    from_zone=zone,
                    to_zone=get_active_zone_at(zone.end + 1, all_zones),
                )
            )

    transitions.sort(key=lambda tr: tr.position)
    return transitions


def validate_hot_zone(zone: HotZone) -> list[str]:
    """Problems with a zone; empty when it is usable."""
    errors: list[str] = []
    if zone.start >= zone.end:
        errors.append("Start date must be before end date")
    if not math.isfinite(zone.magnify) or zone.magnify <= 0:
        errors.append("Magnification must be greater than 0")
    return errors


def merge_overlapping_zones(zones: Iterable[HotZone]) -> list[HotZone]:
    """
    Resolve overlaps by priority: the highest magnification wins.

    A zone overlapping an already kept, higher-magnified zone is dropped
    whole. The result is sorted by start.
    """
    kept: list[HotZone] = []
    for zone in sorted(zones, key=lambda z: -z.magnify):
        if any(zone.start < other.end and zone.end > other.start for other in kept):
            logger.debug(f"Dropping hot zone [{zone.start}, {zone.end}] overlapped by a stronger zone")
            continue
        kept.append(zone)
    kept.sort(key=lambda z: z.start)
    return kept


def hot_zone_from_dict(data: Mapping[str, Any]) -> HotZone:
    """
    Build a zone from a mapping with date strings (or TimeValues).

    Raises:
        ConfigError: missing or unparsable bounds, or an invalid zone
    """
    try:
        start = _zone_time(data["start"])
        end = _zone_time(data["end"])
    except KeyError as e:
        raise ConfigError(f"Hot zone is missing {e.args[0]!r}") from e
    except DateParseError as e:
        raise ConfigError(f"Invalid hot zone date: {e}") from e

    magnify = data.get("magnify", 2.0)
    if isinstance(magnify, bool) or not isinstance(magnify, (int, float)):
        raise ConfigError(f"Hot zone magnify must be a number, got {magnify!r}")

    zone = HotZone(start=start, end=end, magnify=float(magnify), label=data.get("label"))
    errors = validate_hot_zone(zone)
    if errors:
        raise ConfigError(f"Invalid hot zone: {'; '.join(errors)}")
    return zone


def _zone_time(value: Any) -> TimeValue:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return parse_date(value)
