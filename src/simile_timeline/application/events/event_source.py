"""
EventSource - In-Memory Event Store

Owns the event list of one timeline: loads already-fetched dataset
documents, validates them, answers queries and supports CRUD edits.
Records handed to the layout engine come from ``to_records()``.

Usage:
    source = EventSource.from_json(text)
    source.search_events("treaty")
    bounds = source.get_date_bounds(padding_ms=30 * MS_PER_DAY)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from simile_timeline.core.exceptions import (
    DatasetError,
    DateParseError,
    EventValidationError,
    create_error_group,
)
from simile_timeline.domain.entities.timeline import DateBounds, IntervalRecord, TimeValue

from ..dates.calendar import MS_PER_DAY, from_datetime
from ..dates.normalizer import parse_date
from .validation import DatasetValidationResult, event_label, validate_dataset, validate_event

logger = logging.getLogger(__name__)

Event = dict[str, Any]

# Fallback window when there is nothing to bound
_EMPTY_BOUNDS_HALF_SPAN = 365 * MS_PER_DAY

_SEARCH_FIELDS = ("title", "description", "caption", "link")


# =============================================================================
# Bounds helpers
# =============================================================================


def _event_span(event: Mapping[str, Any]) -> tuple[TimeValue, TimeValue]:
    start = parse_date(event.get("start"))
    end_raw = event.get("end")
    end = parse_date(end_raw) if end_raw is not None else start
    return start, end


def _now_ms() -> TimeValue:
    return from_datetime(datetime.now(timezone.utc))


def calculate_event_date_bounds(
    events: Iterable[Mapping[str, Any]],
    padding_ms: int = 0,
    now: TimeValue | None = None,
) -> DateBounds:
    """
    Earliest start and latest end over all events, padded on both sides.

    Events with unparsable dates are ignored. Without any usable event the
    bounds are one year either side of ``now`` and ``has_events`` is False.
    """
    min_time: TimeValue | None = None
    max_time: TimeValue | None = None

    for event in events:
        try:
            start, end = _event_span(event)
        except DateParseError as e:
            logger.warning(f"Ignoring event {event.get('id')!r} for bounds: {e}")
            continue
        min_time = start if min_time is None else min(min_time, start)
        max_time = max(start, end) if max_time is None else max(max_time, start, end)

    if min_time is None or max_time is None:
        center = _now_ms() if now is None else now
        return DateBounds(
            min_time=center - _EMPTY_BOUNDS_HALF_SPAN,
            max_time=center + _EMPTY_BOUNDS_HALF_SPAN,
            has_events=False,
        )

    return DateBounds(min_time=min_time - padding_ms, max_time=max_time + padding_ms, has_events=True)


def clamp_to_bounds(t: TimeValue, bounds: DateBounds) -> TimeValue:
    return bounds.clamp(t)


@dataclass(frozen=True)
class BoundaryStatus:
    """Where an instant sits relative to the bounds."""

    at_min: bool
    at_max: bool
    near_min: bool
    near_max: bool


def is_at_boundary(t: TimeValue, bounds: DateBounds, threshold_ms: int = MS_PER_DAY) -> BoundaryStatus:
    return BoundaryStatus(
        at_min=t <= bounds.min_time,
        at_max=t >= bounds.max_time,
        near_min=t <= bounds.min_time + threshold_ms,
        near_max=t >= bounds.max_time - threshold_ms,
    )


def default_center(bounds: DateBounds) -> TimeValue:
    """Midpoint of the bounds, a sensible initial viewport origin."""
    return (bounds.min_time + bounds.max_time) // 2


def median_time(events: Iterable[Mapping[str, Any]], default: TimeValue | None = None) -> TimeValue:
    """
    Median start instant of the events.

    With an even count the two middle instants are averaged (floored).
    Without usable events, ``default`` (or now) is returned.
    """
    starts: list[TimeValue] = []
    for event in events:
        try:
            starts.append(parse_date(event.get("start")))
        except DateParseError:
            continue

    if not starts:
        return _now_ms() if default is None else default

    starts.sort()
    mid = len(starts) // 2
    if len(starts) % 2:
        return starts[mid]
    return (starts[mid - 1] + starts[mid]) // 2


# =============================================================================
# EventSource
# =============================================================================


class EventSource:
    """
    Mutable, single-owner store of timeline events.

    Events are kept as plain dicts in their source shape; invalid events
    are dropped on load (or rejected as a group in strict mode).
    """

    def __init__(self, data: Mapping[str, Any] | None = None, *, strict: bool = False) -> None:
        self._events: list[Event] = []
        self._date_time_format: str | None = None
        self._validation_result: DatasetValidationResult | None = None
        self._next_id = 1
        if data is not None:
            self.load_data(data, strict=strict)

    @classmethod
    def from_json(cls, text: str | bytes, *, strict: bool = False) -> EventSource:
        """
        Build a source from a JSON document.

        Raises:
            DatasetError: the text is not valid JSON
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DatasetError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e
        return cls(data, strict=strict)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_data(self, data: Mapping[str, Any], *, strict: bool = False) -> None:
        """
        Replace the events with those of a dataset document.

        Args:
            data: Document with an ``events`` list
            strict: Raise instead of dropping invalid events

        Raises:
            DatasetError: the document has no usable ``events`` list
            ExceptionGroup: (strict) one EventValidationError per invalid event
        """
        result = validate_dataset(data)
        if not isinstance(data, Mapping) or not isinstance(data.get("events"), list):
            raise DatasetError("; ".join(result.dataset_errors))

        invalid = [r for r in result.results if not r.valid]
        if strict and invalid:
            raise create_error_group(
                f"{len(invalid)} invalid event(s) in dataset",
                [EventValidationError(event_label(r.event, r.index), r.errors) for r in invalid],
            )

        for message in result.dataset_errors:
            logger.warning(message)
        for r in result.results:
            for warning in r.warnings:
                logger.warning(warning)

        self._validation_result = result
        self._date_time_format = data.get("dateTimeFormat") or self._date_time_format
        self._events = [dict(r.event) for r in result.results if r.valid]

        if invalid:
            logger.warning(f"Loaded {len(self._events)} valid events, skipped {len(invalid)} invalid events")
        else:
            logger.info(f"Loaded {len(self._events)} events")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_events(self) -> list[Event]:
        """Shallow copy of the event list."""
        return list(self._events)

    def get_event_by_id(self, event_id: str | int) -> Event | None:
        key = str(event_id)
        return next((e for e in self._events if e.get("id") is not None and str(e["id"]) == key), None)

    def get_events_by_date_range(self, start: TimeValue, end: TimeValue) -> list[Event]:
        """Events whose [start, end] span intersects [start, end] (inclusive)."""
        matches: list[Event] = []
        for event in self._events:
            try:
                event_start, event_end = _event_span(event)
            except DateParseError:
                continue
            if event_start <= end and event_end >= start:
                matches.append(event)
        return matches

    def search_events(self, query: str) -> list[Event]:
        """Case-insensitive substring search over title, description, caption and link."""
        needle = query.casefold()
        return [
            event
            for event in self._events
            if any(needle in str(event.get(name) or "").casefold() for name in _SEARCH_FIELDS)
        ]

    def filter_events(self, predicate: Callable[[Event], bool]) -> list[Event]:
        return [event for event in self._events if predicate(event)]

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def _generate_id(self) -> str:
        taken = {str(e["id"]) for e in self._events if e.get("id") is not None}
        while f"event-{self._next_id}" in taken:
            self._next_id += 1
        event_id = f"event-{self._next_id}"
        self._next_id += 1
        return event_id

    def add_event(self, event: Mapping[str, Any]) -> str:
        """
        Validate and append an event; returns its id.

        Raises:
            EventValidationError: the event is invalid
        """
        result = validate_event(event)
        if not result.valid:
            raise EventValidationError(event_label(event), result.errors)

        stored = dict(event)
        if not stored.get("id"):
            stored["id"] = self._generate_id()
        self._events.append(stored)
        return str(stored["id"])

    def update_event(self, event_id: str | int, updates: Mapping[str, Any]) -> bool:
        """
        Merge ``updates`` into an event. Returns False if the id is unknown.

        Raises:
            EventValidationError: the merged event is invalid (nothing changes)
        """
        key = str(event_id)
        for index, current in enumerate(self._events):
            if current.get("id") is not None and str(current["id"]) == key:
                merged = {**current, **updates}
                result = validate_event(merged)
                if not result.valid:
                    raise EventValidationError(event_label(merged), result.errors)
                self._events[index] = merged
                return True
        return False

    def remove_event(self, event_id: str | int) -> bool:
        key = str(event_id)
        for index, current in enumerate(self._events):
            if current.get("id") is not None and str(current["id"]) == key:
                del self._events[index]
                return True
        return False

    def clear(self) -> None:
        self._events = []
        self._validation_result = None

    def count(self) -> int:
        return len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def validation_result(self) -> DatasetValidationResult | None:
        """Report of the last load, None before any load or after clear()."""
        return self._validation_result

    @property
    def date_time_format(self) -> str | None:
        return self._date_time_format

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def to_records(self) -> list[IntervalRecord]:
        """Layout records for every event whose dates parse."""
        records: list[IntervalRecord] = []
        for event in self._events:
            try:
                records.append(IntervalRecord.from_event(event))
            except DateParseError as e:
                logger.warning(f"Skipping event {event.get('title')!r}: {e}")
        return records

    def get_date_bounds(self, padding_ms: int = 0, now: TimeValue | None = None) -> DateBounds:
        return calculate_event_date_bounds(self._events, padding_ms, now)

    def get_median_time(self, default: TimeValue | None = None) -> TimeValue:
        return median_time(self._events, default)
