"""
Event and dataset validation.

Structural checks come from the pydantic ``EventDataset`` and ``EventModel``
schemas. On top of those this module checks date semantics (parsable, end
not before start) and emits soft warnings for suspicious colors and URLs.
Nothing here raises: results are plain report objects that ``EventSource`` acts upon.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from simile_timeline.core.exceptions import DateParseError
from simile_timeline.domain.entities.events import EventDataset, EventModel

from ..dates.normalizer import parse_date

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_FUNC_COLOR_RE = re.compile(r"^(?:rgba?|hsla?)\(")
_NAMED_COLORS = frozenset(
    {
        "red", "blue", "green", "yellow", "orange", "purple", "pink", "brown",
        "black", "white", "gray", "grey", "cyan", "magenta", "lime", "navy",
        "teal", "aqua", "maroon", "olive", "silver", "fuchsia",
    }
)

_URL_PATTERNS = (
    re.compile(r"^https?://"),
    re.compile(r"^\.{0,2}/"),
    re.compile(r"^data:"),
    re.compile(r"^[^/]+\.(?:jpg|jpeg|png|gif|svg|webp|ico)$", re.IGNORECASE),
)


@dataclass
class EventValidationResult:
    """Outcome of validating one event."""

    event: Any
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    index: int | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass
class DatasetValidationResult:
    """Outcome of validating a whole dataset document."""

    results: list[EventValidationResult] = field(default_factory=list)
    dataset_errors: list[str] = field(default_factory=list)

    @property
    def total_events(self) -> int:
        return len(self.results)

    @property
    def valid_events(self) -> int:
        return sum(1 for r in self.results if r.valid)

    @property
    def invalid_events(self) -> int:
        return self.total_events - self.valid_events

    @property
    def valid(self) -> bool:
        return not self.dataset_errors and self.invalid_events == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "total_events": self.total_events,
            "valid_events": self.valid_events,
            "invalid_events": self.invalid_events,
            "dataset_errors": self.dataset_errors,
            "results": [r.to_dict() for r in self.results if not r.valid or r.warnings],
        }


def is_valid_color(color: str) -> bool:
    return bool(
        _HEX_COLOR_RE.match(color) or _FUNC_COLOR_RE.match(color) or color.lower() in _NAMED_COLORS
    )


def is_valid_url_format(url: str) -> bool:
    return any(pattern.match(url) for pattern in _URL_PATTERNS)


def event_label(event: Any, index: int | None = None) -> str:
    """How an event is named in messages: by title, else by position."""
    title = event.get("title") if isinstance(event, Mapping) else None
    if isinstance(title, str) and title:
        return f'Event "{title}"'
    if index is not None:
        return f"Event at index {index}"
    return "Event"


def _schema_errors(label: str, exc: PydanticValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else "event"
        kind = err["type"]
        if name in ("start", "title"):
            subject = f"'{name}' date" if name == "start" else f"'{name}'"
            if kind in ("missing", "string_too_short"):
                messages.append(f"{label} is missing required {subject}")
            else:
                messages.append(f"{label} has invalid {subject} (must be a string)")
        elif name == "track":
            messages.append(f"{label} has invalid 'track' number (must be an integer >= 0)")
        else:
            messages.append(f"{label} has invalid '{name}': {err['msg']}")
    return messages


def validate_event(event: Any, index: int | None = None) -> EventValidationResult:
    """
    Validate one raw event mapping.

    Errors make the event unusable; warnings flag fields a renderer may
    mishandle (odd colors, odd URLs).
    """
    result = EventValidationResult(event=event, index=index)
    label = event_label(event, index)

    if not isinstance(event, Mapping):
        result.errors.append(f"{label} must be an object, got {type(event).__name__}")
        return result

    try:
        model = EventModel.model_validate(dict(event))
    except PydanticValidationError as e:
        result.errors.extend(_schema_errors(label, e))
        return result

    if model.is_duration and model.end is None and not model.duration_event:
        result.errors.append(f"{label} is marked as duration event but missing 'end' date or 'durationEvent'")

    start = end = None
    try:
        start = parse_date(model.start)
    except DateParseError:
        result.errors.append(f"{label} has unparsable 'start' date ({model.start})")
    if model.end is not None:
        try:
            end = parse_date(model.end)
        except DateParseError:
            result.errors.append(f"{label} has unparsable 'end' date ({model.end})")
    if start is not None and end is not None and end < start:
        result.errors.append(f"{label} has 'end' date ({model.end}) before 'start' date ({model.start})")

    if model.color and not is_valid_color(model.color):
        result.warnings.append(
            f"{label} has potentially invalid color '{model.color}' (should be hex, rgb, or named color)"
        )
    for name in ("link", "icon", "image"):
        value = getattr(model, name)
        if value and not is_valid_url_format(value):
            result.warnings.append(f"{label} has potentially invalid {name} URL '{value}'")

    return result


def _dataset_errors(exc: PydanticValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        name = str(err["loc"][0]) if err["loc"] else ""
        if err["type"] in ("model_type", "missing") or (name == "events" and err["input"] is None):
            messages.append('Dataset is missing required "events" array')
        elif name == "events":
            messages.append('Dataset "events" must be an array')
        elif name == "dateTimeFormat":
            messages.append(f"Dataset has unknown dateTimeFormat {err['input']!r}")
        else:
            messages.append(f"Dataset has invalid '{name}': {err['msg']}")
    return messages


def validate_dataset(data: Any) -> DatasetValidationResult:
    """Validate a dataset document: structure, every event, duplicate ids."""
    result = DatasetValidationResult()

    document = dict(data) if isinstance(data, Mapping) else data
    try:
        events = EventDataset.model_validate(document).events
    except PydanticValidationError as e:
        result.dataset_errors.extend(_dataset_errors(e))
        # Header problems alone still leave the events worth checking
        events = document.get("events") if isinstance(document, dict) else None
        if not isinstance(events, list):
            return result

    result.results = [validate_event(event, index) for index, event in enumerate(events)]

    seen: set[str] = set()
    duplicates: list[str] = []
    for event in events:
        event_id = event.get("id") if isinstance(event, Mapping) else None
        if not event_id:
            continue
        key = str(event_id)
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    if duplicates:
        result.dataset_errors.append(f"Dataset contains duplicate event IDs: {', '.join(duplicates)}")

    return result


def format_validation_errors(result: DatasetValidationResult) -> str:
    """Human-readable multi-line report of a dataset validation."""
    lines: list[str] = []

    if result.dataset_errors:
        lines.append("Dataset Errors:")
        lines.extend(f"  - {error}" for error in result.dataset_errors)
        lines.append("")

    if result.invalid_events:
        lines.append(f"Found {result.invalid_events} invalid event(s) out of {result.total_events} total:")
        lines.append("")
        for position, r in enumerate(result.results, start=1):
            if r.valid:
                continue
            lines.append(f"Event {position}:")
            lines.extend(f"  - {error}" for error in r.errors)
            lines.extend(f"  ! {warning}" for warning in r.warnings)
            lines.append("")

    return "\n".join(lines)
