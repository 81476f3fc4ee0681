"""
Event input schema.

Pydantic models describing the JSON documents a rendering layer hands to the
core. Structural checks live here; date semantics (parsable, end after start)
are checked by ``simile_timeline.application.events.validation``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

DateTimeFormat = Literal["iso8601", "gregorian", "auto"]


class EventModel(BaseModel):
    """One timeline event in the original Simile JSON shape."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    start: StrictStr = Field(min_length=1)
    title: StrictStr = Field(min_length=1)

    end: StrictStr | None = None
    latest_start: StrictStr | None = Field(default=None, alias="latestStart")
    earliest_end: StrictStr | None = Field(default=None, alias="earliestEnd")
    is_duration: StrictBool | None = Field(default=None, alias="isDuration")
    # A flag in newer data files, a duration in older ones
    duration_event: StrictBool | float | None = Field(default=None, alias="durationEvent")

    track: StrictInt | None = Field(default=None, ge=0)
    id: str | int | None = None

    description: str | None = None
    caption: str | None = None
    link: str | None = None
    icon: str | None = None
    image: str | None = None
    color: str | None = None
    text_color: str | None = Field(default=None, alias="textColor")

    @property
    def has_duration(self) -> bool:
        return is_duration_event(self.model_dump(by_alias=True))


class EventDataset(BaseModel):
    """Root document of a timeline data file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    date_time_format: DateTimeFormat | None = Field(default=None, alias="dateTimeFormat")
    wiki_url: str | None = Field(default=None, alias="wikiURL")
    wiki_section: str | None = Field(default=None, alias="wikiSection")
    events: list[Any]


def is_duration_event(event: Mapping[str, Any]) -> bool:
    """
    Whether a raw event spans time.

    An ``end`` date, ``isDuration: true`` or a ``durationEvent`` that is
    true or a positive number all mark a duration.
    """
    if event.get("end") is not None or event.get("isDuration") is True:
        return True
    flag = event.get("durationEvent")
    if isinstance(flag, bool):
        return flag
    return isinstance(flag, (int, float)) and flag > 0
