"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import pytest

from simile_timeline.application.dates.calendar import MS_PER_DAY, from_fields
from simile_timeline.application.ether import LinearEther
from simile_timeline.config import configure_timeline
from simile_timeline.domain.entities.timeline import IntervalRecord, IntervalUnit, Viewport

# ============================================================
# Time Fixtures
# ============================================================


@pytest.fixture
def origin():
    """2006-06-01T00:00:00Z, the viewport center used by layout tests."""
    return from_fields(2006, 6, 1)


@pytest.fixture
def day():
    return MS_PER_DAY


# ============================================================
# Ether / Viewport Fixtures
# ============================================================


@pytest.fixture
def day_ether():
    """100 px per day."""
    return LinearEther(IntervalUnit.DAY, 100)


@pytest.fixture
def viewport(origin):
    return Viewport(origin_time=origin, pixel_width=1000)


@pytest.fixture
def make_record(origin):
    """Build a record from day offsets relative to the origin."""

    def _make(start_days, end_days=None, title="E", track=None, event_id=None):
        start = origin + round(start_days * MS_PER_DAY)
        end = origin + round(end_days * MS_PER_DAY) if end_days is not None else None
        return IntervalRecord(
            start_time=start,
            end_time=end,
            title=title,
            manual_track=track,
            event_id=event_id,
        )

    return _make


# ============================================================
# Event Data Fixtures
# ============================================================


@pytest.fixture
def sample_events():
    """A small, valid set of raw events in the Simile JSON shape."""
    return [
        {"id": "e1", "start": "2006-01-01", "title": "New Year", "description": "Fireworks"},
        {
            "id": "e2",
            "start": "2006-06-01",
            "end": "2006-07-01",
            "title": "World Cup",
            "isDuration": True,
            "caption": "Football in Germany",
        },
        {"id": "e3", "start": "Jan 1 2007", "title": "Bulgaria joins EU", "track": 2},
    ]


@pytest.fixture
def sample_dataset(sample_events):
    return {"dateTimeFormat": "iso8601", "events": sample_events}


@pytest.fixture
def mixed_dataset(sample_events):
    """Valid events plus one without a title and one ending before it starts."""
    return {
        "events": [
            *sample_events,
            {"start": "2006-03-01"},
            {"start": "2006-05-01", "end": "2006-04-01", "title": "Backwards"},
        ]
    }


# ============================================================
# Global State
# ============================================================


@pytest.fixture(autouse=True)
def reset_timeline_config():
    """Drop the cached process-wide config between tests."""
    configure_timeline(None)
    yield
    configure_timeline(None)
