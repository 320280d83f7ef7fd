"""Root conftest for all tests.

Shared fixtures for building events and preferences. The reference week
starts on Sunday 2024-01-14; Monday is 2024-01-15.
"""

from datetime import datetime

import pytest

from weekplanner.planning.preferences import PlannerPreferences
from weekplanner.planning.types import Event


@pytest.fixture
def preferences() -> PlannerPreferences:
    """Default planner preferences."""
    return PlannerPreferences()


@pytest.fixture
def make_event():
    """Factory for naive (wall-clock) events.

    Usage: make_event("Work", "2024-01-15 09:00", "2024-01-15 17:00", "Rishon Lezion office")
    """
    counter = {"next": 0}

    def _make(
        title: str,
        start: str,
        end: str | None = None,
        location: str | None = None,
        event_id: str | None = None,
    ) -> Event:
        counter["next"] += 1
        return Event(
            id=event_id or f"evt-{counter['next']}",
            title=title,
            start=datetime.fromisoformat(start),
            end=datetime.fromisoformat(end) if end else None,
            location=location,
        )

    return _make
