"""Event input handling for the week planner.

Converts event-store payloads into Event models, validates timestamps, and
groups events into the Sunday-based week window.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from weekplanner.planning.errors import (
    END_BEFORE_START,
    INVALID_TIMESTAMP,
    MISSING_TIMESTAMP,
    InvalidInputError,
)
from weekplanner.planning.types import Event, EventCategory

DAYS_PER_WEEK = 7


def _parse_timestamp(value: Any, *, event_id: str | None, field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(INVALID_TIMESTAMP, f"Unparsable {field}: {value!r}", event_id=event_id, field=field)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidInputError(
            INVALID_TIMESTAMP, f"Unparsable {field}: {value!r}", event_id=event_id, field=field
        ) from e


def _parse_category(value: Any) -> EventCategory:
    if isinstance(value, str):
        for category in EventCategory:
            if category.value.lower() == value.strip().lower():
                return category
    return EventCategory.OTHER


def parse_event(raw: dict[str, Any]) -> Event:
    """Parse an event-store record into an Event.

    Accepts both the store's keys (createdBy, endDate, date) and snake_case.
    Unknown categories map to Other. A missing or null end is allowed.

    Args:
        raw: Event record with ISO-8601 timestamps

    Returns:
        Parsed Event (not yet validated for ordering, see validate_event)

    Raises:
        InvalidInputError: If start is missing or a timestamp is unparsable
    """
    event_id = raw.get("id")
    event_id = str(event_id) if event_id is not None else None

    start_raw = raw.get("start") or raw.get("date")
    if start_raw is None:
        raise InvalidInputError(MISSING_TIMESTAMP, "Event has no start", event_id=event_id, field="start")
    start = _parse_timestamp(start_raw, event_id=event_id, field="start")

    end_raw = raw.get("end") or raw.get("endDate")
    end = _parse_timestamp(end_raw, event_id=event_id, field="end") if end_raw is not None else None

    location = raw.get("location")
    return Event(
        id=event_id,
        title=raw.get("title") or "",
        start=start,
        end=end,
        location=location.strip() if isinstance(location, str) and location.strip() else None,
        category=_parse_category(raw.get("category")),
        created_by=raw.get("createdBy", raw.get("created_by")),
    )


def validate_event(event: Event) -> None:
    """Validate event timestamp invariants.

    Raises:
        InvalidInputError: If the event ends before it starts, or mixes naive and aware timestamps
    """
    if event.end is None:
        return
    if (event.start.tzinfo is None) != (event.end.tzinfo is None):
        raise InvalidInputError(
            INVALID_TIMESTAMP,
            f"Event '{event.title}' mixes naive and timezone-aware timestamps",
            event_id=event.id,
            field="end",
        )
    if event.end < event.start:
        raise InvalidInputError(
            END_BEFORE_START,
            f"Event '{event.title}' ends ({event.end.isoformat()}) before it starts ({event.start.isoformat()})",
            event_id=event.id,
            field="end",
        )


def to_local(value: datetime, timezone: str) -> datetime:
    """Localize a timestamp: aware values move to the planner zone, naive values are wall-clock already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(timezone))


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def week_start_for(reference: date) -> date:
    """Return the Sunday on or before the reference date."""
    if isinstance(reference, datetime):
        reference = reference.date()
    days_since_sunday = (reference.weekday() + 1) % DAYS_PER_WEEK
    return reference - timedelta(days=days_since_sunday)


def week_dates(week_start: date) -> list[date]:
    return [week_start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def sort_events(events: list[Event], timezone: str) -> list[Event]:
    """Sort events by local start time; ties keep input order."""
    return sorted(events, key=lambda event: to_local(event.start, timezone).replace(tzinfo=None))


def bucket_events_by_date(events: list[Event], timezone: str) -> dict[date, list[Event]]:
    """Group events by the local calendar date of their start, each bucket sorted."""
    buckets: dict[date, list[Event]] = defaultdict(list)
    for event in events:
        buckets[to_local(event.start, timezone).date()].append(event)
    return {day: sort_events(day_events, timezone) for day, day_events in buckets.items()}
