"""Tests for event parsing, validation and week bucketing."""

from datetime import date, datetime, timezone

import pytest

from weekplanner.planning.errors import (
    END_BEFORE_START,
    INVALID_TIMESTAMP,
    MISSING_TIMESTAMP,
    InvalidInputError,
)
from weekplanner.planning.events import (
    bucket_events_by_date,
    parse_event,
    sort_events,
    validate_event,
    week_start_for,
)
from weekplanner.planning.types import Event, EventCategory


class TestWeekStart:
    @pytest.mark.parametrize(
        "reference",
        [date(2024, 1, 14), date(2024, 1, 17), date(2024, 1, 20), datetime(2024, 1, 18, 23, 59)],
    )
    def test_sunday_on_or_before(self, reference):
        """Test weeks start on Sunday."""
        assert week_start_for(reference) == date(2024, 1, 14)

    def test_next_sunday_starts_new_week(self):
        """Test the following Sunday."""
        assert week_start_for(date(2024, 1, 21)) == date(2024, 1, 21)


class TestParseEvent:
    def test_event_store_record(self):
        """Test a record with the store's camelCase keys."""
        event = parse_event(
            {
                "id": 42,
                "title": "Tennis",
                "date": "2024-01-15T16:00:00Z",
                "endDate": "2024-01-15T17:30:00Z",
                "location": "  Nir Tzvi tennis club ",
                "category": "personal",
                "createdBy": "Amit",
            }
        )

        assert event.id == "42"
        assert event.start == datetime(2024, 1, 15, 16, 0, tzinfo=timezone.utc)
        assert event.duration_minutes == 90
        assert event.location == "Nir Tzvi tennis club"
        assert event.category == EventCategory.PERSONAL
        assert event.created_by == "Amit"

    def test_defaults(self):
        """Test null end, blank location and unknown category."""
        event = parse_event(
            {"id": "e1", "title": "Call", "start": "2024-01-15T10:00:00", "end": None, "location": " ", "category": "Fun"}
        )

        assert event.end is None
        assert event.duration_minutes == 0
        assert event.effective_end == event.start
        assert event.location is None
        assert event.category == EventCategory.OTHER

    def test_null_keys_fall_back_to_store_aliases(self):
        """Test explicit nulls for start/end do not hide date/endDate."""
        event = parse_event(
            {
                "id": "e1",
                "title": "Tennis",
                "start": None,
                "date": "2024-01-15T16:00:00",
                "end": None,
                "endDate": "2024-01-15T17:00:00",
            }
        )

        assert event.start == datetime(2024, 1, 15, 16, 0)
        assert event.end == datetime(2024, 1, 15, 17, 0)

    def test_missing_start(self):
        """Test a record without start."""
        with pytest.raises(InvalidInputError) as exc_info:
            parse_event({"id": "e1", "title": "Nothing"})

        assert exc_info.value.code == MISSING_TIMESTAMP
        assert exc_info.value.detail.field == "start"

    @pytest.mark.parametrize("field", ["start", "end"])
    def test_unparsable_timestamp(self, field):
        """Test unparsable timestamps name the field and event."""
        raw = {"id": "e1", "title": "Bad", "start": "2024-01-15T10:00:00", "end": "2024-01-15T11:00:00"}
        raw[field] = "tomorrow-ish"

        with pytest.raises(InvalidInputError) as exc_info:
            parse_event(raw)

        assert exc_info.value.code == INVALID_TIMESTAMP
        assert exc_info.value.detail.event_id == "e1"
        assert exc_info.value.detail.field == field


class TestValidateEvent:
    def test_end_before_start(self):
        """Test end < start is rejected."""
        event = Event(id="e1", title="Backwards", start=datetime(2024, 1, 15, 12), end=datetime(2024, 1, 15, 11))

        with pytest.raises(InvalidInputError) as exc_info:
            validate_event(event)

        assert exc_info.value.code == END_BEFORE_START
        assert exc_info.value.detail.event_id == "e1"

    def test_mixed_naive_and_aware(self):
        """Test naive and aware timestamps cannot be mixed."""
        event = Event(
            id="e1",
            title="Mixed",
            start=datetime(2024, 1, 15, 12),
            end=datetime(2024, 1, 15, 13, tzinfo=timezone.utc),
        )

        with pytest.raises(InvalidInputError) as exc_info:
            validate_event(event)

        assert exc_info.value.code == INVALID_TIMESTAMP

    def test_valid_event(self):
        """Test a well-formed event passes."""
        validate_event(Event(title="Ok", start=datetime(2024, 1, 15, 12), end=datetime(2024, 1, 15, 12)))
        validate_event(Event(title="No end", start=datetime(2024, 1, 15, 12)))


class TestBucketing:
    def test_aware_events_bucket_by_local_date(self):
        """Test UTC timestamps are bucketed in the planner timezone."""
        late_utc = Event(title="Late", start=datetime(2024, 1, 15, 23, 30, tzinfo=timezone.utc))

        buckets = bucket_events_by_date([late_utc], "Asia/Jerusalem")

        assert list(buckets) == [date(2024, 1, 16)]

    def test_naive_events_are_wall_clock(self):
        """Test naive timestamps are taken as local time."""
        late = Event(title="Late", start=datetime(2024, 1, 15, 23, 30))

        buckets = bucket_events_by_date([late], "Asia/Jerusalem")

        assert list(buckets) == [date(2024, 1, 15)]

    def test_sort_is_stable(self):
        """Test events with equal starts keep input order."""
        events = [
            Event(title="B", start=datetime(2024, 1, 15, 10)),
            Event(title="A", start=datetime(2024, 1, 15, 9)),
            Event(title="C", start=datetime(2024, 1, 15, 10)),
        ]

        assert [event.title for event in sort_events(events, "Asia/Jerusalem")] == ["A", "B", "C"]
