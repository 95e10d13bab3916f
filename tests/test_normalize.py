"""Tests for raw Calendar event normalization."""

from datetime import datetime, timedelta, timezone

from dayflow.timeline.events import NO_TITLE, CanonicalEvent, normalize_event, normalize_events
from tests.fixtures import at, raw_event


class TestNormalizeEvent:
    """Test normalize_event."""

    def test_timed_event(self):
        """A timed event becomes a CanonicalEvent with aware instants."""
        event = normalize_event(raw_event("a", "09:00", "10:00", summary="Standup"))
        assert isinstance(event, CanonicalEvent)
        assert event.id == "a"
        assert event.title == "Standup"
        assert event.start == at("09:00")
        assert event.end == at("10:00")
        assert event.start.tzinfo is not None
        assert event.manually_completed is False

    def test_all_day_event_skipped(self):
        """Events with start.date instead of start.dateTime are skipped."""
        raw = {"id": "h", "summary": "Holiday", "start": {"date": "2024-03-12"}, "end": {"date": "2024-03-13"}}
        assert normalize_event(raw) is None

    def test_missing_title_defaults(self):
        """A missing summary becomes '(no title)'."""
        event = normalize_event(raw_event("a", "09:00", "10:00", summary=None))
        assert event.title == NO_TITLE

    def test_empty_title_defaults(self):
        """An empty summary also becomes '(no title)'."""
        event = normalize_event(raw_event("a", "09:00", "10:00", summary=""))
        assert event.title == NO_TITLE

    def test_missing_id_skipped(self):
        """Events without an id are skipped."""
        raw = raw_event("a", "09:00", "10:00")
        del raw["id"]
        assert normalize_event(raw) is None

    def test_unparseable_instant_skipped(self):
        """Garbage in dateTime is skipped, not raised."""
        raw = raw_event("a", "09:00", "10:00")
        raw["start"]["dateTime"] = "not a time"
        assert normalize_event(raw) is None

    def test_start_not_before_end_skipped(self):
        """start >= end is skipped."""
        assert normalize_event(raw_event("a", "10:00", "10:00")) is None
        assert normalize_event(raw_event("b", "11:00", "10:00")) is None

    def test_non_mapping_skipped(self):
        """Non-dict input is skipped."""
        assert normalize_event("nope") is None
        assert normalize_event(None) is None

    def test_naive_instant_uses_event_zone(self):
        """A naive dateTime takes the event's timeZone."""
        raw = {
            "id": "a",
            "start": {"dateTime": "2024-03-12T09:00:00", "timeZone": "UTC"},
            "end": {"dateTime": "2024-03-12T10:00:00", "timeZone": "UTC"},
        }
        event = normalize_event(raw)
        assert event.start == datetime(2024, 3, 12, 9, 0, tzinfo=timezone.utc)
        assert event.duration == timedelta(hours=1)

    def test_optional_fields_carried(self):
        """colorId, description and location are kept."""
        raw = raw_event("a", "09:00", "10:00", colorId="5", description="Agenda", location="Room 2")
        event = normalize_event(raw)
        assert event.color == "5"
        assert event.description == "Agenda"
        assert event.location == "Room 2"

    def test_unknown_fields_ignored(self):
        """Extra provider fields don't break normalization."""
        raw = raw_event("a", "09:00", "10:00", attendees=[{"email": "x@example.com"}], kind="calendar#event")
        assert normalize_event(raw) is not None


class TestNormalizeEvents:
    """Test normalize_events."""

    def test_sorted_by_start(self):
        """Output is ordered by start even if input is not."""
        events = normalize_events(
            [raw_event("b", "11:00", "12:00"), raw_event("a", "09:00", "10:00")]
        )
        assert [e.id for e in events] == ["a", "b"]

    def test_drops_skips(self):
        """All-day and malformed events are dropped from the batch."""
        events = normalize_events(
            [
                raw_event("a", "09:00", "10:00"),
                {"id": "h", "start": {"date": "2024-03-12"}, "end": {"date": "2024-03-13"}},
                {"id": "", "start": {}, "end": {}},
                42,
            ]
        )
        assert [e.id for e in events] == ["a"]

    def test_empty(self):
        """An empty batch normalizes to an empty list."""
        assert normalize_events([]) == []
