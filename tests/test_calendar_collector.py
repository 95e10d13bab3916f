"""
Tests for the Calendar client and collector.

All tests use httpx.MockTransport - NO live API calls.
"""

import asyncio

import httpx
import pytest

from dayflow.collectors.calendar import CalendarClient, CalendarCollector
from dayflow.errors import AuthError, HttpError, HttpUnauthorized
from tests.fixtures import DAY, FakeTokenProvider, at, raw_event

# =============================================================================
# FIXTURES
# =============================================================================


def _transport(*responses):
    """MockTransport answering with responses in order, recording requests."""
    requests = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        template = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(template.status_code, headers=template.headers, content=template.content)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


def _items(*events):
    return httpx.Response(200, json={"kind": "calendar#events", "items": list(events)})


# =============================================================================
# CLIENT
# =============================================================================


class TestCalendarClient:
    """Test CalendarClient.fetch_day_events."""

    def test_request_shape(self):
        """One GET with the day window, ordering and bearer token."""
        transport = _transport(_items())
        client = CalendarClient(calendar_id="me@example.com", transport=transport)
        asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))

        [request] = transport.requests
        assert request.method == "GET"
        assert str(request.url).startswith(
            "https://www.googleapis.com/calendar/v3/calendars/me%40example.com/events?"
        )
        assert request.headers["Authorization"] == "Bearer tok"
        params = request.url.params
        assert params["singleEvents"] == "true"
        assert params["orderBy"] == "startTime"
        assert params["maxResults"] == "20"
        assert params["timeMin"] == at("00:00").isoformat()
        assert params["timeMax"] == at("23:59").isoformat()

    def test_returns_items(self):
        transport = _transport(_items(raw_event("a", "09:00", "10:00")))
        client = CalendarClient(transport=transport)
        items = asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))
        assert [item["id"] for item in items] == ["a"]

    def test_missing_items(self):
        """A response without items is an empty day."""
        client = CalendarClient(transport=_transport(httpx.Response(200, json={})))
        assert asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59"))) == []

    def test_401_is_distinct(self):
        client = CalendarClient(transport=_transport(httpx.Response(401)))
        with pytest.raises(HttpUnauthorized):
            asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))

    def test_other_status(self):
        """Non-2xx other than 401 carries its status."""
        client = CalendarClient(transport=_transport(httpx.Response(503)))
        with pytest.raises(HttpError) as exc:
            asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))
        assert exc.value.status == 503
        assert not isinstance(exc.value, HttpUnauthorized)

    def test_transport_failure_is_status_zero(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        client = CalendarClient(transport=httpx.MockTransport(handler))
        with pytest.raises(HttpError) as exc:
            asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))
        assert exc.value.status == 0

    def test_invalid_json(self):
        client = CalendarClient(transport=_transport(httpx.Response(200, content=b"<html>")))
        with pytest.raises(HttpError):
            asyncio.run(client.fetch_day_events("tok", at("00:00"), at("23:59")))


# =============================================================================
# COLLECTOR
# =============================================================================


class TestCalendarCollector:
    """Test CalendarCollector.sync and the 401 retry cycle."""

    def test_sync_normalizes(self):
        """Timed events come back as CanonicalEvents, all-day ones dropped."""
        all_day = {"id": "h", "start": {"date": "2024-03-12"}, "end": {"date": "2024-03-13"}}
        transport = _transport(_items(raw_event("b", "11:00", "12:00"), all_day, raw_event("a", "09:00", "10:00")))
        collector = CalendarCollector(FakeTokenProvider(), CalendarClient(transport=transport))

        events = asyncio.run(collector.sync(DAY))
        assert [e.id for e in events] == ["a", "b"]

    def test_401_retries_once_with_fresh_token(self):
        """401 -> invalidate -> new token -> retry succeeds."""
        transport = _transport(httpx.Response(401), _items(raw_event("a", "09:00", "10:00")))
        auth = FakeTokenProvider()
        collector = CalendarCollector(auth, CalendarClient(transport=transport))

        events = asyncio.run(collector.sync(DAY))
        assert [e.id for e in events] == ["a"]
        assert auth.invalidated == ["tok-1"]
        assert [r.headers["Authorization"] for r in transport.requests] == [
            "Bearer tok-1",
            "Bearer tok-2",
        ]

    def test_second_401_is_auth_error(self):
        transport = _transport(httpx.Response(401))
        auth = FakeTokenProvider()
        collector = CalendarCollector(auth, CalendarClient(transport=transport))

        with pytest.raises(AuthError):
            asyncio.run(collector.sync(DAY))
        assert len(transport.requests) == 2

    def test_other_errors_not_retried(self):
        transport = _transport(httpx.Response(500))
        collector = CalendarCollector(FakeTokenProvider(), CalendarClient(transport=transport))

        with pytest.raises(HttpError):
            asyncio.run(collector.sync(DAY))
        assert len(transport.requests) == 1

    def test_no_token(self):
        """AuthError from the provider propagates without a request."""
        transport = _transport(_items())
        collector = CalendarCollector(FakeTokenProvider(fail=True), CalendarClient(transport=transport))

        with pytest.raises(AuthError):
            asyncio.run(collector.sync(DAY))
        assert transport.requests == []

    def test_interactive_flag_passed(self):
        auth = FakeTokenProvider()
        collector = CalendarCollector(auth, CalendarClient(transport=_transport(_items())))
        asyncio.run(collector.sync(DAY, interactive=False))
        assert auth.interactive_flags == [False]
