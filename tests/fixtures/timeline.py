"""Builders and fakes shared by the timeline, watcher and daemon tests."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

from dayflow.collectors.calendar import CalendarCollector
from dayflow.errors import AuthError
from dayflow.timeline.events import CanonicalEvent

# Pinned: Tuesday 2024-03-12, UTC-05:00
DAY = date(2024, 3, 12)
TZ = timezone(timedelta(hours=-5))


def at(hhmm: str, day: date = DAY) -> datetime:
    """'09:30' -> aware datetime on day in TZ."""
    hour, minute = (int(part) for part in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)


def make_event(event_id: str, start: str, end: str, title: str | None = None) -> CanonicalEvent:
    return CanonicalEvent(id=event_id, title=title or event_id, start=at(start), end=at(end))


def raw_event(event_id: str, start: str, end: str, summary: str | None = "Event", **extra) -> dict:
    raw = {
        "id": event_id,
        "start": {"dateTime": at(start).isoformat()},
        "end": {"dateTime": at(end).isoformat()},
        **extra,
    }
    if summary is not None:
        raw["summary"] = summary
    return raw


class FakeTokenProvider:
    """TokenProvider handing out tok-1, tok-2, ... and recording invalidations."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.issued = 0
        self.invalidated: list[str] = []
        self.interactive_flags: list[bool] = []

    async def get_token(self, interactive: bool = True) -> str:
        self.interactive_flags.append(interactive)
        if self.fail:
            raise AuthError("no grant")
        self.issued += 1
        return f"tok-{self.issued}"

    def invalidate_token(self, token: str) -> None:
        self.invalidated.append(token)


class FakeSink:
    """BadgeSink that remembers what it was given."""

    def __init__(self):
        self.badges: list[str] = []
        self.notifications: list[tuple[str, str]] = []

    @property
    def badge(self) -> str:
        return self.badges[-1] if self.badges else ""

    def set_badge(self, text: str) -> None:
        self.badges.append(text)

    async def notify(self, title: str, body: str) -> None:
        self.notifications.append((title, body))


def static_collector(events: list[CanonicalEvent] | None = None, error: Exception | None = None):
    """CalendarCollector stand-in whose sync() returns events (or raises error)."""
    collector = AsyncMock(spec=CalendarCollector)
    if error is not None:
        collector.sync.side_effect = error
    else:
        collector.sync.return_value = list(events or [])
    return collector
