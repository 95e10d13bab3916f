"""
Event Normalizer - raw Google Calendar event → CanonicalEvent.

Only timed events survive: all-day events (start.date instead of
start.dateTime), events with missing or unparseable instants, events
without an id and events whose start is not before their end are skipped.
Normalization never raises.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError

from dayflow.errors import MalformedEvent

logger = logging.getLogger(__name__)

NO_TITLE = "(no title)"


# ==== Provider wire shape ====
# Subset of the Calendar v3 Event resource the timeline needs.


class EventTime(BaseModel):
    """start/end of a Calendar event: dateTime for timed, date for all-day."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    date_time: datetime | None = Field(default=None, alias="dateTime")
    date: str | None = None
    time_zone: str | None = Field(default=None, alias="timeZone")


class RawEvent(BaseModel):
    """Calendar v3 Event, reduced to the fields Dayflow reads."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    id: str = Field(min_length=1)
    summary: str | None = None
    start: EventTime | None = None
    end: EventTime | None = None
    color_id: str | None = Field(default=None, alias="colorId")
    description: str | None = None
    location: str | None = None


# ==== Canonical record ====


@dataclass(frozen=True)
class CanonicalEvent:
    """
    A timed calendar entry for today. Immutable; overrides produce copies.

    Invariant: start < end for every normalized event. The override clamp
    may later pull end down to the moment the user completed the event.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    manually_completed: bool = False
    color: str | None = None
    description: str = ""
    location: str = ""

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def _aware(value: datetime, zone_name: str | None) -> datetime:
    """Attach a zone to a naive instant: the event's timeZone, else local."""
    if value.tzinfo is not None:
        return value
    if zone_name:
        try:
            return value.replace(tzinfo=ZoneInfo(zone_name))
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug(f"Unknown timeZone {zone_name!r}, assuming local")
    return value.astimezone()


def _to_canonical(raw: Any) -> CanonicalEvent | None:
    if not isinstance(raw, dict):
        raise MalformedEvent(f"expected a mapping, got {type(raw).__name__}")

    try:
        event = RawEvent.model_validate(raw)
    except ValidationError as e:
        raise MalformedEvent(f"invalid event {raw.get('id')!r}: {e.error_count()} errors") from e

    if (
        event.start is None
        or event.end is None
        or event.start.date_time is None
        or event.end.date_time is None
    ):
        # All-day (or untimed) event
        return None

    start = _aware(event.start.date_time, event.start.time_zone)
    end = _aware(event.end.date_time, event.end.time_zone or event.start.time_zone)
    if start >= end:
        raise MalformedEvent(f"event {event.id!r} does not end after it starts")

    return CanonicalEvent(
        id=event.id,
        title=event.summary or NO_TITLE,
        start=start,
        end=end,
        color=event.color_id,
        description=event.description or "",
        location=event.location or "",
    )


def normalize_event(raw: Any) -> CanonicalEvent | None:
    """Normalize one provider event. Returns None for anything to skip."""
    try:
        return _to_canonical(raw)
    except MalformedEvent as e:
        logger.debug(f"Skipping malformed event: {e}")
        return None


def normalize_events(raws: Iterable[Any]) -> list[CanonicalEvent]:
    """Normalize a provider batch, dropping skips, ordered by start (stable)."""
    events = [e for e in (normalize_event(raw) for raw in raws) if e is not None]
    return sorted(events, key=lambda e: e.start)
