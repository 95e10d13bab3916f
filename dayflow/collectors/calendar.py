"""
Calendar Collector - pulls today's events from Google Calendar.

CalendarClient is the raw HTTP fetch (one events.list call over httpx).
CalendarCollector wires it to the token provider and the normalizer:
collect (with the 401 invalidate/reacquire/retry cycle) → transform.
"""

import logging
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

import httpx

from dayflow.config import CALENDAR_API, CALENDAR_ID
from dayflow.errors import AuthError, HttpError, HttpUnauthorized
from dayflow.timeline.clock import day_bounds
from dayflow.timeline.events import CanonicalEvent, normalize_events

from .auth import TokenProvider

logger = logging.getLogger(__name__)


class CalendarClient:
    """Async client for calendars/{id}/events, one day window per call."""

    def __init__(
        self,
        calendar_id: str = CALENDAR_ID,
        max_results: int = 20,
        base_url: str = CALENDAR_API,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.calendar_id = calendar_id
        self.max_results = max_results
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _params(self, day_start: datetime, day_end: datetime) -> dict[str, str]:
        return {
            "timeMin": day_start.isoformat(),
            "timeMax": day_end.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": str(self.max_results),
        }

    async def fetch_day_events(
        self, token: str, day_start: datetime, day_end: datetime
    ) -> list[dict[str, Any]]:
        """
        Raw events between day_start and day_end, ordered by start time.

        Raises:
            HttpUnauthorized on 401 (token expired or revoked).
            HttpError on any other non-2xx, or status 0 on transport failure.
        """
        url = f"{self.base_url}/calendars/{quote(self.calendar_id, safe='')}/events"
        headers = {"Authorization": f"Bearer {token}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    url, params=self._params(day_start, day_end), headers=headers
                )
        except httpx.RequestError as e:
            raise HttpError(0, f"Calendar request failed: {e}") from e

        if response.status_code == 401:
            raise HttpUnauthorized()
        if not response.is_success:
            raise HttpError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise HttpError(response.status_code, "Calendar API returned invalid JSON") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]


class CalendarCollector:
    """Fetches and normalizes one day of events."""

    source_name = "calendar"

    def __init__(self, auth: TokenProvider, client: CalendarClient):
        self.auth = auth
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    async def collect(self, day: date, interactive: bool = True) -> list[dict[str, Any]]:
        """
        Raw events for day.

        A 401 invalidates the token and retries once with a fresh one; a
        second 401 means the grant is gone and surfaces as AuthError.
        """
        day_start, day_end = day_bounds(day)
        token = await self.auth.get_token(interactive)

        try:
            return await self.client.fetch_day_events(token, day_start, day_end)
        except HttpUnauthorized:
            self.logger.info("Calendar rejected token, refreshing and retrying once")
            self.auth.invalidate_token(token)

        token = await self.auth.get_token(interactive)
        try:
            return await self.client.fetch_day_events(token, day_start, day_end)
        except HttpUnauthorized as e:
            raise AuthError("Calendar rejected a freshly acquired token") from e

    def transform(self, raw_events: list[dict[str, Any]]) -> list[CanonicalEvent]:
        events = normalize_events(raw_events)
        skipped = len(raw_events) - len(events)
        if skipped:
            self.logger.debug(f"Skipped {skipped} all-day or malformed events")
        return events

    async def sync(self, day: date, interactive: bool = True) -> list[CanonicalEvent]:
        """collect → transform for day."""
        raw = await self.collect(day, interactive)
        events = self.transform(raw)
        self.logger.info(f"Fetched {len(raw)} events for {day.isoformat()}, {len(events)} timed")
        return events
