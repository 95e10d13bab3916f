"""
Interactive timeline driver.

TimelineWatcher owns one InteractiveSession at a time. Opening a session
fetches the day once; after that every tick re-runs the shared pipeline
(load overrides -> reconcile) against the fetched events on a fixed
interval, without touching the network. refresh() is the only re-fetch.

Usage:
    watcher = TimelineWatcher(collector, overrides, streaks, on_render=show)
    await watcher.open()
    watcher.start()
    ...
    watcher.mark_complete()
"""

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from dayflow.collectors.calendar import CalendarCollector
from dayflow.errors import AuthError, DayflowError
from dayflow.observability import TickContext
from dayflow.timeline.clock import day_key, local_now
from dayflow.timeline.events import CanonicalEvent
from dayflow.timeline.overrides import CompletionOverrideStore
from dayflow.timeline.reconcile import Reconciliation, reconcile
from dayflow.timeline.streak import StreakTracker

logger = logging.getLogger(__name__)

SIGN_IN_MESSAGE = "Connect your Google Calendar to get started."
GENERAL_MESSAGE = "Something went wrong loading your calendar."


@dataclass(frozen=True)
class LoadError:
    kind: str  # "sign-in" | "general"
    message: str


@dataclass
class InteractiveSession:
    """
    State of one open timeline view.

    fetched is the day as the provider returned it and is never modified.
    clamps records the instant each completed event was first cut short, so
    the clamp holds on later ticks and refreshes. It only ever holds ids that
    are still in the override set; an undo from anywhere drops the entry.
    """

    day: str
    fetched: list[CanonicalEvent] = field(default_factory=list)
    events: list[CanonicalEvent] = field(default_factory=list)
    clamps: dict[str, datetime] = field(default_factory=dict)
    reconciliation: Reconciliation | None = None
    error: LoadError | None = None
    drawer_open: bool = False
    streak: int = 1


def _pin_clamp(event: CanonicalEvent, clamp: datetime | None) -> CanonicalEvent:
    if clamp is not None and event.start <= clamp < event.end:
        return dataclasses.replace(event, end=clamp, manually_completed=True)
    return event


class TimelineWatcher:
    def __init__(
        self,
        collector: CalendarCollector,
        overrides: CompletionOverrideStore,
        streaks: StreakTracker,
        interval_seconds: float = 30,
        on_render: Callable[[InteractiveSession], None] | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.collector = collector
        self.overrides = overrides
        self.streaks = streaks
        self.interval_seconds = interval_seconds
        self.on_render = on_render
        self.clock = clock
        self.session: InteractiveSession | None = None
        self._task: asyncio.Task | None = None

    # ==== Lifecycle ====

    async def open(self, now: datetime | None = None) -> InteractiveSession:
        """Start a new session: cancel the old timer, count the day, fetch, tick."""
        self.stop()
        now = now or self.clock()
        streak = self.streaks.update_streak(now.date())
        self.session = InteractiveSession(day=day_key(now), streak=streak)

        events, error = await self._load(now)
        self.session.fetched = events
        self.session.error = error

        self.tick(now)
        return self.session

    def start(self):
        """Schedule periodic ticks on the running loop."""
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._run())

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.tick()
            except Exception:
                logger.exception("Timeline tick failed")

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    # ==== Pipeline ====

    async def _load(self, now: datetime) -> tuple[list[CanonicalEvent], LoadError | None]:
        try:
            events = await self.collector.sync(now.date(), interactive=True)
        except AuthError as e:
            logger.warning(f"Calendar sign-in required: {e}")
            return [], LoadError("sign-in", SIGN_IN_MESSAGE)
        except DayflowError as e:
            logger.warning(f"Calendar load failed: {e}")
            return [], LoadError("general", GENERAL_MESSAGE)
        return events, None

    def _require_session(self) -> InteractiveSession:
        if self.session is None:
            raise RuntimeError("No open timeline session; call open() first")
        return self.session

    def _reconcile(self, session: InteractiveSession, now: datetime) -> Reconciliation:
        """
        Effective events from (fetched, overrides, first-clamp instants).

        Clamps whose id is no longer overridden are dropped before use, and
        newly clamped events are remembered at the instant they were cut.
        """
        overrides = self.overrides.load_overrides(session.day)
        session.clamps = {k: v for k, v in session.clamps.items() if k in overrides}
        pinned = [_pin_clamp(e, session.clamps.get(e.id)) for e in session.fetched]
        result = reconcile(pinned, overrides, now)
        for event in result.events:
            if event.manually_completed:
                session.clamps.setdefault(event.id, event.end)
        return result

    def tick(self, now: datetime | None = None) -> Reconciliation | None:
        """
        One reconciliation pass over the session's events.

        Returns the new Reconciliation, or None while the session is in an
        error state.
        """
        session = self._require_session()
        now = now or self.clock()

        with TickContext("view"):
            if session.error is None:
                result = self._reconcile(session, now)
                session.events = result.events
                session.reconciliation = result
                c = result.classification
                logger.debug(
                    f"Tick: current={c.current.id if c.current else None} "
                    f"next={c.next.id if c.next else None} past={len(c.past)}"
                )
            if self.on_render is not None:
                self.on_render(session)
            return session.reconciliation if session.error is None else None

    # ==== User intents ====

    def mark_complete(self, event_id: str | None = None, now: datetime | None = None) -> bool:
        """
        End a running event now. Defaults to the current event.

        Returns False when the event is not running at now.
        """
        session = self._require_session()
        now = now or self.clock()

        c = self._reconcile(session, now).classification
        running = ([c.current] if c.current else []) + c.concurrent

        if event_id is None:
            target = c.current
        else:
            target = next((e for e in running if e.id == event_id), None)
        if target is None:
            logger.info(f"Nothing to complete at {now:%H:%M} ({event_id or 'current'})")
            return False

        self.overrides.mark_complete(session.day, target.id)
        self.tick(now)
        return True

    def undo_complete(self, event_id: str, now: datetime | None = None) -> bool:
        """Drop the override for event_id; the next tick restores its fetched end."""
        session = self._require_session()
        removed = self.overrides.undo_complete(session.day, event_id)
        self.tick(now)
        return removed

    async def refresh(self, now: datetime | None = None) -> InteractiveSession:
        """Re-fetch the day. Crossing midnight starts a fresh day in the same session slot."""
        session = self._require_session()
        now = now or self.clock()

        if day_key(now) != session.day:
            logger.info(f"Day rolled over to {day_key(now)}")
            session = InteractiveSession(
                day=day_key(now),
                drawer_open=session.drawer_open,
                streak=self.streaks.update_streak(now.date()),
            )
            self.session = session

        events, error = await self._load(now)
        if error is None:
            session.fetched = events
        session.error = error

        self.tick(now)
        return session

    def toggle_drawer(self) -> bool:
        session = self._require_session()
        session.drawer_open = not session.drawer_open
        if self.on_render is not None:
            self.on_render(session)
        return session.drawer_open
