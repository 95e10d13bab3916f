"""
Dayflow Badge Daemon - background timeline reconciliation.

Every tick:
- Re-fetches today silently (non-interactive token)
- Reconciles with the shared pipeline, completion overrides included
- Writes the badge text (time left / countdown / empty)
- Fires the pre-event notification once per event per day

Any failure clears the badge; the loop keeps going.

Usage:
    python -m dayflow daemon start          # Run in the foreground
    python -m dayflow daemon start --bg     # Fork to background, writes PID file
    python -m dayflow daemon stop
    python -m dayflow daemon status
    python -m dayflow badge                 # One tick and exit
"""

import asyncio
import logging
import os
import signal
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from dayflow import paths
from dayflow.collectors.calendar import CalendarCollector
from dayflow.errors import DayflowError
from dayflow.notifier import BadgeSink, NotificationLedger
from dayflow.observability import TickContext
from dayflow.timeline.clock import day_key, local_now
from dayflow.timeline.derive import (
    BADGE_WINDOW_MINUTES,
    NOTIFY_LEAD_MINUTES,
    badge_text,
    notification_content,
    should_notify,
)
from dayflow.timeline.overrides import CompletionOverrideStore
from dayflow.timeline.reconcile import reconcile

logger = logging.getLogger(__name__)


def pid_file() -> Path:
    return paths.data_dir() / "daemon.pid"


@dataclass(frozen=True)
class BadgeTick:
    """Outcome of one background tick."""

    now: datetime
    ok: bool
    badge: str = ""
    notified: str | None = None
    error: str | None = None


class BadgeDaemon:
    def __init__(
        self,
        collector: CalendarCollector,
        overrides: CompletionOverrideStore,
        ledger: NotificationLedger,
        sink: BadgeSink,
        badge_window_minutes: int = BADGE_WINDOW_MINUTES,
        notify_lead_minutes: int = NOTIFY_LEAD_MINUTES,
        interval_seconds: float = 60,
        clock: Callable[[], datetime] = local_now,
    ):
        self.collector = collector
        self.overrides = overrides
        self.ledger = ledger
        self.sink = sink
        self.badge_window_minutes = badge_window_minutes
        self.notify_lead_minutes = notify_lead_minutes
        self.interval_seconds = interval_seconds
        self.clock = clock

    def _clear_badge(self):
        try:
            self.sink.set_badge("")
        except OSError as e:
            logger.error(f"Could not clear badge: {e}")

    async def tick(self, now: datetime | None = None) -> BadgeTick:
        now = now or self.clock()
        day = day_key(now)

        with TickContext("badge"):
            try:
                events = await self.collector.sync(now.date(), interactive=False)
                overrides = self.overrides.load_overrides(day)
            except (DayflowError, sqlite3.Error) as e:
                logger.warning(f"Background refresh failed, clearing badge: {e}")
                self._clear_badge()
                return BadgeTick(now=now, ok=False, error=str(e))

            c = reconcile(events, overrides, now).classification
            text = badge_text(c, now, self.badge_window_minutes)
            self.sink.set_badge(text)

            notified = None
            if c.current is None and should_notify(
                c.next, now, self.ledger.notified(day), self.notify_lead_minutes
            ):
                # Record first: a failed delivery must not repeat every tick.
                self.ledger.record(day, c.next.id)
                title, body = notification_content(c.next, now)
                logger.info(f"Notifying: {title} - {body}")
                await self.sink.notify(title, body)
                notified = c.next.id

            return BadgeTick(now=now, ok=True, badge=text, notified=notified)

    async def run(self, stop_event: asyncio.Event | None = None, handle_signals: bool = True):
        """Main daemon loop. Returns once stop_event is set (or on SIGTERM/SIGINT)."""
        stop = stop_event or asyncio.Event()
        loop = asyncio.get_running_loop()

        if handle_signals:
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, self._handle_signal, sig, stop)

        logger.info("=" * 50)
        logger.info(f"Dayflow badge daemon starting (every {self.interval_seconds}s)")
        logger.info("=" * 50)
        self._write_pid()

        try:
            while not stop.is_set():
                started = loop.time()
                try:
                    await self.tick()
                except Exception:
                    logger.exception("Badge tick failed")
                    self._clear_badge()

                # Sleep to the next interval boundary, not a full interval after a slow tick
                timeout = max(0.0, self.interval_seconds - (loop.time() - started))
                try:
                    await asyncio.wait_for(stop.wait(), timeout=timeout)
                except asyncio.TimeoutError:
                    pass
        finally:
            if handle_signals:
                for sig in (signal.SIGTERM, signal.SIGINT):
                    loop.remove_signal_handler(sig)
            self._cleanup()

    def _handle_signal(self, sig: signal.Signals, stop: asyncio.Event):
        logger.info(f"Received {sig.name}, shutting down...")
        stop.set()

    def _write_pid(self):
        path = pid_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(str(os.getpid()))
        logger.info(f"PID {os.getpid()} written to {path}")

    def _cleanup(self):
        self._clear_badge()
        pid_file().unlink(missing_ok=True)
        logger.info("Daemon stopped")

    @staticmethod
    def is_running() -> tuple[bool, int | None]:
        """Check if a daemon is running. Returns (is_running, pid)."""
        path = pid_file()
        if not path.exists():
            return False, None

        try:
            pid = int(path.read_text().strip())
            os.kill(pid, 0)
            return True, pid
        except (ProcessLookupError, ValueError):
            path.unlink(missing_ok=True)
            return False, None
        except PermissionError:
            return True, pid

    @staticmethod
    def stop() -> bool:
        """Stop the running daemon."""
        running, pid = BadgeDaemon.is_running()
        if not running:
            logger.info("Daemon is not running")
            return False

        logger.info(f"Stopping daemon (PID {pid})...")
        try:
            os.kill(pid, signal.SIGTERM)
            for _ in range(10):
                time.sleep(0.5)
                if not BadgeDaemon.is_running()[0]:
                    logger.info("Daemon stopped")
                    return True
            os.kill(pid, signal.SIGKILL)
            logger.info("Daemon force killed")
            return True
        except ProcessLookupError:
            pid_file().unlink(missing_ok=True)
            logger.info("Daemon already stopped")
            return True

    @staticmethod
    def status() -> dict:
        running, pid = BadgeDaemon.is_running()
        badge = paths.badge_path()
        return {
            "running": running,
            "pid": pid,
            "pid_file": str(pid_file()),
            "badge_file": str(badge),
            "badge": badge.read_text() if badge.exists() else "",
        }
