#!/usr/bin/env python3
"""
Dayflow CLI - today's calendar as a live timeline.

    dayflow today [--all]          # fetch once and show now / next
    dayflow watch                  # keep the view live
    dayflow complete [EVENT_ID]    # end the current (or given running) event now
    dayflow undo EVENT_ID          # undo a completion
    dayflow streak
    dayflow badge                  # one background tick
    dayflow daemon start|stop|status
"""

import argparse
import asyncio
import logging
import os
import sys

import yaml

from dayflow import paths
from dayflow.collectors import CalendarClient, CalendarCollector, GoogleTokenProvider
from dayflow.config import LOG_LEVEL, Settings, load_settings
from dayflow.daemon import BadgeDaemon
from dayflow.notifier import BadgeFile, NotificationEngine, NotificationLedger, StatusSink
from dayflow.observability import configure_logging
from dayflow.state_store import get_store
from dayflow.timeline import CompletionOverrideStore, StreakTracker, day_key, local_now
from dayflow.timeline.derive import streak_label
from dayflow.view import build_view, render_text
from dayflow.watcher import InteractiveSession, TimelineWatcher

logger = logging.getLogger(__name__)


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def _collector(settings: Settings) -> CalendarCollector:
    auth = GoogleTokenProvider(settings.credentials_path())
    client = CalendarClient(calendar_id=settings.calendar_id, max_results=settings.max_results)
    return CalendarCollector(auth, client)


def _watcher(settings: Settings, on_render=None) -> TimelineWatcher:
    store = get_store()
    return TimelineWatcher(
        _collector(settings),
        CompletionOverrideStore(store),
        StreakTracker(store),
        interval_seconds=settings.interactive_interval_seconds,
        on_render=on_render,
    )


def _daemon(settings: Settings) -> BadgeDaemon:
    store = get_store()
    sink = StatusSink(BadgeFile(paths.badge_path()), NotificationEngine(settings.channels))
    return BadgeDaemon(
        _collector(settings),
        CompletionOverrideStore(store),
        NotificationLedger(store),
        sink,
        badge_window_minutes=settings.badge_window_minutes,
        notify_lead_minutes=settings.notify_lead_minutes,
        interval_seconds=settings.background_interval_seconds,
    )


def render_session(session: InteractiveSession) -> str:
    if session.error is not None:
        return session.error.message
    if session.reconciliation is None:
        return ""
    view = build_view(session.reconciliation, session.streak, session.drawer_open)
    return render_text(view, session.drawer_open)


# ==== Commands ====


def cmd_today(args, settings: Settings) -> int:
    """Fetch once and show the timeline."""
    watcher = _watcher(settings)

    async def _open():
        session = await watcher.open()
        session.drawer_open = args.all
        return session

    session = asyncio.run(_open())
    print(render_session(session))
    return 1 if session.error else 0


def cmd_watch(args, settings: Settings) -> int:
    """Keep the timeline on screen, re-reconciling every interval."""

    def _show(session: InteractiveSession):
        if sys.stdout.isatty():
            print("\033[2J\033[H", end="")
        print(render_session(session), flush=True)

    watcher = _watcher(settings, on_render=_show)

    async def _watch():
        await watcher.open()
        watcher.session.drawer_open = args.all
        watcher.start()
        refresh_every = max(1, args.refresh_minutes) * 60
        try:
            while True:
                await asyncio.sleep(refresh_every)
                await watcher.refresh()
        finally:
            watcher.stop()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        pass
    return 0


def cmd_complete(args, settings: Settings) -> int:
    """Mark the current (or a given running) event complete."""
    watcher = _watcher(settings)

    async def _complete():
        await watcher.open()
        if watcher.session.error:
            return False
        return watcher.mark_complete(args.event_id)

    done = asyncio.run(_complete())
    if watcher.session.error:
        print(watcher.session.error.message)
        return 1
    if not done:
        print("Nothing in progress to complete.")
        return 1
    print(render_session(watcher.session))
    return 0


def cmd_undo(args, settings: Settings) -> int:
    """Undo a completion for today."""
    overrides = CompletionOverrideStore(get_store())
    if overrides.undo_complete(day_key(local_now()), args.event_id):
        print(f"Restored {args.event_id}.")
        return 0
    print(f"{args.event_id} was not marked complete today.")
    return 1


def cmd_streak(args, settings: Settings) -> int:
    record = StreakTracker(get_store()).read_streak()
    print(streak_label(record.count))
    if record.last_updated_day:
        print(f"Last opened: {record.last_updated_day}")
    return 0


def cmd_badge(args, settings: Settings) -> int:
    """Run one background tick and print the badge."""
    result = asyncio.run(_daemon(settings).tick())
    if not result.ok:
        print(f"(no badge) {result.error}")
        return 1
    print(result.badge or "(no badge)")
    return 0


def cmd_daemon(args, settings: Settings) -> int:
    if args.action == "stop":
        return 0 if BadgeDaemon.stop() else 1

    if args.action == "status":
        status = BadgeDaemon.status()
        print_header("DAYFLOW DAEMON")
        print(f"Running: {status['running']}")
        if status["pid"]:
            print(f"PID: {status['pid']}")
        print(f"Badge: {status['badge'] or '(empty)'}")
        print(f"Badge file: {status['badge_file']}")
        return 0

    running, pid = BadgeDaemon.is_running()
    if running:
        print(f"Daemon already running (PID {pid})")
        return 1

    if args.bg:
        pid = os.fork()
        if pid > 0:
            print(f"Daemon started in background (PID {pid})")
            return 0
        os.setsid()

    asyncio.run(_daemon(settings).run())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dayflow", description="Today's calendar as a live timeline")
    parser.add_argument("--config", help="Settings file (default ~/.dayflow/config/dayflow.yaml)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING...")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("today", help="Fetch once and show the timeline")
    p.add_argument("--all", action="store_true", help="Show the full schedule")
    p.set_defaults(func=cmd_today)

    p = sub.add_parser("watch", help="Keep the timeline live")
    p.add_argument("--all", action="store_true", help="Show the full schedule")
    p.add_argument("--refresh-minutes", type=int, default=15, help="Re-fetch interval")
    p.set_defaults(func=cmd_watch)

    p = sub.add_parser("complete", help="End a running event now")
    p.add_argument("event_id", nargs="?", default=None)
    p.set_defaults(func=cmd_complete)

    p = sub.add_parser("undo", help="Undo a completion")
    p.add_argument("event_id")
    p.set_defaults(func=cmd_undo)

    p = sub.add_parser("streak", help="Show the day streak")
    p.set_defaults(func=cmd_streak)

    p = sub.add_parser("badge", help="Run one background tick")
    p.set_defaults(func=cmd_badge)

    p = sub.add_parser("daemon", help="Background badge daemon")
    p.add_argument("action", nargs="?", default="start", choices=["start", "stop", "status"])
    p.add_argument("--bg", action="store_true", help="Run in background (start only)")
    p.set_defaults(func=cmd_daemon)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(args.log_level or LOG_LEVEL, json_format=True if args.json_logs else None)

    try:
        settings = load_settings(args.config)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Invalid settings: {e}")
        return 2

    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
