"""
Derived-Value Calculator - numbers and labels computed from a classification.

Minute counts round half-up so they match what a browser shows for the
same instants (Math.round), not Python's banker's rounding.
"""

import math
import re
from collections.abc import Set
from datetime import datetime

from .classify import TimelineClassification
from .events import CanonicalEvent

DISPLAY_HOUR_THRESHOLD = 60
BADGE_WINDOW_MINUTES = 15
NOTIFY_LEAD_MINUTES = 5


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def progress(event: CanonicalEvent, now: datetime) -> float:
    """How far through event now is, 0-100. Zero-length events are 0 before start, 100 after."""
    total = (event.end - event.start).total_seconds()
    elapsed = (now - event.start).total_seconds()
    if total <= 0:
        return 100.0 if elapsed >= 0 else 0.0
    return min(100.0, max(0.0, elapsed / total * 100))


def minutes_until(instant: datetime, now: datetime) -> int:
    return max(0, round_half_up((instant - now).total_seconds() / 60))


def minutes_left(event: CanonicalEvent, now: datetime) -> int:
    return minutes_until(event.end, now)


def short_duration(minutes: int) -> str:
    """45 -> '45m'; 61 -> '1h'; 90 -> '2h'."""
    if minutes < DISPLAY_HOUR_THRESHOLD:
        return f"{minutes}m"
    return f"{round_half_up(minutes / 60)}h"


def next_eta(event: CanonicalEvent, now: datetime) -> str:
    return f"in {short_duration(minutes_until(event.start, now))}"


def badge_text(
    classification: TimelineClassification,
    now: datetime,
    window_minutes: int = BADGE_WINDOW_MINUTES,
) -> str:
    """
    Badge label: minutes left in the current event, else the countdown to
    the next event once it is within window_minutes, else empty.

    Always whole minutes ("90m"); the hour form is only for the view's ETA.
    """
    if classification.current is not None:
        return f"{minutes_left(classification.current, now)}m"
    if classification.next is not None:
        until = minutes_until(classification.next.start, now)
        if until <= window_minutes:
            return f"{until}m"
    return ""


def should_notify(
    next_event: CanonicalEvent | None,
    now: datetime,
    already_notified: Set[str],
    lead_minutes: int = NOTIFY_LEAD_MINUTES,
) -> bool:
    """
    Crossing trigger for the pre-event notification.

    Fires once the countdown has dropped to lead_minutes or below, unless
    the event was already notified. Ticks that skip the exact minute still fire.
    """
    if next_event is None or next_event.id in already_notified:
        return False
    if next_event.start <= now:
        return False
    return minutes_until(next_event.start, now) <= lead_minutes


def notification_content(event: CanonicalEvent, now: datetime) -> tuple[str, str]:
    """(title, body) of the pre-event notification."""
    minutes = minutes_until(event.start, now)
    if minutes == 0:
        title = "Starting now"
    else:
        title = f"Up next in {minutes} minute{'s' if minutes != 1 else ''}"
    return title, event.title


# ==== Display helpers ====


def fmt_time(moment: datetime) -> str:
    """'3:00 pm'."""
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def fmt_range(start: datetime, end: datetime) -> str:
    """'3:00 – 4:30 pm'; the meridiem is kept on both ends when they differ."""
    s = fmt_time(start)
    e = fmt_time(end)
    if s[-2:] == e[-2:]:
        s = s[:-3]
    return f"{s} – {e}"


_EMOJI_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"math|calculus|algebra|geometry|stats"), "📐"),
    (re.compile(r"english|lit|reading|essay|writing|book"), "📖"),
    (re.compile(r"science|physics|chem|bio"), "🔬"),
    (re.compile(r"history|geo|social"), "🌍"),
    (re.compile(r"music|guitar|piano|practice"), "🎵"),
    (re.compile(r"gym|workout|run|yoga|exercise"), "🏃"),
    (re.compile(r"lunch|dinner|breakfast|eat|food"), "🍽️"),
    (re.compile(r"meeting|call|zoom|standup"), "📞"),
    (re.compile(r"review|study|notes|homework|hw"), "📝"),
    (re.compile(r"code|dev|build|design"), "💻"),
    (re.compile(r"sleep|nap|rest"), "😴"),
]


def event_emoji(title: str) -> str:
    """Keyword-matched icon for an event title; first rule wins."""
    t = title.lower()
    for pattern, emoji in _EMOJI_RULES:
        if pattern.search(t):
            return emoji
    return "✦"


def day_progress(now: datetime) -> float:
    """Share of the 24h day elapsed at now, 0-100."""
    minutes = now.hour * 60 + now.minute
    return min(100.0, max(0.0, minutes / 1440 * 100))


def day_phase_orb(now: datetime) -> str:
    h = now.hour
    if 5 <= h < 7:
        return "🌅"
    if 7 <= h < 11:
        return "☀️"
    if 11 <= h < 14:
        return "🌤️"
    if 14 <= h < 17:
        return "🌇"
    if 17 <= h < 20:
        return "🌆"
    if 20 <= h < 23:
        return "🌃"
    return "🌙"


def streak_label(count: int) -> str:
    if count > 1:
        return f"🔥 {count} day streak"
    return "🌸 day 1"


def expand_label(total: int, shown: int, drawer_open: bool) -> str | None:
    """Label of the schedule toggle, or None when it should be hidden."""
    hidden = total - shown
    if total == 0 or (hidden <= 0 and not drawer_open):
        return None
    if drawer_open:
        return "hide schedule"
    return f"{hidden} more task{'s' if hidden != 1 else ''} today"
