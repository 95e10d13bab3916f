"""
Timeline Reconciliation Engine.

Turns today's raw calendar events, the completion overrides and the current
time into a classification (current / next / upcoming / past) and the
values shown around it. Everything here except the stores is pure.

Objects:
- CanonicalEvent (normalized, timed, immutable)
- TimelineClassification (derived per tick, never persisted)
- Reconciliation (one tick's result)

Invariants:
- Every event is in exactly one bucket for a given now
- Overrides only ever move an event's end earlier, and never before its start
- The streak moves at most once per day
"""

from .classify import TimelineClassification, classify
from .clock import day_bounds, day_key, local_now, previous_day
from .derive import (
    badge_text,
    minutes_left,
    minutes_until,
    next_eta,
    progress,
    short_duration,
    should_notify,
)
from .events import CanonicalEvent, normalize_event, normalize_events
from .overrides import CompletionOverrideStore, apply_overrides, effective_end
from .reconcile import Reconciliation, reconcile
from .streak import StreakRecord, StreakTracker

__all__ = [
    "CanonicalEvent",
    "CompletionOverrideStore",
    "Reconciliation",
    "StreakRecord",
    "StreakTracker",
    "TimelineClassification",
    "apply_overrides",
    "badge_text",
    "classify",
    "day_bounds",
    "day_key",
    "effective_end",
    "local_now",
    "minutes_left",
    "minutes_until",
    "next_eta",
    "normalize_event",
    "normalize_events",
    "previous_day",
    "progress",
    "reconcile",
    "short_duration",
    "should_notify",
]
