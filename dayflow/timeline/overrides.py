"""
Completion Override Store - events the user ended early.

The persisted part is a per-day set of event ids. Applying it is a pure
derivation: a running overridden event ends at now, which ends it at the
moment it was marked. Events that are over or not yet started are left
untouched.
"""

import dataclasses
import logging
from collections.abc import Iterable, Set
from datetime import datetime

from dayflow.state_store import StateStore

from .dayset import DayScopedSet
from .events import CanonicalEvent

logger = logging.getLogger(__name__)

COMPLETED_PREFIX = "completed_"


class CompletionOverrideStore:
    """
    Owns the CompletionOverrideRecord. Nothing else writes completed_* keys.

    Writes are synchronous: the caller's next read sees them.
    """

    def __init__(self, store: StateStore):
        self._ids = DayScopedSet(store, COMPLETED_PREFIX)

    def load_overrides(self, day: str) -> frozenset[str]:
        return self._ids.load(day)

    def mark_complete(self, day: str, event_id: str) -> bool:
        added = self._ids.add(day, event_id)
        if added:
            logger.info(f"Marked {event_id} complete for {day}")
        return added

    def undo_complete(self, day: str, event_id: str) -> bool:
        removed = self._ids.remove(day, event_id)
        if removed:
            logger.info(f"Undid completion of {event_id} for {day}")
        return removed


def effective_end(event: CanonicalEvent, overrides: Set[str], now: datetime) -> datetime:
    """
    End of event once overrides apply: clamped to now if overridden and running.

    An overridden event that has not started yet keeps its end until it
    starts; an event never ends before its start.
    """
    if event.id in overrides and event.start <= now < event.end:
        return now
    return event.end


def apply_overrides(
    events: Iterable[CanonicalEvent], overrides: Set[str], now: datetime
) -> list[CanonicalEvent]:
    """
    Clamp the end of every overridden event that is running at now.

    Returns new events; inputs are never modified. Idempotent for a fixed
    now, and re-applying to its own output with a later now holds the first
    clamp because the comparison is against the current end.
    """
    result = []
    for event in events:
        end = effective_end(event, overrides, now)
        if end != event.end:
            event = dataclasses.replace(event, end=end, manually_completed=True)
        result.append(event)
    return result
