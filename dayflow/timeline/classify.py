"""
Timeline Classifier - partition today's events around now.

    current     first event (by start) with start <= now < end
    concurrent  the other events with start <= now < end
    next        first event with start > now
    upcoming    the remaining events with start > now
    past        events with end <= now

Every event lands in exactly one bucket. Nothing is cached between calls.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .events import CanonicalEvent


@dataclass(frozen=True)
class TimelineClassification:
    current: CanonicalEvent | None = None
    next: CanonicalEvent | None = None
    upcoming: list[CanonicalEvent] = field(default_factory=list)
    past: list[CanonicalEvent] = field(default_factory=list)
    concurrent: list[CanonicalEvent] = field(default_factory=list)

    def ordered(self) -> list[CanonicalEvent]:
        """All events in schedule order: past, running, next, upcoming."""
        running = ([self.current] if self.current else []) + self.concurrent
        nxt = [self.next] if self.next else []
        return [*self.past, *running, *nxt, *self.upcoming]

    def __len__(self) -> int:
        return len(self.ordered())


def classify(events: Sequence[CanonicalEvent], now: datetime) -> TimelineClassification:
    """
    Classify events (ordered by start ascending) at now.

    Overlapping events are resolved first-match: the earliest-starting
    running event is current, the rest are concurrent.
    """
    running = [e for e in events if e.start <= now < e.end]
    future = [e for e in events if e.start > now]
    past = [e for e in events if e.end <= now]

    return TimelineClassification(
        current=running[0] if running else None,
        next=future[0] if future else None,
        upcoming=future[1:],
        past=past,
        concurrent=running[1:],
    )
