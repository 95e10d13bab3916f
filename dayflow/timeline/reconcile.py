"""
The reconciliation pipeline shared by the interactive view and the daemon.

    normalized events -> apply overrides -> classify

Both contexts call reconcile() with the same inputs and get the same
classification; "is this event over" has exactly one definition.
"""

from collections.abc import Sequence, Set
from dataclasses import dataclass
from datetime import datetime

from .classify import TimelineClassification, classify
from .events import CanonicalEvent
from .overrides import apply_overrides


@dataclass(frozen=True)
class Reconciliation:
    """One tick's complete result. Built whole, swapped in whole."""

    now: datetime
    events: list[CanonicalEvent]
    classification: TimelineClassification
    overrides: frozenset[str]


def reconcile(
    events: Sequence[CanonicalEvent], overrides: Set[str], now: datetime
) -> Reconciliation:
    effective = apply_overrides(events, overrides, now)
    return Reconciliation(
        now=now,
        events=effective,
        classification=classify(effective, now),
        overrides=frozenset(overrides),
    )
