"""Per-day record of events already notified, so each fires once per day."""

from dayflow.state_store import StateStore
from dayflow.timeline.dayset import DayScopedSet

NOTIFIED_PREFIX = "notified_"


class NotificationLedger:
    def __init__(self, store: StateStore):
        self._ids = DayScopedSet(store, NOTIFIED_PREFIX)

    def notified(self, day: str) -> frozenset[str]:
        return self._ids.load(day)

    def record(self, day: str, event_id: str) -> bool:
        return self._ids.add(day, event_id)
