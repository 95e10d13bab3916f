"""
Day-scoped id sets persisted in the state store.

Each day gets its own key (<prefix><YYYY-MM-DD>) holding a JSON list of ids.
A new day starts from an absent key; old days are never derived from or
pruned implicitly.
"""

import logging
import sqlite3

from dayflow.state_store import StateStore

logger = logging.getLogger(__name__)


class DayScopedSet:
    """Read-modify-write access to one family of per-day id sets."""

    def __init__(self, store: StateStore, prefix: str):
        self.store = store
        self.prefix = prefix

    def key(self, day: str) -> str:
        return f"{self.prefix}{day}"

    def load(self, day: str) -> frozenset[str]:
        """Ids recorded for day. Empty when absent or unreadable; never raises."""
        try:
            value = self.store.get(self.key(day))
        except sqlite3.Error as e:
            logger.warning(f"Could not read {self.key(day)}: {e}")
            return frozenset()

        if value is None:
            return frozenset()
        if not isinstance(value, list):
            logger.warning(f"Ignoring non-list value under {self.key(day)}")
            return frozenset()
        return frozenset(str(item) for item in value)

    def add(self, day: str, item_id: str) -> bool:
        """Add item_id. Returns True if it was not already present."""
        current = self.load(day)
        if item_id in current:
            return False
        self.store.set(self.key(day), sorted(current | {item_id}))
        return True

    def remove(self, day: str, item_id: str) -> bool:
        """Remove item_id. Returns True if it was present."""
        current = self.load(day)
        if item_id not in current:
            return False
        self.store.set(self.key(day), sorted(current - {item_id}))
        return True
