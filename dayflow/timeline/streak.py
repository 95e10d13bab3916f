"""
Streak Tracker - consecutive days the timeline has been opened.

Keyed only by calendar date. The count moves at most once per day: +1 when
the last update was yesterday, back to 1 after any gap.
"""

import logging
from dataclasses import dataclass
from datetime import date

from dayflow.state_store import StateStore

from .clock import day_key, parse_day_key, previous_day

logger = logging.getLogger(__name__)

STREAK_KEY = "streak"
STREAK_DAY_KEY = "streakLastDate"


@dataclass(frozen=True)
class StreakRecord:
    count: int
    last_updated_day: str | None


class StreakTracker:
    def __init__(self, store: StateStore):
        self.store = store

    def read_streak(self) -> StreakRecord:
        """Stored record, without updating it."""
        count = self.store.get(STREAK_KEY)
        last = self.store.get(STREAK_DAY_KEY)
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            count = 1
        if not isinstance(last, str) or parse_day_key(last) is None:
            last = None
        return StreakRecord(count=count, last_updated_day=last)

    def update_streak(self, today: date) -> int:
        """Advance the streak for today and return the count."""
        record = self.read_streak()
        today_key = day_key(today)

        if record.last_updated_day == today_key:
            return record.count

        if record.last_updated_day == day_key(previous_day(today)):
            count = record.count + 1
        else:
            count = 1

        self.store.set(STREAK_KEY, count)
        self.store.set(STREAK_DAY_KEY, today_key)
        logger.info(f"Streak for {today_key}: {count}")
        return count
