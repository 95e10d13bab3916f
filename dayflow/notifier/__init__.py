"""
Dayflow - Notifier Module

Badge and notification delivery for the background daemon.
"""

from typing import Protocol

from .badge import BadgeFile
from .engine import NotificationEngine
from .ledger import NotificationLedger


class BadgeSink(Protocol):
    """Where the daemon puts its badge text and one-shot notifications."""

    def set_badge(self, text: str) -> None: ...

    async def notify(self, title: str, body: str) -> None: ...


class StatusSink:
    """BadgeSink writing the badge to a BadgeFile and notifying via NotificationEngine."""

    def __init__(self, badge: BadgeFile, engine: NotificationEngine):
        self.badge = badge
        self.engine = engine

    def set_badge(self, text: str) -> None:
        self.badge.set_badge(text)

    async def notify(self, title: str, body: str) -> None:
        await self.engine.send(title, body)


__all__ = [
    "BadgeFile",
    "BadgeSink",
    "NotificationEngine",
    "NotificationLedger",
    "StatusSink",
]
