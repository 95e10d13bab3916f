"""
Test fixtures for deterministic timeline tests.

This module provides:
- at(): aware datetimes on a pinned day in a pinned zone
- make_event(): CanonicalEvent from "HH:MM" strings
- raw_event(): Calendar v3 event dicts as the API returns them
- FakeTokenProvider / FakeSink: in-memory collaborators
"""

from .timeline import (
    DAY,
    TZ,
    FakeSink,
    FakeTokenProvider,
    at,
    make_event,
    raw_event,
    static_collector,
)

__all__ = [
    "DAY",
    "TZ",
    "FakeSink",
    "FakeTokenProvider",
    "at",
    "make_event",
    "raw_event",
    "static_collector",
]
