# Dayflow - Core Library
"""
Today's calendar as a live timeline: now, next, and how far through the day.

Exports for the CLI and other consumers.
"""

from .errors import AuthError, DayflowError, HttpError, HttpUnauthorized, MalformedEvent
from .timeline import CanonicalEvent, Reconciliation, reconcile

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "CanonicalEvent",
    "DayflowError",
    "HttpError",
    "HttpUnauthorized",
    "MalformedEvent",
    "Reconciliation",
    "reconcile",
]
