"""
Collectors - data acquisition layer.
Token provider + calendar fetch; everything downstream works on CanonicalEvent.
"""

from .auth import GoogleTokenProvider, TokenProvider
from .calendar import CalendarClient, CalendarCollector

__all__ = [
    "TokenProvider",
    "GoogleTokenProvider",
    "CalendarClient",
    "CalendarCollector",
]
