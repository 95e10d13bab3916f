"""
Dayflow - Notification Channels

Channel handlers for delivering the pre-event notification.
"""

from .google_chat import GoogleChatChannel
from .log import LogChannel

__all__ = ["GoogleChatChannel", "LogChannel"]
