"""
NotificationEngine - fans a notification out to the configured channels.

A failing channel is logged and reported in the results; it never stops
delivery to the others and never raises into the daemon tick.
"""

import logging

import httpx

from .channels.google_chat import GoogleChatChannel
from .channels.log import LogChannel

logger = logging.getLogger(__name__)


class NotificationEngine:
    def __init__(self, config: dict | None = None):
        """
        Args:
            config: channel name -> channel settings, from dayflow.yaml `channels`
        """
        self.config = config or {}
        self._load_channels()

    def _load_channels(self):
        """Instantiate enabled channels."""
        self.channels = {}

        log_cfg = self.config.get("log", {})
        if log_cfg.get("enabled", True):
            self.channels["log"] = LogChannel(level=log_cfg.get("level", "INFO"))

        gchat_cfg = self.config.get("google_chat", {})
        if gchat_cfg.get("webhook_url") and gchat_cfg.get("enabled", True):
            self.channels["google_chat"] = GoogleChatChannel(
                webhook_url=gchat_cfg["webhook_url"],
                dry_run=gchat_cfg.get("dry_run", False),
            )

        for name in self.config:
            if name not in ("log", "google_chat"):
                logger.warning(f"Unknown notification channel {name!r} ignored")

    async def send(self, title: str, body: str) -> list[dict]:
        """
        Deliver (title, body) on every channel.

        Returns:
            List of {channel, status, success, error?}
        """
        results = []
        for name, channel in self.channels.items():
            try:
                result = await channel.send(title, body)
            except (httpx.HTTPError, OSError, ValueError) as e:
                logger.error(f"Channel {name} failed: {e}")
                result = {"status": "error", "success": False, "error": str(e)}
            results.append({"channel": name, **result})
        return results
