"""Log channel: notifications go to the daemon log. Always available."""

import logging

logger = logging.getLogger(__name__)


class LogChannel:
    name = "log"

    def __init__(self, level: str = "INFO"):
        self.level = getattr(logging, str(level).upper(), logging.INFO)

    async def send(self, title: str, body: str) -> dict:
        logger.log(self.level, "Notification: %s: %s", title, body)
        return {"status": "logged", "success": True}
