"""
Badge file - the daemon's persistent status text.

Status bars (tmux, waybar, polybar, xbar...) read the file; an empty file
means no badge. Writes go through a temp file + rename so a reader never
sees a half-written label.
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class BadgeFile:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def set_badge(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".badge-")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug(f"Badge set to {text!r}")

    def read(self) -> str:
        try:
            return self.path.read_text()
        except FileNotFoundError:
            return ""
