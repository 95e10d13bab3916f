"""
Per-tick correlation IDs.

Every reconciliation pass (a view tick or a badge tick) runs inside a
TickContext; log records emitted during it carry its tick_id.
"""

import contextvars
import uuid
from typing import Optional

_tick_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "tick_id", default=None
)


def get_tick_id() -> Optional[str]:
    return _tick_id_var.get()


def generate_tick_id(source: str = "tick") -> str:
    """New id prefixed with the context it belongs to, e.g. badge-1f2e3d4c5b6a."""
    return f"{source}-{uuid.uuid4().hex[:12]}"


class TickContext:
    """
    Binds a tick id for the duration of one reconciliation pass.

    Usage:
        with TickContext("badge"):
            logger.info("Reconciling")
    """

    def __init__(self, source: str = "tick", tick_id: Optional[str] = None):
        self.tick_id = tick_id or generate_tick_id(source)
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "TickContext":
        self._token = _tick_id_var.set(self.tick_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _tick_id_var.reset(self._token)
            self._token = None
