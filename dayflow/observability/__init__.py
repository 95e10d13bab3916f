"""
Observability module: structured logging and per-tick correlation IDs.

Usage:
    from dayflow.observability import TickContext, configure_logging

    configure_logging("INFO")

    with TickContext("badge") as ctx:
        logger.info("Reconciling")  # carries ctx.tick_id
"""

from .context import TickContext, generate_tick_id, get_tick_id
from .logging import HumanFormatter, JSONFormatter, configure_logging

__all__ = [
    "TickContext",
    "generate_tick_id",
    "get_tick_id",
    "JSONFormatter",
    "HumanFormatter",
    "configure_logging",
]
