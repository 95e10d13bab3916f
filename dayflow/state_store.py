"""
State Store - the one persisted resource Dayflow owns.

A SQLite-backed key/value table holding JSON values: per-day completion
overrides, per-day notification markers and the streak record. Both the
interactive view and the background daemon read and write through here.
Writes are whole-value replaces; concurrent writers resolve last-write-wins.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from dayflow import paths

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class StateStore:
    """
    Persisted key/value store. Values are JSON-encoded.

    A connection is opened per operation so the store can be shared by
    coroutines and processes without holding a handle across awaits.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = str(db_path or paths.db_path())
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self._get_conn() as conn:
            conn.execute(_SCHEMA)

        logger.debug("StateStore ready, DB path: %s", self.db_path)

    @contextmanager
    def _get_conn(self):
        """Connection context; commits on success."""
        conn = sqlite3.connect(self.db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        with self._get_conn() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", [key]).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable value for key {key!r}")
            return default

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""
        encoded = json.dumps(value)
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                [key, encoded, datetime.now().isoformat()],
            )

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        with self._get_conn() as conn:
            cursor = conn.execute("DELETE FROM kv WHERE key = ?", [key])
            return cursor.rowcount > 0

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally restricted to a prefix."""
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT key FROM kv WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                [prefix.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_") + "%"],
            ).fetchall()
        return [row["key"] for row in rows]


_store: StateStore | None = None


def get_store(db_path: str | None = None) -> StateStore:
    """Get the process-wide state store."""
    global _store
    if _store is None:
        _store = StateStore(db_path)
    return _store
