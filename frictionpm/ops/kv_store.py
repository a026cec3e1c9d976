"""
Synchronous JSON key-value store on SQLite.

Each key holds one JSON document; a save replaces the whole value in a
single transaction, so a reader never sees a partially written collection.

Usage:
    from frictionpm.ops.kv_store import KeyValueStore

    kv = KeyValueStore(Path("data/frictionpm.db"))
    kv.save("projects", [...])
    kv.load("projects")   # -> list, or None if never saved
"""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any

from frictionpm.logging_config import get_logger
from frictionpm.ops import KV_TABLE
from frictionpm.tasks import DB_PATH
from frictionpm.tasks.errors import ParseError


logger = get_logger(__name__)


class KeyValueStore:
    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path or DB_PATH)
        # one writer at a time per store
        self._lock = threading.Lock()
        self._ensure_schema()

    def get_connection(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self.get_connection()
        try:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {KV_TABLE} (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def load_raw(self, key: str) -> str | None:
        conn = self.get_connection()
        try:
            row = conn.execute(f"SELECT value FROM {KV_TABLE} WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def load(self, key: str) -> Any | None:
        """Decoded JSON for ``key``, None when absent. Raises ParseError if corrupt."""
        raw = self.load_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(key, str(e)) from e

    def save_raw(self, key: str, raw: str) -> None:
        with self._lock:
            conn = self.get_connection()
            try:
                conn.execute(
                    f"""
                    INSERT INTO {KV_TABLE} (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, raw),
                )
                conn.commit()
            finally:
                conn.close()

    def save(self, key: str, value: Any) -> None:
        self.save_raw(key, json.dumps(value))
        logger.debug(f"Saved {key}")


__all__ = ["KeyValueStore"]
