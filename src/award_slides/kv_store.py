"""
SQLite backed key-value store.

Values are stored as JSON text under string keys. The store is the only
persistence the API service needs: awardee records live under
``awardee:{id}`` and the custom category list under a single key.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .errors import StoreError
from .utils import ensure_directory

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/awards.db")


class KeyValueStore:
    """
    Key-value store with get/set/delete and prefix scans.

    Thread-safe: every call opens its own connection and SQLite serializes
    writers under WAL mode.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        ensure_directory(self.db_path.parent)
        self._init_db()

    @contextmanager
    def _get_connection(self):
        """Get a connection; commit on success, roll back and wrap errors on failure."""
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open key-value store: {exc}") from exc
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error(f"Key-value store operation failed: {exc}")
            raise StoreError(str(exc)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for ``key`` or None if absent."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return json.loads(row[0]) if row else None

    def set(self, key: str, value: Any) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, json.dumps(value)),
            )

    def delete(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def get_by_prefix(self, prefix: str) -> List[Any]:
        """Return every value whose key starts with ``prefix``, in key order."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT value FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [json.loads(row[0]) for row in rows]

    def mset(self, keys: Sequence[str], values: Sequence[Any]) -> None:
        """Upsert several keys in a single transaction."""
        if len(keys) != len(values):
            raise ValueError("keys and values must have the same length")
        with self._get_connection() as conn:
            conn.executemany(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                [(key, json.dumps(value)) for key, value in zip(keys, values)],
            )

