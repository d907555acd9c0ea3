"""SQLite-backed store: one row per key, values JSON-encoded."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from smarttab.exceptions import StorageError
from smarttab.storage.base import BaseStore

logger = logging.getLogger(__name__)


class SQLiteStore(BaseStore):
    """Durable store for a single installation.

    Blocking sqlite3 calls run in a worker thread (``asyncio.to_thread``) so
    the event loop is never held up by disk I/O.

    Args:
        db_path: Database file; parent directories are created.
        timeout: Seconds sqlite waits on a locked database before failing.
    """

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        super().__init__()
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open store at {self._db_path}: {e}") from e

    @contextmanager
    def _connection(self):
        conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        try:
            yield conn
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._lock, self._connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()

    # ---- Blocking implementations ----

    def _get_sync(self, key: str) -> str | None:
        with self._lock, self._connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row[0])

    def _set_sync(self, key: str, encoded: str) -> None:
        with self._lock, self._connection() as conn:
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, encoded),
            )
            conn.commit()

    def _remove_sync(self, key: str) -> None:
        with self._lock, self._connection() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()

    def _clear_sync(self) -> None:
        with self._lock, self._connection() as conn:
            conn.execute("DELETE FROM kv")
            conn.commit()

    def _items_sync(self) -> list[tuple[str, str]]:
        with self._lock, self._connection() as conn:
            rows = conn.execute("SELECT key, value FROM kv ORDER BY key").fetchall()
        return [(str(k), str(v)) for k, v in rows]

    # ---- Async interface ----

    async def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = await asyncio.to_thread(self._get_sync, key)
        except sqlite3.Error as e:
            raise StorageError(f"Failed reading {key!r}: {e}") from e
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable value stored under %r", key)
            return default

    async def set(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serializable: {e}") from e
        try:
            await asyncio.to_thread(self._set_sync, key, encoded)
        except sqlite3.Error as e:
            raise StorageError(f"Failed writing {key!r}: {e}") from e

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove_sync, key)
        except sqlite3.Error as e:
            raise StorageError(f"Failed removing {key!r}: {e}") from e

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(self._clear_sync)
        except sqlite3.Error as e:
            raise StorageError(f"Failed clearing store: {e}") from e

    async def items(self) -> dict[str, Any]:
        try:
            rows = await asyncio.to_thread(self._items_sync)
        except sqlite3.Error as e:
            raise StorageError(f"Failed reading store: {e}") from e
        result: dict[str, Any] = {}
        for key, raw in rows:
            try:
                result[key] = json.loads(raw)
            except ValueError:
                logger.warning("Skipping undecodable value stored under %r", key)
        return result
