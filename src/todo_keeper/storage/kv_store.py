# src/todo_keeper/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
import threading
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for durable-slot failures."""


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class SQLiteKeyValueStore:
    """
    SQLite key-value slot.

    One table, one row per key; writes replace the whole value.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SQLiteKeyValueStore ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageReadError(f"failed to read key={key!r} from {self._db_path}: {e}") from e
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            raise StorageWriteError(f"failed to write key={key!r} to {self._db_path}: {e}") from e
        logger.debug("kv write key=%s bytes=%d", key, len(value))

    def remove_item(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageWriteError(f"failed to remove key={key!r} from {self._db_path}: {e}") from e


class JsonFileKeyValueStore:
    """
    Whole key-value mapping kept in one JSON file.

    Writes go to a temp file first and are swapped in with os.replace,
    so readers never see a half-written file.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info("JsonFileKeyValueStore ready path=%s", self._path)

    def close(self) -> None:
        return

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise StorageReadError(f"failed to read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageReadError(f"{self._path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, UnicodeEncodeError) as e:
            raise StorageWriteError(f"failed to write {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            # Best-effort: keep the file private on disk.
            os.chmod(self._path, 0o600)

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageReadError:
                # A corrupt file is replaced rather than blocking every future write.
                logger.warning("Overwriting unreadable storage file %s", self._path)
                data = {}
            data[key] = value
            self._write_all(data)
        logger.debug("kv write key=%s bytes=%d", key, len(value))

    def remove_item(self, key: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageReadError as e:
                raise StorageWriteError(str(e)) from e
            if data.pop(key, None) is not None:
                self._write_all(data)


def open_storage(settings) -> SQLiteKeyValueStore | JsonFileKeyValueStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).strip().lower()
    path = Path(settings.storage_path)
    if backend == "sqlite":
        return SQLiteKeyValueStore(path)
    if backend == "json":
        return JsonFileKeyValueStore(path)
    raise ValueError(f"unknown storage backend: {backend!r} (expected 'sqlite' or 'json')")
