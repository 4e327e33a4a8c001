# src/pocket_todo/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def _check_key(key: str) -> str:
    if not key or not key.strip():
        raise ValueError("key is required")
    return key


class SqliteKeyValueStore:
    """
    SQLite key/value store: one row per key, value is an opaque text blob.

    Thread-safety:
    - each method opens its own SQLite connection

    The file is not touched until the first load/save, so a corrupt database
    surfaces as an error from that call rather than from the constructor.
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._schema_ready = False
        logger.info("SqliteKeyValueStore db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
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
        self._schema_ready = True

    # ---- public API ----

    def load(self, key: str) -> str | None:
        _check_key(key)
        self._ensure_schema()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    def save(self, key: str, blob: str) -> None:
        _check_key(key)
        self._ensure_schema()
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, blob, time.time()),
            )
            conn.commit()
            logger.debug("kv saved key=%s bytes=%d", key, len(blob))
        finally:
            conn.close()

    def describe(self) -> str:
        return f"sqlite:{self._db_path}"


class JsonFileKeyValueStore:
    """
    All keys in one JSON object file, rewritten atomically on each save.
    """

    def __init__(self, path: str | Path = "todos.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def load(self, key: str) -> str | None:
        _check_key(key)
        return self._read_all().get(key)

    def save(self, key: str, blob: str) -> None:
        _check_key(key)
        try:
            data = self._read_all()
        except ValueError:
            logger.warning("Overwriting unreadable store file %s", self._path)
            data = {}
        data[key] = blob

        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        logger.debug("kv saved key=%s path=%s", key, self._path)

    def describe(self) -> str:
        return f"json:{self._path}"


class InMemoryKeyValueStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        _check_key(key)
        return self.data.get(key)

    def save(self, key: str, blob: str) -> None:
        _check_key(key)
        self.data[key] = blob

    def describe(self) -> str:
        return "memory"


def create_kv_store(settings) -> SqliteKeyValueStore | JsonFileKeyValueStore | InMemoryKeyValueStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "json":
        return JsonFileKeyValueStore(settings.json_path)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r; using sqlite", backend)
    return SqliteKeyValueStore(settings.db_path)
