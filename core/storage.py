"""Key-value persistence backends for the entity store.

Each backend stores opaque JSON strings under string keys, mirroring the two
independently keyed entries the organizer keeps (categories and prompts).

Updates:
  v0.2.0 - 2026-09-26 - Add SQLite backend sharing the repository connection pragmas.
  v0.1.0 - 2026-09-15 - Introduce storage protocol with JSON file and memory backends.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Protocol

from .exceptions import StorageError

logger = logging.getLogger("prompt_organizer.storage")

CATEGORIES_KEY = "pa_categories"
PROMPTS_KEY = "pa_prompts"


class KeyValueStorage(Protocol):
    """Persistence port consumed by :class:`core.store.EntityStore`."""

    def read(self, key: str) -> str | None:
        """Return the stored value for *key* or None when absent."""
        ...

    def write(self, key: str, value: str) -> None:
        """Replace the stored value for *key*."""
        ...


class MemoryStorage:
    """Dictionary-backed storage for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStorage:
    """Store each key as ``<key>.json`` inside a data directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        """Return the directory holding the key files."""
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to read {path}") from exc

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=str(self._directory), prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(temp_name, path)
        except OSError as exc:
            raise StorageError(f"Unable to write {path}") from exc


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def connect(db_path: Path) -> sqlite3.Connection:
    """Return a configured SQLite connection."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


class SQLiteStorage:
    """Store key/value pairs in a single SQLite table."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path).expanduser()
        ensure_directory(self._db_path)
        try:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        "CREATE TABLE IF NOT EXISTS kv_store ("
                        "key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                    )
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"Unable to initialise {self._db_path}") from exc

    def _connection(self) -> sqlite3.Connection:
        return connect(self._db_path)

    def read(self, key: str) -> str | None:
        try:
            conn = self._connection()
            try:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"Unable to read key {key!r}") from exc
        if row is None:
            return None
        return str(row["value"])

    def write(self, key: str, value: str) -> None:
        try:
            conn = self._connection()
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                        "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                        (key, value),
                    )
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"Unable to write key {key!r}") from exc


__all__ = [
    "CATEGORIES_KEY",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PROMPTS_KEY",
    "SQLiteStorage",
    "connect",
    "ensure_directory",
]
