from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Any, Optional, Protocol

from .errors import StoreError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "facility-matcher"
CURRENT_SLOT = "current"


@dataclass(frozen=True, slots=True)
class SessionKey:
    """Address of a stored session: one ``current`` slot per user and namespace."""

    namespace: str
    user_id: str
    slot: str = CURRENT_SLOT


class SessionStore(Protocol):
    """Keyed storage for session records; raises StoreError when storage fails."""

    def save(self, key: SessionKey, record: dict[str, Any]) -> None: ...

    def load(self, key: SessionKey) -> Optional[dict[str, Any]]: ...


class MemorySessionStore:
    """In-process store, mainly for tests and embedding."""

    def __init__(self) -> None:
        self._records: dict[SessionKey, str] = {}
        self._lock = Lock()

    def save(self, key: SessionKey, record: dict[str, Any]) -> None:
        payload = json.dumps(record)
        with self._lock:
            self._records[key] = payload

    def load(self, key: SessionKey) -> Optional[dict[str, Any]]:
        with self._lock:
            payload = self._records.get(key)
        if payload is None:
            return None
        return json.loads(payload)


class SqliteSessionStore:
    """SQLite-backed session store."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = Lock()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    namespace TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    slot TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY(namespace, user_id, slot)
                )
                """
            )
            self._conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Cannot open session store at {path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def save(self, key: SessionKey, record: dict[str, Any]) -> None:
        payload = json.dumps(record)
        try:
            with self._lock:
                self._conn.execute(
                    """
                    INSERT INTO sessions(namespace, user_id, slot, value, updated_at)
                    VALUES(?, ?, ?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(namespace, user_id, slot)
                    DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                    """,
                    (key.namespace, key.user_id, key.slot, payload),
                )
                self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to save session {key.user_id}/{key.slot}: {exc}") from exc
        logger.debug("Stored session %s/%s/%s (%d bytes)", key.namespace, key.user_id, key.slot, len(payload))

    def load(self, key: SessionKey) -> Optional[dict[str, Any]]:
        try:
            with self._lock:
                cursor = self._conn.execute(
                    "SELECT value FROM sessions WHERE namespace = ? AND user_id = ? AND slot = ?",
                    (key.namespace, key.user_id, key.slot),
                )
                row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load session {key.user_id}/{key.slot}: {exc}") from exc
        if not row:
            return None
        try:
            value = json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise StoreError(f"Stored session {key.user_id}/{key.slot} is not valid JSON") from exc
        if not isinstance(value, dict):
            raise StoreError(f"Stored session {key.user_id}/{key.slot} is not an object")
        return value
