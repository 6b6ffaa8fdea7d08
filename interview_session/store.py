from __future__ import annotations  # Session persistence backends

import logging
import sqlite3
from pathlib import Path
from threading import RLock
from typing import Dict, List, Optional, Protocol

from config.settings import Settings, settings as default_settings

from .models import Session

logger = logging.getLogger(__name__)


class SessionStore(Protocol):  # Minimal persistence contract used by the session state machine
    def save(self, session: Session) -> None: ...

    def load(self, session_id: str) -> Optional[Session]: ...


class InMemorySessionStore:  # Process-local store; callers always receive detached copies
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = RLock()

    def save(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session.model_copy(deep=True)

    def load(self, session_id: str) -> Optional[Session]:
        with self._lock:
            stored = self._sessions.get(session_id)
            return stored.model_copy(deep=True) if stored is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SqliteSessionStore:  # SQLite-backed store keeping each session as a JSON document
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:  # Open SQLite connection with row access by name
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:  # Create persistence table if missing
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS practice_sessions (
                    session_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    session_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def save(self, session: Session) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO practice_sessions (
                    session_id,
                    user_id,
                    status,
                    session_json,
                    created_at,
                    updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.user_id,
                    session.status,
                    session.model_dump_json(),
                    session.created_at.isoformat(),
                    session.updated_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def load(self, session_id: str) -> Optional[Session]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT session_json FROM practice_sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return Session.model_validate_json(row["session_json"])

    def list_session_ids(self, *, user_id: Optional[str] = None) -> List[str]:  # Newest first
        conn = self._connect()
        try:
            if user_id is None:
                rows = conn.execute(
                    "SELECT session_id FROM practice_sessions ORDER BY updated_at DESC"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT session_id FROM practice_sessions WHERE user_id = ? ORDER BY updated_at DESC",
                    (user_id,),
                ).fetchall()
        finally:
            conn.close()
        return [row["session_id"] for row in rows]


def build_store_from_settings(cfg: Settings | None = None) -> SessionStore:
    """Select the configured session store backend (``memory`` or ``sqlite``)."""

    cfg = cfg or default_settings
    backend = cfg.SESSION_STORE.strip().lower()
    if backend == "sqlite":
        logger.info("Using SQLite session store at %s", cfg.DB_PATH)
        return SqliteSessionStore(cfg.DB_PATH)
    if backend != "memory":
        raise ValueError(f"Unknown SESSION_STORE backend '{cfg.SESSION_STORE}'")
    return InMemorySessionStore()


__all__ = ["InMemorySessionStore", "SessionStore", "SqliteSessionStore", "build_store_from_settings"]
