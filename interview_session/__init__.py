from __future__ import annotations  # Re-export interview_session public API

from .interview_session import (
    Analyzer,
    SessionClosedError,
    SessionError,
    SessionNotFoundError,
    TurnOutcome,
    abort_session,
    current_question,
    get_session,
    start_session,
    submit_answer,
)
from .models import ABORTED, ACTIVE, FINISHED, Answer, Session, SessionStatus
from .store import InMemorySessionStore, SessionStore, SqliteSessionStore, build_store_from_settings

__all__ = [
    "ABORTED",
    "ACTIVE",
    "FINISHED",
    "Analyzer",
    "Answer",
    "InMemorySessionStore",
    "Session",
    "SessionClosedError",
    "SessionError",
    "SessionNotFoundError",
    "SessionStatus",
    "SessionStore",
    "SqliteSessionStore",
    "TurnOutcome",
    "abort_session",
    "build_store_from_settings",
    "current_question",
    "get_session",
    "start_session",
    "submit_answer",
]
