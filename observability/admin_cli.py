"""Lightweight CLI helpers for inspecting stored practice sessions and audit events."""
from __future__ import annotations

import argparse
import json
import sqlite3
from collections import deque
from pathlib import Path
from typing import List, Optional

from config.settings import settings
from interview_session.store import SqliteSessionStore

from .logger import LOG_FILE


def tail_sessions(limit: int = 20, *, db_path: Optional[str] = None) -> List[str]:
    conn = sqlite3.connect(db_path or settings.DB_PATH)
    lines: List[str] = []
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT updated_at, session_id, user_id, status, session_json
            FROM practice_sessions
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        for updated_at, session_id, user_id, status, payload in cursor.fetchall():
            data = json.loads(payload)
            total = len(data.get("selected_questions", []))
            answered = len(data.get("answers", []))
            summary = data.get("summary") or {}
            grade = summary.get("overall_grade", "-")
            lines.append(
                f"[{updated_at}] {session_id} user={user_id or '-'} status={status} answered={answered}/{total} grade={grade}"
            )
    finally:
        conn.close()
    for line in lines:
        print(line)
    return lines


def list_sessions(user_id: Optional[str] = None, *, db_path: Optional[str] = None) -> List[str]:
    ids = SqliteSessionStore(db_path or settings.DB_PATH).list_session_ids(user_id=user_id)
    for session_id in ids:
        print(session_id)
    return ids


def tail_events(limit: int = 20, *, kind: Optional[str] = None, log_file: Optional[str] = None) -> List[str]:
    path = Path(log_file or LOG_FILE)
    if not path.is_file():
        print(f"no audit log at {path}")
        return []
    recent: deque[str] = deque(maxlen=limit)
    with path.open(encoding="utf-8") as handle:
        for raw in handle:
            raw = raw.strip()
            if not raw:
                continue
            event = json.loads(raw)
            if kind and event.get("kind") != kind:
                continue
            extras = {key: value for key, value in event.items() if key not in {"ts", "trace", "kind", "session_id"}}
            recent.append(f"{event.get('kind')} session={event.get('session_id')} {json.dumps(extras, ensure_ascii=False)}")
    for line in recent:
        print(line)
    return list(recent)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Inspect practice sessions and audit events")
    parser.add_argument("--tail-sessions", type=int, help="Show the most recently updated sessions (SQLite store)")
    parser.add_argument("--tail-events", type=int, help="Show the latest audit events from the JSON log")
    parser.add_argument("--list-sessions", action="store_true", help="List stored session ids, newest first")
    parser.add_argument("--user", help="Only list sessions of this user")
    parser.add_argument("--kind", help="Only show audit events of this kind")
    args = parser.parse_args(argv)

    if args.tail_sessions:
        tail_sessions(args.tail_sessions)
    if args.list_sessions:
        list_sessions(args.user)
    if args.tail_events:
        tail_events(args.tail_events, kind=args.kind)


if __name__ == "__main__":
    main()
