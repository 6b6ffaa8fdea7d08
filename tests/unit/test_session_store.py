import random

import pytest

from answer_analysis import parse_analysis
from config.settings import Settings
from interview_session import (
    Answer,
    InMemorySessionStore,
    SqliteSessionStore,
    build_store_from_settings,
    start_session,
)


def test_in_memory_store_returns_detached_copies() -> None:
    store = InMemorySessionStore()
    session = start_session(store, level="easy")
    loaded = store.load(session.id)
    loaded.question_index = 3
    assert store.load(session.id).question_index == 0
    assert store.load("missing") is None
    assert len(store) == 1


def test_sqlite_store_round_trips_full_session(tmp_path, analysis_reply) -> None:
    store = SqliteSessionStore(tmp_path / "nested" / "sessions.db")
    session = start_session(store, level="medium", user_id="u-7", rng=random.Random(5))
    question = session.selected_questions[0]
    session.answers.append(
        Answer(
            question_id=question.id,
            question_text=question.text,
            category=question.category,
            text="Because of the robotics lab.",
            analysis=parse_analysis(analysis_reply(question.category, 3), category=question.category),
        )
    )
    session.question_index = 1
    store.save(session)

    loaded = store.load(session.id)
    assert loaded.model_dump() == session.model_dump()
    assert loaded.answers[0].analysis.scores.migration_intent is None
    assert store.load("missing") is None


def test_sqlite_store_lists_sessions_by_user(tmp_path) -> None:
    store = SqliteSessionStore(tmp_path / "sessions.db")
    first = start_session(store, level="easy", user_id="alice")
    start_session(store, level="easy", user_id="bob")
    assert store.list_session_ids(user_id="alice") == [first.id]
    assert len(store.list_session_ids()) == 2


def test_build_store_from_settings(tmp_path) -> None:
    memory = build_store_from_settings(Settings(_env_file=None, SESSION_STORE="memory"))
    assert isinstance(memory, InMemorySessionStore)
    sqlite = build_store_from_settings(
        Settings(_env_file=None, SESSION_STORE="sqlite", DB_PATH=str(tmp_path / "s.db"))
    )
    assert isinstance(sqlite, SqliteSessionStore)
    with pytest.raises(ValueError):
        build_store_from_settings(Settings(_env_file=None, SESSION_STORE="redis"))
