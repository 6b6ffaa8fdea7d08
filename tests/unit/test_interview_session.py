import random
from typing import List, Optional

import pytest

from answer_analysis import AnalysisDecodeError, parse_analysis
from interview_session import (
    InMemorySessionStore,
    SessionClosedError,
    SessionNotFoundError,
    abort_session,
    current_question,
    get_session,
    start_session,
    submit_answer,
)
from llm_gateway import LlmGatewayError


class ScriptedAnalyzer:
    def __init__(self, analysis_reply, score: int = 4) -> None:
        self._reply = analysis_reply
        self.score = score
        self.calls: List[dict] = []
        self.error: Optional[Exception] = None

    def analyze(self, history, *, question, answer, category=None, session_id=None):
        self.calls.append({"history": len(history), "question": question, "answer": answer, "category": category})
        if self.error is not None:
            raise self.error
        return parse_analysis(self._reply(category, self.score), category=category, session_id=session_id)


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def analyzer(analysis_reply) -> ScriptedAnalyzer:
    return ScriptedAnalyzer(analysis_reply)


def test_start_session_persists_active_session(store) -> None:
    session = start_session(store, level="easy", user_id="u-1", rng=random.Random(1))
    loaded = get_session(store, session.id)
    assert loaded.status == "active"
    assert not loaded.is_terminal
    assert loaded.user_id == "u-1"
    assert loaded.total_questions == 4
    assert current_question(loaded) == loaded.selected_questions[0]


def test_submit_answer_records_analysis_and_advances(store, analyzer) -> None:
    session = start_session(store, level="easy")
    first = current_question(session)
    outcome = submit_answer(store, session.id, "I want to study AI.", analyzer=analyzer)
    assert outcome.answer.question_id == first.id
    assert outcome.analysis is outcome.answer.analysis
    assert outcome.analysis.classification == "Good"
    assert outcome.session.question_index == 1
    assert outcome.next_question == session.selected_questions[1]
    assert not outcome.finished
    assert outcome.percentage == 75.0
    assert analyzer.calls[0]["category"] == first.category
    stored = get_session(store, session.id)
    assert len(stored.answers) == 1


def test_history_grows_with_each_turn(store, analyzer) -> None:
    session = start_session(store, level="easy")
    for _ in range(3):
        submit_answer(store, session.id, "answer", analyzer=analyzer)
    assert [call["history"] for call in analyzer.calls] == [0, 1, 2]


def test_last_answer_finishes_session_with_summary(store, analyzer) -> None:
    session = start_session(store, level="easy")
    outcome = None
    for _ in range(4):
        outcome = submit_answer(store, session.id, "answer", analyzer=analyzer)
    assert outcome is not None and outcome.finished
    assert outcome.next_question is None
    assert outcome.summary is not None
    assert outcome.summary.total_questions == 4
    stored = get_session(store, session.id)
    assert stored.status == "finished"
    assert stored.summary == outcome.summary
    assert current_question(stored) is None


def test_submit_after_finish_is_rejected(store, analyzer) -> None:
    session = start_session(store, level="easy")
    for _ in range(4):
        submit_answer(store, session.id, "answer", analyzer=analyzer)
    with pytest.raises(SessionClosedError):
        submit_answer(store, session.id, "again", analyzer=analyzer)
    assert len(analyzer.calls) == 4


@pytest.mark.parametrize(
    "error",
    [LlmGatewayError("timed out"), AnalysisDecodeError("bad reply", "garbage")],
)
def test_failed_analysis_leaves_session_untouched(store, analyzer, error) -> None:
    session = start_session(store, level="medium")
    before = get_session(store, session.id)
    analyzer.error = error
    with pytest.raises(type(error)):
        submit_answer(store, session.id, "answer", analyzer=analyzer)
    after = get_session(store, session.id)
    assert after.question_index == 0
    assert after.answers == []
    assert after.updated_at == before.updated_at
    analyzer.error = None
    outcome = submit_answer(store, session.id, "answer", analyzer=analyzer)
    assert outcome.answer.question_id == before.selected_questions[0].id


def test_abort_session(store, analyzer) -> None:
    session = start_session(store, level="hard")
    submit_answer(store, session.id, "answer", analyzer=analyzer)
    aborted = abort_session(store, session.id)
    assert aborted.status == "aborted"
    assert aborted.is_terminal
    assert aborted.summary is None
    assert current_question(aborted) is None
    with pytest.raises(SessionClosedError):
        abort_session(store, session.id)
    with pytest.raises(SessionClosedError):
        submit_answer(store, session.id, "late", analyzer=analyzer)


def test_unknown_session_raises(store, analyzer) -> None:
    with pytest.raises(SessionNotFoundError):
        get_session(store, "missing")
    with pytest.raises(SessionNotFoundError):
        submit_answer(store, "missing", "hi", analyzer=analyzer)
    with pytest.raises(SessionNotFoundError):
        abort_session(store, "missing")


def test_get_session_is_idempotent(store, analyzer) -> None:
    session = start_session(store, level="easy")
    for _ in range(4):
        submit_answer(store, session.id, "answer", analyzer=analyzer)
    first = get_session(store, session.id)
    second = get_session(store, session.id)
    assert first == second
    assert first.summary.completed_at == second.summary.completed_at


def test_selected_questions_never_change(store, analyzer) -> None:
    session = start_session(store, level="hard", rng=random.Random(3))
    original = [question.id for question in session.selected_questions]
    for _ in range(3):
        submit_answer(store, session.id, "answer", analyzer=analyzer)
    assert [question.id for question in get_session(store, session.id).selected_questions] == original
