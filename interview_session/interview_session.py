"""Practice session state machine: start, answer, abort, inspect."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from answer_analysis.models import AnalysisResult
from answer_analysis.rubric import score_to_percentage
from observability.logger import log_event
from question_bank import QuestionBank, select_questions
from question_bank.models import Question
from session_reports.models import SessionSummary
from session_reports.summarizer import generate_session_summary

from .models import ABORTED, ACTIVE, FINISHED, Answer, Session
from .store import SessionStore

logger = logging.getLogger(__name__)


class SessionError(RuntimeError):  # Base class for session lifecycle failures
    def __init__(self, message: str, session_id: str) -> None:
        super().__init__(message)
        self.session_id = session_id


class SessionNotFoundError(SessionError):
    pass


class SessionClosedError(SessionError):  # The session is finished or aborted
    def __init__(self, session_id: str, status: str) -> None:
        super().__init__(f"session {session_id} is {status}", session_id)
        self.status = status


class Analyzer(Protocol):  # Anything able to evaluate one answer in session context
    def analyze(
        self,
        history: Sequence[Answer],
        *,
        question: str,
        answer: str,
        category: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> AnalysisResult: ...


@dataclass
class TurnOutcome:  # Result of one successfully analysed answer
    session: Session
    answer: Answer
    analysis: AnalysisResult
    percentage: float
    next_question: Optional[Question] = None

    @property
    def finished(self) -> bool:
        return self.session.status == FINISHED

    @property
    def summary(self) -> Optional[SessionSummary]:
        return self.session.summary


def current_question(session: Session) -> Optional[Question]:
    if session.status != ACTIVE or session.question_index >= session.total_questions:
        return None
    return session.selected_questions[session.question_index]


def start_session(
    store: SessionStore,
    *,
    level: Optional[str] = None,
    user_id: str = "",
    bank: Optional[QuestionBank] = None,
    rng: Optional[random.Random] = None,
) -> Session:
    """Select a fixed question sequence and persist a new active session."""

    questions = select_questions(level, bank, rng=rng)
    session = Session(user_id=user_id, level=level or "", selected_questions=tuple(questions))
    store.save(session)
    log_event("session_started", session.id, tier=session.level or "default", questions=len(questions))
    logger.info("Started session %s with %d questions", session.id, len(questions))
    return session


def get_session(store: SessionStore, session_id: str) -> Session:
    session = store.load(session_id)
    if session is None:
        raise SessionNotFoundError(f"session {session_id} not found", session_id)
    return session


def submit_answer(
    store: SessionStore,
    session_id: str,
    answer_text: str,
    *,
    analyzer: Analyzer,
) -> TurnOutcome:
    """Analyse ``answer_text`` against the current question and advance the session.

    The session is only mutated and saved after the analysis succeeded, so a
    transport or decode failure leaves it exactly as it was. Answering the
    last question finishes the session and attaches its summary.
    """

    session = get_session(store, session_id)
    question = current_question(session)
    if session.is_terminal:
        raise SessionClosedError(session.id, session.status)
    if question is None:
        # Nothing left to answer; an empty selection can still leave an active session.
        raise SessionClosedError(session.id, "out of questions")

    analysis = analyzer.analyze(
        session.answers,
        question=question.text,
        answer=answer_text,
        category=question.category,
        session_id=session.id,
    )

    answer = Answer(
        question_id=question.id,
        question_text=question.text,
        category=question.category,
        text=answer_text,
        analysis=analysis,
    )
    session.answers.append(answer)
    session.question_index += 1
    log_event(
        "answer_recorded",
        session.id,
        question_id=question.id,
        total_score=analysis.scores.total_score,
        classification=analysis.classification,
    )

    if session.question_index >= session.total_questions:
        session.summary = generate_session_summary(session)
        session.status = FINISHED
        log_event(
            "session_finished",
            session.id,
            status=session.status,
            grade=session.summary.overall_grade,
            average_score=session.summary.average_score,
        )
    session.touch()
    store.save(session)

    return TurnOutcome(
        session=session,
        answer=answer,
        analysis=analysis,
        percentage=score_to_percentage(analysis.scores.total_score, analysis.scores.criteria_count()),
        next_question=current_question(session),
    )


def abort_session(store: SessionStore, session_id: str) -> Session:
    session = get_session(store, session_id)
    if session.is_terminal:
        raise SessionClosedError(session.id, session.status)
    session.status = ABORTED
    session.touch()
    store.save(session)
    log_event("session_aborted", session.id, status=session.status, answered=len(session.answers))
    return session


__all__ = [
    "Analyzer",
    "SessionClosedError",
    "SessionError",
    "SessionNotFoundError",
    "TurnOutcome",
    "abort_session",
    "current_question",
    "get_session",
    "start_session",
    "submit_answer",
]
