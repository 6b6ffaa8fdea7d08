"""FastAPI routes for practice session control."""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from answer_analysis import AnalysisDecodeError, AnswerAnalyzer, analyzer_from_config
from api.schemas import AnswerReq, AnswerView, Progress, QuestionPayload, SessionResp, StartReq, StartResp, TurnResp
from config.settings import settings
from interview_session import (
    Session,
    SessionClosedError,
    SessionNotFoundError,
    SessionStore,
    abort_session,
    build_store_from_settings,
    current_question,
    get_session,
    start_session,
    submit_answer,
)
from llm_gateway import LlmGatewayError
from question_bank import Question
from session_reports import EmptySessionError, generate_session_report_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")


@lru_cache(maxsize=1)
def get_store() -> SessionStore:
    return build_store_from_settings(settings)


@lru_cache(maxsize=1)
def get_analyzer() -> AnswerAnalyzer:
    return analyzer_from_config()


def _question_payload(question: Optional[Question]) -> Optional[QuestionPayload]:
    if question is None:
        return None
    return QuestionPayload(id=question.id, category=question.category, text=question.text)


def _progress(session: Session) -> Progress:
    return Progress(answered=len(session.answers), total=session.total_questions)


def _session_resp(session: Session) -> SessionResp:
    return SessionResp(
        session_id=session.id,
        user_id=session.user_id,
        level=session.level,
        status=session.status,
        question=_question_payload(current_question(session)),
        progress=_progress(session),
        answers=[AnswerView.model_validate(answer.model_dump()) for answer in session.answers],
        summary=session.summary,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


def _load(store: SessionStore, session_id: str) -> Session:
    try:
        return get_session(store, session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc


@router.post("/start", response_model=StartResp)
def start(req: StartReq, store: SessionStore = Depends(get_store)) -> StartResp:
    level = req.level if req.level is not None else settings.DEFAULT_LEVEL
    session = start_session(store, level=level, user_id=req.user_id or "")
    return StartResp(
        session_id=session.id,
        level=session.level,
        question=_question_payload(current_question(session)),
        progress=_progress(session),
    )


@router.post("/{session_id}/answers", response_model=TurnResp)
def answer(
    session_id: str,
    req: AnswerReq,
    store: SessionStore = Depends(get_store),
    analyzer: AnswerAnalyzer = Depends(get_analyzer),
) -> TurnResp:
    try:
        outcome = submit_answer(store, session_id, req.answer, analyzer=analyzer)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except SessionClosedError as exc:
        raise HTTPException(status_code=409, detail=f"session is {exc.status}") from exc
    except LlmGatewayError as exc:
        logger.error("Analysis request failed for session %s: %s", session_id, exc)
        raise HTTPException(status_code=503, detail=f"analysis service unavailable: {exc}") from exc
    except AnalysisDecodeError as exc:
        logger.error("Analysis reply unusable for session %s: %s", session_id, exc)
        raise HTTPException(status_code=502, detail="analysis service returned an unreadable reply") from exc

    return TurnResp(
        session_id=outcome.session.id,
        question_id=outcome.answer.question_id,
        analysis=outcome.analysis,
        percentage=outcome.percentage,
        finished=outcome.finished,
        next_question=_question_payload(outcome.next_question),
        progress=_progress(outcome.session),
        summary=outcome.summary,
    )


@router.get("/{session_id}", response_model=SessionResp)
def fetch(session_id: str, store: SessionStore = Depends(get_store)) -> SessionResp:
    return _session_resp(_load(store, session_id))


@router.post("/{session_id}/abort", response_model=SessionResp)
def abort(session_id: str, store: SessionStore = Depends(get_store)) -> SessionResp:
    try:
        session = abort_session(store, session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except SessionClosedError as exc:
        raise HTTPException(status_code=409, detail=f"session is {exc.status}") from exc
    return _session_resp(session)


_UNSAFE = re.compile(r"[^0-9A-Za-z_-]+")


@router.get("/{session_id}/report.pdf")
def report_pdf(session_id: str, store: SessionStore = Depends(get_store)) -> Response:
    session = _load(store, session_id)
    try:
        payload = generate_session_report_pdf(session)
    except EmptySessionError as exc:
        raise HTTPException(status_code=409, detail="session has not finished") from exc
    filename = f"practice-{_UNSAFE.sub('-', session.user_id) or 'session'}-{session.id[:8]}.pdf"
    headers = {"Content-Disposition": f"attachment; filename=\"{filename}\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)


__all__ = ["get_analyzer", "get_store", "router"]
