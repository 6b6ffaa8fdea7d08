"""Pydantic schemas for the practice session API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from answer_analysis.models import AnalysisResult
from session_reports.models import SessionSummary


class StartReq(BaseModel):
    user_id: Optional[str] = None
    level: Optional[str] = None


class AnswerReq(BaseModel):
    answer: str

    @field_validator("answer")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("answer must not be blank")
        return value


class QuestionPayload(BaseModel):
    id: str
    category: str
    text: str


class Progress(BaseModel):
    answered: int
    total: int


class AnswerView(BaseModel):
    question_id: str
    question_text: str
    category: Optional[str] = None
    text: str
    created_at: datetime
    analysis: Optional[AnalysisResult] = None


class StartResp(BaseModel):
    session_id: str
    level: str
    question: Optional[QuestionPayload] = None
    progress: Progress


class TurnResp(BaseModel):
    session_id: str
    question_id: str
    analysis: AnalysisResult
    percentage: float
    finished: bool
    next_question: Optional[QuestionPayload] = None
    progress: Progress
    summary: Optional[SessionSummary] = None


class SessionResp(BaseModel):
    session_id: str
    user_id: str
    level: str
    status: str
    question: Optional[QuestionPayload] = None
    progress: Progress
    answers: List[AnswerView] = Field(default_factory=list)
    summary: Optional[SessionSummary] = None
    created_at: datetime
    updated_at: datetime
