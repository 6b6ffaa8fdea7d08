from __future__ import annotations  # Practice session domain models

from datetime import datetime, timezone
from typing import List, Literal, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field

from answer_analysis.models import AnalysisResult
from question_bank.models import Question
from session_reports.models import SessionSummary

SessionStatus = Literal["active", "finished", "aborted"]

ACTIVE: SessionStatus = "active"
FINISHED: SessionStatus = "finished"
ABORTED: SessionStatus = "aborted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    return uuid4().hex


class Answer(BaseModel):  # One recorded answer with its corrected analysis
    question_id: str
    question_text: str
    category: Optional[str] = None
    text: str
    created_at: datetime = Field(default_factory=_utcnow)
    analysis: Optional[AnalysisResult] = None


class Session(BaseModel):  # Practice session progressing through a fixed question sequence
    id: str = Field(default_factory=new_session_id)
    user_id: str = ""
    level: str = ""
    selected_questions: Tuple[Question, ...] = ()
    question_index: int = 0
    answers: List[Answer] = Field(default_factory=list)
    status: SessionStatus = ACTIVE
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    summary: Optional[SessionSummary] = None

    @property
    def total_questions(self) -> int:
        return len(self.selected_questions)

    @property
    def is_terminal(self) -> bool:
        return self.status != ACTIVE

    def touch(self) -> None:
        self.updated_at = _utcnow()


__all__ = ["ABORTED", "ACTIVE", "FINISHED", "Answer", "Session", "SessionStatus", "new_session_id"]
