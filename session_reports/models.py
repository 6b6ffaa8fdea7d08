from __future__ import annotations  # Session report domain models

from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, Field

Grade = Literal["A", "B", "C", "D"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionSummary(BaseModel):  # Aggregate outcome of a finished practice session
    session_id: str = ""
    total_questions: int
    average_score: float
    overall_grade: Grade
    strong_areas: List[str] = Field(default_factory=list)
    weak_areas: List[str] = Field(default_factory=list)
    common_red_flags: List[str] = Field(default_factory=list)
    recommendation: str
    completed_at: datetime = Field(default_factory=_utcnow)


__all__ = ["Grade", "SessionSummary"]
