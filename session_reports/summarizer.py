"""Aggregate per-answer analyses into a session summary."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from answer_analysis.models import CRITERIA, AnalysisResult
from answer_analysis.rubric import PROPORTIONAL_THRESHOLDS, RED_FLAG_DESCRIPTIONS, criterion_label

from .models import Grade, SessionSummary

if TYPE_CHECKING:
    from interview_session.models import Session

logger = logging.getLogger(__name__)

STRONG_MIN_SCORE = 4
WEAK_MAX_SCORE = 3
RED_FLAG_MAX_SCORE = 2

# Reference scale: 7 criteria, 35 points maximum.
_REFERENCE_MAX = 35.0

# Ordered (points on the reference scale, recommendation) bands, scaled to the average maximum.
RECOMMENDATION_BANDS: Tuple[Tuple[int, str], ...] = (
    (
        32,
        "Excellent performance! You're well-prepared. Focus on maintaining confidence "
        "and natural delivery during the actual interview.",
    ),
    (
        25,
        "Good foundation. Review the specific feedback for each answer and practice the "
        "improved versions. Focus on being more specific and confident in your responses.",
    ),
    (
        18,
        "You need more practice. Focus on providing specific examples, showing strong ties "
        "to your home country, and demonstrating clear post-graduation plans.",
    ),
)

FALLBACK_RECOMMENDATION = (
    "Significant improvement needed. Consider working with an advisor to strengthen your answers. "
    "Focus on clarity, specificity, and addressing visa officer concerns about immigrant intent."
)


class EmptySessionError(ValueError):
    """Raised when a summary is requested for a session without analysed answers."""


def _grade(average_score: float, average_max: float) -> Grade:
    if average_max <= 0:
        return "D"
    percentage = average_score * 100.0 / average_max
    for grade, cutoff in zip(("A", "B", "C"), PROPORTIONAL_THRESHOLDS):
        if percentage >= cutoff:
            return grade  # type: ignore[return-value]
    return "D"


def _recommendation(average_score: float, average_max: float) -> str:
    for points, text in RECOMMENDATION_BANDS:
        if average_score * _REFERENCE_MAX >= points * average_max:
            return text
    return FALLBACK_RECOMMENDATION


def summarize_analyses(analyses: Sequence[AnalysisResult], *, session_id: str = "") -> SessionSummary:
    """Compute mean score, grade, strong/weak areas, red flags and a recommendation."""

    if not analyses:
        raise EmptySessionError(f"session {session_id or '<unknown>'} has no analysed answers")

    count = len(analyses)
    average_score = sum(item.scores.total_score for item in analyses) / count
    average_criteria = sum(item.scores.criteria_count() for item in analyses) / count
    average_max = average_criteria * 5.0

    strong_hits: Dict[str, int] = {name: 0 for name in CRITERIA}
    weak_hits: Dict[str, int] = {name: 0 for name in CRITERIA}
    flagged: set[str] = set()
    for item in analyses:
        for name, score in item.scores.present().items():
            if score >= STRONG_MIN_SCORE:
                strong_hits[name] += 1
            if score <= WEAK_MAX_SCORE:
                weak_hits[name] += 1
            if score <= RED_FLAG_MAX_SCORE:
                flagged.add(name)

    # "At least half" of the answers, counting every analysed answer.
    strong: List[str] = [criterion_label(name) for name in CRITERIA if strong_hits[name] * 2 >= count]
    weak: List[str] = [criterion_label(name) for name in CRITERIA if weak_hits[name] * 2 >= count]
    red_flags: List[str] = [RED_FLAG_DESCRIPTIONS[name] for name in CRITERIA if name in flagged]

    summary = SessionSummary(
        session_id=session_id,
        total_questions=count,
        average_score=average_score,
        overall_grade=_grade(average_score, average_max),
        strong_areas=strong,
        weak_areas=weak,
        common_red_flags=red_flags,
        recommendation=_recommendation(average_score, average_max),
    )
    logger.debug(
        "Summarised %d answers for session %s: mean=%.2f grade=%s",
        count,
        session_id,
        average_score,
        summary.overall_grade,
    )
    return summary


def generate_session_summary(session: "Session") -> SessionSummary:
    analyses = [answer.analysis for answer in session.answers if answer.analysis is not None]
    return summarize_analyses(analyses, session_id=session.id)


__all__ = [
    "FALLBACK_RECOMMENDATION",
    "RECOMMENDATION_BANDS",
    "EmptySessionError",
    "generate_session_summary",
    "summarize_analyses",
]
