"""Static rubric tables: category relevance, classification tiers and score normalization."""
from __future__ import annotations

from typing import Mapping, Optional, Tuple

from question_bank.models import (
    ACADEMIC_BACKGROUND,
    FINANCIAL_CAPABILITY,
    IMMIGRATION_INTENT,
    POST_GRADUATION_PLANS,
    PURPOSE_OF_STUDY,
    UNIVERSITY_CHOICE,
)

from .models import CRITERIA, Classification

EXCELLENT: Classification = "Excellent"
GOOD: Classification = "Good"
AVERAGE: Classification = "Average"
WEAK: Classification = "Weak"

CLASSIFICATIONS: Tuple[Classification, ...] = (EXCELLENT, GOOD, AVERAGE, WEAK)

# Criteria evaluated per question category; every other criterion is forced absent.
CATEGORY_CRITERIA: Mapping[str, Tuple[str, ...]] = {
    FINANCIAL_CAPABILITY: ("financial_understanding", "communication_quality", "red_flags"),
    UNIVERSITY_CHOICE: ("specificity_research", "communication_quality", "red_flags"),
    POST_GRADUATION_PLANS: ("migration_intent", "consistency", "communication_quality", "red_flags"),
    ACADEMIC_BACKGROUND: ("academic_credibility", "communication_quality", "red_flags"),
    IMMIGRATION_INTENT: ("migration_intent", "communication_quality", "red_flags"),
    PURPOSE_OF_STUDY: ("specificity_research", "academic_credibility", "communication_quality", "red_flags"),
}

# Inclusive lower bounds for Excellent, Good, Average at the common low cardinalities.
EXACT_THRESHOLDS: Mapping[int, Tuple[int, int, int]] = {
    3: (13, 10, 7),
    4: (17, 13, 9),
    5: (21, 17, 12),
}

# Percentage-of-maximum cutoffs for Excellent, Good, Average (and for letter grades A, B, C).
PROPORTIONAL_THRESHOLDS: Tuple[float, float, float] = (85.0, 70.0, 50.0)

CRITERION_LABELS: Mapping[str, str] = {
    "migration_intent": "Strong return intent",
    "financial_understanding": "Financial understanding",
    "academic_credibility": "Academic credibility",
    "specificity_research": "Specificity & research",
    "consistency": "Consistency",
    "communication_quality": "Communication quality",
    "red_flags": "No red flags",
}

RED_FLAG_DESCRIPTIONS: Mapping[str, str] = {
    "migration_intent": "Shows potential immigration intent",
    "financial_understanding": "Poor financial understanding or planning",
    "academic_credibility": "Weak academic fit or credibility",
    "specificity_research": "Lacks specific knowledge or research",
    "consistency": "Inconsistent answers or contradictions",
    "communication_quality": "Poor communication or clarity",
    "red_flags": "Major red flags detected",
}


def relevant_criteria(category: Optional[str]) -> Optional[Tuple[str, ...]]:
    """Return the criteria scored for ``category`` or ``None`` when it is unknown."""

    if not category:
        return None
    return CATEGORY_CRITERIA.get(category.strip())


def classify(total_score: int, criteria_count: int) -> Classification:
    """Derive the classification tier from the recomputed score and criterion count."""

    if criteria_count <= 0:
        return WEAK
    if criteria_count in EXACT_THRESHOLDS:
        cutoffs = [float(value) for value in EXACT_THRESHOLDS[criteria_count]]
        value = float(total_score)
    else:
        cutoffs = list(PROPORTIONAL_THRESHOLDS)
        value = total_score * 100 / (criteria_count * 5)
    for label, cutoff in zip(CLASSIFICATIONS, cutoffs):
        if value >= cutoff:
            return label
    return WEAK


def score_to_percentage(total_score: float, criteria_count: int) -> float:
    """Map a total score onto 0..100 between the theoretical minimum and maximum."""

    if criteria_count <= 0:
        return 0.0
    min_score = criteria_count * 1
    max_score = criteria_count * 5
    clamped = min(max(total_score, min_score), max_score)
    return (clamped - min_score) * 100.0 / (max_score - min_score)


def criterion_label(criterion: str) -> str:
    return CRITERION_LABELS.get(criterion, criterion)


__all__ = [
    "AVERAGE",
    "CATEGORY_CRITERIA",
    "CLASSIFICATIONS",
    "CRITERIA",
    "CRITERION_LABELS",
    "EXACT_THRESHOLDS",
    "EXCELLENT",
    "GOOD",
    "PROPORTIONAL_THRESHOLDS",
    "RED_FLAG_DESCRIPTIONS",
    "WEAK",
    "classify",
    "criterion_label",
    "relevant_criteria",
    "score_to_percentage",
]
