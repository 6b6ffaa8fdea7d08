from __future__ import annotations  # Question bank domain models

from typing import List, Optional

from pydantic import BaseModel, Field

PURPOSE_OF_STUDY = "Purpose of Study"
ACADEMIC_BACKGROUND = "Academic Background"
UNIVERSITY_CHOICE = "University Choice"
FINANCIAL_CAPABILITY = "Financial Capability"
POST_GRADUATION_PLANS = "Post-Graduation Plans"
IMMIGRATION_INTENT = "Immigration Intent"

CATEGORY_ORDER = (  # Order in which categories are asked
    PURPOSE_OF_STUDY,
    ACADEMIC_BACKGROUND,
    UNIVERSITY_CHOICE,
    FINANCIAL_CAPABILITY,
    POST_GRADUATION_PLANS,
    IMMIGRATION_INTENT,
)


class Question(BaseModel):  # One selected interview question
    id: str
    category: str
    text: str
    # Graph linkage for branching flows; selection leaves these empty.
    next_id: Optional[str] = None
    followup_candidates: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


__all__ = [
    "CATEGORY_ORDER",
    "PURPOSE_OF_STUDY",
    "ACADEMIC_BACKGROUND",
    "UNIVERSITY_CHOICE",
    "FINANCIAL_CAPABILITY",
    "POST_GRADUATION_PLANS",
    "IMMIGRATION_INTENT",
    "Question",
]
