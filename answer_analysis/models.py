from __future__ import annotations  # Answer analysis domain models

from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Classification = Literal["Excellent", "Good", "Average", "Weak"]

CRITERIA = (  # Canonical criterion order
    "migration_intent",
    "financial_understanding",
    "academic_credibility",
    "specificity_research",
    "consistency",
    "communication_quality",
    "red_flags",
)

CriterionScore = Optional[Annotated[int, Field(ge=1, le=5)]]  # None means not applicable


class AnalysisScores(BaseModel):  # Per-criterion scores; absent criteria are None
    migration_intent: CriterionScore = None
    financial_understanding: CriterionScore = None
    academic_credibility: CriterionScore = None
    specificity_research: CriterionScore = None
    consistency: CriterionScore = None
    communication_quality: CriterionScore = None
    # Inverted: 5 means no flags, 1 means major flags.
    red_flags: CriterionScore = None
    total_score: int = 0

    @field_validator("total_score", mode="before")
    @classmethod
    def _advisory_total(cls, value: object) -> int:  # Stated totals are advisory; tolerate junk
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return 0

    def present(self) -> Dict[str, int]:
        """Return the applicable criteria in canonical order."""

        values: Dict[str, int] = {}
        for name in CRITERIA:
            score = getattr(self, name)
            if score is not None:
                values[name] = score
        return values

    def criteria_count(self) -> int:
        return len(self.present())

    def computed_total(self) -> int:
        return sum(self.present().values())


class StructuredFeedback(BaseModel):  # Feedback with overall text, per-criterion notes and suggestions
    overall: str = ""
    by_criterion: Dict[str, str] = Field(default_factory=dict)
    improvements: List[str] = Field(default_factory=list)

    @field_validator("by_criterion", mode="before")
    @classmethod
    def _drop_null_notes(cls, value: object) -> object:
        if isinstance(value, dict):
            return {str(key): str(note) for key, note in value.items() if note is not None}
        return value


class AnalysisResult(BaseModel):  # Analysis of a single answer
    scores: AnalysisScores
    classification: str = ""
    feedback: StructuredFeedback = Field(default_factory=StructuredFeedback)

    @field_validator("classification", mode="before")
    @classmethod
    def _stated_classification(cls, value: object) -> object:
        return "" if value is None else value

    def to_wire(self) -> str:
        """Serialize in the reply schema, keeping absent criteria as ``null``."""

        return self.model_dump_json()


__all__ = [
    "CRITERIA",
    "AnalysisResult",
    "AnalysisScores",
    "Classification",
    "CriterionScore",
    "StructuredFeedback",
]
