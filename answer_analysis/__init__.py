from __future__ import annotations  # Re-export answer_analysis public API

from .analyzer import ANALYZE_KEY, AnswerAnalyzer, analyzer_from_config
from .models import CRITERIA, AnalysisResult, AnalysisScores, Classification, StructuredFeedback
from .prompts import SYSTEM_PROMPT, build_messages
from .rubric import CATEGORY_CRITERIA, classify, criterion_label, relevant_criteria, score_to_percentage
from .validator import AnalysisDecodeError, parse_analysis

__all__ = [
    "ANALYZE_KEY",
    "AnalysisDecodeError",
    "AnalysisResult",
    "AnalysisScores",
    "AnswerAnalyzer",
    "CATEGORY_CRITERIA",
    "CRITERIA",
    "Classification",
    "SYSTEM_PROMPT",
    "StructuredFeedback",
    "analyzer_from_config",
    "build_messages",
    "classify",
    "criterion_label",
    "parse_analysis",
    "relevant_criteria",
    "score_to_percentage",
]
