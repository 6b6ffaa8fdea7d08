from __future__ import annotations  # Re-export question bank public API

from .models import CATEGORY_ORDER, Question
from .question_bank import (
    QuestionBank,
    QuestionBankError,
    get_question_bank,
    init_question_bank,
    install_question_bank,
    load_question_bank,
)
from .selection import expected_quota, normalize_level, sanitize_category, select_questions

__all__ = [
    "CATEGORY_ORDER",
    "Question",
    "QuestionBank",
    "QuestionBankError",
    "expected_quota",
    "get_question_bank",
    "init_question_bank",
    "install_question_bank",
    "load_question_bank",
    "normalize_level",
    "sanitize_category",
    "select_questions",
]
