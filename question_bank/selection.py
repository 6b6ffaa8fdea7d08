"""Tier-based question selection for a new practice session."""
from __future__ import annotations

import logging
import random
import re
from typing import Dict, List, Optional, Sequence, Set

from .models import (
    ACADEMIC_BACKGROUND,
    CATEGORY_ORDER,
    POST_GRADUATION_PLANS,
    PURPOSE_OF_STUDY,
    UNIVERSITY_CHOICE,
    Question,
)
from .question_bank import QuestionBank, get_question_bank

logger = logging.getLogger(__name__)

LEVELS = ("easy", "medium", "hard")

EASY_CATEGORIES = (
    PURPOSE_OF_STUDY,
    ACADEMIC_BACKGROUND,
    UNIVERSITY_CHOICE,
    POST_GRADUATION_PLANS,
)

HARD_PER_CATEGORY = 2

_NON_ALNUM = re.compile(r"[^0-9A-Za-z]")


def sanitize_category(category: str) -> str:
    """Fold every non-alphanumeric character of a category name to ``_``."""

    return _NON_ALNUM.sub("_", category)


def normalize_level(level: Optional[str]) -> str:
    """Map a requested tier to ``easy``/``medium``/``hard``; anything else is the default tier."""

    token = (level or "").strip().lower()
    return token if token in LEVELS else "hard"


class _Picker:  # Accumulates a duplicate-free question sequence
    def __init__(self, bank: QuestionBank, rng: random.Random) -> None:
        self._bank = bank
        self._rng = rng
        self.selected: List[Question] = []
        self._texts: Set[str] = set()

    def take(self, category: str, count: int) -> int:
        available = [text for text in dict.fromkeys(self._bank.questions(category)) if text not in self._texts]
        if not available:
            return 0
        self._rng.shuffle(available)
        chosen = available[:count]
        for text in chosen:
            self._texts.add(text)
            position = len(self.selected) + 1
            self.selected.append(
                Question(id=f"q{position}_{sanitize_category(category)}", category=category, text=text)
            )
        return len(chosen)


def select_questions(
    level: Optional[str],
    bank: Optional[QuestionBank] = None,
    *,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Build the fixed question sequence for a session at ``level``.

    easy: one question from each of four categories.
    medium: one from each of the six categories plus one extra from a random
    category, skipped if that category has no unused text left.
    hard / default: two from each of the six categories.

    Categories missing from the bank contribute nothing, and categories that
    run short are under-filled rather than backfilled from elsewhere.
    """

    bank = bank if bank is not None else get_question_bank()
    rng = rng or random.Random()
    tier = normalize_level(level)
    picker = _Picker(bank, rng)

    if tier == "easy":
        for category in EASY_CATEGORIES:
            picker.take(category, 1)
    elif tier == "medium":
        for category in CATEGORY_ORDER:
            picker.take(category, 1)
        extra_category = rng.choice(CATEGORY_ORDER)
        if not picker.take(extra_category, 1):
            logger.info("Medium tier extra draw exhausted for category %s", extra_category)
    else:
        for category in CATEGORY_ORDER:
            picker.take(category, HARD_PER_CATEGORY)

    return picker.selected


def expected_quota(level: Optional[str]) -> int:  # Nominal sequence length for a tier
    quotas: Dict[str, int] = {
        "easy": len(EASY_CATEGORIES),
        "medium": len(CATEGORY_ORDER) + 1,
        "hard": len(CATEGORY_ORDER) * HARD_PER_CATEGORY,
    }
    return quotas[normalize_level(level)]


def category_counts(questions: Sequence[Question]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for question in questions:
        counts[question.category] = counts.get(question.category, 0) + 1
    return counts


__all__ = [
    "EASY_CATEGORIES",
    "HARD_PER_CATEGORY",
    "LEVELS",
    "category_counts",
    "expected_quota",
    "normalize_level",
    "sanitize_category",
    "select_questions",
]
