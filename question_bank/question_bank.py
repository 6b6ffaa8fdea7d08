"""Process-wide, read-only question bank loaded once at startup."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import yaml

from config.settings import settings

from .models import CATEGORY_ORDER

logger = logging.getLogger(__name__)

BUNDLED_QUESTIONS = Path(__file__).resolve().parent / "questions.json"

# Every category used by the selection rules must be present and non-empty.
REQUIRED_CATEGORIES: Tuple[str, ...] = CATEGORY_ORDER


class QuestionBankError(RuntimeError):
    """Raised when a question source is missing, malformed or incomplete."""


class QuestionBank:
    """Immutable snapshot of category -> ordered question texts."""

    def __init__(self, categories: Mapping[str, Sequence[str]], *, source: str = "") -> None:
        frozen = {name: tuple(texts) for name, texts in categories.items()}
        self._categories = MappingProxyType(frozen)
        self.source = source

    def categories(self) -> Tuple[str, ...]:
        return tuple(self._categories.keys())

    def questions(self, category: str) -> Tuple[str, ...]:
        """Return the questions for ``category`` (empty when the category is unknown)."""

        return self._categories.get(category, ())

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def __len__(self) -> int:
        return sum(len(texts) for texts in self._categories.values())

    def as_dict(self) -> dict[str, list[str]]:
        return {name: list(texts) for name, texts in self._categories.items()}


def parse_question_mapping(data: object, *, required: Iterable[str] = REQUIRED_CATEGORIES) -> dict[str, list[str]]:
    """Validate a decoded mapping of category name to question strings."""

    if not isinstance(data, Mapping):
        raise QuestionBankError("question source must be a mapping of category -> questions")
    categories: dict[str, list[str]] = {}
    for name, texts in data.items():
        if not isinstance(name, str):
            raise QuestionBankError(f"category name must be a string, got {name!r}")
        if not isinstance(texts, list) or not all(isinstance(text, str) for text in texts):
            raise QuestionBankError(f"category '{name}' must map to a list of strings")
        categories[name] = [text.strip() for text in texts if text.strip()]
    for category in required:
        if category not in categories:
            raise QuestionBankError(f"required category '{category}' not found in question source")
        if not categories[category]:
            raise QuestionBankError(f"required category '{category}' has no questions")
    return categories


def load_question_bank(path: Path | str) -> QuestionBank:
    """Read a JSON or YAML question file and return a validated bank."""

    source = Path(path)
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(f"read questions file {source}: {exc}") from exc
    try:
        if source.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise QuestionBankError(f"decode questions file {source}: {exc}") from exc
    bank = QuestionBank(parse_question_mapping(data), source=str(source))
    logger.info("Loaded %d questions in %d categories from %s", len(bank), len(bank.categories()), source)
    return bank


_bank: Optional[QuestionBank] = None


def _candidate_paths() -> List[Path]:
    paths: List[Path] = []
    if settings.QUESTIONS_PATH:
        paths.append(Path(settings.QUESTIONS_PATH))
    cwd = Path(os.getcwd())
    paths.extend([cwd / "questions.json", cwd / "question_bank" / "questions.json", BUNDLED_QUESTIONS])
    unique: List[Path] = []
    for path in paths:
        if path not in unique:
            unique.append(path)
    return unique


def init_question_bank(path: Path | str | None = None) -> QuestionBank:
    """Load the process-wide bank, trying the configured and default locations."""

    global _bank
    if path is not None:
        _bank = load_question_bank(path)
        return _bank
    candidates = _candidate_paths()
    for candidate in candidates:
        if not candidate.is_file():
            logger.debug("Question source %s not found", candidate)
            continue
        # An existing but invalid file is fatal; only missing files fall through.
        _bank = load_question_bank(candidate)
        return _bank
    tried = ", ".join(str(candidate) for candidate in candidates)
    raise QuestionBankError(f"could not find a questions file; tried: {tried}")


def get_question_bank() -> QuestionBank:
    if _bank is None:
        raise QuestionBankError("question bank has not been initialised")
    return _bank


def install_question_bank(bank: QuestionBank) -> None:  # Install a prebuilt snapshot (tests, embedding apps)
    global _bank
    _bank = bank


__all__ = [
    "BUNDLED_QUESTIONS",
    "REQUIRED_CATEGORIES",
    "QuestionBank",
    "QuestionBankError",
    "get_question_bank",
    "init_question_bank",
    "install_question_bank",
    "load_question_bank",
    "parse_question_mapping",
]
