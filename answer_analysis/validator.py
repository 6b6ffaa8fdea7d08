"""Tolerant decoding and correction of analysis replies."""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from observability.logger import log_event

from .models import CRITERIA, AnalysisResult
from .rubric import classify, relevant_criteria

logger = logging.getLogger(__name__)


class AnalysisDecodeError(ValueError):
    """Raised when a reply does not contain a usable analysis object."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


def strip_fences(text: str) -> str:
    """Trim whitespace and Markdown code fence markers around a reply."""

    value = text.strip()
    if value.startswith("```json"):
        value = value[len("```json"):]
    elif value.startswith("```"):
        value = value[3:]
    if value.endswith("```"):
        value = value[:-3]
    return value.strip()


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text`` or ``None``."""

    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _fail(reason: str, raw_text: str, session_id: Optional[str]) -> AnalysisDecodeError:
    log_event(
        "analysis_decode_failed",
        session_id,
        level=logging.WARNING,
        reason=reason,
        raw_chars=len(raw_text),
    )
    return AnalysisDecodeError(f"analysis reply could not be decoded: {reason}", raw_text)


def _mask_irrelevant(result: AnalysisResult, category: Optional[str], session_id: Optional[str]) -> None:
    relevant = relevant_criteria(category)
    if relevant is None:
        return
    masked: List[str] = []
    for name in CRITERIA:
        if name not in relevant and getattr(result.scores, name) is not None:
            setattr(result.scores, name, None)
            masked.append(name)
    if masked:
        log_event("criteria_masked", session_id, category=category, masked=masked)


def parse_analysis(
    raw_text: str,
    *,
    category: Optional[str] = None,
    session_id: Optional[str] = None,
) -> AnalysisResult:
    """Decode a service reply into an :class:`AnalysisResult` and correct it.

    The reply may wrap the object in prose or code fences. Criteria not scored
    for ``category`` are dropped, ``total_score`` is recomputed from the
    remaining scores, and a stated classification that disagrees with the
    thresholds is overwritten (and audit-logged) rather than rejected.
    """

    candidate = extract_json_object(strip_fences(raw_text))
    if candidate is None:
        raise _fail("no balanced JSON object found", raw_text, session_id)
    try:
        result = AnalysisResult.model_validate_json(candidate)
    except ValidationError as exc:
        logger.debug("Analysis reply failed validation: %s", exc)
        raise _fail(f"{exc.error_count()} validation error(s)", raw_text, session_id) from exc

    _mask_irrelevant(result, category, session_id)

    total = result.scores.computed_total()
    count = result.scores.criteria_count()
    result.scores.total_score = total

    expected = classify(total, count)
    if result.classification != expected:
        log_event(
            "classification_corrected",
            session_id,
            stated=result.classification,
            expected=expected,
            total_score=total,
            criteria=count,
        )
        result.classification = expected
    return result


__all__ = ["AnalysisDecodeError", "extract_json_object", "parse_analysis", "strip_fences"]
