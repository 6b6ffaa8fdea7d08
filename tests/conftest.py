import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from answer_analysis.rubric import CATEGORY_CRITERIA
from config import LlmRoute
from config.settings import settings
from question_bank import CATEGORY_ORDER, QuestionBank, install_question_bank
import question_bank.question_bank as bank_mod


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeClient:
    """Stands in for ``httpx.Client``; replies are served in order."""

    def __init__(self, replies: Optional[List[Any]] = None) -> None:
        self.replies = list(replies or [])
        self.requests: List[Dict[str, Any]] = []

    def queue_content(self, content: str) -> None:
        self.replies.append(FakeResponse(payload={"choices": [{"message": {"role": "assistant", "content": content}}]}))

    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> FakeResponse:
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if not self.replies:
            raise AssertionError("unexpected request: no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _bank_data() -> Dict[str, List[str]]:
    return {
        category: [f"{category} question {index}?" for index in range(1, 4)]
        for category in CATEGORY_ORDER
    }


@pytest.fixture
def bank() -> QuestionBank:
    return QuestionBank(_bank_data(), source="fixture")


@pytest.fixture(autouse=True)
def installed_bank(bank, monkeypatch, tmp_path):
    monkeypatch.setattr(bank_mod, "_bank", None)
    monkeypatch.setattr(settings, "DB_PATH", str(tmp_path / "sessions.db"))
    monkeypatch.setattr(settings, "QUESTIONS_PATH", "")
    install_question_bank(bank)
    yield bank


@pytest.fixture
def route() -> LlmRoute:
    return LlmRoute(
        name="test-route",
        base_url="http://llm.test",
        endpoint="/v1/chat/completions",
        model="test-model",
        timeout_s=1.0,
    )


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def analysis_reply() -> Callable[..., str]:
    """Build a well-formed reply scoring every criterion relevant to ``category``."""

    def _build(
        category: str,
        score: int = 4,
        *,
        classification: str = "Good",
        overrides: Optional[Dict[str, Optional[int]]] = None,
    ) -> str:
        relevant = CATEGORY_CRITERIA[category]
        scores: Dict[str, Any] = {name: score for name in relevant}
        scores.update(overrides or {})
        scores["total_score"] = sum(value for value in scores.values() if isinstance(value, int))
        payload = {
            "scores": scores,
            "classification": classification,
            "feedback": {
                "overall": f"Assessment for {category}.",
                "by_criterion": {name: "ok" for name in relevant},
                "improvements": ["Be more specific."],
            },
        }
        return json.dumps(payload)

    return _build
