import json

import pytest

from answer_analysis import ANALYZE_KEY, AnalysisDecodeError, AnswerAnalyzer, SYSTEM_PROMPT, analyzer_from_config
from config import AppConfig, SamplingSettings
from interview_session.models import Answer
from llm_gateway import LlmGatewayError


def test_analyze_sends_history_and_corrects_reply(route, fake_client, analysis_reply) -> None:
    fake_client.queue_content(analysis_reply("Purpose of Study", 4))
    analyzer = AnswerAnalyzer(route, SamplingSettings(), client=fake_client)
    previous = analyzer.analyze([], question="Why study here?", answer="For the AI lab.", category="Purpose of Study")
    history = [
        Answer(
            question_id="q1_Purpose_of_Study",
            question_text="Why study here?",
            category="Purpose of Study",
            text="For the AI lab.",
            analysis=previous,
        )
    ]
    fake_client.queue_content(analysis_reply("Financial Capability", 5, classification="Average"))
    result = analyzer.analyze(
        history,
        question="Who sponsors you?",
        answer="My father, with a bank statement.",
        category="Financial Capability",
        session_id="s-2",
    )
    assert result.classification == "Excellent"
    assert result.scores.total_score == 15

    payload = fake_client.requests[-1]["json"]
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 1000
    roles = [message["role"] for message in payload["messages"]]
    assert roles == ["system", "user", "assistant", "user"]
    assert payload["messages"][0]["content"] == SYSTEM_PROMPT
    assert payload["messages"][-1]["content"].startswith("Category: Financial Capability\nQuestion: Who sponsors you?")


def test_decode_error_propagates(route, fake_client) -> None:
    fake_client.queue_content("Sorry, I can't help with that.")
    analyzer = AnswerAnalyzer(route, client=fake_client)
    with pytest.raises(AnalysisDecodeError):
        analyzer.analyze([], question="q", answer="a", category="University Choice")


def test_transport_error_propagates(route, fake_client) -> None:
    fake_client.replies.append(LlmGatewayError("down"))
    analyzer = AnswerAnalyzer(route, client=fake_client)
    with pytest.raises(LlmGatewayError):
        analyzer.analyze([], question="q", answer="a")


def test_analyzer_from_config_resolves_registry_route(route, tmp_path) -> None:
    cfg = AppConfig(
        llm_routes={"primary": route},
        registry={ANALYZE_KEY: "primary"},
        sampling=SamplingSettings(temperature=0.1, max_tokens=500),
    )
    analyzer = analyzer_from_config(cfg)
    assert analyzer.route == route
    assert analyzer.sampling.max_tokens == 500

    path = tmp_path / "app_config.json"
    path.write_text(cfg.model_dump_json(), encoding="utf-8")
    from_disk = analyzer_from_config(config_path=path)
    assert from_disk.route.model == "test-model"


def test_analyzer_from_config_requires_registry_entry(route) -> None:
    cfg = AppConfig(llm_routes={"primary": route}, registry={})
    with pytest.raises(KeyError):
        analyzer_from_config(cfg)


def test_shipped_config_targets_openai() -> None:
    from pathlib import Path

    from config import load_config

    cfg = load_config(Path(__file__).resolve().parents[2] / "app_config.json")
    analyzer = analyzer_from_config(cfg)
    assert analyzer.route.model == "gpt-3.5-turbo"
    assert analyzer.route.api_key_env == "OPENAI_API_KEY"
    assert analyzer.route.timeout_s == 60
    assert json.loads(json.dumps(analyzer.sampling.as_options())) == {"temperature": 0.3, "max_tokens": 1000}
