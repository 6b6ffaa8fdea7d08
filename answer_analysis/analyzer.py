from __future__ import annotations  # Answer analysis against the external reasoning service

import logging
from pathlib import Path
from typing import Optional, Sequence

from config import AppConfig, LlmRoute, SamplingSettings, load_config, resolve_route
from config.settings import settings
from llm_gateway import HttpClient, chat
from observability.tracing import span

from .models import AnalysisResult
from .prompts import build_messages
from .validator import parse_analysis

logger = logging.getLogger(__name__)

ANALYZE_KEY = "answer_analysis.analyze_answer"


class AnswerAnalyzer:  # Stateless evaluator: every call replays the session history
    def __init__(
        self,
        route: LlmRoute,
        sampling: Optional[SamplingSettings] = None,
        *,
        client: Optional[HttpClient] = None,
    ) -> None:
        self.route = route
        self.sampling = sampling or SamplingSettings()
        self._client = client

    def analyze(
        self,
        history: Sequence[object],
        *,
        question: str,
        answer: str,
        category: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> AnalysisResult:
        """Evaluate ``answer`` in the context of ``history``.

        Raises :class:`llm_gateway.LlmGatewayError` on transport failure and
        :class:`AnalysisDecodeError` when the reply cannot be decoded.
        """

        messages = build_messages(history, question=question, answer=answer, category=category)
        with span(session_id, "analyze_answer", category=category or "", history=len(history)):
            raw = chat(messages, cfg=self.route, client=self._client, options=self.sampling.as_options())
        return parse_analysis(raw, category=category, session_id=session_id)


def analyzer_from_config(
    cfg: AppConfig | None = None,
    *,
    config_path: Path | str | None = None,
    client: Optional[HttpClient] = None,
) -> AnswerAnalyzer:
    """Build an analyzer from the application config registry."""

    if cfg is None:
        cfg = load_config(Path(config_path or settings.APP_CONFIG_PATH))
    route = resolve_route(cfg, ANALYZE_KEY)
    logger.info("Answer analyzer bound to route %s (model %s)", route.name, route.model)
    return AnswerAnalyzer(route, cfg.sampling, client=client)


__all__ = ["ANALYZE_KEY", "AnswerAnalyzer", "analyzer_from_config"]
