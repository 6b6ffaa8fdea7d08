from answer_analysis.models import AnalysisResult, AnalysisScores, StructuredFeedback
from answer_analysis.prompts import SYSTEM_PROMPT, build_messages
from interview_session.models import Answer


def _answer(question: str, text: str, *, with_analysis: bool = True) -> Answer:
    analysis = None
    if with_analysis:
        analysis = AnalysisResult(
            scores=AnalysisScores(specificity_research=4, communication_quality=4, red_flags=5, total_score=13),
            classification="Excellent",
            feedback=StructuredFeedback(overall="Solid."),
        )
    return Answer(
        question_id="q1_University_Choice",
        question_text=question,
        category="University Choice",
        text=text,
        analysis=analysis,
    )


def test_system_prompt_lists_rubric_and_tables() -> None:
    assert "F-1 visa consular officer" in SYSTEM_PROMPT
    assert "- Financial Capability: Evaluate ONLY financial_understanding, communication_quality, red_flags." in SYSTEM_PROMPT
    assert "For 3 criteria (max 15): Excellent: 13-15, Good: 10-12, Average: 7-9, Weak: 3-6" in SYSTEM_PROMPT
    assert "Excellent: 85%+" in SYSTEM_PROMPT
    assert '"total_score"' in SYSTEM_PROMPT


def test_first_turn_has_system_and_new_pair_only() -> None:
    messages = build_messages([], question="Why this school?", answer="Because of its labs.", category="University Choice")
    assert [message["role"] for message in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PROMPT
    assert messages[1]["content"] == (
        "Category: University Choice\nQuestion: Why this school?\nStudent's Answer: Because of its labs."
    )


def test_history_replays_question_answer_and_analysis() -> None:
    history = [_answer("Why this school?", "Labs and faculty.")]
    messages = build_messages(history, question="Who pays?", answer="My parents.", category="Financial Capability")
    assert [message["role"] for message in messages] == ["system", "user", "assistant", "user"]
    assert messages[1]["content"] == "Question: Why this school?\nStudent's Answer: Labs and faculty."
    replay = AnalysisResult.model_validate_json(messages[2]["content"])
    assert replay.scores.total_score == 13
    assert replay.scores.migration_intent is None
    assert messages[3]["content"].startswith("Category: Financial Capability\n")


def test_history_without_analysis_skips_assistant_turn() -> None:
    history = [_answer("Why this school?", "Labs.", with_analysis=False)]
    messages = build_messages(history, question="Who pays?", answer="Me.")
    assert [message["role"] for message in messages] == ["system", "user", "user"]
    assert messages[-1]["content"] == "Question: Who pays?\nStudent's Answer: Me."


def test_system_prompt_is_stable_across_calls() -> None:
    first = build_messages([], question="a", answer="b")
    second = build_messages([_answer("x", "y")], question="c", answer="d", category="Immigration Intent")
    assert first[0] == second[0]
