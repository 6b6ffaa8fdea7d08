import pytest

from answer_analysis.models import CRITERIA, AnalysisResult, AnalysisScores
from answer_analysis.rubric import RED_FLAG_DESCRIPTIONS
from interview_session.models import Answer, Session
from session_reports import EmptySessionError, generate_session_summary, summarize_analyses
from session_reports.summarizer import FALLBACK_RECOMMENDATION, RECOMMENDATION_BANDS


def _analysis(**scores: int) -> AnalysisResult:
    total = sum(scores.values())
    return AnalysisResult(scores=AnalysisScores(total_score=total, **scores), classification="Good")


def _all_seven(values: list[int]) -> AnalysisResult:
    return _analysis(**dict(zip(CRITERIA, values)))


def test_empty_input_raises() -> None:
    with pytest.raises(EmptySessionError):
        summarize_analyses([])


def test_mean_and_grade_for_two_full_answers() -> None:
    first = _all_seven([5, 5, 5, 5, 4, 4, 4])  # 32
    second = _all_seven([4, 4, 4, 4, 5, 4, 4])  # 29
    summary = summarize_analyses([first, second], session_id="s-1")
    assert summary.session_id == "s-1"
    assert summary.total_questions == 2
    assert summary.average_score == 30.5
    assert summary.overall_grade == "A"
    assert summary.recommendation == RECOMMENDATION_BANDS[1][1]


def test_grade_uses_average_present_criteria() -> None:
    # Three criteria each: max 15, mean 9 -> 60% -> C.
    analyses = [
        _analysis(financial_understanding=3, communication_quality=3, red_flags=3),
        _analysis(specificity_research=3, communication_quality=3, red_flags=3),
    ]
    summary = summarize_analyses(analyses)
    assert summary.average_score == 9.0
    assert summary.overall_grade == "C"


def test_grade_bands() -> None:
    assert summarize_analyses([_analysis(red_flags=5, communication_quality=5, consistency=4)]).overall_grade == "A"
    assert summarize_analyses([_analysis(red_flags=4, communication_quality=4, consistency=3)]).overall_grade == "B"
    assert summarize_analyses([_analysis(red_flags=2, communication_quality=2, consistency=2)]).overall_grade == "D"


def test_recommendation_bands_scale_with_criteria() -> None:
    top = summarize_analyses([_all_seven([5, 5, 5, 5, 4, 4, 4])])  # 32 of 35
    assert top.recommendation == RECOMMENDATION_BANDS[0][1]
    practice = summarize_analyses([_all_seven([3, 3, 3, 3, 2, 2, 2])])  # 18 of 35
    assert practice.recommendation == RECOMMENDATION_BANDS[2][1]
    low = summarize_analyses([_all_seven([3, 3, 2, 2, 2, 2, 3])])  # 17 of 35
    assert low.recommendation == FALLBACK_RECOMMENDATION
    # 3 criteria: 32/35 of 15 is 13.71, so 14 is excellent but 13 is not.
    assert summarize_analyses([_analysis(red_flags=5, communication_quality=5, migration_intent=4)]).recommendation == RECOMMENDATION_BANDS[0][1]
    assert summarize_analyses([_analysis(red_flags=5, communication_quality=4, migration_intent=4)]).recommendation == RECOMMENDATION_BANDS[1][1]


def test_strong_and_weak_areas_require_half_of_answers() -> None:
    analyses = [
        _analysis(communication_quality=4, red_flags=3, migration_intent=5),
        _analysis(communication_quality=5, red_flags=4, financial_understanding=2),
        _analysis(communication_quality=2, red_flags=3, academic_credibility=4),
        _analysis(communication_quality=4, red_flags=5, academic_credibility=3),
    ]
    summary = summarize_analyses(analyses)
    assert summary.strong_areas == ["Communication quality", "No red flags"]
    assert summary.weak_areas == ["No red flags"]


def test_red_flags_are_deduplicated_in_canonical_order() -> None:
    analyses = [
        _analysis(red_flags=1, communication_quality=2, migration_intent=1),
        _analysis(red_flags=2, communication_quality=4, financial_understanding=5),
    ]
    summary = summarize_analyses(analyses)
    assert summary.common_red_flags == [
        RED_FLAG_DESCRIPTIONS["migration_intent"],
        RED_FLAG_DESCRIPTIONS["communication_quality"],
        RED_FLAG_DESCRIPTIONS["red_flags"],
    ]


def test_generate_session_summary_uses_recorded_analyses() -> None:
    session = Session(id="abc")
    session.answers = [
        Answer(question_id="q1", question_text="Q?", text="A.", analysis=_all_seven([5, 5, 5, 5, 4, 4, 4])),
        Answer(question_id="q2", question_text="Q2?", text="B."),
    ]
    summary = generate_session_summary(session)
    assert summary.session_id == "abc"
    assert summary.total_questions == 1
    assert summary.average_score == 32.0


def test_generate_session_summary_without_analyses_raises() -> None:
    with pytest.raises(EmptySessionError):
        generate_session_summary(Session(id="empty"))
