from __future__ import annotations  # Prompt construction for answer analysis calls

from textwrap import dedent
from typing import Dict, List, Optional, Sequence

from .models import CRITERIA
from .rubric import CATEGORY_CRITERIA, EXACT_THRESHOLDS, PROPORTIONAL_THRESHOLDS


def _category_rules() -> str:  # Render the category -> criteria table as prompt lines
    lines: List[str] = []
    for category, criteria in CATEGORY_CRITERIA.items():
        skipped = [name for name in CRITERIA if name not in criteria]
        lines.append(
            f"- {category}: Evaluate ONLY {', '.join(criteria)}. Set {', '.join(skipped)} to null."
        )
    return "\n".join(lines)


def _classification_rules() -> str:  # Render classification thresholds as prompt lines
    lines: List[str] = []
    for count, (excellent, good, average) in EXACT_THRESHOLDS.items():
        top = count * 5
        lines.append(
            f"- For {count} criteria (max {top}): Excellent: {excellent}-{top}, "
            f"Good: {good}-{excellent - 1}, Average: {average}-{good - 1}, Weak: {count}-{average - 1}"
        )
    excellent_pct, good_pct, average_pct = (int(value) for value in PROPORTIONAL_THRESHOLDS)
    lines.append(
        f"- For 6+ criteria: Use proportional thresholds (Excellent: {excellent_pct}%+, "
        f"Good: {good_pct}-{excellent_pct - 1}%, Average: {average_pct}-{good_pct - 1}%, Weak: <{average_pct}%)"
    )
    return "\n".join(lines)


def _schema_block() -> str:  # Render the reply schema example
    scores = ",\n".join(f'    "{name}": 1-5 or null' for name in CRITERIA)
    notes = ",\n".join(f'      "{name}": "string"' for name in CRITERIA)
    return (
        "{\n"
        '  "scores": {\n'
        f"{scores},\n"
        '    "total_score": <sum of non-null criteria>\n'
        "  },\n"
        '  "classification": "Excellent|Good|Average|Weak",\n'
        '  "feedback": {\n'
        '    "overall": "string",\n'
        '    "by_criterion": {\n'
        f"{notes}\n"
        "    },\n"
        '    "improvements": ["string"]\n'
        "  }\n"
        "}"
    )


_RUBRIC = dedent(
    """
    You are an experienced U.S. F-1 visa consular officer evaluating a student's interview answer. Evaluate the answer exactly as a real visa officer would, focusing on evidence, specificity, and potential red flags.

    EVALUATION CRITERIA (Score each 1-5, where 5 is best, or null if not relevant):

    IMPORTANT: Only evaluate criteria that are relevant to the question category. For criteria NOT tested by this question, return null (not a number).

    1. migration_intent (1-5 or null):
       - 5: Strong, specific evidence of return intent (family ties, job offers, property, business plans, a concrete career path back home)
       - 4: Good evidence with some specifics
       - 3: Moderate evidence but vague ("I'll return" without specifics)
       - 2: Weak evidence or concerning statements (vague plans, mentions staying in the US)
       - 1: Strong signs of immigration intent (wants to stay permanently, no ties, unrealistic return plans)

    2. financial_understanding (1-5 or null):
       - 5: Clear total costs, specific funding sources, realistic plan for the entire program
       - 4: Good understanding with most details
       - 3: Basic understanding but missing specifics
       - 2: Unclear about costs or funding sources
       - 1: No understanding or unrealistic financial planning

    3. academic_credibility (1-5 or null):
       - 5: Strong academic fit, clear educational progression, serious student intent
       - 4: Good fit with logical progression
       - 3: Acceptable fit with some gaps
       - 2: Weak fit or questionable academic choices
       - 1: Poor fit or no serious study intent

    4. specificity_research (1-5 or null):
       - 5: Deep knowledge (faculty, labs, unique courses, comparison with other universities)
       - 4: Good knowledge with some specifics
       - 3: Basic but generic knowledge
       - 2: Vague or superficial ("good school")
       - 1: No evidence of research

    5. consistency (1-5 or null):
       - 5: Fully consistent with previous answers, no contradictions
       - 4: Mostly consistent
       - 3: Minor contradictions
       - 2: Several contradictions with previous answers
       - 1: Major contradictions with stated goals

    6. communication_quality (1-5 or null):
       - 5: Clear, confident, natural, well-structured English
       - 4: Mostly clear and confident
       - 3: Understandable but hesitant or unclear at times
       - 2: Difficult to understand, very hesitant
       - 1: Cannot be understood, robotic or rehearsed

    7. red_flags (1-5 or null, INVERTED - 5 = no flags, 1 = major flags):
       - 5: No red flags (honest, specific, realistic, consistent)
       - 4: Minor concerns
       - 3: Some concerns (vague answers, minor contradictions)
       - 2: Significant red flags (major contradictions, unrealistic plans)
       - 1: Major red flags (suspicious patterns, clear immigration intent, lack of knowledge)

    QUESTION CATEGORY AWARENESS:
    You will receive the question category for each evaluated Q&A. Use ONLY that category for the mapping below. Do NOT infer the category from the question text.
    """
).strip()

_GUIDANCE = dedent(
    """
    Always evaluate communication_quality and red_flags.
    Evaluate consistency only if there are previous answers in the session context.

    RED FLAGS TO DETECT:
    - Vague or rehearsed responses ("it's a good school", "I'll see", "maybe")
    - Contradictions between answers
    - Lack of specific knowledge about the program or university
    - Unrealistic financial plans
    - Weak ties to the home country
    - Overly rehearsed or robotic delivery

    Calculate total_score as the sum of only the non-null criteria.

    Assign classification based on total_score and the number of relevant criteria:
    """
).strip()

_FEEDBACK = dedent(
    """
    Provide structured feedback:
    - overall: professional assessment covering overall impression, key strengths, potential red flags, and consular officer concerns
    - by_criterion: specific feedback for each relevant criterion explaining the score; for null criteria write "N/A - not applicable to this question category" or omit them
    - improvements: actionable, specific suggestions with examples of what to include

    CRITICAL: Do not invent facts. Judge only what is written.

    The response must be a single JSON object in the following format:
    """
).strip()

SYSTEM_PROMPT = "\n\n".join(
    [
        _RUBRIC,
        _category_rules(),
        _GUIDANCE,
        _classification_rules(),
        _FEEDBACK,
        _schema_block(),
    ]
)


def format_exchange(question: str, answer: str, category: Optional[str] = None) -> str:
    body = f"Question: {question}\nStudent's Answer: {answer}"
    if category and category.strip():
        return f"Category: {category.strip()}\n{body}"
    return body


def build_messages(
    history: Sequence[object],
    *,
    question: str,
    answer: str,
    category: Optional[str] = None,
) -> List[Dict[str, str]]:
    """Rebuild the full conversation for a stateless evaluation call.

    ``history`` holds previously recorded answers (objects exposing
    ``question_text``, ``text`` and an optional ``analysis``). Each is replayed
    as a user turn, followed by its stored analysis as an assistant turn.
    """

    messages: List[Dict[str, str]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    for previous in history:
        messages.append(
            {
                "role": "user",
                "content": format_exchange(getattr(previous, "question_text", ""), getattr(previous, "text", "")),
            }
        )
        analysis = getattr(previous, "analysis", None)
        if analysis is not None:
            messages.append({"role": "assistant", "content": analysis.to_wire()})
    messages.append({"role": "user", "content": format_exchange(question, answer, category)})
    return messages


__all__ = ["SYSTEM_PROMPT", "build_messages", "format_exchange"]
