"""Builds the Telegram report for a submission."""

import re
from typing import List, Mapping, Optional

from core.grading import ANSWER_KEY, format_submitted_at, format_time, grade_answers, performance_band
from core.models import QuestionResult, SubmissionPayload

MAX_SCORE = 20

# Characters with meaning in Telegram's legacy Markdown parse mode
_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def _format_percentage(percentage: Optional[float]) -> str:
    if percentage is None:
        return "N/A"
    return f"{percentage:g}%"


def _question_lines(results: List[QuestionResult]) -> List[str]:
    lines = []
    for result in results:
        submitted = escape_markdown(result.submitted)
        if result.is_correct:
            lines.append(f"{result.number}. {submitted} ✅")
        else:
            lines.append(f"{result.number}. {submitted} ❌ (correct: {escape_markdown(result.expected)})")
    return lines


def compose_message(payload: SubmissionPayload, answer_key: Mapping[int, str] = ANSWER_KEY) -> str:
    """
    Assemble the report text. Every payload field has a default, so this
    never fails for a parsed payload.
    """
    lines = [
        "📝 *English Test Result*",
        "",
        f"👤 *Student:* {escape_markdown(payload.name)}",
        f"🏫 *Group:* {escape_markdown(payload.group)}",
        f"📊 *Score:* {payload.score}/{MAX_SCORE} ({_format_percentage(payload.percentage)})",
        f"⏱️ *Time:* {format_time(payload.time)}",
        f"🚪 *Page Leaves:* {payload.leaves}",
        f"📅 *Submitted:* {format_submitted_at(payload.timestamp)}",
        "",
        performance_band(payload.percentage).value,
    ]

    if payload.answers is not None:
        results = grade_answers(payload.answers, answer_key)
        correct = sum(result.is_correct for result in results)
        lines += [
            "",
            f"🔍 *Answer check:* {correct}/{len(results)} correct",
            *_question_lines(results),
        ]

    return "\n".join(lines)
