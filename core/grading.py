"""Scoring helpers: answer key, time formatting, banding and per-question checks."""

from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional

from core.models import QuestionResult

TOTAL_QUESTIONS = 20
NO_ANSWER = "No answer"
UNKNOWN_KEY = "?"

EXCELLENT_THRESHOLD = 75.0
AVERAGE_THRESHOLD = 50.0

# Correct option for each question of the English placement test
ANSWER_KEY: Mapping[int, str] = MappingProxyType({
    1: "b", 2: "d", 3: "a", 4: "c", 5: "b",
    6: "a", 7: "c", 8: "d", 9: "b", 10: "a",
    11: "c", 12: "b", 13: "d", 14: "a", 15: "c",
    16: "b", 17: "d", 18: "a", 19: "c", 20: "b",
})


class Band(str, Enum):
    EXCELLENT = "✅ EXCELLENT"
    AVERAGE = "⚠️ AVERAGE/NEEDS PRACTICE"
    NEEDS_IMPROVEMENT = "❌ NEEDS IMPROVEMENT"


def format_time(seconds: int) -> str:
    """Render elapsed seconds as M:SS"""
    minutes, remainder = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{remainder:02d}"


def performance_band(percentage: Optional[float]) -> Band:
    """
    Thresholds are inclusive on the lower edge: 75.0 is EXCELLENT and
    50.0 is AVERAGE. A missing percentage lands in the lowest band.
    """
    if percentage is None:
        return Band.NEEDS_IMPROVEMENT
    if percentage >= EXCELLENT_THRESHOLD:
        return Band.EXCELLENT
    if percentage >= AVERAGE_THRESHOLD:
        return Band.AVERAGE
    return Band.NEEDS_IMPROVEMENT


def format_submitted_at(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%d.%m.%Y %H:%M:%S UTC")


def grade_answers(answers: Mapping[str, str], answer_key: Mapping[int, str] = ANSWER_KEY) -> List[QuestionResult]:
    """
    Compare submitted answers (keyed "q1".."q20") against the key.

    Matching is case-sensitive. Unanswered questions are reported as
    "No answer" and count as incorrect.
    """
    results = []
    for number in range(1, TOTAL_QUESTIONS + 1):
        submitted = answers.get(f"q{number}", NO_ANSWER)
        expected = answer_key.get(number, UNKNOWN_KEY)
        results.append(QuestionResult(
            number=number,
            submitted=submitted,
            expected=expected,
            is_correct=number in answer_key and submitted == expected,
        ))
    return results
