from datetime import datetime, timedelta, timezone

import pytest

from core.grading import (
    ANSWER_KEY,
    Band,
    NO_ANSWER,
    format_submitted_at,
    format_time,
    grade_answers,
    performance_band,
)
from core.models import SubmissionPayload


@pytest.mark.parametrize("seconds, expected", [
    (125, "2:05"),
    (59, "0:59"),
    (0, "0:00"),
    (600, "10:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


@pytest.mark.parametrize("percentage, band", [
    (100, Band.EXCELLENT),
    (75.0, Band.EXCELLENT),
    (74.9, Band.AVERAGE),
    (50.0, Band.AVERAGE),
    (49.99, Band.NEEDS_IMPROVEMENT),
    (0, Band.NEEDS_IMPROVEMENT),
    (None, Band.NEEDS_IMPROVEMENT),
])
def test_performance_band(percentage, band):
    assert performance_band(percentage) is band


def test_grade_answers_marks_correct_and_incorrect():
    results = grade_answers({"q1": "b", "q2": "x"}, {1: "b", 2: "d"})

    assert results[0].is_correct is True
    assert results[1].is_correct is False
    assert results[1].expected == "d"


def test_grade_answers_defaults_for_missing_entries():
    results = grade_answers({"q1": "b"}, {1: "b", 2: "d"})

    assert len(results) == 20
    assert results[1].submitted == NO_ANSWER
    assert results[1].is_correct is False
    # no key entry beyond question 2
    assert results[5].expected == "?"
    assert results[5].is_correct is False


def test_grade_answers_is_case_sensitive():
    results = grade_answers({"q1": "B"}, {1: "b"})
    assert results[0].is_correct is False


def test_answer_key_is_read_only():
    assert len(ANSWER_KEY) == 20
    with pytest.raises(TypeError):
        ANSWER_KEY[1] = "z"


def test_payload_accepts_field_name_variants():
    legacy = SubmissionPayload.model_validate({"name": "Ali", "group": "B2", "time": 30})
    current = SubmissionPayload.model_validate({"studentName": "Ali", "className": "B2", "timeSpent": 30})

    assert legacy.model_dump(exclude={"timestamp"}) == current.model_dump(exclude={"timestamp"})


def test_payload_defaults():
    payload = SubmissionPayload.model_validate({"score": "12"})

    assert payload.name == "Unknown"
    assert payload.group == "Unknown"
    assert payload.score == 12
    assert payload.percentage is None
    assert payload.time == 0
    assert payload.leaves == 0
    assert payload.answers is None
    assert payload.timestamp.tzinfo is not None


def test_payload_tolerates_garbage_values():
    payload = SubmissionPayload.model_validate({
        "name": "   ",
        "score": "lots",
        "percentage": "n/a",
        "time": -5,
        "leaves": [1, 2],
        "answers": "q1=b",
    })

    assert payload.name == "Unknown"
    assert payload.score == 0
    assert payload.percentage is None
    assert payload.time == 0
    assert payload.leaves == 0
    assert payload.answers is None


def test_timestamp_epoch_millis_and_iso():
    from_millis = SubmissionPayload.model_validate({"timestamp": 1736937000000})
    from_iso = SubmissionPayload.model_validate({"timestamp": "2025-01-15T10:30:00Z"})

    assert format_submitted_at(from_millis.timestamp) == "15.01.2025 10:30:00 UTC"
    assert format_submitted_at(from_iso.timestamp) == "15.01.2025 10:30:00 UTC"


@pytest.mark.parametrize("timestamp", [
    "0001-01-01T00:00:00+05:00",
    "9999-12-31T23:59:59-05:00",
])
def test_timestamp_outside_utc_range_falls_back_to_now(timestamp):
    before = datetime.now(timezone.utc)
    payload = SubmissionPayload.model_validate({"timestamp": timestamp})
    after = datetime.now(timezone.utc)

    assert before <= payload.timestamp <= after
    assert format_submitted_at(payload.timestamp).endswith("UTC")


def test_timestamp_with_offset_is_normalised_to_utc():
    payload = SubmissionPayload.model_validate({"timestamp": "2025-01-15T15:30:00+05:00"})

    assert payload.timestamp.utcoffset() == timedelta(0)
    assert format_submitted_at(payload.timestamp) == "15.01.2025 10:30:00 UTC"
