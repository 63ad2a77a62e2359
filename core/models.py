"""Request/response models for the submission endpoint."""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

UNKNOWN = "Unknown"

# ==================== HELPERS ====================

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_non_negative_int(value: Any) -> int:
    number = _to_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    # offsets near datetime.min/max cannot be shifted to UTC
    try:
        return moment.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return utcnow()


def _parse_timestamp(value: Any) -> datetime:
    """Accept epoch milliseconds or an ISO-8601 string, falling back to now"""
    if isinstance(value, datetime):
        return _as_utc(value)

    millis = _to_number(value)
    if millis is not None:
        try:
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return utcnow()

    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return utcnow()
        return _as_utc(parsed)

    return utcnow()

# ==================== ENUMS ====================

class DeliveryStatus(str, Enum):
    SENT = "sent"
    NOT_CONFIGURED = "not configured"
    FAILED = "failed"

# ==================== INBOUND ====================

class SubmissionPayload(BaseModel):
    """
    A completed test attempt as reported by the quiz page.

    Older and newer versions of the page disagree on field names
    (`name` vs `studentName`, `group` vs `className`, ...), so every
    variant is accepted here and nothing downstream has to care.
    Values that cannot be interpreted fall back to their defaults.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(UNKNOWN, validation_alias=AliasChoices("name", "studentName", "student_name", "student"))
    group: str = Field(UNKNOWN, validation_alias=AliasChoices("group", "className", "class_name", "groupName", "class"))
    score: int = 0
    percentage: Optional[float] = None
    time: int = Field(0, validation_alias=AliasChoices("time", "elapsed", "timeSpent", "time_seconds"))
    leaves: int = Field(0, validation_alias=AliasChoices("leaves", "pageLeaves", "page_leaves", "tabSwitches"))
    timestamp: datetime = Field(default_factory=utcnow)
    answers: Optional[Dict[str, str]] = None

    @field_validator("name", "group", mode="before")
    @classmethod
    def default_unknown(cls, v):
        if v is None:
            return UNKNOWN
        return str(v).strip() or UNKNOWN

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v):
        number = _to_number(v)
        return int(number) if number is not None else 0

    @field_validator("percentage", mode="before")
    @classmethod
    def coerce_percentage(cls, v):
        return _to_number(v)

    @field_validator("time", "leaves", mode="before")
    @classmethod
    def coerce_counter(cls, v):
        return _to_non_negative_int(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, v):
        return _parse_timestamp(v)

    @field_validator("answers", mode="before")
    @classmethod
    def coerce_answers(cls, v):
        if not isinstance(v, dict):
            return None
        return {str(key): str(answer) for key, answer in v.items() if answer is not None}

# ==================== DERIVED ====================

class QuestionResult(BaseModel):
    number: int
    submitted: str
    expected: str
    is_correct: bool


class DeliveryResult(BaseModel):
    success: bool
    reason: Optional[str] = None
    status_code: Optional[int] = None

# ==================== OUTBOUND ====================

class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    score: int
    percentage: Optional[float] = None
    telegram: DeliveryStatus
    correct_answers: Optional[int] = None
