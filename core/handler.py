"""
Submission endpoint logic, independent of the hosting runtime.

A request goes through: method gate -> body parse -> credential check ->
message composition -> Telegram delivery -> response. Nothing is kept
between requests.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from fastapi import HTTPException
from pydantic import BaseModel, Field, ValidationError

from core.config import NotificationSettings, SettingsProvider, env_settings
from core.grading import ANSWER_KEY, grade_answers
from core.message import compose_message
from core.models import DeliveryResult, DeliveryStatus, SubmissionPayload, SubmissionResponse
from core.notifier import TelegramNotifier

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

MSG_SUBMITTED = "Test submitted successfully"
MSG_NOT_CONFIGURED = "Test recorded (Telegram not configured)"


class Notifier(Protocol):
    async def send(self, settings: NotificationSettings, text: str) -> DeliveryResult:
        ...


class SubmissionRequest(BaseModel):
    method: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None


class HandlerResponse(BaseModel):
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = Field(default_factory=lambda: dict(CORS_HEADERS))


def parse_body(body: Any) -> Dict[str, Any]:
    """
    Decode the request body into a JSON object.

    Raises HTTPException(400) for an empty body, undecodable JSON, or a
    JSON value that is not an object.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail="Invalid JSON")

    if isinstance(body, str):
        if not body.strip():
            raise HTTPException(status_code=400, detail="Missing submission data")
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid JSON")

    if body is None or body == {}:
        raise HTTPException(status_code=400, detail="Missing submission data")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid submission data")
    return body


class SubmissionHandler:
    def __init__(
        self,
        settings_provider: SettingsProvider = env_settings,
        notifier: Optional[Notifier] = None,
        answer_key: Mapping[int, str] = ANSWER_KEY,
    ):
        self.settings_provider = settings_provider
        self.notifier = notifier or TelegramNotifier()
        self.answer_key = answer_key

    async def handle(self, request: SubmissionRequest) -> HandlerResponse:
        method = request.method.upper()

        if method == "OPTIONS":
            return HandlerResponse(status_code=200)

        if method != "POST":
            return HandlerResponse(status_code=405, body={"error": "Method not allowed"})

        logger.info("Received submission request")

        try:
            payload = SubmissionPayload.model_validate(parse_body(request.body))
        except HTTPException as e:
            logger.warning("Rejected submission: %s", e.detail)
            return HandlerResponse(status_code=e.status_code, body={"error": e.detail})
        except ValidationError as e:
            logger.warning("Rejected submission: %s", e)
            return HandlerResponse(status_code=400, body={"error": "Invalid submission data"})

        try:
            result = await self.process(payload)
        except Exception as e:
            logger.exception("Server error while processing submission")
            return HandlerResponse(
                status_code=500,
                body={"error": "Internal server error", "message": str(e)},
            )

        return HandlerResponse(status_code=200, body=result.model_dump(mode="json", exclude_none=True))

    async def process(self, payload: SubmissionPayload) -> SubmissionResponse:
        """Compose the report and attempt delivery; the submission is accepted either way"""
        logger.info("Student: %s | Group: %s | Score: %s", payload.name, payload.group, payload.score)

        settings = self.settings_provider()
        text = compose_message(payload, self.answer_key)

        correct_answers = None
        if payload.answers is not None:
            correct_answers = sum(r.is_correct for r in grade_answers(payload.answers, self.answer_key))

        if not settings.is_configured:
            logger.warning("Telegram credentials not set in environment")
            return SubmissionResponse(
                message=MSG_NOT_CONFIGURED,
                score=payload.score,
                percentage=payload.percentage,
                telegram=DeliveryStatus.NOT_CONFIGURED,
                correct_answers=correct_answers,
            )

        delivery = await self.notifier.send(settings, text)
        if not delivery.success:
            logger.warning("Submission accepted but notification failed: %s", delivery.reason)

        return SubmissionResponse(
            message=MSG_SUBMITTED,
            score=payload.score,
            percentage=payload.percentage,
            telegram=DeliveryStatus.SENT if delivery.success else DeliveryStatus.FAILED,
            correct_answers=correct_answers,
        )
