"""Telegram Bot API delivery."""

import logging
from typing import Optional

import httpx

from core.config import NotificationSettings
from core.models import DeliveryResult

logger = logging.getLogger(__name__)

PARSE_MODE = "Markdown"


class TelegramNotifier:
    """
    Sends one message per call to the Bot API `sendMessage` method.

    Failures are returned as a DeliveryResult rather than raised: a bad
    status, an `"ok": false` body, a timeout and transport errors all
    come back as `success=False` with a reason for the logs.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    def send_url(self, settings: NotificationSettings) -> str:
        return f"{settings.api_base_url}/bot{settings.bot_token}/sendMessage"

    async def send(self, settings: NotificationSettings, text: str) -> DeliveryResult:
        payload = {
            "chat_id": settings.chat_id,
            "text": text,
            "parse_mode": PARSE_MODE,
        }

        try:
            async with httpx.AsyncClient(timeout=settings.timeout, transport=self.transport) as client:
                resp = await client.post(self.send_url(settings), json=payload)
        except httpx.TimeoutException:
            logger.error("Telegram request timed out after %.1fs", settings.timeout)
            return DeliveryResult(success=False, reason="timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Failed to send to Telegram: %s", e)
            return DeliveryResult(success=False, reason=str(e) or type(e).__name__)

        try:
            body = resp.json()
        except ValueError:
            body = {"description": resp.text}
        if not isinstance(body, dict):
            body = {}

        if resp.is_success and body.get("ok", True):
            logger.info("Telegram message sent successfully")
            return DeliveryResult(success=True, status_code=resp.status_code)

        reason = body.get("description") or f"HTTP {resp.status_code}"
        logger.error("Telegram API error (%s): %s", resp.status_code, reason)
        return DeliveryResult(success=False, reason=reason, status_code=resp.status_code)
