"""Environment-backed settings for the Telegram notification sink."""

import math
import os
from typing import Callable, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_TELEGRAM_API_URL = "https://api.telegram.org"
DEFAULT_TELEGRAM_TIMEOUT = 5.0


class NotificationSettings(BaseModel):
    bot_token: Optional[str] = None
    chat_id: Optional[str] = None
    api_base_url: str = DEFAULT_TELEGRAM_API_URL
    timeout: float = DEFAULT_TELEGRAM_TIMEOUT

    @property
    def is_configured(self) -> bool:
        """Both credentials must be present for delivery to be attempted"""
        return bool(self.bot_token) and bool(self.chat_id)


SettingsProvider = Callable[[], NotificationSettings]


def _read_timeout() -> float:
    raw = os.getenv("TELEGRAM_TIMEOUT")
    if not raw:
        return DEFAULT_TELEGRAM_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        return DEFAULT_TELEGRAM_TIMEOUT
    return timeout if math.isfinite(timeout) and timeout > 0 else DEFAULT_TELEGRAM_TIMEOUT


def env_settings() -> NotificationSettings:
    """
    Read notification settings from the process environment.

    Called once per request so that rotated secrets are picked up without a
    cold start. Blank values are treated the same as missing ones.
    """
    return NotificationSettings(
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", "").strip() or None,
        chat_id=os.getenv("TELEGRAM_CHAT_ID", "").strip() or None,
        api_base_url=os.getenv("TELEGRAM_API_URL", "").strip().rstrip("/") or DEFAULT_TELEGRAM_API_URL,
        timeout=_read_timeout(),
    )
