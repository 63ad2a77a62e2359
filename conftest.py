import json
from typing import List

import httpx
import pytest

from core.config import NotificationSettings
from core.handler import SubmissionHandler
from core.notifier import TelegramNotifier


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request sent through it"""

    def __init__(self, status_code=200, body=None, error=None):
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.body = body if body is not None else {"ok": True, "result": {"message_id": 1}}
        self.error = error
        super().__init__(self._respond)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    @property
    def sent_payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def configured_settings():
    return NotificationSettings(bot_token="123:abc", chat_id="-1001")


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def make_handler(configured_settings):
    def _make(transport, settings=None):
        settings = settings or configured_settings
        return SubmissionHandler(
            settings_provider=lambda: settings,
            notifier=TelegramNotifier(transport=transport),
        )
    return _make


@pytest.fixture
def sample_submission():
    return {
        "name": "Aziza Karimova",
        "group": "IELTS-7",
        "score": 16,
        "percentage": 80,
        "time": 125,
        "leaves": 1,
        "timestamp": 1736937000000,
    }
