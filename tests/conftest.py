"""Shared fixtures for the WildWaste test suite."""

import asyncio
import json
from unittest.mock import patch

import pytest

from wildwaste.api.client import ApiResponse


def respond(body, status_code: int = 200) -> ApiResponse:
    """ApiResponse with a JSON body (or raw text when body is a str)."""
    text = body if isinstance(body, str) else json.dumps(body)
    return ApiResponse(status_code=status_code, text=text)


def wire_report(report_id: int, **overrides) -> dict:
    """A report in its wire shape."""
    data = {
        "id": report_id,
        "user_id": 7,
        "latitude": -7.2575 + report_id / 1000,
        "longitude": 112.7521,
        "trash_type": f"Plastic {report_id}",
        "quantity": "1 bag",
        "image_base64": None,
        "notes": None,
        "reported_at": "2025-03-05T10:15:00",
        "username": "budi",
    }
    data.update(overrides)
    return data


def reports_body(*report_ids: int) -> dict:
    return {"status": "success", "data": [wire_report(i) for i in report_ids]}


class FakeApi:
    """In-memory transport.

    Each operation pops its next scripted outcome: an ApiResponse to return,
    an exception to raise, or an asyncio.Event-gated pair (event, outcome)
    that is held until the test sets the event.
    """

    def __init__(self):
        self.outcomes: dict[str, list] = {
            "login": [], "register": [], "list_reports": [],
            "submit_report": [], "delete_report": [],
        }
        self.calls: list[tuple] = []

    def script(self, operation: str, *outcomes) -> "FakeApi":
        self.outcomes[operation].extend(outcomes)
        return self

    async def _next(self, operation: str, *args):
        self.calls.append((operation, *args))
        outcome = self.outcomes[operation].pop(0)
        if isinstance(outcome, tuple):
            gate, outcome = outcome
            await gate.wait()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def login(self, username, password):
        return await self._next("login", username, password)

    async def register(self, username, password):
        return await self._next("register", username, password)

    async def list_reports(self, scope):
        return await self._next("list_reports", scope)

    async def submit_report(self, draft):
        return await self._next("submit_report", draft)

    async def delete_report(self, report_id):
        return await self._next("delete_report", report_id)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "base_url": "http://testserver/",
        "connect_timeout": 1,
        "read_timeout": 1,
        "connect_retries": 2,
        "retry_wait_max": 0,
        "fence_stale_fetches": False,
        "map": {"default_center": [-7.2575, 112.7521], "default_zoom": 15},
    }
    with patch("wildwaste.config._config", test_config):
        yield test_config
