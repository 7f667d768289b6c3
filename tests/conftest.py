"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
from loguru import logger

# Add src to path
src_root = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_root))

from shared.config import Settings  # noqa: E402


def message_body(
    text: str,
    input_tokens: Optional[int] = 100,
    output_tokens: Optional[int] = 50,
) -> dict[str, Any]:
    """Messages API success body."""
    body: dict[str, Any] = {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
    }
    usage = {}
    if input_tokens is not None:
        usage["input_tokens"] = input_tokens
    if output_tokens is not None:
        usage["output_tokens"] = output_tokens
    if usage:
        body["usage"] = usage
    return body


def error_body(message: str) -> dict[str, Any]:
    """Messages API error body."""
    return {"type": "error", "error": {"type": "api_error", "message": message}}


class FakeProvider:
    """MockTransport handler replaying queued responses and counting calls."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self._responses: list[Any] = []

    def reply(self, json: Any = None, status_code: int = 200, content: Optional[bytes] = None):
        if content is not None:
            self._responses.append(httpx.Response(status_code, content=content))
        else:
            self._responses.append(httpx.Response(status_code, json=json))
        return self

    def fail(self, exc: Exception):
        self._responses.append(exc)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def models_called(self) -> list[str]:
        import json

        return [json.loads(call.content)["model"] for call in self.calls]


@pytest.fixture
def settings() -> Settings:
    """Settings with a test API key, isolated from .env."""
    return Settings(
        _env_file=None,
        anthropic_api_key="test-key",
        anthropic_base_url="https://api.test.local",
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def claude_client(settings, provider):
    """ClaudeClient whose HTTP calls go to the fake provider."""
    from completion.client import ClaudeClient

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider))
    return ClaudeClient(settings=settings, http_client=http_client)


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
