"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from voice_tutor.clients.llm_client import LLMClient, LLMResponse
from voice_tutor.config import ProviderConfig

ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "CORRECTION_API_MODE",
    "CORRECTION_MODELS",
    "GOOGLE_TTS_API_KEY",
)

TEST_MODELS = ("model-large", "model-medium", "model-small")


class FakeAPIError(Exception):
    """Exception shaped like a provider SDK error."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None,
                 type: str | None = None, body: dict | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.type = type
        self.body = body


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(models=TEST_MODELS, mode="fallback", api_key="test-key", timeout=5)


@pytest.fixture
def sample_segments() -> list[dict]:
    return [
        {
            "text": "I go to the store yesterday",
            "isCorrect": False,
            "correction": "I went to the store yesterday",
            "explanation": "Use past tense (went) instead of present tense (go) for past actions.",
        }
    ]


def make_response(text: str, model: str = "model-large") -> LLMResponse:
    return LLMResponse(text=text, model=model, input_tokens=100, output_tokens=50)


@pytest.fixture
def mock_llm_client(sample_segments) -> LLMClient:
    """Create a mock LLM client that answers with ``sample_segments``."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(return_value=make_response(json.dumps(sample_segments)))
    return client


def sdk_client(responses: list[httpx.Response], sent: list[dict]) -> LLMClient:
    """LLMClient whose Anthropic SDK talks to a mocked HTTP transport."""
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return queue.pop(0)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LLMClient(api_key="test-key", http_client=http_client)


def rate_limited(retry_after_ms: str = "1") -> httpx.Response:
    return httpx.Response(
        429,
        headers={"retry-after-ms": retry_after_ms},
        json={"type": "error", "error": {"type": "rate_limit_error", "message": "Rate limit reached"}},
    )


def not_found(model: str) -> httpx.Response:
    return httpx.Response(
        404,
        json={"type": "error", "error": {"type": "not_found_error", "message": f"model: {model}"}},
    )


def message_ok(text: str, model: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "id": "msg_01",
            "type": "message",
            "role": "assistant",
            "model": model,
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
            "stop_sequence": None,
            "usage": {"input_tokens": 12, "output_tokens": 7},
        },
    )
