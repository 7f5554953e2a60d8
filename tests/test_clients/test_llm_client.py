"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from conftest import message_ok, rate_limited, sdk_client
from voice_tutor.clients.llm_client import LLMClient, LLMResponse, ProviderRequest


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(type="text", text=text)]
    return message


def _request(**overrides) -> ProviderRequest:
    fields = {"prompt": "correct this", "system": "be a teacher", "model": "claude-haiku-4-5-20251001"}
    fields.update(overrides)
    return ProviderRequest(**fields)


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with(max_retries=0)

    def test_init_with_both_params_passes_both(self):
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(max_retries=0, api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        """generate() wraps API response fields into an LLMResponse dataclass."""
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                return_value=_make_api_message('[{"text": "hi", "isCorrect": true}]', 120, 30)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            result = await llm.generate(_request())

        assert isinstance(result, LLMResponse)
        assert result.text == '[{"text": "hi", "isCorrect": true}]'
        assert result.model == "claude-haiku-4-5-20251001"
        assert result.input_tokens == 120
        assert result.output_tokens == 30

    async def test_generate_sends_request_fields(self):
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("[]"))
            mock_cls.return_value = mock_client

            await LLMClient().generate(_request(max_tokens=256, temperature=0.2))

        mock_client.messages.create.assert_awaited_once_with(
            model="claude-haiku-4-5-20251001",
            max_tokens=256,
            temperature=0.2,
            messages=[{"role": "user", "content": "correct this"}],
            system="be a teacher",
        )

    async def test_generate_omits_empty_system(self):
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("[]"))
            mock_cls.return_value = mock_client

            await LLMClient().generate(_request(system=""))

        assert "system" not in mock_client.messages.create.call_args.kwargs

    async def test_generate_requires_model(self):
        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
        with pytest.raises(ValueError, match="model"):
            await llm.generate(_request(model=""))

    async def test_status_errors_are_not_retried(self):
        """HTTP status errors surface after a single call so the runner can classify them."""

        class StatusError(Exception):
            status_code = 404

        with patch("voice_tutor.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(side_effect=StatusError("not found"))
            mock_cls.return_value = mock_client

            llm = LLMClient()
            with pytest.raises(StatusError):
                await llm.generate(_request())

        assert mock_client.messages.create.await_count == 1


class TestLLMClientOverHTTP:
    async def test_rate_limit_is_a_single_http_call(self):
        """The SDK does not retry status errors; they reach the caller after one request."""
        sent: list[dict] = []
        llm = sdk_client([rate_limited(), rate_limited(), rate_limited()], sent)

        with pytest.raises(anthropic.RateLimitError):
            await llm.generate(_request())

        assert len(sent) == 1

    async def test_server_error_is_a_single_http_call(self):
        sent: list[dict] = []
        body = {"type": "error", "error": {"type": "api_error", "message": "Internal error"}}
        llm = sdk_client([httpx.Response(500, json=body), httpx.Response(500, json=body)], sent)

        with pytest.raises(anthropic.InternalServerError):
            await llm.generate(_request())

        assert len(sent) == 1

    async def test_successful_message(self):
        sent: list[dict] = []
        llm = sdk_client([message_ok("[]", "claude-haiku-4-5-20251001")], sent)

        result = await llm.generate(_request())

        assert result.text == "[]"
        assert result.input_tokens == 12
        assert sent[0]["model"] == "claude-haiku-4-5-20251001"
        assert sent[0]["system"] == "be a teacher"
