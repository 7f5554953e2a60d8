"""Claude API wrapper used as the grammar-correction provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderRequest:
    """One logical correction request; ``model`` is filled in per attempt."""

    prompt: str
    system: str = ""
    model: str = ""
    temperature: float = 0.0
    max_tokens: int = 1024


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    Connection failures are retried with exponential backoff. HTTP status
    errors (404, 429, ...) are raised straight away so the caller can decide
    whether another model is worth trying.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        # SDK retries are off; one model attempt is one HTTP call.
        kwargs: dict = {"max_retries": 0}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        if http_client is not None:
            kwargs["http_client"] = http_client
        self.client = anthropic.AsyncAnthropic(**kwargs)

    @retry(
        retry=retry_if_exception_type(anthropic.APIConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        reraise=True,
    )
    async def _call_api(self, request: ProviderRequest) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        kwargs: dict = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system:
            kwargs["system"] = request.system
        return await self.client.messages.create(**kwargs)

    async def generate(self, request: ProviderRequest) -> LLMResponse:
        """Send the request to Claude and return the text response with usage."""
        if not request.model:
            raise ValueError("ProviderRequest.model must be set before calling the provider")
        logger.debug("LLM call: model=%s", request.model)
        message = await self._call_api(request)
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        text = "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )
        return LLMResponse(
            text=text,
            model=request.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
