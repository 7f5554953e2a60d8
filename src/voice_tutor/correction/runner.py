"""Ordered model fallback against the correction provider."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace

from voice_tutor.clients.llm_client import LLMClient, LLMResponse, ProviderRequest
from voice_tutor.config import ProviderConfig
from voice_tutor.correction.errors import (
    ErrorCategory,
    ProviderError,
    classify,
    normalize_error,
)

logger = logging.getLogger(__name__)


@dataclass
class Success:
    payload: LLMResponse
    attempts: list[str] = field(default_factory=list)


@dataclass
class RetryNextModel:
    error: ProviderError
    attempts: list[str] = field(default_factory=list)


@dataclass
class AbortToFallback:
    """Quota or billing failure in fallback mode; serve offline corrections."""

    error: ProviderError
    attempts: list[str] = field(default_factory=list)


@dataclass
class Fatal:
    error: ProviderError
    attempts: list[str] = field(default_factory=list)


AttemptOutcome = Success | RetryNextModel | AbortToFallback | Fatal


class ModelFallbackRunner:
    """Try each configured model in order until one answers.

    Attempts are sequential and the order never changes within a request.
    """

    def __init__(self, client: LLMClient, config: ProviderConfig):
        self.client = client
        self.config = config

    async def _attempt(self, request: ProviderRequest) -> AttemptOutcome:
        try:
            response = await asyncio.wait_for(
                self.client.generate(request), timeout=self.config.timeout
            )
        except Exception as exc:
            error = normalize_error(exc)
        else:
            return Success(payload=response)

        if error.is_timeout:
            logger.warning(
                "Model %s timed out after %.1fs, trying next model",
                request.model,
                self.config.timeout,
            )
            return RetryNextModel(error)

        category = classify(error)
        if category is ErrorCategory.QUOTA_OR_BILLING:
            logger.warning(
                "Quota or billing issue on model %s: %s", request.model, error.message
            )
            if self.config.mode == "fallback":
                return AbortToFallback(error)
            return Fatal(error)
        if category is ErrorCategory.MODEL_UNAVAILABLE:
            logger.warning("Model %s not available, trying next model", request.model)
            return RetryNextModel(error)
        logger.error("Model %s failed: %s", request.model, error.message)
        return Fatal(error)

    async def run(self, request: ProviderRequest) -> AttemptOutcome:
        """Return ``Success``, ``AbortToFallback`` or ``Fatal``; never ``RetryNextModel``."""
        attempts: list[str] = []
        last_error = ProviderError(message="No models configured")

        for model in self.config.models:
            logger.info("Trying model: %s", model)
            attempts.append(model)
            outcome = await self._attempt(replace(request, model=model))
            outcome.attempts = list(attempts)
            if isinstance(outcome, RetryNextModel):
                last_error = outcome.error
                continue
            return outcome

        return Fatal(last_error, attempts=attempts)
