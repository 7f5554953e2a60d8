"""Correction request orchestration.

Turns an utterance into correction segments. Every path that the provider
can break (no credential, quota, unusable output) degrades to the offline
mock engine with a 200; only unclassified provider failures and internal
errors produce a 500.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from voice_tutor.clients.llm_client import LLMClient, ProviderRequest
from voice_tutor.config import ProviderConfig
from voice_tutor.correction.errors import is_quota_or_billing
from voice_tutor.correction.mock_engine import MockCorrectionEngine
from voice_tutor.correction.parser import parse_segments
from voice_tutor.correction.prompts import CORRECTION_SYSTEM, DEFAULT_LANGUAGE, build_prompt
from voice_tutor.correction.runner import AbortToFallback, Fatal, ModelFallbackRunner, Success
from voice_tutor.models.correction import CorrectionSegment

logger = logging.getLogger(__name__)

NO_TEXT_ERROR = "No text provided"
NO_ERRORS_EXPLANATION = "No grammatical errors detected."
INTERNAL_ERROR = "Failed to correct text"


@dataclass
class HandlerResult:
    status: int
    body: list | dict


class CorrectionRequestHandler:
    """Validate, call the provider through the fallback runner, and degrade safely."""

    def __init__(
        self,
        config: ProviderConfig,
        client: LLMClient | None = None,
        mock_engine: MockCorrectionEngine | None = None,
    ):
        self.config = config
        self.client = client
        self.mock_engine = mock_engine or MockCorrectionEngine()
        self.runner = ModelFallbackRunner(client, config) if client is not None else None

    @property
    def uses_provider(self) -> bool:
        return self.runner is not None

    def _mock(self, text: str) -> HandlerResult:
        segments = self.mock_engine.generate(text)
        return HandlerResult(200, [s.to_json() for s in segments])

    async def handle(self, text, language=None) -> HandlerResult:
        try:
            return await self._handle(text, language)
        except Exception:
            logger.exception("Error correcting speech")
            return HandlerResult(500, {"error": INTERNAL_ERROR})

    async def _handle(self, text, language) -> HandlerResult:
        if not isinstance(text, str) or not text.strip():
            return HandlerResult(400, {"error": NO_TEXT_ERROR})

        if self.runner is None:
            logger.info("Using mock correction data, no provider credential configured")
            return self._mock(text)

        request = ProviderRequest(
            prompt=build_prompt(text, (language or "").strip() or DEFAULT_LANGUAGE),
            system=CORRECTION_SYSTEM,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        outcome = await self.runner.run(request)

        if isinstance(outcome, Success):
            logger.info(
                "Correction from %s after %d attempt(s)",
                outcome.payload.model,
                len(outcome.attempts),
            )
            try:
                segments = parse_segments(outcome.payload.text)
            except Exception:
                logger.error("Error parsing provider response", exc_info=True)
                return self._mock(text)
            if not segments:
                logger.info("Provider returned no usable segments, treating text as correct")
                default = CorrectionSegment(
                    text=text, is_correct=True, explanation=NO_ERRORS_EXPLANATION
                )
                return HandlerResult(200, [default.to_json()])
            return HandlerResult(200, segments)

        if isinstance(outcome, AbortToFallback) or is_quota_or_billing(outcome.error):
            logger.warning(
                "Provider quota or billing limit hit (%s), using mock correction data",
                outcome.error.message,
            )
            return self._mock(text)

        if isinstance(outcome, Fatal):
            logger.error(
                "Correction provider failed after %d attempt(s): %s",
                len(outcome.attempts),
                outcome.error.message,
            )
            message = f"Correction provider error: {outcome.error.message}"
            return HandlerResult(500, {"error": message})

        raise RuntimeError(f"Unexpected runner outcome: {outcome!r}")


def build_correction_handler(config: ProviderConfig) -> CorrectionRequestHandler:
    """Create a handler, with a provider client only when a credential is configured."""
    if not config.is_configured:
        logger.warning("ANTHROPIC_API_KEY is not set. Using mock corrections.")
        return CorrectionRequestHandler(config)
    client = LLMClient(api_key=config.api_key, timeout=config.timeout)
    return CorrectionRequestHandler(config, client)
