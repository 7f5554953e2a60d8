"""Google Cloud Text-to-Speech REST wrapper."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://texttospeech.googleapis.com/v1/text:synthesize"

LANGUAGE_CODES = ("en-US", "en-GB", "fr-FR", "de-DE", "es-ES")

VOICE_NAMES: dict[str, str] = {
    "en-US": "en-US-Neural2-C",
    "en-GB": "en-GB-Neural2-B",
    "fr-FR": "fr-FR-Neural2-A",
    "de-DE": "de-DE-Neural2-B",
    "es-ES": "es-ES-Neural2-C",
}


def language_code(language: str) -> str:
    return language if language in LANGUAGE_CODES else "en-US"


def voice_name(language: str) -> str:
    return VOICE_NAMES.get(language, "en-US-Neural2-C")


class TTSClient:
    """Async Text-to-Speech client returning base64-encoded MP3 audio."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Text-to-Speech API key required. Set GOOGLE_TTS_API_KEY.")
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    def _build_payload(self, text: str, language: str) -> dict:
        return {
            "input": {"text": text},
            "voice": {
                "languageCode": language_code(language),
                "name": voice_name(language),
                "ssmlGender": "NEUTRAL",
            },
            "audioConfig": {
                "audioEncoding": "MP3",
                "pitch": 0,
                "speakingRate": 1,
            },
        }

    async def synthesize(self, text: str, language: str = "en-US") -> str:
        """Return base64 MP3 audio for ``text``; empty string if none was produced."""
        logger.debug("TTS call: language=%s, %d chars", language, len(text))
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self._build_payload(text, language),
            )
        response.raise_for_status()
        return response.json().get("audioContent") or ""
