"""Speech synthesis request handling for reading corrections aloud."""

from __future__ import annotations

import logging

from voice_tutor.clients.tts_client import TTSClient
from voice_tutor.config import SpeechConfig
from voice_tutor.correction.handler import NO_TEXT_ERROR, HandlerResult

logger = logging.getLogger(__name__)

SPEECH_ERROR = "Failed to generate speech"

# One second of silent MP3, served when no Text-to-Speech credential is set.
MOCK_AUDIO_BASE64 = (
    "SUQzBAAAAAAAI1RTU0UAAAAPAAADTGF2ZjU4Ljc2LjEwMAAAAAAAAAAAAAAA/+M4wAAAAAAAAAAAAEluZm8AAAAPAAAAAwAAAbMAYGBgYGBgYGBgYGBgYGBgYGBgYGBgYGBggICAgICAgICAgICAgICAgICAgICAgICAgKCgoKCgoKCgoKCgoKCgoKCgoKCgoKCgoKDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwP/////////////////////////////////8AAAAKTEFNRTMuMTAwBEoAAAAAAAAAABRJdE9mAQAAABgAEAN2AAAJAAABswQH/+MYxAAAAANIAAAAAExBTUUzLjEwMABBP/AAAAALPAAAAC5AcJAAAD////+AAAAAAoM4AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA/+MYxCoAAAFGAAAAAAAAAIAo8j///3//ygAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
)


class SpeechRequestHandler:
    def __init__(self, client: TTSClient | None = None):
        self.client = client

    async def handle(self, text, language=None) -> HandlerResult:
        if not isinstance(text, str) or not text.strip():
            return HandlerResult(400, {"error": NO_TEXT_ERROR})

        if self.client is None:
            logger.info("Using mock audio data, Text-to-Speech client is not available")
            return HandlerResult(200, {"audioContent": MOCK_AUDIO_BASE64})

        try:
            audio = await self.client.synthesize(text, (language or "").strip() or "en-US")
            if not audio:
                raise RuntimeError("Failed to generate audio content")
        except Exception:
            logger.error("Error generating speech", exc_info=True)
            return HandlerResult(500, {"error": SPEECH_ERROR})
        return HandlerResult(200, {"audioContent": audio})


def build_speech_handler(config: SpeechConfig) -> SpeechRequestHandler:
    if not config.api_key:
        logger.warning("GOOGLE_TTS_API_KEY is not set. Using mock audio.")
        return SpeechRequestHandler()
    return SpeechRequestHandler(
        TTSClient(api_key=config.api_key, endpoint=config.endpoint, timeout=config.timeout)
    )
