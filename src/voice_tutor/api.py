"""FastAPI app exposing the correction and speech endpoints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from voice_tutor.config import AppConfig, load_config
from voice_tutor.correction.handler import (
    INTERNAL_ERROR,
    CorrectionRequestHandler,
    HandlerResult,
    build_correction_handler,
)
from voice_tutor.models.correction import CorrectionRequest
from voice_tutor.speech import SPEECH_ERROR, SpeechRequestHandler, build_speech_handler

logger = logging.getLogger(__name__)


async def _read_body(request: Request) -> CorrectionRequest:
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object body, got {type(data).__name__}")
    return CorrectionRequest.model_validate(data)


def _respond(result: HandlerResult) -> JSONResponse:
    return JSONResponse(result.body, status_code=result.status)


def create_app(
    config: AppConfig | None = None,
    *,
    correction_handler: CorrectionRequestHandler | None = None,
    speech_handler: SpeechRequestHandler | None = None,
) -> FastAPI:
    """Create the app; handlers are built from config unless injected."""
    config = config or load_config()

    app = FastAPI(title="Voice Tutor", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.correction = correction_handler or build_correction_handler(config.provider)
    app.state.speech = speech_handler or build_speech_handler(config.speech)

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "mode": config.provider.mode,
            "provider": "anthropic" if app.state.correction.uses_provider else "mock",
        }

    @app.post("/api/correct")
    async def correct(request: Request) -> JSONResponse:
        try:
            body = await _read_body(request)
        except (ValueError, ValidationError):
            logger.error("Malformed correction request body", exc_info=True)
            return JSONResponse({"error": INTERNAL_ERROR}, status_code=500)
        return _respond(await app.state.correction.handle(body.text, body.language))

    @app.post("/api/speak")
    async def speak(request: Request) -> JSONResponse:
        try:
            body = await _read_body(request)
        except (ValueError, ValidationError):
            logger.error("Malformed speech request body", exc_info=True)
            return JSONResponse({"error": SPEECH_ERROR}, status_code=500)
        return _respond(await app.state.speech.handle(body.text, body.language))

    return app
