"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

API_MODES = ("production", "development", "fallback")

# Most capable first, cheapest last.
DEFAULT_MODELS: tuple[str, ...] = (
    "claude-opus-4-1-20250805",
    "claude-sonnet-4-5-20250929",
    "claude-sonnet-4-20250514",
    "claude-haiku-4-5-20251001",
)


@dataclass(frozen=True)
class ProviderConfig:
    models: tuple[str, ...] = DEFAULT_MODELS
    mode: str = "fallback"
    api_key: str | None = None
    timeout: float = 30.0
    max_tokens: int = 1024
    temperature: float = 0.0

    def __post_init__(self) -> None:
        if self.mode not in API_MODES:
            raise ValueError(f"mode must be one of {', '.join(API_MODES)}, got {self.mode!r}")
        if not self.models:
            raise ValueError("models must list at least one model id")
        if self.timeout < 1:
            raise ValueError(f"timeout must be >= 1 second, got {self.timeout}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be between 0 and 1, got {self.temperature}")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class SpeechConfig:
    api_key: str | None = None
    timeout: float = 15.0
    endpoint: str = "https://texttospeech.googleapis.com/v1/text:synthesize"


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class AppConfig:
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _provider_section(raw: dict) -> dict:
    section = dict(raw.get("provider", {}))
    if "models" in section:
        section["models"] = tuple(section["models"] or ())

    api_key = _env("ANTHROPIC_API_KEY")
    if api_key:
        section["api_key"] = api_key
    mode = _env("CORRECTION_API_MODE")
    if mode:
        section["mode"] = mode.lower()
    models = _env("CORRECTION_MODELS")
    if models:
        section["models"] = tuple(m.strip() for m in models.split(",") if m.strip())
    return section


def _speech_section(raw: dict) -> dict:
    section = dict(raw.get("speech", {}))
    api_key = _env("GOOGLE_TTS_API_KEY")
    if api_key:
        section["api_key"] = api_key
    return section


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file and environment, falling back to defaults.

    Environment variables win over the file:
    ANTHROPIC_API_KEY, CORRECTION_API_MODE, CORRECTION_MODELS, GOOGLE_TTS_API_KEY.
    """
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        provider=ProviderConfig(**_provider_section(raw)),
        speech=SpeechConfig(**_speech_section(raw)),
        server=ServerConfig(**raw.get("server", {})),
    )
