"""Pydantic models for correction results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CorrectionSegment(BaseModel):
    """One unit of correction feedback covering a span of the utterance."""

    text: str
    is_correct: bool = Field(alias="isCorrect")
    correction: str | None = None  # only when is_correct is False
    explanation: str | None = None

    model_config = {"populate_by_name": True}

    def to_json(self) -> dict:
        """Serialize with camelCase keys, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CorrectionRequest(BaseModel):
    text: str | None = None
    language: str | None = None
