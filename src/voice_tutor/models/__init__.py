"""Data models for the correction service."""

from voice_tutor.models.correction import CorrectionRequest, CorrectionSegment

__all__ = [
    "CorrectionRequest",
    "CorrectionSegment",
]
