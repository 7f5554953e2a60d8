"""Safe decoding of the provider's correction payload."""

from __future__ import annotations

import logging

from voice_tutor.utils.json_parser import extract_json

logger = logging.getLogger(__name__)


def parse_segments(raw_text: str) -> list:
    """Decode the provider payload into a list of segment dicts. Never raises.

    An empty list means the output was unusable, not that the utterance is
    correct. Items are returned as decoded; their shape is not re-validated.
    """
    try:
        data = extract_json(raw_text)
    except (ValueError, TypeError, AttributeError):
        logger.warning("Could not decode provider payload: %.200r", raw_text)
        return []

    if not isinstance(data, list):
        logger.warning("Provider returned non-array payload: %.200r", data)
        return []

    return data
