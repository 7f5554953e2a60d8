"""Utility to decode JSON from LLM responses."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict | list:
    """Decode JSON from an LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Find first '[' to last ']' and parse (JSON array)
    """
    text = text.strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    result = _extract_brackets(stripped)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()


def _extract_brackets(text: str) -> list | None:
    """Try to extract a JSON array from first '[' to last ']'."""
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
