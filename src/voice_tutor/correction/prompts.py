"""Prompt templates for the correction provider."""

from __future__ import annotations

DEFAULT_LANGUAGE = "en-US"

LANGUAGE_NAMES: dict[str, str] = {
    "en-US": "American English",
    "en-GB": "British English",
    "fr-FR": "French",
    "de-DE": "German",
    "es-ES": "Spanish",
}

CORRECTION_SYSTEM = """\
You are an expert language teacher. Your task is to identify grammatical errors,
vocabulary issues, and unnatural expressions in the text provided.
Provide corrections with explanations.

Respond with a JSON array only, in this format:
[
  {
    "text": "original text segment with error",
    "isCorrect": false,
    "correction": "corrected text segment",
    "explanation": "brief explanation of the error"
  },
  {
    "text": "original text segment without error",
    "isCorrect": true
  }
]

If there are no errors, return an array with a single item where isCorrect is true."""


def language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, "English")


def build_prompt(text: str, language: str = DEFAULT_LANGUAGE) -> str:
    return f"""The following is spoken text in {language_name(language)}.
Identify any grammatical errors, vocabulary misuse, or unnatural expressions.
Provide corrections and brief explanations for each issue.

Text: "{text}"
"""
