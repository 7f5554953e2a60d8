"""Rule-based offline corrector used when the provider is absent or unusable."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from voice_tutor.models.correction import CorrectionSegment

NO_ERRORS_EXPLANATION = "No grammatical errors detected (mock response)."

PAST_TENSE: dict[str, str] = {
    "go": "went",
    "come": "came",
    "run": "ran",
    "get": "got",
    "have": "had",
}

_PRESENT_VERB = re.compile(r"\b(go|come|run|get|have)\b", re.IGNORECASE)


@dataclass(frozen=True)
class MockRule:
    """A pattern, a rewrite applied to the first match, and why."""

    pattern: re.Pattern
    transform: Callable[[str], str]
    explanation: str

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def apply(self, text: str) -> str:
        return self.pattern.sub(lambda m: self.transform(m.group(0)), text, count=1)


def _to_past_tense(span: str) -> str:
    return _PRESENT_VERB.sub(lambda m: PAST_TENSE[m.group(0).lower()], span, count=1)


def _replace_first(pattern: str, replacement: str) -> Callable[[str], str]:
    regex = re.compile(pattern, re.IGNORECASE)
    return lambda span: regex.sub(replacement, span, count=1)


# Evaluated in order; the first matching rule wins.
MOCK_RULES: tuple[MockRule, ...] = (
    MockRule(
        pattern=re.compile(r"\b(go|come|run|get|have)\b.+(yesterday|last|ago)", re.IGNORECASE),
        transform=_to_past_tense,
        explanation="Use past tense for completed actions in the past.",
    ),
    MockRule(
        pattern=re.compile(r"\bI (is|are|were)\b", re.IGNORECASE),
        transform=_replace_first(r"\b(is|are|were)\b", "am"),
        explanation="Use 'am' with first person singular pronoun 'I'.",
    ),
    MockRule(
        pattern=re.compile(r"\bhe (are|am|were)\b", re.IGNORECASE),
        transform=_replace_first(r"\b(are|am|were)\b", "is"),
        explanation="Use 'is' with third person singular pronouns.",
    ),
)


class MockCorrectionEngine:
    """Deterministic corrector; always returns exactly one segment."""

    def __init__(self, rules: tuple[MockRule, ...] = MOCK_RULES):
        self.rules = rules

    def generate(self, text: str) -> list[CorrectionSegment]:
        for rule in self.rules:
            if rule.matches(text):
                return [
                    CorrectionSegment(
                        text=text,
                        is_correct=False,
                        correction=rule.apply(text),
                        explanation=rule.explanation,
                    )
                ]
        return [
            CorrectionSegment(text=text, is_correct=True, explanation=NO_ERRORS_EXPLANATION)
        ]
