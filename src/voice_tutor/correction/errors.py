"""Normalisation and classification of correction-provider failures.

Provider SDKs raise errors in several shapes (HTTP status on the exception,
an error object nested in the response body, or only a message). Every
failure is normalised into a ``ProviderError`` before any decision is made,
and the predicates here only ever look at that normalised structure.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass

import anthropic

QUOTA_CODES = frozenset({
    "insufficient_quota",
    "billing_hard_limit_reached",
    "billing_error",
    "rate_limit_error",
})
QUOTA_MESSAGE_MARKERS = ("quota", "billing", "exceeded", "credit balance")

MODEL_UNAVAILABLE_CODES = frozenset({"model_not_found", "not_found_error"})


class ErrorCategory(enum.Enum):
    QUOTA_OR_BILLING = "quota_or_billing"
    MODEL_UNAVAILABLE = "model_unavailable"
    OTHER = "other"


@dataclass(frozen=True)
class ProviderError:
    """A provider failure reduced to the fields classification relies on."""

    message: str
    status_code: int | None = None
    code: str | None = None
    type: str | None = None
    original: BaseException | None = None

    @property
    def is_timeout(self) -> bool:
        return isinstance(
            self.original, (asyncio.TimeoutError, TimeoutError, anthropic.APITimeoutError)
        )


def _as_int(value) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_str(value) -> str | None:
    return value if isinstance(value, str) and value else None


def normalize_error(exc: BaseException | dict) -> ProviderError:
    """Reduce an exception (or a raw error mapping) to a ``ProviderError``."""
    if isinstance(exc, ProviderError):
        return exc

    if isinstance(exc, dict):
        get = exc.get
        original = None
    else:
        def get(name, default=None):
            return getattr(exc, name, default)
        original = exc

    status_code = _as_int(get("status_code")) or _as_int(get("status"))
    code = _as_str(get("code"))
    error_type = _as_str(get("type"))

    # Anthropic puts the error object in the body: {"type": "error", "error": {...}}
    body = get("body")
    if isinstance(body, dict):
        nested = body.get("error") if isinstance(body.get("error"), dict) else body
        code = code or _as_str(nested.get("code"))
        if error_type in (None, "error"):
            error_type = _as_str(nested.get("type")) or error_type

    message = _as_str(get("message"))
    if message is None and original is not None:
        if isinstance(original, (asyncio.TimeoutError, TimeoutError)) and not str(exc):
            message = "Provider call timed out"
        else:
            message = str(exc) or type(exc).__name__
    message = message or "Unknown provider error"

    return ProviderError(
        message=message,
        status_code=status_code,
        code=code,
        type=error_type,
        original=original,
    )


def is_quota_or_billing(error: ProviderError) -> bool:
    """True when any one quota/billing signal is present.

    Heuristic on purpose: a false positive degrades to offline corrections,
    a false negative shows the user an error for a capacity problem.
    """
    if error.status_code == 429:
        return True
    if error.code in QUOTA_CODES or error.type in QUOTA_CODES:
        return True
    message = error.message.lower()
    return any(marker in message for marker in QUOTA_MESSAGE_MARKERS)


def is_model_unavailable(error: ProviderError) -> bool:
    return (
        error.status_code == 404
        or error.code in MODEL_UNAVAILABLE_CODES
        or error.type in MODEL_UNAVAILABLE_CODES
    )


def classify(error: ProviderError) -> ErrorCategory:
    if is_quota_or_billing(error):
        return ErrorCategory.QUOTA_OR_BILLING
    if is_model_unavailable(error):
        return ErrorCategory.MODEL_UNAVAILABLE
    return ErrorCategory.OTHER
