"""Exceptions raised by the code evaluator."""

from __future__ import annotations

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a few moments."


class EvaluationError(Exception):
    """Raised when an evaluation cannot be produced."""


class RateLimitedError(EvaluationError):
    """Raised when the LLM provider keeps rejecting requests for rate limits."""

    def __init__(self, message: str = RATE_LIMIT_MESSAGE) -> None:
        super().__init__(message)
