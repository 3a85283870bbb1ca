"""Errors raised while talking to the evaluation model."""

from __future__ import annotations


class LLMGatewayError(Exception):
    """Base class for gateway and prompt errors."""


class ConfigurationError(LLMGatewayError):
    """No usable model identifier was given."""


class RetryExhaustedError(LLMGatewayError):
    """Every attempt at a completion failed with a transient error.

    ``last_error`` keeps the final provider exception so callers can tell a
    rate limit apart from a timeout.
    """

    def __init__(self, attempts: int, last_error: Exception, model: str = "") -> None:
        self.attempts = attempts
        self.last_error = last_error
        self.model = model
        target = f" to {model}" if model else ""
        super().__init__(
            f"Request{target} failed after {attempts} attempts: {last_error}"
        )


class TemplateError(LLMGatewayError):
    """A prompt is missing or could not be rendered."""
