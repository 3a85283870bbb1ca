"""LLM gateway – chat completions through LiteLLM with retry and logging.

Any provider LiteLLM understands can serve the evaluation model, e.g.
``groq/llama-3.3-70b-versatile`` or ``gpt-4o-mini``.  Transient failures
(rate limits, dropped connections, timeouts) are retried with exponential
backoff; authentication and bad-request errors surface immediately.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from uuid import uuid4

import litellm
from litellm import completion as litellm_completion
from litellm.exceptions import (
    APIConnectionError,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
    Timeout,
)

from codecritic.llm.exceptions import ConfigurationError, RetryExhaustedError
from codecritic.llm.models import GatewayConfig, LLMLogEntry

logger = logging.getLogger(__name__)

# Errors that trigger a retry
_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    RateLimitError,
    APIConnectionError,
    Timeout,
    TimeoutError,
)
_NON_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    AuthenticationError,
    BadRequestError,
)

# Maximum truncation length for logged messages / responses.
_LOG_TRUNCATE_LEN = 1000


def _truncate(text: str, max_len: int = _LOG_TRUNCATE_LEN) -> str:
    """Truncate text to *max_len* characters, appending '…' if clipped."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "…"


def _truncate_messages(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return a copy of *messages* with ``content`` values truncated."""
    truncated: list[dict[str, Any]] = []
    for msg in messages:
        entry = dict(msg)
        if isinstance(entry.get("content"), str):
            entry["content"] = _truncate(entry["content"])
        truncated.append(entry)
    return truncated


class LLMGateway:
    """Chat-completion client with retry and a per-instance request log.

    Not thread-safe: the request log is a plain list.

    Example::

        gw = LLMGateway()
        text = gw.complete(
            messages=[{"role": "user", "content": "Review this code"}],
            model="groq/llama-3.3-70b-versatile",
            response_format={"type": "json_object"},
        )
    """

    def __init__(self, config: GatewayConfig | None = None) -> None:
        self._config = config or GatewayConfig()
        self._logs: list[LLMLogEntry] = []
        litellm.suppress_debug_info = True

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def logs(self) -> list[LLMLogEntry]:
        """Copy of the request log."""
        return list(self._logs)

    def complete(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **kwargs: Any,
    ) -> str:
        """Send a chat completion request and return the response text.

        Args:
            messages: Chat messages (``{"role": …, "content": …}``).
            model: LiteLLM model identifier.
            **kwargs: Forwarded to ``litellm.completion()`` (temperature,
                max_tokens, response_format, …).

        Returns:
            The assistant's response text (empty if the model sent none).

        Raises:
            ConfigurationError: If *model* is blank.
            RetryExhaustedError: If every attempt failed with a transient error.
        """
        if not model or not model.strip():
            raise ConfigurationError("No model configured")

        request_id = uuid4()
        start = time.monotonic()
        last_error: Exception | None = None
        attempts = self._config.max_retries + 1

        for attempt in range(attempts):
            try:
                response = litellm_completion(model=model, messages=messages, **kwargs)
            except _NON_RETRYABLE_ERRORS:
                raise
            except _RETRYABLE_ERRORS as exc:
                last_error = exc
                logger.warning(
                    "LLM request %s failed (attempt %d/%d): %s",
                    request_id,
                    attempt + 1,
                    attempts,
                    exc,
                )
                if attempt < self._config.max_retries:
                    time.sleep(self._config.base_retry_delay * (2 ** attempt))
                continue

            elapsed_ms = (time.monotonic() - start) * 1000
            text = response.choices[0].message.content or ""
            usage = getattr(response, "usage", None)

            self._logs.append(
                LLMLogEntry(
                    request_id=request_id,
                    model=model,
                    messages=_truncate_messages(messages),
                    response=_truncate(text),
                    attempts=attempt + 1,
                    tokens_prompt=usage.prompt_tokens if usage else 0,
                    tokens_completion=usage.completion_tokens if usage else 0,
                    latency_ms=elapsed_ms,
                )
            )
            logger.debug(
                "LLM request %s completed in %.0fms (%d chars)",
                request_id,
                elapsed_ms,
                len(text),
            )
            return text

        assert last_error is not None
        raise RetryExhaustedError(attempts=attempts, last_error=last_error, model=model)
