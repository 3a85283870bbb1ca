"""Unit tests for LLMGateway.

All LiteLLM calls are mocked so tests run without API keys or network access.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from codecritic.llm.exceptions import ConfigurationError, RetryExhaustedError
from codecritic.llm.gateway import LLMGateway, _truncate, _truncate_messages
from codecritic.llm.models import GatewayConfig, LLMLogEntry

MODEL = "groq/llama-3.3-70b-versatile"


def _mock_response(
    text: str | None = "Hello!",
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
) -> MagicMock:
    """Build a mock LiteLLM response object."""
    choice = SimpleNamespace(message=SimpleNamespace(content=text))
    usage = SimpleNamespace(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )
    resp = MagicMock()
    resp.choices = [choice]
    resp.usage = usage
    return resp


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestTruncate:
    def test_short_text_unchanged(self) -> None:
        assert _truncate("hello", max_len=10) == "hello"

    def test_long_text_truncated(self) -> None:
        assert _truncate("abcdefghij", max_len=5) == "abcde…"

    def test_default_max_len(self) -> None:
        assert _truncate("x" * 1000) == "x" * 1000
        assert _truncate("x" * 1001).endswith("…")


class TestTruncateMessages:
    def test_truncates_long_content(self) -> None:
        result = _truncate_messages([{"role": "user", "content": "x" * 2000}])
        assert len(result[0]["content"]) < 2000

    def test_preserves_non_string_content(self) -> None:
        assert _truncate_messages([{"role": "user", "content": 42}])[0]["content"] == 42

    def test_does_not_mutate_original(self) -> None:
        msgs = [{"role": "user", "content": "x" * 2000}]
        _truncate_messages(msgs)
        assert len(msgs[0]["content"]) == 2000


# ---------------------------------------------------------------------------
# complete()
# ---------------------------------------------------------------------------


class TestComplete:
    @patch("codecritic.llm.gateway.litellm_completion")
    def test_returns_text(self, mock_completion: MagicMock) -> None:
        mock_completion.return_value = _mock_response(text="review")
        gw = LLMGateway()
        assert gw.complete([{"role": "user", "content": "hi"}], model=MODEL) == "review"

    @patch("codecritic.llm.gateway.litellm_completion")
    def test_forwards_kwargs(self, mock_completion: MagicMock) -> None:
        mock_completion.return_value = _mock_response()
        LLMGateway().complete(
            [{"role": "user", "content": "hi"}],
            model=MODEL,
            temperature=0.7,
            response_format={"type": "json_object"},
        )
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == MODEL
        assert kwargs["temperature"] == 0.7
        assert kwargs["response_format"] == {"type": "json_object"}

    @patch("codecritic.llm.gateway.litellm_completion")
    def test_none_content_becomes_empty(self, mock_completion: MagicMock) -> None:
        mock_completion.return_value = _mock_response(text=None)
        assert LLMGateway().complete([], model=MODEL) == ""

    @pytest.mark.parametrize("model", ["", "   "])
    def test_blank_model_rejected(self, model: str) -> None:
        with pytest.raises(ConfigurationError):
            LLMGateway().complete([], model=model)

    @patch("codecritic.llm.gateway.litellm_completion")
    def test_log_entry_recorded(self, mock_completion: MagicMock) -> None:
        mock_completion.return_value = _mock_response(
            text="ok", prompt_tokens=12, completion_tokens=3
        )
        gw = LLMGateway()
        gw.complete([{"role": "user", "content": "hi"}], model=MODEL)
        assert len(gw.logs) == 1
        entry = gw.logs[0]
        assert isinstance(entry, LLMLogEntry)
        assert entry.model == MODEL
        assert entry.response == "ok"
        assert entry.tokens_total == 15
        assert entry.attempts == 1

    @patch("codecritic.llm.gateway.litellm_completion")
    def test_logs_is_a_copy(self, mock_completion: MagicMock) -> None:
        mock_completion.return_value = _mock_response()
        gw = LLMGateway()
        gw.complete([], model=MODEL)
        gw.logs.clear()
        assert len(gw.logs) == 1


# ---------------------------------------------------------------------------
# Retry behaviour
# ---------------------------------------------------------------------------


class TestRetry:
    @patch("codecritic.llm.gateway.time.sleep")
    @patch("codecritic.llm.gateway.litellm_completion")
    def test_retries_rate_limit(self, mock_completion: MagicMock, mock_sleep: MagicMock) -> None:
        from litellm.exceptions import RateLimitError

        mock_completion.side_effect = [
            RateLimitError(message="rate limited", llm_provider="groq", model=MODEL),
            _mock_response(text="success after retry"),
        ]
        gw = LLMGateway(GatewayConfig(max_retries=2, base_retry_delay=0.5))
        assert gw.complete([], model=MODEL) == "success after retry"
        mock_sleep.assert_called_once_with(0.5)
        assert gw.logs[0].attempts == 2

    @patch("codecritic.llm.gateway.time.sleep")
    @patch("codecritic.llm.gateway.litellm_completion")
    def test_exponential_backoff(self, mock_completion: MagicMock, mock_sleep: MagicMock) -> None:
        from litellm.exceptions import APIConnectionError

        mock_completion.side_effect = APIConnectionError(
            message="lost", llm_provider="groq", model=MODEL
        )
        gw = LLMGateway(GatewayConfig(max_retries=3, base_retry_delay=1.0))
        with pytest.raises(RetryExhaustedError) as exc_info:
            gw.complete([], model=MODEL)
        assert exc_info.value.attempts == 4
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0, 4.0]
        assert isinstance(exc_info.value.last_error, APIConnectionError)
        assert exc_info.value.model == MODEL

    @patch("codecritic.llm.gateway.time.sleep")
    @patch("codecritic.llm.gateway.litellm_completion")
    def test_zero_retries(self, mock_completion: MagicMock, mock_sleep: MagicMock) -> None:
        mock_completion.side_effect = TimeoutError("slow")
        gw = LLMGateway(GatewayConfig(max_retries=0))
        with pytest.raises(RetryExhaustedError):
            gw.complete([], model=MODEL)
        assert mock_completion.call_count == 1
        mock_sleep.assert_not_called()

    @patch("codecritic.llm.gateway.litellm_completion")
    def test_auth_error_not_retried(self, mock_completion: MagicMock) -> None:
        from litellm.exceptions import AuthenticationError

        mock_completion.side_effect = AuthenticationError(
            message="invalid key", llm_provider="groq", model=MODEL
        )
        with pytest.raises(AuthenticationError):
            LLMGateway().complete([], model=MODEL)
        assert mock_completion.call_count == 1


class TestGatewayConfig:
    def test_defaults(self) -> None:
        cfg = GatewayConfig()
        assert cfg.max_retries == 4
        assert cfg.base_retry_delay == 1.0

    def test_bounds(self) -> None:
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            GatewayConfig(max_retries=11)
        with pytest.raises(ValidationError):
            GatewayConfig(base_retry_delay=0)
