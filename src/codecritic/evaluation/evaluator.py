"""Code evaluation via the LLM gateway.

Builds the code-review prompt for a :class:`CodeSubmission`, requests a JSON
answer, and validates it into an :class:`EvaluationResult`.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from litellm.exceptions import RateLimitError

from codecritic.evaluation.exceptions import EvaluationError, RateLimitedError
from codecritic.evaluation.models import (
    SCORE_MAX,
    SCORE_MIN,
    CodeSubmission,
    EvaluationResult,
)
from codecritic.llm.exceptions import RetryExhaustedError
from codecritic.llm.gateway import LLMGateway
from codecritic.llm.prompt_templates import PromptTemplate
from codecritic.report.parser import strip_wrapping_fence

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "groq/llama-3.3-70b-versatile"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

_PROMPT_TEMPLATE = "code_review"
_REQUIRED_TEXT_FIELDS = ("strengths", "improvements", "full_report")


def _fence_for(code: str) -> str:
    fence = "```"
    while fence in code:
        fence += "`"
    return fence


def parse_evaluation(text: str, model: str = "") -> EvaluationResult:
    """Validate a raw LLM answer into an :class:`EvaluationResult`.

    The score is clamped to ``0..100``.

    Raises:
        EvaluationError: If the answer is empty, not a JSON object, has a
            non-numeric score, or lacks strengths/improvements/full_report.
    """
    if not text or not text.strip():
        raise EvaluationError("No response from AI")

    try:
        data: Any = json.loads(strip_wrapping_fence(text))
    except ValueError as exc:
        raise EvaluationError("Invalid AI response format") from exc

    if not isinstance(data, dict):
        raise EvaluationError("Invalid AI response format")

    raw_score = data.get("score")
    if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
        raise EvaluationError("Invalid AI response format")
    try:
        score = float(raw_score)
    except OverflowError as exc:
        raise EvaluationError("Invalid AI response format") from exc
    if not math.isfinite(score):
        raise EvaluationError("Invalid AI response format")
    if any(not data.get(key) for key in _REQUIRED_TEXT_FIELDS):
        raise EvaluationError("Invalid AI response format")

    return EvaluationResult(
        score=min(SCORE_MAX, max(SCORE_MIN, score)),
        strengths=str(data["strengths"]),
        improvements=str(data["improvements"]),
        full_report=data["full_report"],
        model=model,
    )


class CodeEvaluator:
    """Evaluate code submissions with an LLM.

    Example::

        evaluator = CodeEvaluator(LLMGateway())
        result = evaluator.evaluate(CodeSubmission(code="function f() {}"))
        payload = result.to_payload()
    """

    def __init__(
        self,
        gateway: LLMGateway,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        templates: PromptTemplate | None = None,
    ) -> None:
        self._gateway = gateway
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._templates = templates or PromptTemplate()

    @property
    def model(self) -> str:
        return self._model

    def build_messages(self, submission: CodeSubmission) -> list[dict[str, str]]:
        """Return the chat messages asking for an evaluation of *submission*."""
        prompt = self._templates.render(
            _PROMPT_TEMPLATE,
            title=submission.title,
            description=submission.description or "(none)",
            language=submission.language,
            code=submission.code,
            fence=_fence_for(submission.code),
        )
        return [{"role": "user", "content": prompt}]

    def evaluate(self, submission: CodeSubmission) -> EvaluationResult:
        """Run the evaluation for *submission*.

        Raises:
            RateLimitedError: If the provider rate limit was never lifted.
            EvaluationError: If the request failed or the answer is invalid.
        """
        logger.info(
            "Evaluating '%s' (%s, %d chars) with %s",
            submission.title,
            submission.language,
            len(submission.code),
            self._model,
        )
        try:
            text = self._gateway.complete(
                messages=self.build_messages(submission),
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except RetryExhaustedError as exc:
            if isinstance(exc.last_error, RateLimitError):
                raise RateLimitedError() from exc
            raise EvaluationError(str(exc)) from exc

        result = parse_evaluation(text, model=self._model)
        logger.info("Evaluation complete: score=%g", result.score)
        return result
