"""codecritic code evaluation.

- :class:`CodeEvaluator` – Prompt the LLM and validate its evaluation
- :class:`CodeSubmission` / :class:`EvaluationResult` – Input and output models
"""

from codecritic.evaluation.evaluator import CodeEvaluator, parse_evaluation
from codecritic.evaluation.exceptions import EvaluationError, RateLimitedError
from codecritic.evaluation.models import CodeSubmission, EvaluationResult

__all__ = [
    "CodeEvaluator",
    "CodeSubmission",
    "EvaluationError",
    "EvaluationResult",
    "RateLimitedError",
    "parse_evaluation",
]
