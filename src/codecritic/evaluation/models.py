"""Submission and result models for code evaluation."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCORE_MIN = 0.0
SCORE_MAX = 100.0


class CodeSubmission(BaseModel):
    """A code sample submitted for review."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(default="Untitled task")
    description: str = Field(default="")
    language: str = Field(default="javascript")
    code: str = Field(..., description="Source code under review")

    @field_validator("code")
    @classmethod
    def _code_required(cls, value: str) -> str:
        if not value:
            raise ValueError("code must not be empty")
        return value


class EvaluationResult(BaseModel):
    """Validated evaluation returned by the LLM.

    ``full_report`` is kept in whatever shape the model produced (nested
    object or prose); the report formatter accepts both.
    """

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    strengths: str
    improvements: str
    full_report: Any
    model: str = ""

    def to_payload(self) -> str:
        """Serialise to the payload text consumed by the report formatter."""
        return json.dumps(
            {
                "score": self.score,
                "strengths": self.strengths,
                "improvements": self.improvements,
                "full_report": self.full_report,
            },
            indent=2,
        )
