"""Data models for the report formatter.

Pydantic models describing the parsed evaluation payload and the transient
display sections derived from it.

Models:
    - EvaluationReport: Narrative fields, recommendations and summary
    - Recommendations: Two optional recommendation entries
    - CombinedText / SplitPair: Tagged union for a recommendation entry
    - EvaluationSummary: Score, strengths and improvements envelope
    - UnstructuredPayload: Sentinel for payloads that failed to decode
    - Section / CodeSnippet: One renderable unit of the report
    - FormattedReport: Summary plus ordered sections
"""

from __future__ import annotations

import json
import math
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def coerce_text(value: Any) -> Optional[str]:
    """Coerce a loosely-typed payload value into narrative text.

    ``None`` stays ``None``; lists are joined line by line; mappings are
    dumped as indented JSON; anything else goes through :func:`str`.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(
            item if isinstance(item, str) else json.dumps(item)
            for item in value
        )
    if isinstance(value, dict):
        return json.dumps(value, indent=2)
    return str(value)


# ---------------------------------------------------------------------------
# Recommendation entries (tagged union)
# ---------------------------------------------------------------------------


class CombinedText(BaseModel):
    """A recommendation delivered as one narrative string with inline code."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["combined"] = "combined"
    text: str = ""


class SplitPair(BaseModel):
    """A recommendation already split into explanation and code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["split"] = "split"
    explanation: str = Field(
        default="",
        validation_alias=AliasChoices("explanation", "description", "text"),
    )
    code: str = ""
    language: Optional[str] = None

    @field_validator("explanation", "code", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return coerce_text(value) or ""


RecommendationEntry = Annotated[
    Union[CombinedText, SplitPair],
    Field(discriminator="kind"),
]


def _resolve_entry(value: Any) -> Any:
    """Tag a raw recommendation value as ``combined`` or ``split``."""
    if value is None or isinstance(value, (CombinedText, SplitPair)):
        return value
    if isinstance(value, dict):
        if "kind" in value:
            return value
        return {"kind": "split", **value}
    return {"kind": "combined", "text": coerce_text(value)}


class Recommendations(BaseModel):
    """The two recommendation sub-sections of a report."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    improved_function: Optional[RecommendationEntry] = Field(
        default=None,
        validation_alias=AliasChoices("improved_function", "improvedFunction"),
    )
    informative_feedback: Optional[RecommendationEntry] = Field(
        default=None,
        validation_alias=AliasChoices("informative_feedback", "informativeFeedback"),
    )

    @field_validator("improved_function", "informative_feedback", mode="before")
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return _resolve_entry(value)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class EvaluationSummary(BaseModel):
    """Headline values of an evaluation: score, strengths, improvements."""

    model_config = ConfigDict(frozen=True)

    score: Optional[float] = None
    strengths: Optional[str] = None
    improvements: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def _lenient_score(cls, value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        try:
            score = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return score if math.isfinite(score) else None

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return coerce_text(value)

    @property
    def is_empty(self) -> bool:
        return (
            self.score is None
            and not (self.strengths or "").strip()
            and not (self.improvements or "").strip()
        )


class EvaluationReport(BaseModel):
    """Structured evaluation decoded from an LLM payload.

    Every field is optional; absent fields are skipped when rendering.
    ``recommendations`` accepts both a pre-split and a combined shape per
    entry, resolved once here at validation time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    code_quality: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("code_quality", "codeQuality"),
    )
    best_practices: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("best_practices", "bestPractices"),
    )
    performance: Optional[str] = None
    readability: Optional[str] = None
    security_considerations: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "security_considerations", "securityConsiderations", "security"
        ),
    )
    recommendations: Optional[Recommendations] = None
    summary: Optional[EvaluationSummary] = None
    full_report_text: Optional[str] = None

    @field_validator(
        "code_quality",
        "best_practices",
        "performance",
        "readability",
        "security_considerations",
        "full_report_text",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return coerce_text(value)

    @field_validator("recommendations", mode="before")
    @classmethod
    def _recommendations(cls, value: Any) -> Any:
        # A bare string or list is treated as informative feedback.
        if value is None or isinstance(value, (dict, Recommendations)):
            return value
        return {"informative_feedback": value}


class UnstructuredPayload(BaseModel):
    """Sentinel returned when a payload cannot be decoded as a report."""

    model_config = ConfigDict(frozen=True)

    raw: str = ""


# ---------------------------------------------------------------------------
# Display sections
# ---------------------------------------------------------------------------


class CodeSnippet(BaseModel):
    """A code excerpt extracted from narrative text."""

    model_config = ConfigDict(frozen=True)

    source: str
    language: str


class Section(BaseModel):
    """One titled, renderable unit of a report."""

    model_config = ConfigDict(frozen=True)

    title: str
    narrative_before: str = ""
    code: Optional[CodeSnippet] = None
    narrative_after: str = ""
    is_fallback: bool = False

    @property
    def has_code(self) -> bool:
        return self.code is not None


class FormattedReport(BaseModel):
    """The complete renderable form of a payload."""

    model_config = ConfigDict(frozen=True)

    structured: bool
    summary: Optional[EvaluationSummary] = None
    sections: list[Section] = Field(default_factory=list)
