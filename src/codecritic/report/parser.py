"""Payload parser for LLM evaluation reports.

Decodes the text blob produced by the evaluation step into an
:class:`~codecritic.report.models.EvaluationReport`.  The payload is
untrusted: anything that does not decode into a recognisable report comes
back as an :class:`~codecritic.report.models.UnstructuredPayload` instead of
raising.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Union

from pydantic import ValidationError

from codecritic.report.models import (
    EvaluationReport,
    EvaluationSummary,
    UnstructuredPayload,
)

logger = logging.getLogger(__name__)

ParsedPayload = Union[EvaluationReport, UnstructuredPayload]

_WRAPPING_FENCE_RE = re.compile(
    r"^\s*```[A-Za-z0-9_-]*[ \t]*\n(?P<body>.*?)\n?[ \t]*```\s*$",
    re.DOTALL,
)

_SUMMARY_KEYS = ("score", "strengths", "improvements")
_FULL_REPORT_KEYS = ("full_report", "fullReport")

# Keys (and accepted aliases) that mark an object as an evaluation report.
_REPORT_KEYS = frozenset(
    {
        "code_quality",
        "codeQuality",
        "best_practices",
        "bestPractices",
        "performance",
        "readability",
        "security_considerations",
        "securityConsiderations",
        "security",
        "recommendations",
        *_SUMMARY_KEYS,
        *_FULL_REPORT_KEYS,
    }
)


def strip_wrapping_fence(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole of *text*.

    LLMs frequently answer ```` ```json\\n{...}\\n``` ```` even in JSON mode.
    Text that is not entirely wrapped is returned unchanged.
    """
    match = _WRAPPING_FENCE_RE.match(text)
    if match is None:
        return text
    return match.group("body")


def decode_object(text: str) -> Optional[dict[str, Any]]:
    """Decode *text* as a JSON object, returning ``None`` on any failure."""
    try:
        data = json.loads(strip_wrapping_fence(text))
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _split_full_report(data: dict[str, Any]) -> tuple[dict[str, Any], Optional[str]]:
    """Resolve the ``full_report`` envelope shape.

    Returns the mapping holding the narrative fields and, when the full
    report is plain prose, that prose.
    """
    full: Any = None
    for key in _FULL_REPORT_KEYS:
        if key in data:
            full = data[key]
            break

    if isinstance(full, str):
        nested = decode_object(full)
        if nested is None:
            return data, full
        full = nested

    if isinstance(full, dict):
        return {**data, **full}, None
    return data, None


def parse_payload(text: Any) -> ParsedPayload:
    """Decode an evaluation payload.

    Accepts flat narrative fields at the top level as well as the
    ``{score, strengths, improvements, full_report}`` envelope, where
    ``full_report`` may be a nested object, a JSON string, or prose.

    Args:
        text: The payload text.  Non-string input is treated as undecodable.

    Returns:
        An :class:`EvaluationReport`, or an :class:`UnstructuredPayload`
        carrying the raw text when the payload cannot be decoded.
    """
    if not isinstance(text, str):
        logger.debug("Payload is not text (%s); using raw fallback", type(text).__name__)
        return UnstructuredPayload(raw="" if text is None else str(text))

    data = decode_object(text)
    if data is None:
        logger.debug("Payload is not a JSON object; using raw fallback")
        return UnstructuredPayload(raw=text)

    if not _REPORT_KEYS.intersection(data):
        logger.debug(
            "Payload object has no report fields (keys=%s); using raw fallback",
            sorted(data)[:10],
        )
        return UnstructuredPayload(raw=text)

    body, full_report_text = _split_full_report(data)

    fields = {
        key: value
        for key, value in body.items()
        if key not in ("summary", "full_report_text", *_SUMMARY_KEYS, *_FULL_REPORT_KEYS)
    }

    try:
        summary = None
        if any(key in data for key in _SUMMARY_KEYS):
            summary = EvaluationSummary.model_validate(
                {key: data.get(key) for key in _SUMMARY_KEYS}
            )
        fields["summary"] = summary
        fields["full_report_text"] = full_report_text
        return EvaluationReport.model_validate(fields)
    except ValidationError as exc:
        logger.debug("Payload failed report validation: %s", exc)
        return UnstructuredPayload(raw=text)
