"""Section rendering for evaluation reports.

Maps each populated field of an :class:`EvaluationReport` to a titled
:class:`Section` in a fixed display order.  Payloads that do not decode
become a single preformatted fallback section holding the raw text.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from codecritic.report.models import (
    CodeSnippet,
    CombinedText,
    EvaluationReport,
    FormattedReport,
    Section,
    SplitPair,
    UnstructuredPayload,
)
from codecritic.report.parser import ParsedPayload, parse_payload
from codecritic.report.splitter import normalize_language, split_narrative

logger = logging.getLogger(__name__)

# Display order of the narrative fields.
NARRATIVE_FIELDS: tuple[tuple[str, str], ...] = (
    ("code_quality", "Code Quality"),
    ("best_practices", "Best Practices"),
    ("performance", "Performance"),
    ("readability", "Readability"),
    ("security_considerations", "Security Considerations"),
)

RECOMMENDATION_FIELDS: tuple[tuple[str, str], ...] = (
    ("improved_function", "Recommendations: Improved Function"),
    ("informative_feedback", "Recommendations: Informative Feedback"),
)

DETAILED_REPORT_TITLE = "Detailed Report"
FALLBACK_TITLE = "Raw Report"
FALLBACK_LANGUAGE = "text"
EMPTY_PAYLOAD_NOTICE = "The evaluation returned no report content."


def section_from_text(
    title: str,
    text: Optional[str],
    language: Optional[str] = None,
) -> Optional[Section]:
    """Build a section from one narrative field, or ``None`` if it is blank."""
    if text is None or not text.strip():
        return None
    parts = split_narrative(text, language)
    code = None
    if parts.has_code:
        code = CodeSnippet(
            source=parts.code,
            language=parts.language or normalize_language(language),
        )
    return Section(
        title=title,
        narrative_before=parts.before,
        code=code,
        narrative_after=parts.after,
    )


def section_from_entry(
    title: str,
    entry: Union[CombinedText, SplitPair, None],
    language: Optional[str] = None,
) -> Optional[Section]:
    """Build a section from a recommendation entry, or ``None`` if it is blank."""
    if entry is None:
        return None
    if isinstance(entry, CombinedText):
        return section_from_text(title, entry.text, language)

    explanation = entry.explanation.strip()
    source = entry.code.strip()
    if not explanation and not source:
        return None
    code = None
    if source:
        code = CodeSnippet(
            source=source,
            language=entry.language or normalize_language(language),
        )
    return Section(title=title, narrative_before=explanation, code=code)


def fallback_section(raw: str) -> Section:
    """Return the single section shown for an undecodable payload."""
    if not raw.strip():
        return Section(
            title=FALLBACK_TITLE,
            narrative_before=EMPTY_PAYLOAD_NOTICE,
            is_fallback=True,
        )
    return Section(
        title=FALLBACK_TITLE,
        code=CodeSnippet(source=raw, language=FALLBACK_LANGUAGE),
        is_fallback=True,
    )


def _ensure_parsed(payload: Union[str, ParsedPayload]) -> ParsedPayload:
    if isinstance(payload, (EvaluationReport, UnstructuredPayload)):
        return payload
    return parse_payload(payload)


def _report_sections(report: EvaluationReport, language: Optional[str]) -> list[Section]:
    sections: list[Section] = []

    for field_name, title in NARRATIVE_FIELDS:
        section = section_from_text(title, getattr(report, field_name), language)
        if section is not None:
            sections.append(section)

    if report.recommendations is not None:
        for field_name, title in RECOMMENDATION_FIELDS:
            section = section_from_entry(
                title, getattr(report.recommendations, field_name), language
            )
            if section is not None:
                sections.append(section)

    detailed = section_from_text(DETAILED_REPORT_TITLE, report.full_report_text, language)
    if detailed is not None:
        sections.append(detailed)

    return sections


def render_sections(
    payload: Union[str, ParsedPayload],
    language: Optional[str] = None,
) -> list[Section]:
    """Render a payload into its ordered display sections.

    Args:
        payload: Payload text, or an already parsed payload.
        language: Language of the evaluated code, used to detect and label
            embedded snippets.

    Returns:
        One section per populated field in display order, or a single
        fallback section when the payload could not be decoded.
    """
    parsed = _ensure_parsed(payload)
    if isinstance(parsed, UnstructuredPayload):
        return [fallback_section(parsed.raw)]
    return _report_sections(parsed, language)


def format_report(
    payload: Union[str, ParsedPayload],
    language: Optional[str] = None,
) -> FormattedReport:
    """Parse and render *payload* into a :class:`FormattedReport`."""
    parsed = _ensure_parsed(payload)
    sections = render_sections(parsed, language)

    if isinstance(parsed, UnstructuredPayload):
        return FormattedReport(structured=False, sections=sections)

    summary = parsed.summary
    if summary is not None and summary.is_empty:
        summary = None
    logger.debug("Rendered %d report sections", len(sections))
    return FormattedReport(structured=True, summary=summary, sections=sections)
