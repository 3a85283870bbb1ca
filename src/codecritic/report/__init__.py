"""codecritic report formatter.

Turns a loosely structured LLM evaluation payload into ordered, titled
sections with embedded code snippets separated from the narrative:

- :func:`parse_payload` – Decode a payload, never raising
- :func:`split_narrative` – Separate prose from an embedded code sample
- :func:`render_sections` – Ordered :class:`Section` list for a payload
- :func:`format_report` – Summary plus sections in one :class:`FormattedReport`
- :func:`to_markdown` / :func:`to_console` / :func:`to_json` – Output renderers
"""

from codecritic.report.models import (
    CodeSnippet,
    CombinedText,
    EvaluationReport,
    EvaluationSummary,
    FormattedReport,
    Recommendations,
    Section,
    SplitPair,
    UnstructuredPayload,
)
from codecritic.report.parser import parse_payload, strip_wrapping_fence
from codecritic.report.render import to_console, to_json, to_markdown
from codecritic.report.sections import format_report, render_sections
from codecritic.report.splitter import SplitResult, split_narrative

__all__ = [
    "CodeSnippet",
    "CombinedText",
    "EvaluationReport",
    "EvaluationSummary",
    "FormattedReport",
    "Recommendations",
    "Section",
    "SplitPair",
    "SplitResult",
    "UnstructuredPayload",
    "format_report",
    "parse_payload",
    "render_sections",
    "split_narrative",
    "strip_wrapping_fence",
    "to_console",
    "to_json",
    "to_markdown",
]
