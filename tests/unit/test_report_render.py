"""Unit tests for codecritic.report.render."""

from __future__ import annotations

import io
import json

from rich.console import Console

from codecritic.report.models import (
    CodeSnippet,
    EvaluationSummary,
    FormattedReport,
    Section,
)
from codecritic.report.render import _fence_for, to_console, to_json, to_markdown
from codecritic.report.sections import format_report


def _report() -> FormattedReport:
    return FormattedReport(
        structured=True,
        summary=EvaluationSummary(score=87.5, strengths="Tidy code.", improvements="Add tests."),
        sections=[
            Section(title="Code Quality", narrative_before="Solid."),
            Section(
                title="Recommendations: Improved Function",
                narrative_before="Try:",
                code=CodeSnippet(source="const x = [1];", language="js"),
                narrative_after="Simpler.",
            ),
        ],
    )


def _capture() -> Console:
    return Console(file=io.StringIO(), width=100, record=True, color_system=None)


class TestFenceFor:
    def test_plain_code(self) -> None:
        assert _fence_for("x = 1") == "```"

    def test_code_containing_fence(self) -> None:
        assert _fence_for("a ``` b") == "````"

    def test_longer_run(self) -> None:
        assert _fence_for("`````") == "``````"


class TestToMarkdown:
    def test_headings_and_summary(self) -> None:
        md = to_markdown(_report())
        assert md.startswith("# Code Evaluation Report")
        assert "- **Score**: 87.5/100" in md
        assert "- **Strengths**: Tidy code." in md
        assert "## Code Quality" in md
        assert "## Recommendations: Improved Function" in md

    def test_code_block_fenced_with_language(self) -> None:
        md = to_markdown(_report())
        assert "```js\nconst x = [1];\n```" in md

    def test_section_order_preserved(self) -> None:
        md = to_markdown(_report())
        assert md.index("## Code Quality") < md.index("## Recommendations")
        assert md.index("Try:") < md.index("const x") < md.index("Simpler.")

    def test_custom_title(self) -> None:
        assert to_markdown(_report(), title="Review").startswith("# Review")

    def test_no_summary(self) -> None:
        md = to_markdown(FormattedReport(structured=True, sections=[Section(title="Performance", narrative_before="ok")]))
        assert "## Summary" not in md

    def test_empty_sections_notice(self) -> None:
        md = to_markdown(FormattedReport(structured=True))
        assert "_No report content._" in md

    def test_raw_fallback_rendered_verbatim(self) -> None:
        md = to_markdown(format_report("not { json"))
        assert "## Raw Report" in md
        assert "```text\nnot { json\n```" in md


class TestToJson:
    def test_round_trips_sections(self) -> None:
        data = json.loads(to_json(_report()))
        assert data["structured"] is True
        assert data["summary"]["score"] == 87.5
        assert data["sections"][1]["code"]["language"] == "js"


class TestToConsole:
    def test_prints_sections(self) -> None:
        console = _capture()
        to_console(_report(), console)
        text = console.export_text()
        assert "Code Quality" in text
        assert "Recommendations: Improved Function" in text
        assert "const x = [1];" in text
        assert "87.5/100" in text

    def test_summary_only(self) -> None:
        console = _capture()
        to_console(_report(), console, include_sections=False)
        text = console.export_text()
        assert "87.5/100" in text
        assert "Code Quality" not in text

    def test_unstructured_notice(self) -> None:
        console = _capture()
        to_console(format_report("raw words"), console)
        text = console.export_text()
        assert "could not be parsed" in text
        assert "raw words" in text

    def test_markup_in_text_is_literal(self) -> None:
        report = FormattedReport(
            structured=True,
            summary=EvaluationSummary(strengths="uses [bold] tags"),
        )
        console = _capture()
        to_console(report, console)
        assert "[bold]" in console.export_text()
