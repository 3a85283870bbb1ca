"""Output renderers for formatted reports.

Three presentations of a :class:`FormattedReport`:

- :func:`to_markdown` – Markdown via the ``report.md.jinja2`` template
- :func:`to_console` – Rich panels with syntax-highlighted code
- :func:`to_json` – JSON dump of the sections
"""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from codecritic.report.models import FormattedReport, Section

_TEMPLATE_DIR = Path(__file__).parent / "templates"
_MARKDOWN_TEMPLATE = "report.md.jinja2"
_BACKTICK_RUN_RE = re.compile(r"`{3,}")

DEFAULT_TITLE = "Code Evaluation Report"


def _fence_for(source: str) -> str:
    """Return a backtick fence longer than any backtick run in *source*."""
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(source)), default=2)
    return "`" * max(3, longest + 1)


def _format_score(score: float) -> str:
    return f"{score:g}"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["fence"] = _fence_for
    env.filters["score"] = _format_score
    return env


def to_markdown(report: FormattedReport, title: str = DEFAULT_TITLE) -> str:
    """Render *report* as a Markdown document."""
    template = _environment().get_template(_MARKDOWN_TEMPLATE)
    return template.render(
        title=title,
        summary=report.summary,
        sections=report.sections,
    )


def to_json(report: FormattedReport, indent: int = 2) -> str:
    """Serialise *report* to JSON."""
    return report.model_dump_json(indent=indent)


# ---------------------------------------------------------------------------
# Rich console
# ---------------------------------------------------------------------------


def _section_panel(section: Section) -> Panel:
    parts: list[RenderableType] = []
    if section.narrative_before:
        parts.append(Text(section.narrative_before))
    if section.code is not None:
        parts.append(
            Syntax(
                section.code.source,
                section.code.language,
                theme="monokai",
                word_wrap=True,
                background_color="default",
            )
        )
    if section.narrative_after:
        parts.append(Text(section.narrative_after))

    border = "yellow" if section.is_fallback else "cyan"
    return Panel(
        Group(*parts),
        title=f"[bold]{section.title}[/bold]",
        title_align="left",
        border_style=border,
    )


def _summary_table(report: FormattedReport) -> Table:
    summary = report.summary
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    if summary is None:
        return table
    if summary.score is not None:
        table.add_row("Score", f"{_format_score(summary.score)}/100")
    if summary.strengths:
        table.add_row("Strengths", Text(summary.strengths.strip()))
    if summary.improvements:
        table.add_row("Improvements", Text(summary.improvements.strip()))
    return table


def to_console(
    report: FormattedReport,
    console: Console | None = None,
    title: str = DEFAULT_TITLE,
    include_sections: bool = True,
) -> None:
    """Print *report* to a Rich console.

    With *include_sections* false only the summary is shown.
    """
    out = console or Console()
    out.rule(f"[bold]{title}[/bold]")
    if report.summary is not None:
        out.print(_summary_table(report))
    if not include_sections:
        return
    if not report.structured:
        out.print("[yellow]Report could not be parsed; showing raw output.[/yellow]")
    if not report.sections:
        out.print("[dim]No report content.[/dim]")
    for section in report.sections:
        out.print(_section_panel(section))
