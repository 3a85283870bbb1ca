"""codecritic CLI application entry point.

Built with `Typer <https://typer.tiangolo.com/>`_ and
`Rich <https://rich.readthedocs.io/>`_.
"""

from __future__ import annotations

import io
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from codecritic.cli.config import CodeCriticConfig, load_config
from codecritic.cli.errors import CLIError, error_handler
from codecritic.cli.init_cmd import run_init
from codecritic.cli.logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="codecritic",
    help="codecritic – LLM code review with sectioned, code-aware reports.",
    add_completion=False,
    no_args_is_help=True,
)

_console = Console(stderr=True)

# File suffix → language passed to the evaluator and splitter.
SUFFIX_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".php": "php",
    ".kt": "kotlin",
    ".swift": "swift",
    ".java": "java",
    ".rb": "ruby",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
}


class OutputFormat(str, Enum):
    """Presentation used by ``render``."""

    CONSOLE = "console"
    MARKDOWN = "markdown"
    JSON = "json"


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from codecritic import __version__

        _console.print(f"codecritic {__version__}")
        raise typer.Exit()


def _config(ctx: typer.Context) -> CodeCriticConfig:
    cfg = ctx.obj.get("config") if isinstance(ctx.obj, dict) else None
    return cfg if cfg is not None else CodeCriticConfig()


def _read_text(source: str) -> str:
    """Read *source* as a path, or stdin when it is ``-``."""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise CLIError(f"File not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def _language_for(path: Path, explicit: Optional[str], cfg: CodeCriticConfig) -> str:
    if explicit:
        return explicit
    return SUFFIX_LANGUAGES.get(path.suffix.lower(), cfg.default_language)


# ---------------------------------------------------------------------------
# Main callback (global options)
# ---------------------------------------------------------------------------


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) output.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration TOML file.",
    ),
) -> None:
    """Global options for the codecritic CLI."""
    with error_handler(_console):
        cfg = load_config(config_path=config)
    level = "DEBUG" if verbose else cfg.log_level
    setup_logging(level, cfg.log_file)
    ctx.obj = {"config": cfg, "verbose": verbose}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None,
        help="Target directory to initialise. Defaults to current directory.",
    ),
) -> None:
    """Create ``.codecritic/config.toml`` with default settings."""
    with error_handler(_console):
        config_path = run_init(path)
        _console.print(f"[green]Wrote configuration to {config_path}[/green]")


@app.command()
def render(
    ctx: typer.Context,
    payload: str = typer.Argument(
        ..., help="Payload file produced by an evaluation, or '-' for stdin."
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.CONSOLE,
        "--format",
        "-f",
        help="Output format.",
        case_sensitive=False,
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language of the evaluated code (labels and detects snippets).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the rendered report to this file instead of stdout.",
    ),
) -> None:
    """Render an evaluation payload as a sectioned report.

    Example::

        codecritic render evaluation.json
        codecritic render evaluation.json -f markdown -o report.md
    """
    from codecritic.report import format_report, to_console, to_json, to_markdown

    with error_handler(_console):
        cfg = _config(ctx)
        text = _read_text(payload)
        report = format_report(text, language or cfg.default_language)
        if not report.structured:
            logger.warning("Payload is not a structured report; rendering raw text")

        if output_format is OutputFormat.CONSOLE and output is None:
            to_console(report, Console())
            return

        if output_format is OutputFormat.JSON:
            rendered = to_json(report)
        elif output_format is OutputFormat.MARKDOWN:
            rendered = to_markdown(report)
        else:
            file_console = Console(record=True, width=100, file=io.StringIO())
            to_console(report, file_console)
            rendered = file_console.export_text()

        if output is None:
            sys.stdout.write(rendered)
        else:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(rendered, encoding="utf-8")
            _console.print(f"[green]Saved report to {output}[/green]")


@app.command()
def evaluate(
    ctx: typer.Context,
    code_file: Path = typer.Argument(..., help="Source file to evaluate."),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Language (default: from file suffix)."
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Task title (default: file name)."
    ),
    description: str = typer.Option(
        "", "--description", "-d", help="What the code is supposed to do."
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="LLM model (LiteLLM identifier)."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save the evaluation payload (JSON) here."
    ),
    full: bool = typer.Option(
        False, "--full", help="Show the full sectioned report, not only the summary."
    ),
) -> None:
    """Evaluate a source file with an LLM and show the result.

    Example::

        codecritic evaluate sum.js -d "Sum an array" -o evaluation.json
    """
    from codecritic.evaluation import CodeEvaluator, CodeSubmission
    from codecritic.llm import GatewayConfig, LLMGateway
    from codecritic.report import format_report, to_console

    with error_handler(_console):
        cfg = _config(ctx)
        code = _read_text(str(code_file))
        lang = _language_for(code_file, language, cfg)
        submission = CodeSubmission(
            title=title or code_file.name,
            description=description,
            language=lang,
            code=code,
        )

        gateway = LLMGateway(GatewayConfig(max_retries=cfg.max_retries))
        evaluator = CodeEvaluator(
            gateway,
            model=model or cfg.llm_model,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
        )
        _console.print(f"[bold]Evaluating[/bold] {code_file} with {evaluator.model}...")
        result = evaluator.evaluate(submission)
        payload = result.to_payload()

        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(payload, encoding="utf-8")
            _console.print(f"[green]Saved evaluation to {output}[/green]")

        to_console(format_report(payload, lang), Console(), include_sections=full)
