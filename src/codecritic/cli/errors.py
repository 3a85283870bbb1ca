"""codecritic CLI error handling.

Structured errors rendered as Rich panels with consistent exit codes.

Exit codes:
    0 - Success
    1 - General error
    2 - Configuration error
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Generator

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


class CLIError(Exception):
    """Base exception for CLI errors.

    Parameters
    ----------
    message:
        Human-readable error description.
    exit_code:
        Process exit code (default :data:`EXIT_GENERAL_ERROR`).
    """

    def __init__(self, message: str, exit_code: int = EXIT_GENERAL_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigError(CLIError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=EXIT_CONFIG_ERROR)


_stderr = Console(stderr=True)


def _error_panel(message: str, title: str) -> Panel:
    return Panel(
        f"[bold red]{escape(message)}[/bold red]",
        title=f"[red]{title}[/red]",
        border_style="red",
    )


@contextmanager
def error_handler(console: Console | None = None) -> Generator[None, None, None]:
    """Catch exceptions, print a Rich error panel, and exit.

    :class:`CLIError` exits with its own code, ``KeyboardInterrupt`` with
    130, and any other exception with :data:`EXIT_GENERAL_ERROR`.
    """
    out = console or _stderr
    try:
        yield
    except CLIError as exc:
        out.print(_error_panel(exc.message, "Error"))
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        out.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        out.print(_error_panel(str(exc), "Unexpected Error"))
        sys.exit(EXIT_GENERAL_ERROR)
