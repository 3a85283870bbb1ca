"""codecritic CLI – command-line interface built with Typer and Rich.

- :data:`app` – The main Typer application
- :class:`CodeCriticConfig` – Configuration model
- :func:`setup_logging` – Logging infrastructure
- :class:`CLIError` – Structured error handling
"""

from codecritic.cli.app import app
from codecritic.cli.config import CodeCriticConfig, load_config
from codecritic.cli.errors import CLIError, ConfigError, error_handler
from codecritic.cli.logging_setup import setup_logging

__all__ = [
    "CLIError",
    "CodeCriticConfig",
    "ConfigError",
    "app",
    "error_handler",
    "load_config",
    "setup_logging",
]
