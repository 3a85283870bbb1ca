"""codecritic configuration.

Settings are resolved in three layers, later ones winning:

1. :class:`CodeCriticConfig` defaults
2. A TOML file – ``.codecritic/config.toml`` in the project directory, or an
   explicit path.  Keys may sit under a ``[general]`` table or at top level.
3. ``CODECRITIC_<FIELD>`` environment variables
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codecritic.cli.errors import ConfigError

DEFAULT_CONFIG_DIR = ".codecritic"
DEFAULT_CONFIG_FILE = "config.toml"
ENV_PREFIX = "CODECRITIC_"


class CodeCriticConfig(BaseModel):
    """Runtime configuration for the CLI."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    project_dir: Path = Field(default_factory=Path.cwd)
    llm_model: str = "groq/llama-3.3-70b-versatile"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    max_retries: int = Field(default=4, ge=0, le=10)
    default_language: str = "javascript"
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``CODECRITIC_*`` environment variables onto *data*.

    Only variables naming a known config field are applied.
    """
    result = dict(data)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX):].lower()
        if field_name in CodeCriticConfig.model_fields:
            result[field_name] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            raw = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc

    data = {key: value for key, value in raw.items() if not isinstance(value, dict)}
    general = raw.get("general")
    if isinstance(general, dict):
        data.update(general)
    return data


def load_config(
    config_path: Optional[Path] = None,
    project_dir: Optional[Path] = None,
) -> CodeCriticConfig:
    """Load configuration for *project_dir* (default: current directory).

    Raises:
        ConfigError: If an explicit *config_path* is missing, a file cannot
            be parsed, or a value fails validation.
    """
    project = project_dir or Path.cwd()
    data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found: {config_path}")
        data = _read_toml(config_path)
    else:
        default_path = project / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
        if default_path.is_file():
            data = _read_toml(default_path)

    data = _apply_env_overrides(data)
    data["project_dir"] = project

    try:
        return CodeCriticConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def default_config_toml() -> str:
    """Return the contents written by ``codecritic init``."""
    defaults = CodeCriticConfig()
    return (
        "# codecritic configuration\n"
        "\n"
        "[general]\n"
        f'llm_model = "{defaults.llm_model}"\n'
        f"temperature = {defaults.temperature}\n"
        f"max_tokens = {defaults.max_tokens}\n"
        f"max_retries = {defaults.max_retries}\n"
        f'default_language = "{defaults.default_language}"\n'
        f'log_level = "{defaults.log_level}"\n'
        '# log_file = ".codecritic/codecritic.log"\n'
    )
