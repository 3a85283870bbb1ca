"""Jinja2 prompts sent to the evaluation model."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from codecritic.llm.exceptions import TemplateError

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
_SUFFIX = ".jinja2"


class PromptTemplate:
    """Loads ``<name>.jinja2`` prompts from a directory and renders them.

    Undefined variables are errors, so a prompt is never sent with a hole
    in it.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        directory = template_dir or _DEFAULT_TEMPLATE_DIR
        if not directory.is_dir():
            raise TemplateError(f"Prompt directory does not exist: {directory}")
        self._env = Environment(
            loader=FileSystemLoader(str(directory)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, **variables: Any) -> str:
        """Render prompt *name* (no extension) with *variables*.

        Raises:
            TemplateError: If the prompt is missing or a variable is undefined.
        """
        try:
            template = self._env.get_template(name + _SUFFIX)
        except TemplateNotFound:
            raise TemplateError(f"Prompt '{name}' not found") from None

        try:
            return template.render(**variables)
        except Exception as exc:
            raise TemplateError(f"Cannot render prompt '{name}': {exc}") from exc
