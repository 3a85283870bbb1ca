"""codecritic LLM gateway.

- :class:`LLMGateway` – Chat completion via LiteLLM with retry and logging
- :class:`PromptTemplate` – Jinja2-based prompt template management
"""

from codecritic.llm.exceptions import (
    ConfigurationError,
    LLMGatewayError,
    RetryExhaustedError,
    TemplateError,
)
from codecritic.llm.gateway import LLMGateway
from codecritic.llm.models import GatewayConfig, LLMLogEntry
from codecritic.llm.prompt_templates import PromptTemplate

__all__ = [
    "ConfigurationError",
    "GatewayConfig",
    "LLMGateway",
    "LLMGatewayError",
    "LLMLogEntry",
    "PromptTemplate",
    "RetryExhaustedError",
    "TemplateError",
]
