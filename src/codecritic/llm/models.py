"""Data models for the LLM gateway."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class LLMLogEntry(BaseModel):
    """Record of a single completed LLM request."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC time the response was received",
    )
    request_id: UUID = Field(default_factory=uuid4)
    model: str = Field(..., description="Model identifier used for the request")
    messages: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Request messages, content truncated",
    )
    response: str = Field(default="", description="Response text, truncated")
    attempts: int = Field(default=1, ge=1, description="Attempts needed")
    tokens_prompt: int = 0
    tokens_completion: int = 0
    latency_ms: float = 0.0

    @property
    def tokens_total(self) -> int:
        return self.tokens_prompt + self.tokens_completion


class GatewayConfig(BaseModel):
    """Retry behaviour of the LLM gateway."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    max_retries: int = Field(
        default=4,
        ge=0,
        le=10,
        description="Maximum retry attempts on transient errors",
    )
    base_retry_delay: float = Field(
        default=1.0,
        gt=0,
        description="Base delay in seconds for exponential backoff",
    )
