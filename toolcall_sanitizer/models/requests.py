"""Request and response models for the HTTP surface."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from toolcall_sanitizer.models.config import SanitizerConfig
from toolcall_sanitizer.models.messages import Message


class SanitizeRequest(BaseModel):
    """Request model for the sanitize endpoint.

    Messages are accepted as raw objects so malformed entries are dropped
    by the sanitizer rather than rejecting the request.
    """

    messages: list[dict[str, Any]]
    config: SanitizerConfig | None = None


class SanitizeResponse(BaseModel):
    """Response model for the sanitize endpoint."""

    messages: list[Message]
    original_count: int
    sanitized_count: int


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request to be forwarded to a backend."""

    messages: list[dict[str, Any]]
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    tools: list[dict[str, Any]] | None = None
    stream: bool = False

    class Config:
        extra = "allow"  # Forward provider-specific parameters untouched


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
    config: dict[str, Any] = Field(default_factory=dict)
