"""API endpoints for the conversation sanitizer service."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, HTTPException

from toolcall_sanitizer import __version__
from toolcall_sanitizer.models.config import default_config
from toolcall_sanitizer.models.requests import (
    ChatCompletionRequest,
    HealthResponse,
    SanitizeRequest,
    SanitizeResponse,
)
from toolcall_sanitizer.services.inference import ToolCallConstraintError, build_inference_request
from toolcall_sanitizer.services.sanitizer import MessageSanitizer, message_sanitizer
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/sanitize", response_model=SanitizeResponse, response_model_exclude_none=True, tags=["Sanitizer"])
async def sanitize_conversation(request: SanitizeRequest) -> SanitizeResponse:
    """Sanitize a conversation so it carries at most one pending tool call per turn.

    Invalid messages are dropped rather than rejected; an optional ``config``
    overrides the service defaults for this request only.
    """
    sanitizer = MessageSanitizer(request.config) if request.config else message_sanitizer
    messages = sanitizer.sanitize_messages(request.messages)

    logger.info(f"Sanitized conversation: {len(request.messages)} -> {len(messages)} message(s)")
    return SanitizeResponse(
        messages=messages,
        original_count=len(request.messages),
        sanitized_count=len(messages),
    )


@router.post("/chat/completions/prepare", tags=["Sanitizer"])
async def prepare_chat_completion(request: ChatCompletionRequest) -> dict[str, Any]:
    """Return the request body to forward to a single-tool-call inference backend."""
    try:
        return build_inference_request(request)
    except ToolCallConstraintError as e:
        logger.warning(f"Rejecting chat completion request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
        config=default_config.model_dump(exclude={"summary_templates"}),
    )
