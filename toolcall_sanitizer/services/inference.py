"""Preparation of outbound inference requests from sanitized conversations."""

from typing import Any

from toolcall_sanitizer.models.messages import Message
from toolcall_sanitizer.models.requests import ChatCompletionRequest
from toolcall_sanitizer.services.sanitizer import MessageSanitizer, message_sanitizer
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)


class ToolCallConstraintError(ValueError):
    """Raised when a conversation still has an assistant turn with several tool calls."""


def validate_tool_call_constraints(messages: list[Message]) -> None:
    """Check that every assistant message carries at most one tool call.

    Raises:
        ToolCallConstraintError: If an assistant message has more than one tool call
    """
    for message in messages:
        if message.role == "assistant" and message.tool_calls and len(message.tool_calls) > 1:
            raise ToolCallConstraintError(
                f"Sanitization failed: Found {len(message.tool_calls)} tool calls, expected 1 or 0"
            )


def build_inference_request(
    request: ChatCompletionRequest,
    sanitizer: MessageSanitizer | None = None,
) -> dict[str, Any]:
    """Sanitize a chat completion request and return the body to forward.

    Args:
        request: Incoming OpenAI-compatible request
        sanitizer: Sanitizer to use (module default when omitted)

    Returns:
        Request body with sanitized messages; unset optional parameters are omitted

    Raises:
        ToolCallConstraintError: If the sanitized messages violate the single-call constraint
    """
    sanitizer = sanitizer or message_sanitizer
    messages = sanitizer.sanitize_messages(request.messages)
    validate_tool_call_constraints(messages)

    body = request.model_dump(exclude_none=True, exclude={"messages"})
    body["messages"] = [message.to_payload() for message in messages]

    logger.info(f"Prepared inference request: {len(request.messages)} -> {len(messages)} message(s)")
    return body
