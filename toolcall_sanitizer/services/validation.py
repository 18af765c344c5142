"""Validation and cleaning of raw conversation messages."""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from toolcall_sanitizer.models.config import SanitizerConfig
from toolcall_sanitizer.models.messages import ROLES, FunctionCall, Message, ToolCall
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)

EMPTY_ARGUMENTS = "{}"

RawMessage = Message | Mapping[str, Any]


class MessageValidator:
    """Drops structurally invalid messages and repairs tool-call arguments.

    Never raises for bad input: anything that cannot be turned into a
    well-formed ``Message`` is omitted from the result.
    """

    def __init__(self, config: SanitizerConfig):
        """Initialize validator.

        Args:
            config: Sanitizer settings; ``strict_validation`` is honored
        """
        self.config = config

    def clean(self, messages: Iterable[RawMessage] | None) -> list[Message]:
        """Return the valid messages, repaired where possible."""
        cleaned: list[Message] = []

        for index, raw in enumerate(messages or []):
            message = self.clean_message(raw)
            if message is None:
                logger.debug(f"Dropping invalid message at index {index}")
                continue
            cleaned.append(message)

        return cleaned

    def clean_message(self, raw: RawMessage) -> Message | None:
        """Validate a single message, returning None when it must be dropped."""
        if isinstance(raw, Message):
            raw = raw.model_dump()
        if not isinstance(raw, Mapping):
            return None

        role = raw.get("role")
        if not isinstance(role, str) or role not in ROLES:
            return None

        content = self._normalize_content(raw.get("content"))
        if content is None:
            return None

        tool_calls: list[ToolCall] = []
        if role == "assistant":
            tool_calls = self._clean_tool_calls(raw.get("tool_calls"))

        if not content and not tool_calls:
            return None

        tool_call_id = raw.get("tool_call_id")
        if role == "tool":
            if tool_call_id is not None and not isinstance(tool_call_id, str):
                return None
            if not tool_call_id:
                if self.config.strict_validation:
                    return None
                tool_call_id = None
        else:
            tool_call_id = None

        name = raw.get("name")
        try:
            return Message(
                role=role,
                content=content,
                name=name if isinstance(name, str) else None,
                tool_calls=tool_calls or None,
                tool_call_id=tool_call_id,
            )
        except ValidationError as e:
            logger.debug(f"Message failed model validation: {e}")
            return None

    def _clean_tool_calls(self, raw_calls: Any) -> list[ToolCall]:
        """Keep tool calls that have an id and a function name."""
        if not isinstance(raw_calls, list):
            return []

        calls: list[ToolCall] = []
        for raw_call in raw_calls:
            if isinstance(raw_call, ToolCall):
                raw_call = raw_call.model_dump()
            if not isinstance(raw_call, Mapping):
                continue

            call_id = raw_call.get("id")
            function = raw_call.get("function")
            if not call_id or not isinstance(call_id, str) or not isinstance(function, Mapping):
                continue
            name = function.get("name")
            if not name or not isinstance(name, str):
                continue

            arguments = self._repair_arguments(call_id, function.get("arguments"))
            calls.append(ToolCall(id=call_id, function=FunctionCall(name=name, arguments=arguments)))

        return calls

    def _repair_arguments(self, call_id: str, arguments: Any) -> str:
        """Return arguments as a JSON string, replacing anything malformed with an empty object."""
        if arguments is None or arguments == "":
            return EMPTY_ARGUMENTS

        if not isinstance(arguments, str):
            # Some clients send arguments already decoded
            try:
                arguments = json.dumps(arguments)
            except (TypeError, ValueError):
                logger.warning(f"Unserializable arguments in tool call {call_id}: {arguments!r}")
                return EMPTY_ARGUMENTS

        try:
            parsed = json.loads(arguments)
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON in tool call {call_id}: {arguments}")
            return EMPTY_ARGUMENTS

        if self.config.strict_validation and not isinstance(parsed, dict):
            logger.warning(f"Non-object arguments in tool call {call_id}: {arguments}")
            return EMPTY_ARGUMENTS

        return arguments

    @staticmethod
    def _normalize_content(content: Any) -> str | None:
        """Coerce content to text; None means the message is unusable."""
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            # OpenAI content parts
            parts = [
                part["text"]
                for part in content
                if isinstance(part, Mapping) and part.get("type") == "text" and isinstance(part.get("text"), str)
            ]
            return "\n".join(parts)
        return None
