"""Chat message data models (OpenAI tool-calling format)."""

from typing import Any, Literal

from pydantic import BaseModel

Role = Literal["user", "assistant", "tool"]

ROLES: frozenset[str] = frozenset({"user", "assistant", "tool"})


class FunctionCall(BaseModel):
    """Function name and JSON-encoded arguments of a tool call."""

    name: str
    arguments: str = "{}"


class ToolCall(BaseModel):
    """A tool call issued by the assistant."""

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall

    class Config:
        extra = "ignore"


class Message(BaseModel):
    """A message in a tool-calling conversation."""

    role: Role
    content: str = ""
    name: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None

    class Config:
        extra = "ignore"  # Ignore provider-specific fields

    @property
    def has_tool_calls(self) -> bool:
        """Whether this is an assistant message carrying tool calls."""
        return self.role == "assistant" and bool(self.tool_calls)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for an outbound request, omitting absent fields."""
        return self.model_dump(exclude_none=True)


class ToolResponse(BaseModel):
    """Outcome of a tool call, derived from its tool-role message."""

    tool_call_id: str
    content: str
    success: bool
