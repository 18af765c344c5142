"""Classification of tool calls as completed, pending or orphaned."""

from dataclasses import dataclass, field

from toolcall_sanitizer.models.messages import Message, ToolResponse
from toolcall_sanitizer.services.summaries import ResponseClassifier, error_substring_classifier


@dataclass(frozen=True)
class CompletionAnalysis:
    """Result of scanning a conversation for tool-call outcomes.

    Tool-call ids are assumed unique within one conversation. When a log
    reuses an id, the calls sharing it are classified together and the
    last response recorded for the id wins.
    """

    completed: frozenset[str] = frozenset()
    orphaned: frozenset[str] = frozenset()
    responses: dict[str, ToolResponse] = field(default_factory=dict)

    def is_completed(self, tool_call_id: str) -> bool:
        """Whether a call has a response and was issued by some assistant message."""
        return tool_call_id in self.completed

    def is_orphaned(self, tool_call_id: str | None) -> bool:
        """Whether a response has no owning call. Responses without an id count as orphaned."""
        return tool_call_id is None or tool_call_id in self.orphaned


def analyze_completion(
    messages: list[Message],
    classifier: ResponseClassifier = error_substring_classifier,
) -> CompletionAnalysis:
    """Collect completed and orphaned tool-call ids plus each call's response."""
    issued: set[str] = set()
    answered: set[str] = set()
    responses: dict[str, ToolResponse] = {}

    for message in messages:
        if message.has_tool_calls:
            issued.update(call.id for call in message.tool_calls or [])
        elif message.role == "tool" and message.tool_call_id:
            answered.add(message.tool_call_id)
            responses[message.tool_call_id] = ToolResponse(
                tool_call_id=message.tool_call_id,
                content=message.content,
                success=classifier(message.content),
            )

    orphaned = answered - issued
    return CompletionAnalysis(
        completed=frozenset(answered - orphaned),
        orphaned=frozenset(orphaned),
        responses=responses,
    )
