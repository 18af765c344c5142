"""Rewrites completed tool-call turns into summaries and compacts pending calls."""

from collections import defaultdict

from toolcall_sanitizer.models.config import SanitizerConfig
from toolcall_sanitizer.models.messages import Message, ToolCall
from toolcall_sanitizer.services.completion import CompletionAnalysis
from toolcall_sanitizer.services.summaries import ArgumentComparator, SummaryRenderer
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)


class MessageTransformer:
    """Produces the final message list from a cleaned, deduplicated conversation.

    - Assistant turns whose tool calls are all completed become a single
      assistant message summarizing each call, one line per call.
    - Assistant turns with pending calls keep only the last pending call.
    - Tool responses are folded into the summaries; orphaned ones pass through.
    - Everything else is left untouched.
    """

    def __init__(self, config: SanitizerConfig, arguments_match: ArgumentComparator):
        """Initialize transformer.

        Args:
            config: Sanitizer settings
            arguments_match: Decides whether two argument strings are a retry of each other
        """
        self.config = config
        self.arguments_match = arguments_match
        self.renderer = SummaryRenderer(config)

    def transform(self, messages: list[Message], analysis: CompletionAnalysis) -> list[Message]:
        """Apply the summarization and compaction rules in conversation order."""
        successful_calls = self._index_successful_calls(messages, analysis)
        result: list[Message] = []

        for position, message in enumerate(messages):
            if message.has_tool_calls:
                transformed = self._transform_tool_turn(position, message, analysis, successful_calls)
                if transformed is not None:
                    result.append(transformed)
            elif message.role == "tool":
                if analysis.is_orphaned(message.tool_call_id):
                    result.append(message)
            else:
                result.append(message)

        return result

    def _transform_tool_turn(
        self,
        position: int,
        message: Message,
        analysis: CompletionAnalysis,
        successful_calls: dict[str, list[tuple[int, ToolCall]]],
    ) -> Message | None:
        calls = message.tool_calls or []
        pending = [call for call in calls if not analysis.is_completed(call.id)]

        if pending:
            if len(pending) > 1 or len(calls) > 1:
                logger.debug(f"Compacting {len(calls)} tool call(s) to pending call {pending[-1].id}")
            return message.model_copy(update={"tool_calls": [pending[-1]]})

        lines = []
        for call in calls:
            line = self._summarize_call(position, call, analysis, successful_calls)
            if line:
                lines.append(line)

        summary = "\n".join(lines)
        if not summary.strip():
            logger.debug(f"Dropping assistant turn at position {position}: every call was superseded")
            return None

        return Message(role="assistant", content=summary, name=message.name)

    def _summarize_call(
        self,
        position: int,
        call: ToolCall,
        analysis: CompletionAnalysis,
        successful_calls: dict[str, list[tuple[int, ToolCall]]],
    ) -> str | None:
        function_name = call.function.name
        arguments = call.function.arguments
        response = analysis.responses.get(call.id)

        if response is None:
            return self.renderer.initiated(function_name, arguments)

        if not response.success:
            if not self.config.preserve_failed_calls and self._has_successful_retry(
                position, call, successful_calls
            ):
                logger.debug(f"Suppressing failed {function_name} call {call.id}: retried successfully")
                return None
            return self.renderer.failed(function_name, arguments, response.content)

        return self.renderer.succeeded(function_name, arguments, response.content)

    def _has_successful_retry(
        self,
        position: int,
        failed_call: ToolCall,
        successful_calls: dict[str, list[tuple[int, ToolCall]]],
    ) -> bool:
        """Look for a successful call to the same function with similar arguments.

        Candidates come from the failed call's own turn or any later turn.
        """
        for candidate_position, candidate in successful_calls.get(failed_call.function.name, []):
            if candidate_position < position or candidate.id == failed_call.id:
                continue
            if self.arguments_match(failed_call.function.arguments, candidate.function.arguments):
                return True
        return False

    @staticmethod
    def _index_successful_calls(
        messages: list[Message], analysis: CompletionAnalysis
    ) -> dict[str, list[tuple[int, ToolCall]]]:
        """Map function name to the (position, call) pairs that completed successfully."""
        index: dict[str, list[tuple[int, ToolCall]]] = defaultdict(list)
        for position, message in enumerate(messages):
            if not message.has_tool_calls:
                continue
            for call in message.tool_calls or []:
                response = analysis.responses.get(call.id)
                if analysis.is_completed(call.id) and response is not None and response.success:
                    index[call.function.name].append((position, call))
        return index
