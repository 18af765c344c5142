"""Tests for completion analysis."""

from toolcall_sanitizer.models.messages import FunctionCall, Message, ToolCall
from toolcall_sanitizer.services.completion import CompletionAnalysis, analyze_completion


def assistant_with_calls(*call_ids):
    return Message(
        role="assistant",
        content="",
        tool_calls=[ToolCall(id=call_id, function=FunctionCall(name="web_search")) for call_id in call_ids],
    )


def tool_response(call_id, content="ok"):
    return Message(role="tool", content=content, tool_call_id=call_id)


class TestAnalyzeCompletion:
    """Tests for completed/orphaned classification."""

    def test_completed_and_pending(self):
        """Test calls with responses are completed, others pending."""
        analysis = analyze_completion(
            [assistant_with_calls("call_1", "call_2"), tool_response("call_2")]
        )
        assert analysis.completed == frozenset({"call_2"})
        assert analysis.is_completed("call_2")
        assert not analysis.is_completed("call_1")
        assert analysis.orphaned == frozenset()

    def test_orphaned_responses_excluded_from_completed(self):
        """Test responses without an issuing call are orphaned."""
        analysis = analyze_completion([Message(role="user", content="Hi"), tool_response("ghost")])
        assert analysis.orphaned == frozenset({"ghost"})
        assert analysis.completed == frozenset()
        assert analysis.is_orphaned("ghost")

    def test_order_independent(self):
        """Test a response listed before its call still completes it."""
        analysis = analyze_completion([tool_response("call_1"), assistant_with_calls("call_1")])
        assert analysis.completed == frozenset({"call_1"})
        assert analysis.orphaned == frozenset()

    def test_responses_classified_with_default_heuristic(self):
        """Test responses mentioning errors are failures."""
        analysis = analyze_completion(
            [
                assistant_with_calls("call_1", "call_2"),
                tool_response("call_1", "Error: invalid input"),
                tool_response("call_2", '{"results": []}'),
            ]
        )
        assert analysis.responses["call_1"].success is False
        assert analysis.responses["call_2"].success is True

    def test_custom_classifier(self):
        """Test the success classifier is pluggable."""
        analysis = analyze_completion(
            [assistant_with_calls("call_1"), tool_response("call_1", "No error found")],
            classifier=lambda content: not content.startswith("FAILED"),
        )
        assert analysis.responses["call_1"].success is True

    def test_last_response_wins_for_reused_id(self):
        """Test a reused id keeps the most recent response."""
        analysis = analyze_completion(
            [assistant_with_calls("call_1"), tool_response("call_1", "Error"), tool_response("call_1", "fine")]
        )
        assert analysis.responses["call_1"].content == "fine"

    def test_missing_id_counts_as_orphaned(self):
        """Test responses without an id have no owning call."""
        assert CompletionAnalysis().is_orphaned(None)

    def test_empty_conversation(self):
        """Test an empty conversation yields empty sets."""
        analysis = analyze_completion([])
        assert analysis.completed == frozenset()
        assert analysis.orphaned == frozenset()
        assert analysis.responses == {}
