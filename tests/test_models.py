"""Tests for data models."""

import json

import pytest
from pydantic import ValidationError

from toolcall_sanitizer.models.config import DEFAULT_SUMMARY_TEMPLATES, SanitizerConfig
from toolcall_sanitizer.models.messages import FunctionCall, Message, ToolCall, ToolResponse
from toolcall_sanitizer.models.requests import ChatCompletionRequest, SanitizeRequest


class TestMessageModels:
    """Tests for message and tool call models."""

    def test_user_message_valid(self):
        """Test valid user message."""
        message = Message(role="user", content="Hello")
        assert message.role == "user"
        assert message.content == "Hello"
        assert message.tool_calls is None
        assert message.tool_call_id is None
        assert message.has_tool_calls is False

    def test_assistant_message_with_tool_calls(self):
        """Test assistant message carrying a tool call."""
        call = ToolCall(id="call_1", function=FunctionCall(name="web_search", arguments='{"query": "python"}'))
        message = Message(role="assistant", content="", tool_calls=[call])
        assert message.has_tool_calls is True
        assert message.tool_calls[0].type == "function"
        assert message.tool_calls[0].function.name == "web_search"

    def test_message_invalid_role(self):
        """Test message with invalid role."""
        with pytest.raises(ValidationError) as exc_info:
            Message(role="system", content="Hello")  # type: ignore
        assert "Input should be 'user', 'assistant' or 'tool'" in str(exc_info.value)

    def test_message_from_openai_json(self):
        """Test parsing an OpenAI tool message, ignoring unknown fields."""
        json_data = '{"role": "tool", "content": "ok", "tool_call_id": "call_1", "refusal": null}'
        message = Message.model_validate(json.loads(json_data))
        assert message.role == "tool"
        assert message.tool_call_id == "call_1"
        assert not hasattr(message, "refusal")

    def test_to_payload_omits_absent_fields(self):
        """Test outbound serialization drops unset optional fields."""
        message = Message(role="assistant", content="Done", name="Agent")
        assert message.to_payload() == {"role": "assistant", "content": "Done", "name": "Agent"}

    def test_function_call_default_arguments(self):
        """Test function call arguments default to an empty object."""
        assert FunctionCall(name="noop").arguments == "{}"

    def test_tool_response_valid(self):
        """Test derived tool response model."""
        response = ToolResponse(tool_call_id="call_1", content="Error: boom", success=False)
        assert response.success is False


class TestSanitizerConfig:
    """Tests for sanitizer configuration."""

    def test_defaults(self):
        """Test default configuration values."""
        config = SanitizerConfig()
        assert config.deduplication_enabled is True
        assert config.deduplication_window == 3
        assert config.preserve_failed_calls is False
        assert config.strict_validation is True
        assert config.argument_matching == "lenient"
        assert config.max_context_length == 4000
        assert config.debug_mode is False
        assert config.summary_templates == DEFAULT_SUMMARY_TEMPLATES

    def test_config_is_frozen(self):
        """Test configuration cannot be mutated."""
        config = SanitizerConfig()
        with pytest.raises(ValidationError):
            config.deduplication_window = 5  # type: ignore

    def test_camel_case_aliases(self):
        """Test configuration accepts camelCase keys."""
        config = SanitizerConfig.model_validate(
            {"deduplicationEnabled": False, "deduplicationWindow": 5, "preserveFailedCalls": True}
        )
        assert config.deduplication_enabled is False
        assert config.deduplication_window == 5
        assert config.preserve_failed_calls is True

    def test_summary_templates_require_default(self):
        """Test templates without a fallback are rejected."""
        with pytest.raises(ValidationError, match="default"):
            SanitizerConfig(summary_templates={"web_search": "Searched {query}"})

    def test_get_summary_template_fallback(self):
        """Test unknown functions use the default template."""
        config = SanitizerConfig()
        assert config.get_summary_template("web_search") == "Performed web search for: {query}"
        assert config.get_summary_template("unknown") == DEFAULT_SUMMARY_TEMPLATES["default"]

    def test_with_updates_returns_new_config(self):
        """Test updates produce a new validated config."""
        config = SanitizerConfig()
        updated = config.with_updates(deduplication_window=7)
        assert updated.deduplication_window == 7
        assert config.deduplication_window == 3

    def test_invalid_argument_matching(self):
        """Test unknown comparator names are rejected."""
        with pytest.raises(ValidationError):
            SanitizerConfig(argument_matching="fuzzy")  # type: ignore


class TestRequestModels:
    """Tests for HTTP request models."""

    def test_sanitize_request_accepts_raw_messages(self):
        """Test malformed messages are not rejected at the boundary."""
        request = SanitizeRequest.model_validate({"messages": [{"role": "bogus"}, {"content": 1}]})
        assert len(request.messages) == 2
        assert request.config is None

    def test_sanitize_request_with_config(self):
        """Test per-request configuration parsing."""
        request = SanitizeRequest.model_validate({"messages": [], "config": {"deduplicationWindow": 1}})
        assert request.config.deduplication_window == 1

    def test_chat_completion_request_keeps_extra_parameters(self):
        """Test provider-specific parameters are preserved."""
        request = ChatCompletionRequest.model_validate({"messages": [], "model": "llama", "top_p": 0.9})
        assert request.model == "llama"
        assert request.model_dump()["top_p"] == 0.9
