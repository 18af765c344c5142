"""Summary templates and the pluggable policies used when summarizing tool calls."""

import json
import re
import string
from collections.abc import Callable, Mapping
from typing import Any

from toolcall_sanitizer.models.config import DEFAULT_TEMPLATE_KEY, SanitizerConfig

ResponseClassifier = Callable[[str], bool]
ArgumentComparator = Callable[[str, str], bool]

_WHITESPACE = re.compile(r"\s")


def error_substring_classifier(content: str) -> bool:
    """Treat a tool response as successful unless it mentions "error"."""
    return "error" not in content.lower()


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _coerce(value: Any) -> str:
    """String form used for loose comparison, so 10 and "10" compare equal."""
    return value if isinstance(value, str) else _compact_json(value)


def lenient_arguments_match(first: str, second: str) -> bool:
    """Decide whether two argument strings describe a retry of the same call.

    Both are decoded as JSON; objects match when they share the same key set
    and every value is equal either directly or after string coercion.
    Undecodable input falls back to comparing the strings with whitespace
    removed.
    """
    try:
        parsed_first = json.loads(first)
        parsed_second = json.loads(second)
    except (json.JSONDecodeError, TypeError):
        return _WHITESPACE.sub("", first or "") == _WHITESPACE.sub("", second or "")

    if not isinstance(parsed_first, dict) or not isinstance(parsed_second, dict):
        return parsed_first == parsed_second or _coerce(parsed_first) == _coerce(parsed_second)

    if parsed_first.keys() != parsed_second.keys():
        return False

    return all(
        parsed_first[key] == parsed_second[key] or _coerce(parsed_first[key]) == _coerce(parsed_second[key])
        for key in parsed_first
    )


def strict_arguments_match(first: str, second: str) -> bool:
    """Match only when both strings decode to the same JSON value."""
    try:
        return json.loads(first) == json.loads(second)
    except (json.JSONDecodeError, TypeError):
        return _WHITESPACE.sub("", first or "") == _WHITESPACE.sub("", second or "")


ARGUMENT_COMPARATORS: dict[str, ArgumentComparator] = {
    "lenient": lenient_arguments_match,
    "strict": strict_arguments_match,
}


def decode_arguments(arguments: str) -> Any:
    """Decode tool-call arguments, wrapping undecodable text as ``{"raw": ...}``."""
    try:
        return json.loads(arguments)
    except (json.JSONDecodeError, TypeError):
        return {"raw": arguments}


def count_results(response_content: str) -> int | None:
    """Number of results in a JSON tool response, or None if it is not JSON."""
    try:
        parsed = json.loads(response_content)
    except (json.JSONDecodeError, TypeError):
        return None

    if isinstance(parsed, list):
        return len(parsed)
    if isinstance(parsed, dict) and isinstance(parsed.get("results"), list):
        return len(parsed["results"])
    return 0


class _TemplateFormatter(string.Formatter):
    """``str.format`` where ``{a|b}`` picks the first field that is present."""

    def get_value(self, key: Any, args: Any, kwargs: Mapping[str, Any]) -> Any:
        if isinstance(key, str):
            for alternative in key.split("|"):
                value = kwargs.get(alternative.strip())
                if value is not None:
                    return value
        raise KeyError(key)


_formatter = _TemplateFormatter()


def render_template(template: str, fields: Mapping[str, Any]) -> str:
    """Render a summary template; raises KeyError if a field is unavailable."""
    return _formatter.vformat(template, (), fields)


class SummaryRenderer:
    """Turns a tool call and its outcome into a line of natural language."""

    def __init__(self, config: SanitizerConfig):
        """Initialize renderer with the configured templates."""
        self.config = config

    def initiated(self, function_name: str, arguments: str) -> str:
        """Summary for a call whose response was never recorded."""
        return self._render(self.config.initiated_template, self._fields(function_name, arguments))

    def failed(self, function_name: str, arguments: str, response_content: str) -> str:
        """Summary for a call whose response was classified as a failure."""
        fields = self._fields(function_name, arguments, response_content)
        return self._render(self.config.failure_template, fields)

    def succeeded(self, function_name: str, arguments: str, response_content: str) -> str:
        """Summary for a successful call, using the function's template if one is configured."""
        fields = self._fields(function_name, arguments, response_content)
        template = self.config.get_summary_template(function_name)
        try:
            return render_template(template, fields)
        except (KeyError, IndexError, AttributeError, TypeError, ValueError):
            pass

        fallback = self.config.fallback_templates.get(function_name)
        if fallback:
            try:
                return render_template(fallback, fields)
            except (KeyError, IndexError, AttributeError, TypeError, ValueError):
                pass

        return self._render(self.config.summary_templates[DEFAULT_TEMPLATE_KEY], fields)

    @staticmethod
    def _fields(function_name: str, arguments: str, response_content: str | None = None) -> dict[str, Any]:
        decoded = decode_arguments(arguments)
        fields: dict[str, Any] = dict(decoded) if isinstance(decoded, dict) else {}
        # camelCase spelling matches the aliases accepted by SanitizerConfig
        fields.update(function_name=function_name, functionName=function_name, args=_compact_json(decoded))
        if response_content is not None:
            fields["content"] = response_content
            count = count_results(response_content)
            if count is not None:
                fields["count"] = count
        return fields

    @staticmethod
    def _render(template: str, fields: Mapping[str, Any]) -> str:
        try:
            return render_template(template, fields)
        except (KeyError, IndexError, AttributeError, TypeError, ValueError):
            return f"{fields['function_name']} {fields['args']}"
