"""Sanitization pipeline for conversations sent to single-tool-call backends."""

from collections.abc import Iterable

from toolcall_sanitizer.models.config import SanitizerConfig, default_config
from toolcall_sanitizer.models.messages import Message
from toolcall_sanitizer.services.completion import analyze_completion
from toolcall_sanitizer.services.deduplication import MessageDeduplicator
from toolcall_sanitizer.services.summaries import (
    ARGUMENT_COMPARATORS,
    ArgumentComparator,
    ResponseClassifier,
    error_substring_classifier,
)
from toolcall_sanitizer.services.transformer import MessageTransformer
from toolcall_sanitizer.services.validation import MessageValidator, RawMessage
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)


class MessageSanitizer:
    """Runs validation, deduplication, completion analysis and transformation.

    The sanitizer holds only read-only settings and policies, so one instance
    can serve any number of concurrent callers.
    """

    def __init__(
        self,
        config: SanitizerConfig | None = None,
        classifier: ResponseClassifier | None = None,
        arguments_match: ArgumentComparator | None = None,
    ):
        """Initialize sanitizer.

        Args:
            config: Sanitizer settings (defaults used when omitted)
            classifier: Decides whether a tool response content is a success
            arguments_match: Retry-detection comparator; overrides ``config.argument_matching``
        """
        self.config = config or default_config
        self.classifier = classifier or error_substring_classifier
        self.arguments_match = arguments_match or ARGUMENT_COMPARATORS[self.config.argument_matching]

        self.validator = MessageValidator(self.config)
        self.deduplicator = MessageDeduplicator(
            self.config.deduplication_window if self.config.deduplication_enabled else 0
        )
        self.transformer = MessageTransformer(self.config, self.arguments_match)

    def sanitize_messages(self, messages: Iterable[RawMessage] | None) -> list[Message]:
        """Sanitize a conversation. Never raises.

        On an unexpected failure the cleaned but otherwise untouched list is
        returned instead.
        """
        try:
            raw = list(messages or [])
        except TypeError as e:
            logger.error(f"Messages are not a list, returning no messages: {e}")
            return []

        try:
            cleaned = self.validator.clean(raw)
            deduplicated = self.deduplicator.deduplicate(cleaned)
            analysis = analyze_completion(deduplicated, self.classifier)
            transformed = self.transformer.transform(deduplicated, analysis)
            # Summaries can make distinct turns identical
            result = self.deduplicator.deduplicate(transformed)

            logger.debug(
                f"Sanitized {len(raw)} message(s): cleaned={len(cleaned)}, "
                f"deduplicated={len(deduplicated)}, completed_calls={len(analysis.completed)}, "
                f"orphaned_responses={len(analysis.orphaned)}, output={len(result)}"
            )
            return result

        except Exception as e:
            logger.error(f"Message sanitization failed, returning cleaned messages: {e}", exc_info=True)
            return self._fallback(raw)

    def _fallback(self, raw: list[RawMessage]) -> list[Message]:
        try:
            return self.validator.clean(raw)
        except Exception as e:
            logger.error(f"Message cleaning failed, returning no messages: {e}", exc_info=True)
            return []


message_sanitizer = MessageSanitizer()


def sanitize(messages: Iterable[RawMessage] | None, config: SanitizerConfig | None = None) -> list[Message]:
    """Sanitize a conversation with the given settings (defaults when omitted)."""
    sanitizer = message_sanitizer if config is None else MessageSanitizer(config)
    return sanitizer.sanitize_messages(messages)
