"""Sliding-window removal of repeated messages."""

import hashlib
import json
from collections import deque

from toolcall_sanitizer.models.messages import Message
from toolcall_sanitizer.utils.logging import get_logger

logger = get_logger(__name__)


def fingerprint(message: Message) -> str:
    """Digest of the fields that make two messages the same turn.

    ``name`` is not part of the fingerprint; key order is fixed so the
    serialization is deterministic.
    """
    payload = {
        "role": message.role,
        "content": message.content,
        "tool_calls": [call.model_dump() for call in message.tool_calls or []],
        "tool_call_id": message.tool_call_id,
    }
    serialized = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(serialized.encode()).hexdigest()


class MessageDeduplicator:
    """Drops messages identical to one of the last ``window_size`` accepted ones."""

    def __init__(self, window_size: int = 3):
        """Initialize deduplicator.

        Args:
            window_size: Number of accepted messages to look back over; <= 0 disables
        """
        self.window_size = window_size

    def deduplicate(self, messages: list[Message]) -> list[Message]:
        """Return messages with in-window duplicates removed, first occurrence kept."""
        if self.window_size <= 0 or len(messages) <= 1:
            return list(messages)

        recent: deque[str] = deque(maxlen=self.window_size)
        result: list[Message] = []

        for message in messages:
            digest = fingerprint(message)
            if digest in recent:
                logger.debug(f"Dropping duplicate {message.role} message")
                continue
            result.append(message)
            recent.append(digest)

        dropped = len(messages) - len(result)
        if dropped:
            logger.info(f"Removed {dropped} duplicate message(s)")

        return result
