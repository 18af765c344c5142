"""Conversation sanitizer for single-pending-tool-call inference backends."""

__version__ = "0.1.0"

from toolcall_sanitizer.services.sanitizer import MessageSanitizer, sanitize  # noqa: E402

__all__ = ["MessageSanitizer", "__version__", "sanitize"]
