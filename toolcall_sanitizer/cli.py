"""Command line front end for sanitizing conversation logs."""

import argparse
import json
import sys
from typing import Any

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from toolcall_sanitizer.models.config import SanitizerConfig
from toolcall_sanitizer.services.sanitizer import MessageSanitizer
from toolcall_sanitizer.utils.logging import LogConfig, setup_logging


class SanitizeCLI:
    """Reads a conversation, sanitizes it and renders the result."""

    def __init__(self, config: SanitizerConfig, base_url: str | None = None, console: Console | None = None):
        """Initialize CLI.

        Args:
            config: Sanitizer settings
            base_url: URL of a running sanitizer service; sanitizes locally when omitted
            console: Rich console to render to
        """
        self.config = config
        self.base_url = base_url
        self.console = console or Console()

    def run(self, source: str) -> int:
        """Sanitize the conversation at ``source`` ('-' for stdin) and print it."""
        try:
            messages = self._load_messages(source)
        except (OSError, ValueError) as e:
            self.console.print(f"[red]❌ Cannot read conversation: {e}[/red]")
            return 1

        try:
            sanitized = self._sanitize_remote(messages) if self.base_url else self._sanitize_local(messages)
        except httpx.HTTPError as e:
            self.console.print(f"[red]❌ Sanitizer service error: {e}[/red]")
            return 1

        self._display(messages, sanitized)
        return 0

    def _load_messages(self, source: str) -> list[dict[str, Any]]:
        """Load a JSON list of messages, or an object with a ``messages`` key."""
        if source == "-":
            data = json.load(sys.stdin)
        else:
            with open(source, encoding="utf-8") as handle:
                data = json.load(handle)

        if isinstance(data, dict):
            data = data.get("messages")
        if not isinstance(data, list):
            raise ValueError("expected a list of messages or an object with a 'messages' list")
        return data

    def _sanitize_local(self, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        sanitizer = MessageSanitizer(self.config)
        return [message.to_payload() for message in sanitizer.sanitize_messages(messages)]

    def _sanitize_remote(self, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        with httpx.Client(timeout=30.0) as client:
            response = client.post(
                f"{self.base_url.rstrip('/')}/sanitize",
                json={"messages": messages, "config": self.config.model_dump()},
            )
            response.raise_for_status()
            return response.json()["messages"]

    def _display(self, original: list[dict[str, Any]], sanitized: list[dict[str, Any]]) -> None:
        table = Table(title="Sanitization summary", show_header=True, header_style="bold blue")
        table.add_column("Role")
        table.add_column("Before", justify="right")
        table.add_column("After", justify="right")

        for role in ("user", "assistant", "tool"):
            before = sum(1 for message in original if isinstance(message, dict) and message.get("role") == role)
            after = sum(1 for message in sanitized if message.get("role") == role)
            table.add_row(role, str(before), str(after))
        table.add_row("[bold]total[/bold]", str(len(original)), str(len(sanitized)))

        self.console.print(table)
        self.console.print(
            Panel(
                Syntax(json.dumps(sanitized, indent=2, ensure_ascii=False), "json", word_wrap=True),
                title="[bold green]Sanitized conversation[/bold green]",
                border_style="green",
            )
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="toolcall-sanitizer",
        description="Sanitize a tool-calling conversation for single-tool-call backends.",
    )
    parser.add_argument("source", help="JSON file with the conversation, or '-' for stdin")
    parser.add_argument("--url", help="Base URL of a running sanitizer service")
    parser.add_argument("--window", type=int, default=3, help="Deduplication look-back window")
    parser.add_argument("--no-dedup", action="store_true", help="Disable deduplication")
    parser.add_argument("--preserve-failed", action="store_true", help="Keep failed calls even when retried")
    parser.add_argument("--lenient", action="store_true", help="Relax argument and tool-message validation")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the sanitizer CLI."""
    args = build_parser().parse_args(argv)

    config = SanitizerConfig(
        deduplication_enabled=not args.no_dedup,
        deduplication_window=args.window,
        preserve_failed_calls=args.preserve_failed,
        strict_validation=not args.lenient,
        debug_mode=args.debug,
    )
    setup_logging(LogConfig.from_env(debug_mode=config.debug_mode))

    return SanitizeCLI(config, base_url=args.url).run(args.source)


if __name__ == "__main__":
    sys.exit(main())
