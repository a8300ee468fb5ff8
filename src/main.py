#!/usr/bin/env python3
"""
Email Format Inspector
Command-line entry point: parses an RFC 5322 message file and prints a
summary of its fields, or the normalized message itself.

Usage:
    python -m src.main <message-file> [env-file] [--normalize]
"""

import sys
import signal
from pathlib import Path
from typing import List, NoReturn, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.utils.config import Config
from src.utils.colors import Colors
from src.utils.logging_utils import setup_logging
from src.utils.sanitization import sanitize_for_logging
from src.modules.email_address import EmailAddress
from src.modules.email_builder import Email
from src.modules.email_parser import EmailParser
from src.modules.headers import Cc, From, ReplyTo, To

USAGE = "Usage: python -m src.main <message-file> [env-file] [--normalize]"


class MessageInspector:
    """Encapsulates argument handling, configuration and output of the inspector."""

    def __init__(self, args: Optional[List[str]] = None) -> None:
        """
        Initialize the inspector with CLI arguments.

        Args:
            args: Command line arguments (defaults to sys.argv)
        """
        self.args = args if args is not None else sys.argv
        options = [arg for arg in self.args[1:] if arg.startswith("--")]
        positional = [arg for arg in self.args[1:] if not arg.startswith("--")]
        self.normalize = "--normalize" in options
        self.message_file = positional[0] if positional else None
        self.config_file = positional[1] if len(positional) > 1 else ".env"
        self.use_color = Colors.enabled(sys.stdout)

    def run(self) -> int:
        """Execute the inspector; returns the process exit status."""
        if self.message_file is None:
            print(USAGE)
            return 2

        try:
            config = Config(self.config_file)
            config.validate()
        except ValueError as e:
            print(self._paint(f"Configuration error: {e}", Colors.RED))
            return 2

        setup_logging(config)

        try:
            raw = Path(self.message_file).read_bytes()
        except OSError as e:
            print(self._paint(f"Cannot read '{self.message_file}': {e.strerror}", Colors.RED))
            return 1

        email = EmailParser(config).parse_email(raw, label=self.message_file)
        if email is None:
            print(self._paint(f"Could not parse '{self.message_file}' (see log for details)", Colors.RED))
            return 1

        if self.normalize:
            email.stream(sys.stdout.buffer)
            sys.stdout.buffer.flush()
        else:
            self.print_summary(email)
        return 0

    def print_summary(self, email: Email) -> None:
        """Print trace, field and address summary of a parsed message."""
        print(self._paint("=" * 60, Colors.CYAN))
        print(self._paint(f"Message: {self.message_file}", Colors.BOLD + Colors.CYAN))
        print(self._paint("=" * 60, Colors.CYAN))

        if email.trace_blocks:
            received = sum(len(block.trace.received) for block in email.trace_blocks)
            print(f"Trace blocks: {len(email.trace_blocks)} ({received} Received)")

        for field in email.fields:
            value = sanitize_for_logging(field.value.value.to_bytes().strip(), max_length=70)
            print(f"  {self._paint(field.field_name, Colors.BOLD + Colors.BLUE)}: {value}")

        address_values = (
            (From, email.get_from()),
            (ReplyTo, email.get_reply_to()),
            (To, email.get_to()),
            (Cc, email.get_cc()),
        )
        for header, value in address_values:
            if value is None:
                continue
            if header is From:
                addresses = EmailAddress.from_mailbox_list(value)
            else:
                addresses = EmailAddress.from_addresses(value)
            for address in addresses:
                print(f"  {header.NAME} address: {address}")

        body = email.get_body()
        if body is None:
            print(self._paint("No body", Colors.GREY))
        else:
            print(f"Body: {len(body.content)} bytes, {len(body.lines)} line(s)")

    def _paint(self, text: str, color: str) -> str:
        return Colors.colorize(text, color) if self.use_color else text


def signal_handler(signum, frame) -> NoReturn:
    """Handle shutdown signals"""
    print("\nInterrupted")
    sys.exit(130)


def main():
    """Main entry point"""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    sys.exit(MessageInspector().run())


if __name__ == "__main__":
    main()
