"""
Email Parser Module
Turns raw message bytes into Message trees and Email façades

PATTERN RECOGNITION: This follows the Parser pattern - it takes unstructured
data (raw message bytes) and transforms it into a structured object. The
grammar productions do the real work; this module adds the policy around
them: size limits, the full-parse requirement and logging.

SECURITY STORY: This is the boundary where untrusted bytes enter. The size
is checked before any parsing, and every fragment of the input that ends up
in a log record goes through sanitize_for_logging first.
"""

import logging
from typing import Optional, Union

from .email_builder import Email
from .message import Message
from .parse_error import FieldParseError, ParseError, TrailingInputError
from .token import BytesLike
from ..utils.config import Config
from ..utils.sanitization import sanitize_for_logging
from ..utils.security_validators import MessageTooLargeError, validate_message_size

# Bytes of input shown around a failure offset in log records
CONTEXT_BYTES = 40


class EmailParser:
    """
    Parses raw message bytes according to configuration

    MAINTENANCE WISDOM: Keep parsing logic separate from I/O. Callers read
    the file or socket; this class only ever sees bytes, which keeps it
    trivial to test.
    """

    def __init__(self, config: Config):
        """
        Initialize message parser

        Args:
            config: Loaded configuration (uses config.parser)
        """
        self.config = config
        self.max_message_size = config.parser.max_message_size
        self.require_full_parse = config.parser.require_full_parse
        self.logger = logging.getLogger("EmailParser")

    def parse_message(self, raw: Union[BytesLike, str]) -> Message:
        """
        Parse raw bytes into a Message

        Args:
            raw: Complete message, headers and optional body

        Returns:
            Parsed Message

        Raises:
            MessageTooLargeError: If the input exceeds MAX_MESSAGE_SIZE
            TrailingInputError: If bytes are left over and a full parse is required
            ParseError: If the message is malformed
        """
        data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)
        validate_message_size(len(data), self.max_message_size)

        message, remainder = Message.parse(data)
        if remainder:
            consumed = len(data) - len(remainder)
            if self.require_full_parse:
                raise TrailingInputError(Message.NAME, consumed)
            self.logger.warning(
                f"Ignoring {len(remainder)} unparsed bytes at offset {consumed}: "
                f"{sanitize_for_logging(remainder[:CONTEXT_BYTES])}"
            )
        return message

    def parse_email(self, raw: Union[BytesLike, str], label: str = "message") -> Optional[Email]:
        """
        Parse raw bytes into an Email, logging instead of raising on failure

        SECURITY STORY: The label often comes from the input itself (a file
        name, a Message-ID), so it is sanitized before logging like any
        other untrusted text.

        Args:
            raw: Complete message bytes
            label: Identifier used in log records

        Returns:
            Email or None if the message could not be parsed
        """
        try:
            return Email.from_message(self.parse_message(raw))
        except MessageTooLargeError as e:
            self.logger.error(f"Failed to parse {sanitize_for_logging(label)}: {e}")
        except ParseError as e:
            self._log_parse_error(label, raw, e)
        return None

    def _log_parse_error(self, label: str, raw: Union[BytesLike, str], error: ParseError) -> None:
        root = error.root_cause() if isinstance(error, FieldParseError) else error
        offset = getattr(root, "offset", None)
        extra_fields = {
            "label": sanitize_for_logging(label),
            "error_type": type(root).__name__,
            "chain": [type(link).__name__ for link in error.chain()],
        }
        if offset is not None:
            data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)
            extra_fields["offset"] = offset
            extra_fields["context"] = data[offset:offset + CONTEXT_BYTES]
        self.logger.warning(
            f"Failed to parse {sanitize_for_logging(label)}: {sanitize_for_logging(str(error))}",
            extra={"extra_fields": extra_fields}
        )
