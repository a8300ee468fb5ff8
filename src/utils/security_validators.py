"""
Security Validators Module
Centralizes the resource limits applied to untrusted message bytes

SECURITY STORY: These limits protect the parser against adversarial input:
- MAX_COMMENT_DEPTH: Comments nest recursively; unbounded nesting would let a
  small input exhaust the interpreter stack (CWE-674: Uncontrolled Recursion)
- MAX_LINE_LENGTH: RFC 5322 section 2.1.1 hard ceiling for a body line
- DEFAULT_MAX_MESSAGE_SIZE: Rejects huge inputs before any parsing starts
"""

import logging

# Nesting limit for "(" ... ")" comments, far above anything seen in real mail
MAX_COMMENT_DEPTH = 100

# Characters per line, excluding the CRLF
MAX_LINE_LENGTH = 998

# Default whole-message ceiling (10MB), overridable through MAX_MESSAGE_SIZE
DEFAULT_MAX_MESSAGE_SIZE = 10 * 1024 * 1024

logger = logging.getLogger(__name__)


class MessageTooLargeError(ValueError):
    """Raised when a message exceeds the configured size ceiling"""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Message is {size} bytes, exceeds limit of {limit}")


def validate_message_size(size: int, limit: int = DEFAULT_MAX_MESSAGE_SIZE) -> None:
    """
    Check a message size against the configured ceiling

    SECURITY STORY: Parsing keeps the whole message in memory and builds a
    tree proportional to it, so the size is checked before parsing starts.

    Args:
        size: Size of the raw message in bytes
        limit: Maximum accepted size in bytes

    Raises:
        MessageTooLargeError: If size exceeds limit
    """
    if size > limit:
        logger.error(f"Message has {size} bytes, exceeds limit of {limit}")
        raise MessageTooLargeError(size, limit)
