"""
Sanitization Utility Module
Makes untrusted header and body text safe to write into logs and terminals.
"""

import re
import unicodedata
from typing import Union

ANSI_ESCAPE_PATTERN = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


def sanitize_for_logging(text: Union[str, bytes, None], max_length: int = 255) -> str:
    """
    Sanitize text for safe logging to prevent Log Injection (CRLF) and terminal manipulation.

    Header values are often still raw bytes when they need logging; those are
    decoded as ASCII with undecodable bytes shown as \\xNN escapes.

    Args:
        text: The input text or raw bytes to sanitize.
        max_length: Maximum allowed length for the log entry (truncates if longer).

    Returns:
        Sanitized string safe for logging.
    """
    if not text:
        return ""

    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode("ascii", errors="backslashreplace")

    text = unicodedata.normalize('NFKC', text)

    # Folded header lines must not start new log records
    text = text.replace('\n', '\\n').replace('\r', '\\r')

    text = ANSI_ESCAPE_PATTERN.sub('', text)

    # Remaining control characters (tab is kept)
    text = "".join(ch for ch in text if ch == '\t' or ord(ch) >= 32)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text
