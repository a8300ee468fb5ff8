"""
Structured Logging Module
Provides JSON-formatted logging for better integration with log aggregation tools
"""

import json
import logging
from typing import Any

from .sanitization import sanitize_for_logging


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs log records as JSON.

    SECURITY STORY: Parse failures are logged next to fragments of the input
    that caused them. Message bytes are attacker-controlled, so every bytes
    value attached through ``extra_fields`` is passed through
    sanitize_for_logging before it is serialized; a header carrying
    "\\r\\n" or ANSI escapes cannot forge extra log lines.

    PATTERN RECOGNITION: This is similar to how web servers use JSON access logs
    (nginx with json_log format) because structured data is easier to analyze
    than parsing free-form text with regex.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Python logging.LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Context attached via logger.warning("msg", extra={"extra_fields": {...}})
        if hasattr(record, "extra_fields"):
            log_data.update({
                k: self._sanitize_value(v)
                for k, v in record.extra_fields.items()
            })

        return json.dumps(log_data, default=str)

    @staticmethod
    def _sanitize_value(value: Any) -> Any:
        """Render raw message bytes as safe text; other values pass through"""
        if isinstance(value, (bytes, bytearray, memoryview)):
            return sanitize_for_logging(value)
        return value
