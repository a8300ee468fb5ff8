"""
Tests for structured logging functionality
"""

import unittest
import json
import logging
import sys

from src.utils.structured_logging import JSONFormatter


class TestJSONFormatter(unittest.TestCase):
    """Test cases for JSONFormatter"""

    def setUp(self):
        """Set up test fixtures"""
        self.formatter = JSONFormatter()

    def _record(self, msg="Test message", level=logging.INFO, exc_info=None):
        return logging.LogRecord(
            name="test_logger",
            level=level,
            pathname="test.py",
            lineno=42,
            msg=msg,
            args=(),
            exc_info=exc_info,
            func="test_function"
        )

    def test_basic_json_format(self):
        """Test that logs are formatted as valid JSON"""
        data = json.loads(self.formatter.format(self._record()))

        self.assertIn("timestamp", data)
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "test_logger")
        self.assertEqual(data["message"], "Test message")
        self.assertEqual(data["module"], "test")
        self.assertEqual(data["function"], "test_function")
        self.assertEqual(data["line"], 42)

    def test_exception_logging(self):
        """Test that exceptions are included in JSON output"""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(self.formatter.format(
            self._record("Error occurred", logging.ERROR, exc_info)
        ))

        self.assertIn("exception", data)
        self.assertIn("ValueError: Test error", data["exception"])
        self.assertIn("Traceback", data["exception"])

    def test_extra_fields(self):
        """Test that extra fields are included in output"""
        record = self._record("Failed to parse message")
        record.extra_fields = {
            "label": "inbox/1",
            "offset": 17,
            "chain": ["FieldParseError", "ExpectedError"],
        }

        data = json.loads(self.formatter.format(record))

        self.assertEqual(data["label"], "inbox/1")
        self.assertEqual(data["offset"], 17)
        self.assertEqual(data["chain"], ["FieldParseError", "ExpectedError"])

    def test_message_bytes_are_sanitized(self):
        """SECURITY STORY: raw input fragments cannot forge log lines"""
        record = self._record("Failed to parse message")
        record.extra_fields = {
            "context": b"x\r\nFAKE: entry\x1b[31m\xff",
        }

        data = json.loads(self.formatter.format(record))

        self.assertEqual(data["context"], "x\\r\\nFAKE: entry\\xff")

    def test_no_extra_fields(self):
        """Test that formatter works when no extra fields are present"""
        data = json.loads(self.formatter.format(self._record()))
        self.assertEqual(data["message"], "Test message")


if __name__ == '__main__':
    unittest.main()
