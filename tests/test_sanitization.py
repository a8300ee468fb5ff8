"""
Tests for Sanitization Utility
"""

import unittest
from src.utils.sanitization import sanitize_for_logging

class TestSanitization(unittest.TestCase):

    def test_basic_sanitization(self):
        """Test basic string sanitization"""
        self.assertEqual(sanitize_for_logging("Hello World"), "Hello World")
        self.assertEqual(sanitize_for_logging(""), "")
        self.assertEqual(sanitize_for_logging(None), "")

    def test_newline_sanitization(self):
        """Test that newlines are escaped"""
        self.assertEqual(
            sanitize_for_logging("Line 1\r\nLine 2"),
            "Line 1\\r\\nLine 2"
        )
        self.assertEqual(
            sanitize_for_logging("Line 1\nLine 2"),
            "Line 1\\nLine 2"
        )

    def test_control_character_sanitization(self):
        """Test that control characters are removed"""
        self.assertEqual(sanitize_for_logging("Ding\x07"), "Ding")
        self.assertEqual(sanitize_for_logging("\x1b[31mRed\x1b[0m"), "Red")
        self.assertEqual(sanitize_for_logging("a\tb"), "a\tb")

    def test_folded_header_bytes(self):
        """Raw folded header bytes stay on one log line"""
        self.assertEqual(
            sanitize_for_logging(b"Subject: This is\r\n a test"),
            "Subject: This is\\r\\n a test"
        )

    def test_eight_bit_bytes_are_escaped(self):
        self.assertEqual(sanitize_for_logging("café".encode("utf-8")), "caf\\xc3\\xa9")

    def test_unicode_normalization(self):
        """Test unicode normalization"""
        # 'ﬁ' (ligature) -> 'fi'
        self.assertEqual(sanitize_for_logging("ﬁle"), "file")

    def test_truncation(self):
        """Test string truncation"""
        text = "This is a long string that should be truncated"
        sanitized = sanitize_for_logging(text, max_length=10)
        self.assertEqual(sanitized, "This is a ...")

    def test_large_input_truncation(self):
        large_text = b"A" * 2000
        sanitized = sanitize_for_logging(large_text, max_length=255)
        self.assertEqual(len(sanitized), 255 + 3)
        self.assertTrue(sanitized.endswith("..."))


if __name__ == '__main__':
    unittest.main()
