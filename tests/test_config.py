"""
Tests for configuration loading and validation
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.utils.config import Config
from src.utils.security_validators import DEFAULT_MAX_MESSAGE_SIZE

MISSING_ENV = "/nonexistent/email-format-test.env"


class TestConfigDefaults(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config(MISSING_ENV)
        self.assertEqual(config.parser.max_message_size, DEFAULT_MAX_MESSAGE_SIZE)
        self.assertTrue(config.parser.require_full_parse)
        self.assertEqual(config.system.log_level, "INFO")
        self.assertEqual(config.system.log_file, "logs/email_format.log")
        self.assertEqual(config.system.log_format, "text")
        self.assertTrue(config.validate())


class TestConfigLoading(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.env_file = Path(self.temp_dir.name) / ".env"

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_env_file_values(self):
        self.env_file.write_text(
            "MAX_MESSAGE_SIZE=2048\n"
            "REQUIRE_FULL_PARSE=no\n"
            "LOG_LEVEL=DEBUG\n"
            "LOG_FORMAT= JSON\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            config = Config(str(self.env_file))
        self.assertEqual(config.parser.max_message_size, 2048)
        self.assertFalse(config.parser.require_full_parse)
        self.assertEqual(config.system.log_level, "DEBUG")
        self.assertEqual(config.system.log_format, "json")

    def test_environment_overrides_file(self):
        self.env_file.write_text("LOG_LEVEL=DEBUG\n")
        with patch.dict(os.environ, {"LOG_LEVEL": "ERROR"}, clear=True):
            config = Config(str(self.env_file))
        self.assertEqual(config.system.log_level, "ERROR")


class TestConfigValidation(unittest.TestCase):

    def _config(self, **env):
        with patch.dict(os.environ, env, clear=True):
            return Config(MISSING_ENV)

    def test_non_positive_size(self):
        with self.assertRaises(ValueError):
            self._config(MAX_MESSAGE_SIZE="0").validate()

    def test_unknown_log_format(self):
        with self.assertRaises(ValueError) as ctx:
            self._config(LOG_FORMAT="xml").validate()
        self.assertIn("xml", str(ctx.exception))

    def test_empty_log_file(self):
        with self.assertRaises(ValueError):
            self._config(LOG_FILE="").validate()

    def test_bool_parsing(self):
        for value in ("true", "1", "YES", "on"):
            self.assertTrue(self._config(REQUIRE_FULL_PARSE=value).parser.require_full_parse)
        for value in ("false", "0", "off", "maybe"):
            self.assertFalse(self._config(REQUIRE_FULL_PARSE=value).parser.require_full_parse)


if __name__ == '__main__':
    unittest.main()
