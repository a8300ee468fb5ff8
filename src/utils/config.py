"""
Configuration Management Module
Handles loading and validation of environment variables and settings

The grammar engine reads no configuration; these settings only govern the
message façade (size ceiling, full-parse requirement) and logging.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .security_validators import DEFAULT_MAX_MESSAGE_SIZE

VALID_LOG_FORMATS = ("text", "json")


@dataclass
class ParserConfig:
    """Configuration for the message façade"""
    max_message_size: int
    require_full_parse: bool


@dataclass
class SystemConfig:
    """Configuration for system settings"""
    log_level: str
    log_file: str
    log_format: str


class Config:
    """Main configuration class"""

    def __init__(self, env_file: str = ".env"):
        """
        Initialize configuration from environment file

        Values already present in the process environment take precedence
        over the file.

        Args:
            env_file: Path to environment file (default: .env)
        """
        load_dotenv(env_file)

        self.parser = self._load_parser_config()
        self.system = self._load_system_config()

    def _load_parser_config(self) -> ParserConfig:
        """Load message façade configuration"""
        return ParserConfig(
            max_message_size=int(os.getenv("MAX_MESSAGE_SIZE", str(DEFAULT_MAX_MESSAGE_SIZE))),
            require_full_parse=self._get_bool("REQUIRE_FULL_PARSE", True)
        )

    def _load_system_config(self) -> SystemConfig:
        """Load system configuration"""
        return SystemConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/email_format.log"),
            log_format=os.getenv("LOG_FORMAT", "text").strip().lower()
        )

    @staticmethod
    def _get_bool(key: str, default: bool = False) -> bool:
        """Convert environment variable to boolean"""
        value = os.getenv(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')

    def validate(self) -> bool:
        """
        Validate configuration

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        if self.parser.max_message_size <= 0:
            raise ValueError("MAX_MESSAGE_SIZE must be a positive number of bytes")

        if self.system.log_format not in VALID_LOG_FORMATS:
            raise ValueError(
                f"Unknown LOG_FORMAT '{self.system.log_format}'; "
                f"expected one of {', '.join(VALID_LOG_FORMATS)}"
            )

        if not self.system.log_file:
            raise ValueError("LOG_FILE must not be empty")

        return True
