"""
ANSI Color codes for console output formatting
"""

import os
import sys


class Colors:
    """ANSI color codes and helper methods"""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    UNDERLINE = "\033[4m"

    # Text Colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    GREY = "\033[90m"

    @staticmethod
    def enabled(stream=None) -> bool:
        """
        Whether colors should be emitted on ``stream`` (default stdout)

        Honors the NO_COLOR convention and disables colors when the output
        is redirected to a file or pipe.
        """
        if os.getenv("NO_COLOR"):
            return False
        stream = stream if stream is not None else sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    @classmethod
    def colorize(cls, text: str, color: str) -> str:
        """Wrap text in color codes"""
        return f"{color}{text}{cls.RESET}"

    @classmethod
    def header(cls, text: str) -> str:
        """Format as a header (Bold Cyan)"""
        return f"{cls.BOLD}{cls.CYAN}{text}{cls.RESET}"

    @classmethod
    def warning(cls, text: str) -> str:
        """Format as a warning (Yellow)"""
        return f"{cls.YELLOW}{text}{cls.RESET}"

    @classmethod
    def error(cls, text: str) -> str:
        """Format as an error (Red)"""
        return f"{cls.RED}{text}{cls.RESET}"

    @classmethod
    def success(cls, text: str) -> str:
        """Format as success (Green)"""
        return f"{cls.GREEN}{text}{cls.RESET}"

    @classmethod
    def field_name(cls, name: str) -> str:
        """Format a header field name (Bold Blue)"""
        return f"{cls.BOLD}{cls.BLUE}{name}{cls.RESET}"
