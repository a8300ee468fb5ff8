import copy
import logging
import sys
from pathlib import Path

from src.utils.colors import Colors
from src.utils.structured_logging import JSONFormatter

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter to add colors to log levels and specific messages.
    Highlights parse outcomes and dims per-field chatter.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.GREY,
        logging.INFO: Colors.BLUE,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED
    }

    def format(self, record):
        # Copy so file handlers sharing the record never see ANSI codes
        record = copy.copy(record)

        color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"

        if isinstance(record.msg, str):
            if record.msg.startswith("Failed to parse"):
                record.msg = f"{Colors.RED}{Colors.BOLD}{record.msg}{Colors.RESET}"
            elif "extension field" in record.msg.lower():
                record.msg = f"{Colors.GREY}{record.msg}{Colors.RESET}"
            elif record.msg.startswith("Parsed message"):
                record.msg = f"{Colors.GREEN}{record.msg}{Colors.RESET}"

        return super().format(record)


def setup_logging(config) -> None:
    """
    Configure root logging from a Config

    Writes to the configured log file and to stdout. The console gets colors
    (when attached to a terminal) in text mode and JSON lines in json mode;
    the file never gets ANSI codes.
    """
    log_path = Path(config.system.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    level_name = str(config.system.log_level).upper()
    level = logging.getLevelName(level_name)
    valid_level = isinstance(level, int)
    if not valid_level:
        level = logging.INFO

    file_handler = logging.FileHandler(config.system.log_file)
    console_handler = logging.StreamHandler(sys.stdout)

    if config.system.log_format == "json":
        file_handler.setFormatter(JSONFormatter())
        console_handler.setFormatter(JSONFormatter())
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        if Colors.enabled(sys.stdout):
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=level, handlers=[file_handler, console_handler], force=True)

    if not valid_level:
        logging.getLogger(__name__).warning(
            "Invalid log level '%s'; defaulting to INFO",
            config.system.log_level
        )
