"""
Logging configuration for restore-saved-albums.

This module sets up console logging that coexists with the progress bars
shown during a run. Nothing is written to disk: the tool keeps no local
state between runs, and the backup playlist is the only durable artifact.

Usage:
    from restore_saved_albums.core.logger import setup_logging, get_logger

    setup_logging()                # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Reading saved tracks")
"""

import logging
import sys
from typing import TextIO

from tqdm import tqdm


# Log format for console output (compact, tqdm-friendly)
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"

# Verbose format used with --debug style setups
DEBUG_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEBUG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        message = f"{colored_levelname}: {record.getMessage()}"

        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return message


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes without breaking live progress bars.

    Progress bars redraw in place using carriage returns. Writing log lines
    straight to stderr interleaves with those redraws; tqdm.write() prints
    the message above the active bar instead.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, before
    the Spotify session is created.

    Args:
        level: Minimum level shown on the console. At DEBUG the timestamped
               format is used so individual batches can be correlated.
        stream: Output stream, defaults to sys.stderr.

    Behavior:
        1. Set root logger level to DEBUG
        2. Remove any existing handlers
        3. Install a TqdmLoggingHandler at the requested level
        4. Quiet spotipy/urllib3 below WARNING unless level is DEBUG
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    if level <= logging.DEBUG:
        console_handler.setFormatter(
            logging.Formatter(DEBUG_LOG_FORMAT, DEBUG_DATE_FORMAT)
        )
    else:
        console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in ("spotipy", "urllib3"):
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger configured by setup_logging().
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Flush and remove all handlers from the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except Exception:
            pass
        root_logger.removeHandler(handler)
