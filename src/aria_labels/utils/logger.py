"""
Logging configuration for Aria Labels.

Every module logs through ``get_logger(__name__)``, which hangs its logger
under the application logger. ``setup_logging`` attaches the handlers to
that parent once, from the command line entry point.
"""

import functools
import logging
import sys
import time
from typing import Optional, List, TextIO
from logging.handlers import RotatingFileHandler

from . import constants
from .constants import APP_NAME

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(levelname)s | %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colors whole console lines by level when the stream is a terminal."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: Optional[str] = None, stream: Optional[TextIO] = None):
        super().__init__(fmt)
        self.stream = stream

    def use_color(self) -> bool:
        stream = self.stream if self.stream is not None else sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        # The record is shared with every other handler; only the text is colored.
        line = super().format(record)
        color = self.COLORS.get(record.levelno)
        if color and self.use_color():
            return f"{color}{line}{self.RESET}"
        return line


def _file_handler(level: int) -> logging.Handler:
    constants.ensure_directories()
    handler = RotatingFileHandler(
        constants.LOG_FILE,
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _console_handler(level: int, stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, stream=stream))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the application logger.

    Console output goes to stderr so that command output on stdout stays
    machine readable. The log file lives in the application data directory.

    Args:
        level: Logging level (default: INFO)
        log_to_file: Whether to write the rotating log file
        log_to_console: Whether to write to stderr

    Returns:
        The application logger
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if log_to_file:
        logger.addHandler(_file_handler(level))
    if log_to_console:
        logger.addHandler(_console_handler(level, sys.stderr))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, nested under the application logger."""
    if name:
        return logging.getLogger(f"{APP_NAME}.{name}")
    return logging.getLogger(APP_NAME)


class LogCapture(logging.Handler):
    """Collects the records of one logger while the context is active."""

    def __init__(self, logger_name: Optional[str] = None, level: int = logging.DEBUG):
        super().__init__(level)
        self.logger = get_logger(logger_name)
        self.records: List[logging.LogRecord] = []
        self._previous_level = self.logger.level

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def __enter__(self) -> "LogCapture":
        self._previous_level = self.logger.level
        self.logger.addHandler(self)
        self.logger.setLevel(self.level)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.removeHandler(self)
        self.logger.setLevel(self._previous_level)

    def messages(self, level: Optional[int] = None) -> List[str]:
        """Captured messages, optionally only those of one level."""
        return [
            record.getMessage()
            for record in self.records
            if level is None or record.levelno == level
        ]


def log_exception(logger: logging.Logger, exc: Exception, context: str = "") -> None:
    """Log an exception with its traceback, prefixed by ``context``."""
    message = f"{type(exc).__name__}: {exc}"
    logger.error(f"{context}: {message}" if context else message, exc_info=True)


def log_operation(logger: logging.Logger, operation: str):
    """
    Decorator that logs when an operation starts, ends or fails.

    Args:
        logger: Logger instance
        operation: Description of the operation
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"Starting: {operation}")
            started = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Failed: {operation} ({time.monotonic() - started:.2f}s) - {e}")
                raise
            logger.debug(f"Completed: {operation} ({time.monotonic() - started:.2f}s)")
            return result
        return wrapper
    return decorator
