"""
Logging Configuration Module.

All loggers of the extraction system live under the "invoice_ocr"
namespace. Console output goes to stderr with the level name colour-coded;
an optional rotating file receives plain records.

Usage:
    from src.utils.logger import setup_logger, get_logger

    setup_logger(level="DEBUG")          # once, at startup
    logger = get_logger(__name__)        # in every module
    logger.debug("Invoice number pass 1 (explicit pattern)")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, TextIO

import colorama
from colorama import Fore, Style

colorama.init()

ROOT_LOGGER_NAME = "invoice_ocr"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colours the level name of console records.

    DEBUG is cyan, INFO green, WARNING yellow, ERROR red and CRITICAL
    bright red. The message text itself is left untouched.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{color}{original}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {name}")
    return level


def setup_logger(
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
    colorize: bool = True,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configure the "invoice_ocr" logger.

    Calling it again replaces the previous handlers, so the CLI and the
    tests can reconfigure logging freely.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Record format; a pipe-separated default is used if None.
        date_format: strftime format for %(asctime)s.
        log_file: Rotating log file path; no file logging if None.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        colorize: Colour the level name on the console.
        stream: Console stream, sys.stderr by default.

    Returns:
        The configured application logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric_level = _level(level)
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    app_logger.handlers.clear()
    app_logger.propagate = False

    # stdout is reserved for JSON results
    console = logging.StreamHandler(stream or sys.stderr)
    formatter_class = ColoredFormatter if colorize else logging.Formatter
    console.setFormatter(formatter_class(log_format, datefmt=date_format))
    app_logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        app_logger.addHandler(file_handler)

    app_logger.debug(f"Logging initialized at {logging.getLevelName(numeric_level)}")
    return app_logger


def set_verbosity(debug: bool = False, quiet: bool = False) -> None:
    """Switch the application logger to DEBUG or ERROR from the command line."""
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if debug:
        app_logger.setLevel(logging.DEBUG)
    elif quiet:
        app_logger.setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger below the application namespace.

    Example:
        >>> get_logger("src.field_extraction.amounts").name
        'invoice_ocr.src.field_extraction.amounts'
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """Configure logging from the "logging" section of settings.yaml."""
    from config import get_config

    log_file = None
    if get_config("logging.file.enabled", False):
        log_file = get_config("logging.file.path")

    return setup_logger(
        level=get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        log_file=log_file,
        max_bytes=get_config("logging.file.max_bytes", 10485760),
        backup_count=get_config("logging.file.backup_count", 5),
        colorize=get_config("logging.console.colorize", True)
    )
