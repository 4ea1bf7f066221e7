import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "html2gutenberg"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, falling back to INFO."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Set up the html2gutenberg package logger.

    Records go to stderr (or ``stream``) so converted HTML written to
    stdout can be piped safely.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path that also receives every record
        format_string: Optional custom format string for log messages
        force: If True, replace existing handlers
        stream: Console stream, defaults to sys.stderr

    Returns:
        Configured package logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    numeric_level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    logger.propagate = False
    return logger
