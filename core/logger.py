"""
Logging configuration for the import engine.
Row contents are logged only at DEBUG level.
"""
import logging
import os
import sys
from typing import Dict, Optional

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers handed out by setup_logger, by name
_loggers: Dict[str, logging.Logger] = {}
_handler: Optional[logging.Handler] = None


def resolve_level(level: Optional[str] = None) -> int:
    """
    Turn a level name into a logging constant.

    Unknown names fall back to INFO instead of failing at import time.
    """
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if name not in VALID_LEVELS:
        name = "INFO"
    return getattr(logging, name)


def _stdout_handler() -> logging.Handler:
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return _handler


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env LOG_LEVEL or INFO.

    Returns:
        Configured logger instance writing to stdout
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    handler = _stdout_handler()
    if handler not in logger.handlers:
        logger.addHandler(handler)

    _loggers[name] = logger
    return logger


def set_level(level: str) -> None:
    """Apply a level to every logger created so far."""
    numeric = resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(numeric)
