"""Logging setup for the ``llm_tools`` logger namespace.

Usage:
    from llm_tools.logging_setup import setup_logging
    setup_logging(settings.log_level, settings.log_file)

Modules keep using ``logging.getLogger(__name__)``; everything under
``llm_tools.*`` inherits the handlers attached here.
"""

import logging
import sys
from typing import Optional, Union

_configured = False

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_level(level: Union[str, int]) -> int:
    """Map names like "info" or "WARNING" to logging levels (unknown -> INFO)."""
    if isinstance(level, int):
        return level
    return LEVELS.get(level.lower(), logging.INFO)


def setup_logging(level: Union[str, int] = "info", log_file: Optional[str] = None) -> None:
    """Configure handlers for the ``llm_tools`` logger. Safe to call more than once."""
    global _configured
    if _configured:
        return

    numeric_level = parse_level(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger("llm_tools")
    root.setLevel(numeric_level)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    _configured = True
