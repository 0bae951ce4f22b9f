"""Logging configuration for the Squares AI command-line tools."""

from __future__ import annotations

import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "squares_ai"


class JsonFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: str = "INFO", format_json: bool = False) -> logging.Handler:
    """
    Configure logging for the package.

    Library modules only create loggers; the command-line tools call this
    once to attach a handler. Calling it again replaces the previous handler.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Whether to output one JSON object per line (for log collectors)

    Returns:
        The installed handler
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_json:
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            log_time_format="%H:%M:%S",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.setLevel(log_level)
    logger.addHandler(handler)
    logger.propagate = False
    return handler


__all__ = ["JsonFormatter", "setup_logging"]
