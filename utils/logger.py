"""Logging utilities for the pipeline."""
import logging
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console

import config

console = Console(stderr=True)


def setup_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Set up a logger with rich formatting.

    Args:
        name: Logger name
        level: Logging level, defaults to config.LOG_LEVEL

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else config.LOG_LEVEL)

    # Avoid adding multiple handlers
    if not logger.handlers:
        handler = RichHandler(
            rich_tracebacks=True,
            console=console,
            show_time=True,
            show_path=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger


def truncate(text: str, limit: int = config.RAW_LOG_CHARS) -> str:
    """Shorten raw model text for log lines."""
    if text is None:
        return ""
    text = str(text)
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more chars]"
