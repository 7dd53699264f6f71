"""Logging setup using Loguru."""
from __future__ import annotations
import sys
from typing import Any
from loguru import logger

DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | "
    "{message} | {extra}"
)

def setup_logging(level: str = "INFO", serialize: bool = False) -> None:
    """Replace Loguru's default handler with a single stderr sink.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        serialize: Emit one JSON document per line (for CloudWatch) instead of text
    """
    logger.remove()
    logger.configure(extra={"name": "dreamlens"})
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=DEFAULT_FORMAT,
        serialize=serialize,
        backtrace=False,
        diagnose=False,
        catch=True,
    )

def get_logger(name: str) -> Any:
    """Get a logger bound to `name` (typically __name__)."""
    return logger.bind(name=name)
