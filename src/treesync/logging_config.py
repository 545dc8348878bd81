"""Logging configuration for treesync."""

import sys
from typing import Any, TextIO

from loguru import logger

LOG_FORMAT = "{level.icon} {name}: {message}"


def configure_logging(
    *, verbose: bool = False, level: str | None = None, sink: TextIO | Any = None
) -> int:
    """Route treesync logs to one sink, stderr by default.

    Args:
        verbose: Show the dispatcher and sync debug traces.
        level: Explicit level name; takes precedence over verbose.
        sink: Anything loguru accepts as a sink.

    Returns:
        The loguru handler id.
    """
    logger.remove()
    if level is None:
        level = "DEBUG" if verbose else "INFO"
    return logger.add(sink or sys.stderr, level=level.upper(), format=LOG_FORMAT)
