"""Logging helpers for docscope."""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger with a NullHandler attached, so library use stays silent
        unless the application configures logging.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def configure_logging(level: str | int = "WARNING") -> None:
    """Configure root logging for command line use."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
