# crossloom/log_config.py
"""Logging configuration for crossloom using Loguru.

Every module in the package logs through the ``logger`` re-exported here, so a
single call to :func:`configure_logging` controls the verbosity of query
normalization, deep paging and HTTP transport records alike.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink=sys.stderr):
    """
    Configures Loguru logger.

    Removes existing handlers and adds a new one with the specified level and sink.

    Args:
        level: The minimum logging level (e.g., "DEBUG", "INFO", "WARNING").
        sink: The output sink (e.g., sys.stderr, "crossloom.log").
    """
    logger.remove()
    logger.add(
        sink,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=sink is sys.stderr,
        backtrace=True,
        diagnose=False,
    )
    logger.debug(f"crossloom logging configured with level={level.upper()}")


__all__ = ["LOG_FORMAT", "configure_logging", "logger"]
