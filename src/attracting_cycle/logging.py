"""
Logging utilities for the attracting_cycle package.

Exports:
    - logger: Global Loguru logger (disabled for this package until enabled).
    - enable_logging: Turn on package records and add a console sink.
    - setup_logfile: Add file logging with rotation/compression.
"""

from __future__ import annotations

import sys

from loguru import logger

__all__ = [
    "logger",
    "enable_logging",
    "setup_logfile",
]

PACKAGE = "attracting_cycle"
DEFAULT_HANDLER_ID = 0


def _drop_default_handler() -> None:
    # Loguru's stock stderr handler passes DEBUG; package sinks set their own level.
    try:
        logger.remove(DEFAULT_HANDLER_ID)
    except ValueError:
        pass  # already removed by the application


def enable_logging(level: str = "INFO", sink=None) -> int:
    """
    Enable records emitted by attracting_cycle and route them to `sink`.

    Loguru's default stderr handler is removed so that `level` is the only
    threshold applied to package records.

    Args:
        level (str): Logging level (DEBUG, INFO, etc.).
        sink: Any Loguru sink; defaults to stderr.

    Returns:
        int: Handler id, usable with `logger.remove`.
    """
    _drop_default_handler()
    logger.enable(PACKAGE)
    return logger.add(
        sys.stderr if sink is None else sink,
        level=level.upper(),
        filter=PACKAGE,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    )


def setup_logfile(
    log_path: str,
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    level: str = "INFO",
) -> int:
    """
    Add a rotating file handler for package records.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level (DEBUG, INFO, etc.).
    """
    _drop_default_handler()
    logger.enable(PACKAGE)
    handler_id = logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        filter=PACKAGE,
        colorize=False,
        backtrace=True,
        diagnose=False,
    )
    logger.info(f"Loguru file logging initialized: {log_path}")
    return handler_id
