"""
Logging configuration and utilities.

Log records go to stderr so that command output on stdout (reports, JSON
timeline lines) stays machine-readable.
"""

import logging
import sys
from pathlib import Path

from tracker_interlink.utils.parameters import LoggingConfig


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    config: LoggingConfig,
    logger_name: str | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Set up logging for the application.

    Args:
        config: Logging configuration.
        logger_name: Optional logger name. If None, configures the root logger.
        verbose: Force DEBUG level regardless of the configured level.

    Returns:
        Configured logger instance.
    """
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper())
    formatter = logging.Formatter(config.format)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()

    if config.console:
        logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), level, formatter)
        )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name."""
    return logging.getLogger(name)
