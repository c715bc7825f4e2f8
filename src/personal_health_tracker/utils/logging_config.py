"""
Logging configuration and utilities.

Sets up the package logger from the ``logging`` section of the configuration,
including per-logger level overrides.
"""

import logging
import sys
from pathlib import Path

from personal_health_tracker.utils.parameters import LoggingConfig


def _build_handler(handler: logging.Handler, config: LoggingConfig) -> logging.Handler:
    handler.setLevel(config.level)
    handler.setFormatter(logging.Formatter(config.format))
    return handler


def setup_logging(config: LoggingConfig, logger_name: str | None = None) -> logging.Logger:
    """
    Set up logging for the tracker.

    Console output goes to stderr so command output on stdout stays clean.
    Loggers listed in ``config.levels`` get their own level, which is how the
    per-record messages of the record store are kept out of CLI runs.

    Args:
        config: Logging configuration.
        logger_name: Optional logger name. If None, configures the root logger.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(config.level)
    logger.handlers.clear()

    if config.console:
        logger.addHandler(_build_handler(logging.StreamHandler(sys.stderr), config))

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_build_handler(logging.FileHandler(log_file, encoding="utf-8"), config))

    for name, level in config.levels.items():
        logging.getLogger(name).setLevel(level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name."""
    return logging.getLogger(name)
