#!/usr/bin/env python3
"""
Logging setup for the drive scanner CLI.

Everything logs under the "drive_scanner" logger. Scanner callbacks run on
worker threads, so records carry the thread name.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT_LOGGER = "drive_scanner"

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# OFF sits above CRITICAL so nothing gets through
LOG_LEVELS = {
    "OFF": logging.CRITICAL + 10,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
}

# Library loggers that are chatty below WARNING (inotify events, HTTP connections)
NOISY_LOGGERS = ("watchdog", "urllib3")


def parse_level(log_level: str) -> int:
    """
    Numeric level for a level name.

    Raises:
        ValueError: If the name is not in LOG_LEVELS
    """
    try:
        return LOG_LEVELS[log_level.upper()]
    except KeyError:
        raise ValueError(
            f"Invalid log level: '{log_level}'. Must be one of: {', '.join(sorted(LOG_LEVELS))}"
        ) from None


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the package logger.

    Called once by the CLI group and again by `watch` after the options file
    is loaded, so previous handlers are closed and replaced.

    Args:
        log_level: Level name, see LOG_LEVELS
        log_file: Also append to this file when set

    Returns:
        The package logger
    """
    level = parse_level(log_level)
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(level)
    logger.propagate = False

    if level > logging.CRITICAL:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if not log_file:
        return handlers

    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as e:
        # stdout still works; report once it is attached
        logging.getLogger(ROOT_LOGGER).warning(f"Could not open log file {log_file}: {e}")
    return handlers


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    return logging.getLogger(name)
