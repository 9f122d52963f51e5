"""Logging configuration for skill-bridge.

Usage:
    from skill_bridge.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)

Environment variables:
    SKILL_BRIDGE_LOG_LEVEL: DEBUG, INFO, WARNING (default) or ERROR
"""

import logging
import os
import sys

ROOT_LOGGER_NAME = "skill_bridge"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def get_log_level() -> int:
    level_str = os.environ.get("SKILL_BRIDGE_LOG_LEVEL", "WARNING").upper()
    return _LEVELS.get(level_str, logging.WARNING)


def setup_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the package logger.

    Args:
        level: Log level (uses SKILL_BRIDGE_LOG_LEVEL if not specified)
    """
    if level is None:
        level = get_log_level()

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, DATE_FORMAT))
    package_logger.addHandler(handler)

    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
