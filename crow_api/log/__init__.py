# AGPL-3.0 License

import logging
import sys
from enum import Enum

from loguru import logger

from crow_api.config_loader import get_settings


class LoggingFormat(str, Enum):
    CONSOLE = "CONSOLE"
    JSON = "JSON"


def setup_logger(level: str = "INFO", fmt: LoggingFormat = LoggingFormat.CONSOLE):
    level: int = logging.getLevelName(level.upper())
    if type(level) is not int:
        level = logging.INFO

    if fmt == LoggingFormat.JSON:
        logger.remove(None)
        logger.add(
            sys.stdout,
            level=level,
            format="{message}",
            colorize=False,
            serialize=True,
        )
    elif fmt == LoggingFormat.CONSOLE:  # does not print the 'extra' fields
        logger.remove(None)
        logger.add(sys.stderr, level=level, colorize=True)

    return logger


def setup_logger_from_settings(settings=None):
    """
    Install the sink configured under [log] in the settings.

    For application entry points such as a CDK app.py. Library modules
    do not call it, so sinks added by the host application stay in place.
    """
    settings = settings or get_settings()
    return setup_logger(
        settings.get("log.level", "INFO"),
        LoggingFormat(settings.get("log.format", "CONSOLE").upper()),
    )


def get_logger(*args, **kwargs):
    return logger
