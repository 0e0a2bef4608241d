"""Logging setup for yaml-docs.

Applies the ``logging`` section of the configuration to the package
logger. Messages go to stderr so documentation printed in dry-run mode
stays clean on stdout; a log file can be added through the config.
"""

import logging
import sys
from typing import Optional

from yaml_docs.utils.config import LoggingConfig

LOGGER_NAME = "yaml_docs"


def _resolve_level(name: str) -> Optional[int]:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else None


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))
    return handlers


def setup_logging(
    config: Optional[LoggingConfig] = None, level: Optional[str] = None
) -> logging.Logger:
    """Configure the ``yaml_docs`` logger from a logging config section.

    Handlers from an earlier call are closed and replaced, so the
    command can be invoked repeatedly in one process.

    Args:
        config: Logging section of the application config. Defaults
            are used when omitted.
        level: Level name from the command line; takes precedence
            over ``config.level``.

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()
    level_name = level or config.level

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    numeric_level = _resolve_level(level_name)
    package_logger.setLevel(logging.INFO if numeric_level is None else numeric_level)

    formatter = logging.Formatter(config.format)
    for handler in _build_handlers(config):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    if numeric_level is None:
        package_logger.warning("Unknown log level %r, using INFO", level_name)
    package_logger.debug("Logging initialized at level %s", level_name.upper())
    return package_logger
