"""Logging for tika-metadata.

The package only ever logs below the ``tika_metadata`` logger and leaves the
root logger to the host application. Command line entry points call
``LoggerManager.setup_logging`` to get output on stderr.
"""

import logging
import sys
from pathlib import Path
from typing import ClassVar, Optional, Union

from tika_metadata.core.enums import LogLevel

PACKAGE_LOGGER = "tika_metadata"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def _level_number(level: Union[str, LogLevel]) -> int:
    if isinstance(level, LogLevel):
        level = level.value
    return getattr(logging, level.upper())


class LoggerManager:
    """Hands out package loggers and configures their output for the CLI."""

    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _handlers: ClassVar[list[logging.Handler]] = []

    @classmethod
    def setup_logging(
        cls,
        level: Union[str, LogLevel] = LogLevel.INFO,
        log_file: Optional[Union[str, Path]] = None,
        force: bool = False,
    ) -> None:
        """Send package log records to stderr and, optionally, a file.

        Args:
            level: Logging level of the package logger.
            log_file: Optional log file path.
            force: Replace handlers installed by an earlier call.
        """
        if cls._handlers and not force:
            return

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in cls._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        cls._handlers = []

        formatter = logging.Formatter(LOG_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))

        for handler in handlers:
            handler.setFormatter(formatter)
            package_logger.addHandler(handler)

        package_logger.setLevel(_level_number(level))
        cls._handlers = handlers

    @classmethod
    def get_logger(
        cls,
        name: str,
        level: Optional[Union[str, LogLevel]] = None,
    ) -> logging.Logger:
        """Get a logger namespaced under ``tika_metadata``.

        Does not configure any handlers.

        Args:
            name: Logger name (typically module or class name).
            level: Optional specific level for this logger.
        """
        logger = cls._loggers.get(name)
        if logger is None:
            logger = logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
            cls._loggers[name] = logger

        if level:
            logger.setLevel(_level_number(level))
        return logger
