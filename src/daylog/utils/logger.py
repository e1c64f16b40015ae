# src/daylog/utils/logger.py
"""
Diagnostic logging for daylog and a bridge from the standard logging module.

daylog reports its own problems (a log directory that cannot be created, a
failed archive) through named stdlib loggers under ``daylog``. This module
configures that channel and provides a logging.Handler that writes ordinary
logging records through a DailyLogger.
"""

import logging
import sys
from typing import Optional

from ..config.loader import LogConfig
from ..core.emitter import DailyLogger, Severity


# Global flag to track if logging has been configured
_logging_configured = False

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _SkipOwnRecords(logging.Filter):
    # daylog diagnostics are emitted while a DailyLogger holds its lock
    def filter(self, record: logging.LogRecord) -> bool:
        return not (record.name == Loggers.PACKAGE or record.name.startswith(Loggers.PACKAGE + "."))


class DailyLogHandler(logging.Handler):
    """
    logging.Handler that delivers records through a DailyLogger.

    Records get the same console coloring, daily rotation and archival as
    direct DailyLogger calls. The handler's formatter renders the message
    part only; timestamp and severity are added by the DailyLogger.
    """

    LEVEL_MAP = {
        logging.CRITICAL: Severity.ERROR,
        logging.ERROR: Severity.ERROR,
        logging.WARNING: Severity.WARN,
        logging.INFO: Severity.INFO,
        logging.DEBUG: Severity.DEBUG,
    }

    def __init__(self, daily_logger: Optional[DailyLogger] = None,
                 config: Optional[LogConfig] = None, level=logging.NOTSET):
        """
        Initialize the handler.

        Args:
            daily_logger: Logger to write through; built from config if None
            config: Configuration for a new DailyLogger
            level: Minimum record level handled
        """
        super().__init__(level)
        self.daily_logger = daily_logger or DailyLogger(config)
        self.addFilter(_SkipOwnRecords())

    @classmethod
    def severity_for(cls, levelno: int) -> Severity:
        """Nearest Severity at or below the given level number."""
        for threshold in sorted(cls.LEVEL_MAP, reverse=True):
            if levelno >= threshold:
                return cls.LEVEL_MAP[threshold]
        return Severity.DEBUG

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            self.daily_logger.log(self.severity_for(record.levelno), message)
        except Exception:
            self.handleError(record)


def setup_logger(
    log_level: str = "WARNING",
    log_format: Optional[str] = None,
    stream=None
) -> logging.Logger:
    """
    Configure the ``daylog`` diagnostic logger.

    Only the first call has an effect. Diagnostics go to stderr by default so
    they never mix with the colored console output on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Optional custom log format
        stream: Stream for the handler (default: sys.stderr)

    Returns:
        The configured ``daylog`` logger
    """
    global _logging_configured

    package_logger = logging.getLogger(Loggers.PACKAGE)

    # Only configure once
    if _logging_configured:
        return package_logger

    if log_format is None:
        log_format = DEFAULT_FORMAT

    package_logger.setLevel(getattr(logging, log_level.upper()))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))
    package_logger.addHandler(handler)

    _logging_configured = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically one of the Loggers constants)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class Loggers:
    """Logger names used across the package."""
    PACKAGE = "daylog"
    CONFIG = "daylog.config"
    STORAGE = "daylog.storage"
    ROTATION = "daylog.rotation"
    ARCHIVE = "daylog.archive"
    CLI = "daylog.cli"
