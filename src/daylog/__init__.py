"""
daylog - console and daily-file logger with archival of old log files
"""

__version__ = "1.0.0"

from .config import LogConfig, load_config
from .core import DailyLogger, Severity, log_message
from .exceptions import ArchiveError, DaylogError
from .utils import DailyLogHandler, setup_logger

__all__ = [
    'LogConfig',
    'load_config',
    'DailyLogger',
    'Severity',
    'log_message',
    'ArchiveError',
    'DaylogError',
    'DailyLogHandler',
    'setup_logger',
]
