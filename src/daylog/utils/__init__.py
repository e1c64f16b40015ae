"""
Utils package for daylog
Provides the diagnostic logger setup and the stdlib logging bridge
"""

from .logger import (
    DailyLogHandler,
    Loggers,
    get_logger,
    setup_logger,
)

__all__ = [
    'DailyLogHandler',
    'Loggers',
    'get_logger',
    'setup_logger',
]
