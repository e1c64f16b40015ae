"""
Core package for daylog.

This package contains the naming policy, the rotation and archival engines
and the emitter that ties them together on every log call.
"""

from .archive import archive_overflow, prune_archives, select_overflow
from .emitter import (
    DailyLogger,
    LogEntry,
    Severity,
    get_default_logger,
    log_message,
    render_line,
)
from .naming import (
    archive_file_name,
    current_file_name,
    daily_file_name,
    list_daily_files,
    parse_daily_date,
)
from .rotation import rotate_current_log
from .storage import ensure_log_directory

__all__ = [
    # Emitter
    'DailyLogger',
    'LogEntry',
    'Severity',
    'get_default_logger',
    'log_message',
    'render_line',

    # Naming
    'archive_file_name',
    'current_file_name',
    'daily_file_name',
    'list_daily_files',
    'parse_daily_date',

    # Rotation and archival
    'rotate_current_log',
    'archive_overflow',
    'prune_archives',
    'select_overflow',
    'ensure_log_directory',
]
