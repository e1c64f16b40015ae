# src/daylog/core/naming.py
"""
File naming policy for the log directory.

Every name produced here sorts lexicographically in chronological order,
which is what the archival step relies on to find the oldest files.
"""

import re
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Pattern, Tuple

from ..config.loader import LogConfig

DAILY_DATE_FORMAT = "%Y-%m-%d"
ARCHIVE_DATE_FORMAT = "%Y%m%d"


def current_file_name(config: LogConfig) -> str:
    """Name of the active, append-only log file."""
    return f"{config.current_name}{config.log_extension}"


def daily_file_name(day: date, config: LogConfig) -> str:
    """Name of the sealed log file for the given calendar day."""
    return f"{config.daily_prefix}{day.strftime(DAILY_DATE_FORMAT)}{config.log_extension}"


def archive_file_name(start: date, end: date, config: LogConfig) -> str:
    """Name of the bundle that covers the days from start to end inclusive."""
    return (
        f"{start.strftime(ARCHIVE_DATE_FORMAT)}-{end.strftime(ARCHIVE_DATE_FORMAT)}"
        f"{config.archive_extension}"
    )


def _daily_pattern(config: LogConfig) -> Pattern[str]:
    return re.compile(
        rf"^{re.escape(config.daily_prefix)}"
        r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
        rf"{re.escape(config.log_extension)}$"
    )


def parse_daily_date(name: str, config: LogConfig) -> Optional[date]:
    """
    Recover the calendar day from a daily file name.

    Args:
        name: Bare file name (no directory)
        config: Configuration the name was produced with

    Returns:
        The encoded date, or None if the name is not a daily file name
    """
    match = _daily_pattern(config).match(name)
    if match is None:
        return None
    try:
        return date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        # e.g. log-2024-02-30.log
        return None


def list_daily_files(directory: Path, config: LogConfig) -> List[Tuple[date, Path]]:
    """
    List the sealed daily files in a directory, oldest first.

    The current file and anything that does not follow the daily naming
    scheme are left out.
    """
    if not directory.is_dir():
        return []

    current = current_file_name(config)
    found = []
    for path in directory.iterdir():
        if path.name == current or not path.is_file():
            continue
        day = parse_daily_date(path.name, config)
        if day is not None:
            found.append((day, path))

    found.sort(key=lambda item: (item[0], item[1].name))
    return found


def _archive_pattern(config: LogConfig) -> Pattern[str]:
    return re.compile(
        r"^(?P<start>\d{8})-(?P<end>\d{8})(?:_(?P<seq>\d+))?"
        rf"{re.escape(config.archive_extension)}$"
    )


def parse_archive_range(name: str, config: LogConfig) -> Optional[Tuple[date, date]]:
    """Recover the (start, end) days from an archive bundle name."""
    match = _archive_pattern(config).match(name)
    if match is None:
        return None
    try:
        return (
            datetime.strptime(match["start"], ARCHIVE_DATE_FORMAT).date(),
            datetime.strptime(match["end"], ARCHIVE_DATE_FORMAT).date(),
        )
    except ValueError:
        return None
