# src/daylog/core/rotation.py
"""
Sealing of the current log file into a dated historical file.
"""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from ..config.loader import LogConfig
from .naming import daily_file_name

logger = logging.getLogger("daylog.rotation")


def calendar_date(moment: datetime, config: LogConfig) -> date:
    """Calendar day of an instant, in UTC or local time depending on config."""
    if config.utc:
        return moment.astimezone(timezone.utc).date()
    return moment.astimezone().date()


def current_period(config: LogConfig) -> Optional[date]:
    """
    Day the current log file belongs to, or None if there is no current file.

    The emitter stamps the file's modification time with the timestamp of
    the last entry, so the mtime identifies the day of the file's content.
    """
    try:
        mtime = config.current_path.stat().st_mtime
    except FileNotFoundError:
        return None
    return calendar_date(datetime.fromtimestamp(mtime, tz=timezone.utc), config)


def rotate_current_log(config: LogConfig, today: date) -> Optional[Path]:
    """
    Seal the current log file if it belongs to an earlier day.

    With ``rotate_every_call`` set, the file is sealed under today's name on
    every call regardless of its age.

    Args:
        config: Logger configuration
        today: Calendar day of the log call in progress

    Returns:
        Path of the sealed file, or None if nothing was rotated

    Raises:
        OSError: If the collision delete or the rename fails
    """
    current = config.current_path
    period = current_period(config)
    if period is None:
        return None

    if config.rotate_every_call:
        period = today
    elif period == today:
        return None

    target = config.log_dir / daily_file_name(period, config)
    if target.exists():
        logger.warning("Replacing existing log file %s", target.name)
        target.unlink()

    current.rename(target)
    logger.debug("Rotated %s -> %s", current.name, target.name)
    return target
