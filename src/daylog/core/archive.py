# src/daylog/core/archive.py
"""
Archival of overflow daily log files.

When more sealed daily files exist than the retention threshold allows, the
oldest surplus is compressed into a single bundle named after the first and
last day it covers. The bundle is written to a temporary ``.part`` file and
only moved into place once the compressor has been closed without error;
the source files are deleted after that and never before.
"""

import gzip
import logging
import shutil
import tarfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from ..config.loader import LogConfig
from ..exceptions import ArchiveError
from .naming import archive_file_name, list_daily_files, parse_archive_range
from .rotation import calendar_date

logger = logging.getLogger("daylog.archive")

PARTIAL_SUFFIX = ".part"


def _archive_path(config: LogConfig, start: date, end: date) -> Path:
    """Bundle path for a date range, never one that already exists."""
    name = archive_file_name(start, end, config)
    candidate = config.log_dir / name
    stem = name[: -len(config.archive_extension)]
    seq = 1
    while candidate.exists():
        candidate = config.log_dir / f"{stem}_{seq}{config.archive_extension}"
        seq += 1
    return candidate


def _write_gzip(partial: Path, target: Path, sources: List[Path]) -> None:
    # One gzip member holding the files back to back, oldest first
    with open(partial, "wb") as raw, gzip.GzipFile(filename=target.name, mode="wb", fileobj=raw) as out:
        for src in sources:
            with src.open("rb") as f_in:
                shutil.copyfileobj(f_in, out)


def _write_tar(partial: Path, target: Path, sources: List[Path]) -> None:
    with tarfile.open(partial, "w:gz") as tar:
        for src in sources:
            tar.add(src, arcname=src.name)


_WRITERS = {
    "gzip": _write_gzip,
    "tar": _write_tar,
}


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove incomplete archive %s: %s", path, e)


def select_overflow(config: LogConfig) -> List[Tuple[date, Path]]:
    """Oldest daily files beyond the retention threshold, oldest first."""
    daily = list_daily_files(config.log_dir, config)
    surplus = len(daily) - config.max_log_files
    if surplus <= 0:
        return []
    return daily[:surplus]


def archive_overflow(config: LogConfig) -> Optional[Path]:
    """
    Compress the daily files that exceed the retention threshold.

    Args:
        config: Logger configuration

    Returns:
        Path of the new bundle, or None if the threshold was not exceeded

    Raises:
        ArchiveError: If the bundle could not be written. No source file is
            deleted in that case.
        OSError: If the bundle was written but a source file could not be
            deleted. The other sources are still deleted.
    """
    batch = select_overflow(config)
    if not batch:
        return None

    start, end = batch[0][0], batch[-1][0]
    sources = [path for _, path in batch]
    target = _archive_path(config, start, end)
    partial = target.with_name(target.name + PARTIAL_SUFFIX)

    writer = _WRITERS[config.archive_format]
    try:
        writer(partial, target, sources)
        partial.replace(target)
    except (OSError, tarfile.TarError) as e:
        _discard(partial)
        logger.error("Archiving %d log file(s) into %s failed: %s", len(sources), target.name, e)
        raise ArchiveError(target, sources, e) from e

    logger.info("Archived %d log file(s) into %s", len(sources), target.name)

    # A source left behind would be archived again on the next call
    failures = []
    for src in sources:
        try:
            src.unlink()
        except OSError as e:
            logger.error("Failed to delete archived log file %s: %s", src, e)
            failures.append(e)
    if failures:
        raise failures[0]
    return target


def prune_archives(config: LogConfig, today: date) -> List[Path]:
    """
    Delete bundles last modified more than the archive retention ago.

    Does nothing unless ``archive_retention_days`` is configured.

    Returns:
        Paths of the deleted bundles
    """
    if config.archive_retention_days is None or not config.log_dir.is_dir():
        return []

    cutoff = today - timedelta(days=config.archive_retention_days)
    removed = []
    for path in sorted(config.log_dir.iterdir()):
        if parse_archive_range(path.name, config) is None:
            continue
        try:
            mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            if calendar_date(mtime, config) >= cutoff:
                continue
            path.unlink()
        except OSError as e:
            logger.warning("Failed to delete old log archive %s: %s", path.name, e)
            continue
        logger.info("Deleted old log archive: %s", path.name)
        removed.append(path)
    return removed
