"""
Exceptions raised by daylog.

Filesystem errors during rotation and appending are not wrapped; they
propagate as the OSError the platform raised.
"""

from pathlib import Path
from typing import Sequence


class DaylogError(Exception):
    """Base class for daylog errors."""


class ArchiveError(DaylogError):
    """
    Raised when an archive bundle could not be written completely.

    None of the source files are deleted when this is raised. The partial
    bundle has already been removed.
    """

    def __init__(self, archive_path: Path, sources: Sequence[Path], cause: BaseException):
        self.archive_path = archive_path
        self.sources = list(sources)
        self.cause = cause
        super().__init__(
            f"Failed to archive {len(self.sources)} log file(s) into {archive_path.name}: {cause}"
        )
