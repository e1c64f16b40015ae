# src/daylog/core/emitter.py
"""
Rendering and delivery of log entries.

Each call runs the whole cycle in order: make sure the directory exists,
seal yesterday's file if needed, print the colored line, append the plain
line to the current file, then archive whatever exceeds the retention
threshold.
"""

import os
import sys
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional, TextIO, Union

from colorama import Fore, Style, just_fix_windows_console

from ..config.loader import LogConfig, load_config
from .archive import archive_overflow, prune_archives
from .rotation import calendar_date, rotate_current_log
from .storage import ensure_log_directory


class Severity(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"


ANSI_RESET = Style.RESET_ALL

SEVERITY_COLORS = {
    Severity.ERROR: Fore.RED,
    Severity.WARN: Fore.YELLOW,
    Severity.INFO: Fore.BLUE,
    Severity.DEBUG: Fore.GREEN,
}

SeverityLike = Union[Severity, str]


def coerce_severity(value: SeverityLike) -> SeverityLike:
    """Map a string onto the Severity it names exactly; keep it verbatim otherwise."""
    if isinstance(value, Severity):
        return value
    try:
        return Severity(value)
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class LogEntry:
    severity: SeverityLike
    message: str
    timestamp: datetime

    @property
    def label(self) -> str:
        if isinstance(self.severity, Severity):
            return self.severity.value
        return self.severity


def format_timestamp(moment: datetime, config: LogConfig) -> str:
    """ISO-8601 with milliseconds; UTC instants end in 'Z'."""
    if config.utc:
        return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return moment.astimezone().isoformat(timespec="milliseconds")


def render_line(entry: LogEntry, config: LogConfig) -> str:
    """Plain rendering of an entry, without line terminator."""
    return f"[{format_timestamp(entry.timestamp, config)}] [{entry.label}] {entry.message}"


def colorize(line: str, severity: SeverityLike) -> str:
    color = SEVERITY_COLORS.get(severity) if isinstance(severity, Severity) else None
    if color is None:
        return line
    return f"{color}{line}{ANSI_RESET}"


def _system_clock(config: LogConfig) -> Callable[[], datetime]:
    if config.utc:
        return lambda: datetime.now(timezone.utc)
    return lambda: datetime.now().astimezone()


class DailyLogger:
    """
    Console and daily-file logger for one log directory.

    Args:
        config: Logger configuration (defaults to LogConfig())
        stream: Console stream; sys.stdout at the time of each call if None
        clock: Callable returning the current aware datetime
    """

    def __init__(
        self,
        config: Optional[LogConfig] = None,
        stream: Optional[TextIO] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or LogConfig()
        self._stream = stream
        self._clock = clock or _system_clock(self.config)
        self._lock = threading.Lock()
        if stream is None:
            # ANSI codes on a Windows console need translation
            just_fix_windows_console()

    def log(self, severity: SeverityLike, message: str) -> None:
        """
        Write one entry to the console and the current log file.

        Raises:
            OSError: If rotating or appending to the log file fails
            ArchiveError: If overflow files could not be archived
        """
        with self._lock:
            config = self.config
            ensure_log_directory(config)

            now = self._clock()
            today = calendar_date(now, config)
            rotate_current_log(config, today)

            entry = LogEntry(coerce_severity(severity), str(message), now)
            line = render_line(entry, config)
            self._write_console(line, entry.severity)
            self._append(line, now)

            archive_overflow(config)
            prune_archives(config, today)

    def today(self) -> date:
        """Calendar day of the logger's clock."""
        return calendar_date(self._clock(), self.config)

    def error(self, message: str) -> None:
        self.log(Severity.ERROR, message)

    def warn(self, message: str) -> None:
        self.log(Severity.WARN, message)

    def info(self, message: str) -> None:
        self.log(Severity.INFO, message)

    def debug(self, message: str) -> None:
        self.log(Severity.DEBUG, message)

    def _write_console(self, line: str, severity: SeverityLike) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        if self.config.color:
            line = colorize(line, severity)
        stream.write(line + "\n")
        stream.flush()

    def _append(self, line: str, moment: datetime) -> None:
        path = self.config.current_path
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        # Rotation reads the day of the file's content from its mtime
        stamp = moment.timestamp()
        os.utime(path, (stamp, stamp))


# Default instance used by log_message()
_default_logger: Optional[DailyLogger] = None

# Loggers created by log_message() for an explicit config
_config_loggers: Dict[LogConfig, DailyLogger] = {}


def get_default_logger() -> DailyLogger:
    """Return the process-wide logger, creating it from the environment on first use."""
    global _default_logger
    if _default_logger is None:
        _default_logger = DailyLogger(load_config())
    return _default_logger


def log_message(severity: SeverityLike, message: str, config: Optional[LogConfig] = None) -> None:
    """
    Log one entry without managing a DailyLogger.

    Args:
        severity: Entry severity
        message: Entry text
        config: Directory and settings to log with; the process-wide default
            logger is used if None
    """
    if config is None:
        daily_logger = get_default_logger()
    else:
        daily_logger = _config_loggers.get(config)
        if daily_logger is None:
            daily_logger = _config_loggers[config] = DailyLogger(config)
    daily_logger.log(severity, message)
