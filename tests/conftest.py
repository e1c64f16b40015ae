# tests/conftest.py
# !/usr/bin/env python3
# coding: utf-8
"""
Pytest configuration and fixtures for the test suite
"""

import os
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from daylog.config.loader import LogConfig
from daylog.core.naming import daily_file_name


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0):
        self.now = self.now + timedelta(days=days, hours=hours)


@pytest.fixture
def log_dir(tmp_path):
    """Log directory path inside the per-test temp dir (not created yet)"""
    return tmp_path / "logs"


@pytest.fixture
def config(log_dir):
    """Default configuration pointed at the per-test log directory"""
    return LogConfig(log_dir=log_dir)


@pytest.fixture
def clock():
    """Clock starting at noon UTC on 2024-01-01"""
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_daily_files():
    """Factory creating sealed daily files for consecutive days"""

    def _make(cfg: LogConfig, first: date, count: int):
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for offset in range(count):
            day = first + timedelta(days=offset)
            path = cfg.log_dir / daily_file_name(day, cfg)
            path.write_text(f"entries for {day.isoformat()}\n", encoding="utf-8")
            paths.append(path)
        return paths

    return _make


@pytest.fixture
def write_current():
    """Factory creating the current file with a given content and day"""

    def _write(cfg: LogConfig, content: str, day: date):
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        path = cfg.current_path
        path.write_text(content, encoding="utf-8")
        stamp = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc).timestamp()
        os.utime(path, (stamp, stamp))
        return path

    return _write
