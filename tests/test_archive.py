# tests/test_archive.py
"""
Test suite for archiving overflow daily log files.
"""

import gzip
import os
import tarfile
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from daylog.config.loader import LogConfig
from daylog.core import archive as archive_module
from daylog.core.archive import archive_overflow, prune_archives, select_overflow
from daylog.core.naming import list_daily_files
from daylog.exceptions import ArchiveError


def _names(directory):
    return sorted(p.name for p in directory.iterdir())


class TestThreshold:
    """Nothing happens at or below the retention threshold"""

    def test_below_threshold(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 6)

        assert archive_overflow(config) is None
        assert len(list_daily_files(config.log_dir, config)) == 6

    def test_at_threshold(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 7)

        assert select_overflow(config) == []
        assert archive_overflow(config) is None

    def test_current_file_not_counted(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 7)
        config.current_path.write_text("current\n")

        assert archive_overflow(config) is None
        assert config.current_path.exists()


class TestRetentionBound:
    """Archiving brings the daily file count back to the threshold"""

    def test_oldest_overflow_archived(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 9)

        bundle = archive_overflow(config)

        assert bundle.name == "20240101-20240102.gz"
        remaining = list_daily_files(config.log_dir, config)
        assert len(remaining) == 7
        assert remaining[0][0] == date(2024, 1, 3)
        assert remaining[-1][0] == date(2024, 1, 9)
        assert [n for n in _names(config.log_dir) if n.endswith(".gz")] == ["20240101-20240102.gz"]

    def test_gzip_holds_concatenation_in_date_order(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 10)

        bundle = archive_overflow(config)

        with gzip.open(bundle, "rt", encoding="utf-8") as f:
            assert f.read() == (
                "entries for 2024-01-01\n"
                "entries for 2024-01-02\n"
                "entries for 2024-01-03\n"
            )

    def test_zero_threshold_archives_everything(self, log_dir, make_daily_files):
        cfg = LogConfig(log_dir=log_dir, max_log_files=0)
        make_daily_files(cfg, date(2024, 1, 1), 2)

        bundle = archive_overflow(cfg)

        assert bundle.name == "20240101-20240102.gz"
        assert list_daily_files(cfg.log_dir, cfg) == []

    def test_non_daily_log_files_ignored(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 8)
        (config.log_dir / "aaa.log").write_text("not a daily file\n")

        bundle = archive_overflow(config)

        assert bundle.name == "20240101-20240101.gz"
        assert (config.log_dir / "aaa.log").exists()

    def test_tar_format_keeps_file_names(self, log_dir, make_daily_files):
        cfg = LogConfig(log_dir=log_dir, archive_format="tar")
        make_daily_files(cfg, date(2024, 1, 1), 9)

        bundle = archive_overflow(cfg)

        assert bundle.name == "20240101-20240102.tar.gz"
        with tarfile.open(bundle, "r:gz") as tar:
            assert tar.getnames() == ["log-2024-01-01.log", "log-2024-01-02.log"]
            member = tar.extractfile("log-2024-01-02.log")
            assert member.read() == b"entries for 2024-01-02\n"

    def test_existing_bundle_never_overwritten(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 8)
        (config.log_dir / "20240101-20240101.gz").write_bytes(b"earlier bundle")

        bundle = archive_overflow(config)

        assert bundle.name == "20240101-20240101_1.gz"
        assert (config.log_dir / "20240101-20240101.gz").read_bytes() == b"earlier bundle"


class TestArchiveFailure:
    """A failed bundle never costs a daily file"""

    def test_write_failure_keeps_sources(self, config, make_daily_files, monkeypatch, caplog):
        make_daily_files(config, date(2024, 1, 1), 9)
        before = _names(config.log_dir)

        def _broken_copy(src, dst, *args, **kwargs):
            dst.write(src.read(8))
            raise OSError("No space left on device")

        monkeypatch.setattr(archive_module.shutil, "copyfileobj", _broken_copy)

        with caplog.at_level("ERROR", logger="daylog.archive"):
            with pytest.raises(ArchiveError) as exc_info:
                archive_overflow(config)

        assert _names(config.log_dir) == before
        assert exc_info.value.archive_path.name == "20240101-20240102.gz"
        assert [p.name for p in exc_info.value.sources] == ["log-2024-01-01.log", "log-2024-01-02.log"]
        assert isinstance(exc_info.value.cause, OSError)
        assert "failed" in caplog.text

    def test_tar_failure_keeps_sources(self, log_dir, make_daily_files, monkeypatch):
        cfg = LogConfig(log_dir=log_dir, archive_format="tar")
        make_daily_files(cfg, date(2024, 1, 1), 8)
        before = _names(cfg.log_dir)

        def _broken_add(self, name, *args, **kwargs):
            raise OSError("disk error")

        monkeypatch.setattr(tarfile.TarFile, "add", _broken_add)

        with pytest.raises(ArchiveError):
            archive_overflow(cfg)
        assert _names(cfg.log_dir) == before

    def test_missing_source_keeps_others(self, config, make_daily_files, monkeypatch):
        paths = make_daily_files(config, date(2024, 1, 1), 9)
        real_select = archive_module.select_overflow

        def _select_then_vanish(cfg):
            batch = real_select(cfg)
            paths[1].unlink()
            return batch

        monkeypatch.setattr(archive_module, "select_overflow", _select_then_vanish)

        with pytest.raises(ArchiveError):
            archive_overflow(config)
        assert paths[0].exists()
        assert not any(n.endswith(".gz") or n.endswith(".part") for n in _names(config.log_dir))


class TestPruneArchives:
    """Old bundles are removed only when a retention is configured"""

    def _bundles(self, cfg, modified, *names):
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime(modified.year, modified.month, modified.day, 12, tzinfo=timezone.utc).timestamp()
        for name in names:
            path = cfg.log_dir / name
            path.write_bytes(b"x")
            os.utime(path, (stamp, stamp))

    def test_disabled_by_default(self, config):
        self._bundles(config, date(2020, 1, 2), "20200101-20200102.gz")

        assert prune_archives(config, date(2024, 1, 1)) == []
        assert (config.log_dir / "20200101-20200102.gz").exists()

    def test_removes_bundles_modified_past_retention(self, log_dir):
        cfg = LogConfig(log_dir=log_dir, archive_retention_days=30)
        self._bundles(cfg, date(2023, 11, 5), "20231101-20231105.gz", "log-2023-11-01.log")
        self._bundles(cfg, date(2023, 12, 2), "20231120-20231202.gz")
        self._bundles(cfg, date(2023, 12, 25), "20231220-20231225.gz")

        removed = prune_archives(cfg, date(2024, 1, 1))

        assert [p.name for p in removed] == ["20231101-20231105.gz"]
        assert _names(cfg.log_dir) == [
            "20231120-20231202.gz",
            "20231220-20231225.gz",
            "log-2023-11-01.log",
        ]

    def test_age_taken_from_modification_time(self, log_dir):
        """A bundle named after old days but written recently is kept"""
        cfg = LogConfig(log_dir=log_dir, archive_retention_days=30)
        self._bundles(cfg, date(2023, 12, 30), "20230101-20230102.gz")

        assert prune_archives(cfg, date(2024, 1, 1)) == []
        assert (log_dir / "20230101-20230102.gz").exists()


class TestBundleDetails:
    """Gzip header contents and cleanup after a written bundle"""

    def test_gzip_header_names_final_bundle(self, config, make_daily_files):
        make_daily_files(config, date(2024, 1, 1), 9)

        data = archive_overflow(config).read_bytes()

        # FNAME flag set, name stored after the 10-byte fixed header
        assert data[3] & 0x08
        assert data[10:data.index(b"\0", 10)] == b"20240101-20240102"

    def test_source_delete_failure_raised(self, config, make_daily_files, monkeypatch):
        paths = make_daily_files(config, date(2024, 1, 1), 9)
        real_unlink = Path.unlink

        def _unlink(self, *args, **kwargs):
            if self.name == paths[0].name:
                raise PermissionError("locked")
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", _unlink)

        with pytest.raises(PermissionError):
            archive_overflow(config)

        assert (config.log_dir / "20240101-20240102.gz").exists()
        assert paths[0].exists()
        assert not paths[1].exists()
