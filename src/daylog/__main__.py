"""
Command line entry point.
Usage:
  python -m daylog [--log-dir logs] [--max-files 7] log INFO "message"
  python -m daylog rotate
  python -m daylog archive
"""

import argparse
import sys

from .config.loader import load_config
from .core.archive import archive_overflow, prune_archives
from .core.emitter import DailyLogger, Severity
from .core.rotation import rotate_current_log
from .core.storage import ensure_log_directory
from .exceptions import ArchiveError
from .utils.logger import Loggers, get_logger, setup_logger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="daylog", description="Daily log files with archival")
    ap.add_argument("--log-dir", help="log directory (default: $DAYLOG_DIR or ./logs)")
    ap.add_argument("--max-files", type=int, help="daily files kept before archiving")
    ap.add_argument("--env-file", help=".env file to load")
    ap.add_argument("--verbose", action="store_true", help="show diagnostic messages")

    sub = ap.add_subparsers(dest="command", required=True)

    p_log = sub.add_parser("log", help="write one entry")
    p_log.add_argument("severity", type=str.upper, choices=[s.value for s in Severity])
    p_log.add_argument("message", nargs="+")

    sub.add_parser("rotate", help="seal the current file if it belongs to an earlier day")
    sub.add_parser("archive", help="archive daily files beyond the retention threshold")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(log_level="DEBUG" if args.verbose else "WARNING")
    logger = get_logger(Loggers.CLI)

    overrides = {}
    if args.log_dir:
        overrides["log_dir"] = args.log_dir
    if args.max_files is not None:
        overrides["max_log_files"] = args.max_files
    config = load_config(env_file=args.env_file, **overrides)

    try:
        if args.command == "log":
            DailyLogger(config).log(args.severity, " ".join(args.message))
            return 0

        ensure_log_directory(config)
        today = DailyLogger(config).today()

        if args.command == "rotate":
            sealed = rotate_current_log(config, today)
            print(f"[OK] Rotated to {sealed.name}." if sealed else "[OK] Nothing to rotate.")
        else:
            bundle = archive_overflow(config)
            pruned = prune_archives(config, today)
            print(f"[OK] Archived into {bundle.name}." if bundle else "[OK] Nothing to archive.")
            if pruned:
                print(f"[OK] Deleted {len(pruned)} old archive(s).")
        return 0
    except ArchiveError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Log file operation failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
