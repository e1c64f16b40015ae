# src/daylog/core/storage.py
import logging

from ..config.loader import LogConfig

logger = logging.getLogger("daylog.storage")


def ensure_log_directory(config: LogConfig) -> bool:
    """
    Create the log directory if it does not exist yet.

    Failures are reported and swallowed; whatever touches the directory next
    will fail on its own.

    Returns:
        True if the directory exists after the call
    """
    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Could not create log directory %s: %s", config.log_dir, e)
        return False
    return True
