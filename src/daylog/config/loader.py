# src/daylog/config/loader.py
"""
Handles loading and validation of the logger configuration.

This module is responsible for:
- Defining the validated configuration model passed to every component.
- Loading overrides from environment variables and an optional .env file.
- Falling back to safe defaults when a value is missing or invalid.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger("daylog.config")

# --- Defaults ---
DEFAULT_LOG_DIR = Path("./logs")
DEFAULT_MAX_LOG_FILES = 7
DEFAULT_LOG_EXTENSION = ".log"

ARCHIVE_EXTENSIONS: Dict[str, str] = {
    "gzip": ".gz",
    "tar": ".tar.gz",
}

ENV_PREFIX = "DAYLOG_"


class LogConfig(BaseModel):
    """Settings for one log directory."""

    model_config = ConfigDict(frozen=True)

    log_dir: Path = DEFAULT_LOG_DIR
    max_log_files: int = Field(DEFAULT_MAX_LOG_FILES, ge=0)
    log_extension: str = DEFAULT_LOG_EXTENSION
    archive_format: Literal["gzip", "tar"] = "gzip"
    archive_extension: str = ""
    current_name: str = Field("latest", min_length=1)
    daily_prefix: str = "log-"
    utc: bool = True
    rotate_every_call: bool = False
    archive_retention_days: Optional[int] = Field(None, ge=1)
    color: bool = True

    @model_validator(mode="before")
    @classmethod
    def _fill_archive_extension(cls, data: Any) -> Any:
        # The extension follows the format unless given explicitly
        if isinstance(data, dict) and not data.get("archive_extension"):
            fmt = data.get("archive_format", "gzip")
            if fmt in ARCHIVE_EXTENSIONS:
                data = {**data, "archive_extension": ARCHIVE_EXTENSIONS[fmt]}
        return data

    @model_validator(mode="after")
    def _check_extensions(self) -> "LogConfig":
        if not self.log_extension.startswith("."):
            raise ValueError(f"log_extension must start with '.', got {self.log_extension!r}")
        if self.archive_extension == self.log_extension:
            raise ValueError("archive_extension must differ from log_extension")
        return self

    @property
    def current_path(self) -> Path:
        return self.log_dir / f"{self.current_name}{self.log_extension}"


# --- Helper Functions ---
def _int_or_default(val: Any, default: Optional[int], name: str) -> Optional[int]:
    """Safely converts a value to an integer, falling back to a default."""
    if val is None or val == "":
        return default
    try:
        return int(val)
    except (ValueError, TypeError):
        logger.warning("Configuration value '%s' is invalid. Using default value: %s", name, default)
        return default


def _to_bool(val: Optional[str], default: bool) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env(name: str) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name)


def load_config(env_file: Optional[Union[str, Path]] = None, **overrides: Any) -> LogConfig:
    """
    Build a LogConfig from the environment.

    Args:
        env_file: Optional path of a .env file to load first. Variables that
            are already set in the process environment are not overridden.
        **overrides: Field values that take precedence over the environment.

    Returns:
        A validated LogConfig
    """
    if env_file is not None:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(".env file loaded from %s", env_path)
        else:
            logger.warning(".env file not found at %s. Using environment and defaults.", env_path)

    values: Dict[str, Any] = {
        "log_dir": Path(_env("DIR") or DEFAULT_LOG_DIR),
        "max_log_files": _int_or_default(_env("MAX_LOG_FILES"), DEFAULT_MAX_LOG_FILES, "DAYLOG_MAX_LOG_FILES"),
        "utc": _to_bool(_env("UTC"), True),
        "rotate_every_call": _to_bool(_env("ROTATE_EVERY_CALL"), False),
        "archive_retention_days": _int_or_default(
            _env("ARCHIVE_RETENTION_DAYS"), None, "DAYLOG_ARCHIVE_RETENTION_DAYS"
        ),
        "color": _to_bool(_env("COLOR"), True),
    }
    archive_format = _env("ARCHIVE_FORMAT")
    if archive_format:
        values["archive_format"] = archive_format.strip().lower()

    values.update(overrides)
    return LogConfig(**values)
