"""
Job Context and Configuration State for Logging.

A context variable carries the job token currently being submitted or
polled, so log lines from concurrent pollers can be told apart. Because
asyncio tasks copy the context at creation, each task polling its own
job sees only its own token.

Module-level variables store the logging configuration shared by the
whole process.

Environment Variables:
    - FAKEYOU_LOG_LEVEL: Override log level (1-4 or name)
    - FAKEYOU_LOG_DIR: Directory for the JSONL log file
    - FAKEYOU_JSONL_FILE: JSONL filename
    - FAKEYOU_LOG_ROTATE_BYTES: Max log file size
    - FAKEYOU_LOG_ROTATE_BACKUP: Number of rotated files to keep
"""
from __future__ import annotations

import os
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any, Dict, Optional

from .levels import LEVEL_NAMES, LogLevel

if TYPE_CHECKING:
    from fakeyou.core.config import Settings

# "-" outside any job
_job_token: ContextVar[str] = ContextVar("job_token", default="-")

_configured: bool = False
_log_config: Dict[str, Any] = {}
_current_level: LogLevel = LogLevel.NORMAL


def get_job_token() -> str:
    """Get the job token bound to the current context, or "-"."""
    return _job_token.get()


def set_job_token(token: str) -> Token[str]:
    """
    Bind a job token to the current context for log correlation.

    Returns:
        A contextvars Token; pass it to reset_job_token() when done.
    """
    return _job_token.set(token)


def reset_job_token(previous: Token[str]) -> None:
    """Restore the job token that was bound before set_job_token()."""
    _job_token.reset(previous)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def get_level_name() -> str:
    """Current log level as a name ("MINIMAL", "NORMAL", ...)."""
    return LEVEL_NAMES.get(_current_level, "NORMAL")


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def get_log_config() -> Dict[str, Any]:
    return _log_config


def set_log_config(config: Dict[str, Any]) -> None:
    global _log_config
    _log_config = config


def read_logging_config(settings: Optional["Settings"] = None) -> Dict[str, Any]:
    """
    Read logging configuration from settings and the environment.

    Priority (highest to lowest):
        1. Environment variables (FAKEYOU_LOG_LEVEL, etc.)
        2. The logging section of settings (or of the default settings file)
        3. Defaults (applied by configure_logging)

    Args:
        settings: Settings in use; None loads the default settings file.

    Returns:
        Dictionary with resolved logging configuration.
    """
    from fakeyou.core.config import ConfigValidationError, load_settings

    cfg: Dict[str, Any] = {}

    if settings is None:
        try:
            settings = load_settings()
        except (ConfigValidationError, OSError):
            # An unreadable settings file must not break logging setup
            settings = None
    if settings is not None:
        cfg.update(settings.raw.get("logging") or {})

    if os.getenv("FAKEYOU_LOG_LEVEL"):
        cfg["level"] = os.environ["FAKEYOU_LOG_LEVEL"]
    if os.getenv("FAKEYOU_LOG_DIR"):
        cfg["log_dir"] = os.environ["FAKEYOU_LOG_DIR"]
    if os.getenv("FAKEYOU_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["FAKEYOU_JSONL_FILE"]
    for env_name, key in (
        ("FAKEYOU_LOG_ROTATE_BYTES", "rotate_max_bytes"),
        ("FAKEYOU_LOG_ROTATE_BACKUP", "rotate_backup_count"),
    ):
        value = os.getenv(env_name)
        if value and value.isdigit():
            cfg[key] = int(value)

    return cfg
