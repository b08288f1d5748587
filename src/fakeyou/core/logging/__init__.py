"""
fakeyou-client Structured Logging.

A small layer over the standard logging module with:
    - Numeric log levels (1-4) for simple configuration
    - Colored console output
    - Optional rotating JSONL file output
    - Job token correlation across concurrent pollers

Handlers are attached to the "fakeyou" logger only, so an application
embedding the client keeps full control of its root logger.

Log Levels:
    1 = MINIMAL  - Errors and failed jobs only
    2 = NORMAL   - Submissions, uploads, job outcomes (default)
    3 = VERBOSE  - Every HTTP request and poll attempt
    4 = DEBUG    - Raw payload shapes

Configuration:
    export FAKEYOU_LOG_LEVEL=3     # VERBOSE
    export FAKEYOU_LOG_DIR=logs    # Also write logs/fakeyou.jsonl
    export FAKEYOU_NO_COLOR=1

Usage:
    from fakeyou.core.logging import get_logger, info, verbose

    log = get_logger("fakeyou.polling")
    info(log, "tts_submitted", model_token="TM:abc", chars=13)
    verbose(log, "poll_status", status="pending", attempt=1)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from . import colors
from .colors import Colors, colorize, get_status_color, get_tag_color, supports_color
from .context import (
    get_job_token,
    get_level,
    get_level_name,
    get_log_config,
    is_configured,
    read_logging_config,
    set_configured,
    reset_job_token,
    set_job_token,
    set_level,
    set_log_config,
)
from .formatters import ColoredConsoleFormatter, JsonlFormatter
from .levels import LEVEL_MAP, LEVEL_NAMES, LogLevel, coerce_level

if TYPE_CHECKING:
    from fakeyou.core.config import Settings

ROOT_LOGGER_NAME = "fakeyou"


def configure_logging(
    level: Optional[int | str | LogLevel] = None,
    force: bool = False,
    settings: Optional["Settings"] = None,
) -> None:
    """
    Configure the "fakeyou" logger.

    Args:
        level: Log level (1-4, level name, or LogLevel); wins over
            FAKEYOU_LOG_LEVEL and the settings file
        force: Reconfigure even if already configured
        settings: Settings whose logging section to use instead of the
            default settings file
    """
    if is_configured() and not force:
        return

    colors.USE_COLORS = supports_color()

    log_config = read_logging_config(settings)
    set_log_config(log_config)

    current_level = coerce_level(level if level is not None else log_config.get("level", LogLevel.NORMAL))
    set_level(current_level)
    python_level = LEVEL_MAP.get(current_level, logging.INFO)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG - 5)  # Filter in handlers
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(python_level)
    console.setFormatter(ColoredConsoleFormatter())
    root.addHandler(console)

    log_dir = log_config.get("log_dir")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / str(log_config.get("jsonl_file", "fakeyou.jsonl")),
            maxBytes=int(log_config.get("rotate_max_bytes", 10 * 1024 * 1024)),
            backupCount=int(log_config.get("rotate_backup_count", 5)),
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(logging.DEBUG - 5)  # Everything goes to file
        file_handler.setFormatter(JsonlFormatter())
        root.addHandler(file_handler)

    set_configured(True)


def _log(
    logger: logging.Logger,
    level: int,
    tag: str,
    msg: str,
    numeric_level: int = 2,
    exc_info: Any = None,
    **fields: Any,
) -> None:
    if numeric_level > get_level():
        return

    event = fields.pop("event", None)
    seconds = fields.pop("seconds", None)
    logger.log(
        level,
        msg,
        exc_info=exc_info,
        extra={
            "tag": tag,
            "job_token": get_job_token(),
            "event": event,
            "seconds": seconds,
            "extra_data": fields or None,
            "numeric_level": numeric_level,
        },
    )


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the "fakeyou" hierarchy, configuring logging if needed."""
    configure_logging()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def info(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log an info message (level 2 = NORMAL)."""
    _log(logger, logging.INFO, "INFO", msg, numeric_level=2, **fields)


def warn(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a warning (level 2 = NORMAL)."""
    _log(logger, logging.WARNING, "WARN", msg, numeric_level=2, **fields)


def error(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log an error (level 1 = MINIMAL)."""
    _log(logger, logging.ERROR, "ERROR", msg, numeric_level=1, **fields)


def success(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a success (level 2 = NORMAL)."""
    _log(logger, logging.INFO, "SUCCESS", msg, numeric_level=2, **fields)


def fail(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a failure (level 1 = MINIMAL)."""
    _log(logger, logging.ERROR, "FAIL", msg, numeric_level=1, **fields)


def verbose(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a verbose message (level 3 = VERBOSE)."""
    _log(logger, logging.DEBUG, "INFO", msg, numeric_level=3, **fields)


def debug(logger: logging.Logger, msg: str, **fields: Any) -> None:
    """Log a debug message (level 4 = DEBUG)."""
    _log(logger, logging.DEBUG - 5, "DEBUG", msg, numeric_level=4, **fields)


__all__ = [
    "LogLevel",
    "LEVEL_MAP",
    "LEVEL_NAMES",
    "coerce_level",
    "Colors",
    "supports_color",
    "colorize",
    "get_tag_color",
    "get_status_color",
    "get_job_token",
    "set_job_token",
    "reset_job_token",
    "get_level",
    "get_level_name",
    "get_log_config",
    "JsonlFormatter",
    "ColoredConsoleFormatter",
    "ROOT_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "info",
    "warn",
    "error",
    "success",
    "fail",
    "verbose",
    "debug",
]
