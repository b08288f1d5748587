"""
ANSI Color Utilities for Console Output.

Colors are disabled when:
    - stdout is not a TTY (e.g., piped to a file)
    - NO_COLOR is set (https://no-color.org/)
    - FAKEYOU_NO_COLOR=1 is set
"""
from __future__ import annotations

import os
import sys


class Colors:
    """ANSI escape code constants. Always close colored text with RESET."""
    RESET = "\033[0m"

    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


def supports_color() -> bool:
    """
    Check if the terminal supports ANSI color codes.

    Returns:
        True if colors should be used, False otherwise.
    """
    if os.getenv("FAKEYOU_NO_COLOR", "0") == "1":
        return False
    if os.getenv("NO_COLOR"):
        return False

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None or not isatty():
        return False

    if sys.platform == "win32":
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            # STD_OUTPUT_HANDLE = -11, enable virtual terminal processing
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except (AttributeError, OSError):
            return False

    return True


# Checked at import, refreshed by configure_logging(); tests may flip it
USE_COLORS = supports_color()


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text if USE_COLORS is set."""
    if not USE_COLORS:
        return text
    return f"{color}{text}{Colors.RESET}"


def get_tag_color(tag: str) -> str:
    """Get the color for a log tag (SUCCESS, FAIL, WARN, ...)."""
    tag_colors = {
        "SUCCESS": Colors.BRIGHT_GREEN,
        "FAIL": Colors.BRIGHT_RED,
        "ERROR": Colors.BRIGHT_RED,
        "WARN": Colors.BRIGHT_YELLOW,
        "WARNING": Colors.BRIGHT_YELLOW,
        "INFO": Colors.BRIGHT_CYAN,
        "DEBUG": Colors.GRAY,
        "TRACE": Colors.DIM,
    }
    return tag_colors.get(tag.upper(), Colors.WHITE)


def get_status_color(status: str) -> str:
    """Get the color for a job status value (pending, running, ...)."""
    status_colors = {
        "succeeded": Colors.GREEN,
        "complete_success": Colors.GREEN,
        "failed": Colors.RED,
        "complete_failure": Colors.RED,
        "dead": Colors.RED,
        "attempt_failed": Colors.YELLOW,
        "running": Colors.CYAN,
        "started": Colors.CYAN,
        "pending": Colors.BLUE,
    }
    return status_colors.get(str(status).lower(), Colors.DIM)
