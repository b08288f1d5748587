"""Text helpers for log output."""
from __future__ import annotations


def preview(text: str, max_chars: int = 80) -> str:
    """
    Shorten text for a log line.

    Collapses whitespace and truncates with an ellipsis so inference
    text never floods the console.

    Examples:
        >>> preview("Hello,\\n  world!")
        'Hello, world!'
        >>> preview("abcdefgh", 5)
        'abcd…'
        >>> preview("abc", 0)
        ''
    """
    if max_chars <= 0:
        return ""
    flat = " ".join(text.split())
    if len(flat) <= max_chars:
        return flat
    return flat[: max_chars - 1] + "…"
