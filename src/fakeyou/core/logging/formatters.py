"""
Log Formatters for JSON and Console Output.

    JsonlFormatter: one JSON object per line, for files and log shippers.
    ColoredConsoleFormatter: human-readable, colored terminal lines.

Output Examples:
    JSONL (file):
        {"ts":"2026-10-19T14:30:05+00:00","level":2,"tag":"INFO","message":"poll_status","job_token":"JTINF:abc","extra":{"status":"pending","attempt":1}}

    Console (colored):
        14:30:05 [ INFO  ] (JTINF:abc) poll_status status=pending attempt=1
        14:30:21 [SUCCESS] (JTINF:abc) job_succeeded 16.204s result_url=https://...
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict

from .colors import Colors, colorize, get_status_color, get_tag_color

# Extra fields whose values are job statuses
_STATUS_KEYS = {"status", "vendor_status"}


class JsonlFormatter(logging.Formatter):
    """
    Format log records as JSON Lines.

    Output Format:
        {
            "ts": "2026-10-19T14:30:05+00:00",  # ISO timestamp, local tz
            "level": 2,                          # Numeric level (1-4)
            "tag": "INFO",
            "message": "poll_status",
            "job_token": "JTINF:abc",            # "-" outside a job
            "event": "poll",                     # Optional
            "seconds": 0.5,                      # Optional
            "extra": {"status": "pending"}       # Optional
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).astimezone().isoformat()

        payload: Dict[str, Any] = {
            "ts": ts,
            "level": getattr(record, "numeric_level", 2),
            "tag": getattr(record, "tag", record.levelname),
            "message": record.getMessage(),
            "job_token": getattr(record, "job_token", "-"),
        }

        event = getattr(record, "event", None)
        if event:
            payload["event"] = event

        seconds = getattr(record, "seconds", None)
        if seconds is not None:
            payload["seconds"] = seconds

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """
    Format log records with ANSI colors for the console.

    Output Format:
        HH:MM:SS [ TAG   ] (job_token) message 0.123s key=value

    Job status values are colored by outcome, timings by duration.
    """

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        tag = getattr(record, "tag", record.levelname)
        token = getattr(record, "job_token", "-")

        parts = [
            colorize(ts, Colors.DIM),
            colorize(f"[{tag:^7}]", get_tag_color(tag)),
        ]
        if token != "-":
            parts.append(colorize(f"({token})", Colors.DIM + Colors.CYAN))
        parts.append(record.getMessage())

        event = getattr(record, "event", None)
        if event:
            parts.append(colorize(f"event={event}", Colors.BLUE))

        seconds = getattr(record, "seconds", None)
        if seconds is not None:
            if seconds < 1.0:
                time_color = Colors.GREEN
            elif seconds < 30.0:
                time_color = Colors.YELLOW
            else:
                time_color = Colors.RED
            parts.append(colorize(f"{seconds:.3f}s", time_color))

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            for k, v in extra_data.items():
                color = get_status_color(v) if k in _STATUS_KEYS else Colors.DIM
                parts.append(colorize(f"{k}={v}", color))

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
