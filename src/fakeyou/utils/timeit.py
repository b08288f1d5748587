"""
Timing Utilities.

Measures wall-clock time of HTTP calls and whole polling runs so the
durations can be attached to log lines (seconds=...).

Example:
    with timeit("tts inference") as t:
        response = await http.post(...)
    verbose(log, "http_request", seconds=t.seconds)
"""
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter


@dataclass
class Timing:
    """
    Finished measurement.

    Attributes:
        name: What was timed (e.g., "poll", "image upload").
        seconds: Duration in seconds.
    """
    name: str
    seconds: float


class timeit:
    """
    Context manager timing a block with perf_counter().

    Around awaited calls the measured time includes the wait, which is
    what request and poll logs report.
    """

    def __init__(self, name: str):
        self.name = name
        self._t0: float | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "timeit":
        self._t0 = perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.timing = Timing(name=self.name, seconds=perf_counter() - self._started())

    def _started(self) -> float:
        if self._t0 is None:
            raise RuntimeError(f"timeit({self.name!r}) used outside a with block")
        return self._t0

    @property
    def seconds(self) -> float:
        """Elapsed seconds; while still inside the block, time so far."""
        if self.timing is not None:
            return self.timing.seconds
        if self._t0 is None:
            return 0.0
        return perf_counter() - self._t0
