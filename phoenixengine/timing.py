"""Frame time values and a simple stopwatch."""

from __future__ import annotations

import time


class DeltaTime(float):
    """Time between frames, in seconds; behaves as a float."""

    def __new__(cls, time: float = 0.0) -> "DeltaTime":
        return super().__new__(cls, time)

    @property
    def seconds(self) -> float:
        return float(self)

    @property
    def milliseconds(self) -> float:
        return float(self) * 1000.0


class Timer:
    """Stopwatch started on creation."""

    def __init__(self) -> None:
        self._start = 0
        self.reset()

    def reset(self) -> None:
        """Restart the stopwatch."""
        self._start = time.perf_counter_ns()

    def elapsed(self) -> float:
        """Seconds since the last reset."""
        return (time.perf_counter_ns() - self._start) * 1e-9

    def elapsed_millis(self) -> float:
        """Milliseconds since the last reset."""
        return self.elapsed() * 1000.0