"""Profiling sessions written as Chrome trace-event JSON."""

from __future__ import annotations

import atexit
import logging
import threading
import time
from dataclasses import dataclass
from typing import IO, Optional

logger = logging.getLogger(__name__)

_HEADER = '{"otherData": {},"traceEvents":[{}'
_FOOTER = "]}"


@dataclass(frozen=True)
class ProfileResult:
    """One timed scope: start in fractional and length in whole microseconds."""

    name: str
    start: float
    elapsed_time: int
    thread_id: int


class Instrumentor:
    """Writes profile results of one open session to a JSON file."""

    _instance: Optional["Instrumentor"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._session_name: Optional[str] = None
        self._stream: Optional[IO[str]] = None

    @property
    def session_name(self) -> Optional[str]:
        """Name of the open session, or None."""
        return self._session_name

    def begin_session(self, name: str, filepath: str = "results.json") -> None:
        """Open a session writing to ``filepath``, closing any open one first."""
        with self._lock:
            if self._session_name is not None:
                logger.error(
                    "Instrumentor.begin_session('%s') when session '%s' already open.",
                    name,
                    self._session_name,
                )
                self._end_session_locked()
            try:
                self._stream = open(filepath, "w", encoding="utf-8")
            except OSError:
                logger.error("Instrumentor could not open results file '%s'.", filepath)
                return
            self._session_name = name
            self._emit(_HEADER)

    def end_session(self) -> None:
        """Close the open session, if any."""
        with self._lock:
            self._end_session_locked()

    def write_profile(self, result: ProfileResult) -> None:
        """Append one trace event to the open session; ignored without one."""
        entry = (
            ",{"
            '"cat":"function",'
            f'"dur":{result.elapsed_time},'
            f'"name":"{result.name}",'
            '"ph":"X",'
            '"pid":0,'
            f'"tid":{result.thread_id},'
            f'"ts":{result.start:.3f}'
            "}"
        )
        with self._lock:
            if self._session_name is not None:
                self._emit(entry)

    @classmethod
    def get(cls) -> "Instrumentor":
        """The shared instance, whose session is closed at interpreter exit."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
                atexit.register(cls._instance.end_session)
            return cls._instance

    def _emit(self, text: str) -> None:
        assert self._stream is not None
        self._stream.write(text)
        self._stream.flush()

    def _end_session_locked(self) -> None:
        if self._session_name is not None and self._stream is not None:
            self._emit(_FOOTER)
            self._stream.close()
        self._stream = None
        self._session_name = None


class InstrumentationTimer:
    """Times a scope and reports it to an instrumentor; use as a context manager."""

    def __init__(self, name: str, instrumentor: Optional[Instrumentor] = None) -> None:
        self.name = name
        self._instrumentor = instrumentor
        self.stopped = False
        self._start_ns = time.perf_counter_ns()

    def stop(self) -> ProfileResult:
        """Report the time since creation and return the result written."""
        end_ns = time.perf_counter_ns()
        result = ProfileResult(
            name=self.name,
            start=self._start_ns / 1000.0,
            elapsed_time=end_ns // 1000 - self._start_ns // 1000,
            thread_id=threading.get_ident(),
        )
        (self._instrumentor or Instrumentor.get()).write_profile(result)
        self.stopped = True
        return result

    def __enter__(self) -> "InstrumentationTimer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self.stopped:
            self.stop()


def cleanup_output_string(expr: str, remove: str) -> str:
    """Drop occurrences of ``remove`` from ``expr`` and turn double quotes into single ones.

    Right after a removed occurrence the next character is copied as is, so
    back-to-back occurrences are only partly removed.
    """
    out = []
    i = 0
    while i < len(expr):
        if remove and expr.startswith(remove, i):
            i += len(remove)
        if i < len(expr):
            ch = expr[i]
            out.append("'" if ch == '"' else ch)
        i += 1
    return "".join(out)