from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

from kcl_bridge.domain.logging import LogLevel, LogMessage
from kcl_bridge.ports.log_sink import LogSink


class NullLogSink(LogSink):
    # Default sink: the error stream stays reserved for processor fault renderings.
    def emit(self, message: LogMessage) -> None:
        _ = message

    def close(self) -> None:
        return None


class StderrLogSink(LogSink):
    """Structured log lines on the diagnostic stream, which the daemon echoes.

    The dispatch loop already renders processor faults on that same stream,
    so events named in ``exclude`` are dropped to keep one entry per fault.
    """

    def __init__(self, stream: TextIO | None = None, *, exclude: frozenset[str] = frozenset()) -> None:
        self._stream = stream if stream is not None else sys.stderr
        self._exclude = exclude

    def emit(self, message: LogMessage) -> None:
        if message.event in self._exclude:
            return
        self._stream.write(_render(message) + "\n")
        self._stream.flush()

    def close(self) -> None:
        # The stream belongs to the host process.
        return None


class JsonlLogSink(LogSink):
    # File-backed structured log sink for session lifecycle diagnostics.
    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: TextIO | None = self._path.open("a", encoding="utf-8")

    def emit(self, message: LogMessage) -> None:
        if self._file is None:
            raise ValueError("JsonlLogSink is closed")
        self._file.write(_render(message) + "\n")
        self._file.flush()

    def close(self) -> None:
        # Close is idempotent to simplify shutdown paths.
        if self._file is None:
            return
        self._file.close()
        self._file = None


class LevelFilter(LogSink):
    # Drops messages below `threshold` before they reach the wrapped sink.
    def __init__(self, sink: LogSink, threshold: LogLevel = LogLevel.INFO) -> None:
        self._sink = sink
        self._threshold = threshold

    def emit(self, message: LogMessage) -> None:
        if message.level >= self._threshold:
            self._sink.emit(message)

    def close(self) -> None:
        self._sink.close()


def _render(message: LogMessage) -> str:
    return json.dumps(message.as_record(), separators=(",", ":"), ensure_ascii=False, default=str)
