from __future__ import annotations

import io
import json
from datetime import UTC, datetime
from pathlib import Path

from kcl_bridge.domain.logging import PROCESSOR_FAULT, SESSION_STARTED, LogLevel, LogMessage
from kcl_bridge.observability.logging import JsonlLogSink, LevelFilter, NullLogSink, StderrLogSink
from kcl_bridge.ports.log_sink import LogSink

_AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


def test_stderr_sink_writes_compact_json_lines() -> None:
    stream = io.StringIO()
    StderrLogSink(stream).emit(LogMessage(level=LogLevel.INFO, event=SESSION_STARTED, at=_AT, fields={"n": 1}))
    assert stream.getvalue() == (
        '{"at":"2024-01-02T03:04:05Z","level":"info","event":"session_started","fields":{"n":1}}\n'
    )


def test_stderr_sink_skips_excluded_events() -> None:
    stream = io.StringIO()
    sink = StderrLogSink(stream, exclude=frozenset({PROCESSOR_FAULT}))
    sink.emit(LogMessage(level=LogLevel.ERROR, event=PROCESSOR_FAULT, fields={"kind": "RuntimeError"}))
    sink.emit(LogMessage(level=LogLevel.INFO, event=SESSION_STARTED))
    assert [json.loads(line)["event"] for line in stream.getvalue().splitlines()] == [SESSION_STARTED]


def test_jsonl_sink_appends_and_close_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "bridge.jsonl"
    sink = JsonlLogSink(path)
    sink.emit(LogMessage(level="info", event="a", at=_AT))
    sink.emit(LogMessage(level="error", event="b", at=_AT))
    sink.close()
    sink.close()
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [(line["level"], line["event"]) for line in lines] == [("info", "a"), ("error", "b")]


def test_level_filter_drops_messages_below_threshold() -> None:
    stream = io.StringIO()
    sink = LevelFilter(StderrLogSink(stream), LogLevel.WARNING)
    sink.emit(LogMessage(level="debug", event="quiet"))
    sink.emit(LogMessage(level="info", event="quiet"))
    sink.emit(LogMessage(level="error", event="loud"))
    assert [json.loads(line)["event"] for line in stream.getvalue().splitlines()] == ["loud"]


def test_sinks_satisfy_log_sink_port(tmp_path: Path) -> None:
    jsonl = JsonlLogSink(tmp_path / "x.jsonl")
    for sink in (NullLogSink(), StderrLogSink(io.StringIO()), jsonl, LevelFilter(NullLogSink())):
        assert isinstance(sink, LogSink)
    jsonl.close()
