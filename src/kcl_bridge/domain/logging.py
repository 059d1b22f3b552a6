from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum

# Session event names emitted by the dispatch loop.
SESSION_STARTED = "session_started"
SESSION_ENDED = "session_ended"
ACTION_RECEIVED = "action_received"
PROCESSOR_FAULT = "processor_fault"
PROTOCOL_FAULT = "protocol_fault"


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        try:
            return cls[value.upper()]
        except KeyError as exc:
            raise ValueError(f"unknown log level: {value}") from exc


@dataclass(frozen=True, slots=True)
class LogMessage:
    # One session event; sinks decide where it goes, never the protocol stream.
    level: LogLevel
    event: str
    fields: Mapping[str, object] = field(default_factory=dict)
    at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __post_init__(self) -> None:
        if not self.event:
            raise ValueError("LogMessage.event must be non-empty")
        object.__setattr__(self, "level", LogLevel.parse(self.level))

    def as_record(self) -> dict[str, object]:
        return {
            "at": self.at.isoformat().replace("+00:00", "Z"),
            "level": self.level.name.lower(),
            "event": self.event,
            "fields": dict(self.fields),
        }
