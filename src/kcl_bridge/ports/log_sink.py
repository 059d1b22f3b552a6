from __future__ import annotations

from typing import Protocol, runtime_checkable

from kcl_bridge.domain.logging import LogMessage


# LogSink port for structured diagnostics; implementations must never touch the protocol stream.
@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        """Consume one LogMessage."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")

    def close(self) -> None:
        """Release resources held by the sink."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")
