from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from typing import Any, TextIO

from kcl_bridge.adapters.checkpointer import ActionCheckpointer
from kcl_bridge.adapters.io import ActionCodec, LineTransport
from kcl_bridge.adapters.legacy_processor import contract_version, resolve_record_processor
from kcl_bridge.domain.errors import ProtocolError
from kcl_bridge.domain.logging import (
    ACTION_RECEIVED,
    PROCESSOR_FAULT,
    PROTOCOL_FAULT,
    SESSION_ENDED,
    SESSION_STARTED,
    LogLevel,
    LogMessage,
)
from kcl_bridge.domain.messages import ActionName
from kcl_bridge.kernel.decode import decode_action
from kcl_bridge.observability.logging import NullLogSink
from kcl_bridge.ports.log_sink import LogSink


class KCLProcess:
    """Drives one processor session against the daemon.

    Each inbound action is decoded, handed to the matching processor
    callback and acknowledged with exactly one ``status`` action. Processor
    failures are written to the error stream and suppressed; protocol faults
    (``ProtocolError``) end the session by propagating out of :meth:`run`.
    A clean end of the input stream ends the session normally.
    """

    def __init__(
        self,
        processor: object,
        input: TextIO | None = None,
        output: TextIO | None = None,
        error: TextIO | None = None,
        *,
        log_sink: LogSink | None = None,
    ) -> None:
        self._transport = LineTransport(
            input=input if input is not None else sys.stdin,
            output=output if output is not None else sys.stdout,
            error=error if error is not None else sys.stderr,
        )
        self._codec = ActionCodec(self._transport)
        # One checkpointer per session, shared by every callback.
        self._checkpointer = ActionCheckpointer(self._codec)
        self._log = log_sink or NullLogSink()
        self._contract_version = contract_version(processor)
        self._processor = resolve_record_processor(processor)
        # Callback selection is fixed for the whole session.
        self._handlers: dict[ActionName, Callable[[Any], None]] = {
            ActionName.INITIALIZE: self._processor.initialize,
            ActionName.PROCESS_RECORDS: self._processor.process_records,
            ActionName.LEASE_LOST: self._processor.lease_lost,
            ActionName.SHARD_ENDED: self._processor.shard_ended,
            ActionName.SHUTDOWN_REQUESTED: self._processor.shutdown_requested,
        }
        self._acknowledged = 0

    @property
    def checkpointer(self) -> ActionCheckpointer:
        return self._checkpointer

    @property
    def acknowledged(self) -> int:
        # Number of actions answered with a status line so far.
        return self._acknowledged

    def run(self) -> None:
        self._log.emit(
            LogMessage(
                level=LogLevel.INFO,
                event=SESSION_STARTED,
                fields={"contract_version": self._contract_version},
            )
        )
        try:
            action = self._codec.read_action()
            while action is not None:
                self.process_action(action)
                action = self._codec.read_action()
        except ProtocolError as exc:
            self._log.emit(
                LogMessage(
                    level=LogLevel.ERROR,
                    event=PROTOCOL_FAULT,
                    fields={"kind": type(exc).__name__, "detail": str(exc)},
                )
            )
            raise
        self._log.emit(
            LogMessage(level=LogLevel.INFO, event=SESSION_ENDED, fields={"acknowledged": self._acknowledged})
        )

    def process_action(self, action: Mapping[str, object]) -> None:
        # Decoding failures raise MalformedAction before any status is written.
        target, callback_input = decode_action(action, self._checkpointer)
        response_for = str(action["action"])
        self._log.emit(LogMessage(level=LogLevel.DEBUG, event=ACTION_RECEIVED, fields={"action": response_for}))
        self._dispatch_to_processor(target, response_for, callback_input)
        self._codec.write_action("status", {"responseFor": response_for})
        self._acknowledged += 1

    def _dispatch_to_processor(self, target: ActionName, response_for: str, callback_input: object) -> None:
        try:
            self._handlers[target](callback_input)
        except ProtocolError:
            # The shared stream is broken even if the fault surfaced inside processor code.
            raise
        except Exception as exc:
            # Processor bugs must not desynchronize the pipe; report and move on to the status line.
            self._transport.write_error(exc)
            self._log.emit(
                LogMessage(
                    level=LogLevel.ERROR,
                    event=PROCESSOR_FAULT,
                    fields={"action": response_for, "kind": type(exc).__name__},
                )
            )
