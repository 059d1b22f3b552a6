from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import TextIO

from kcl_bridge.domain.errors import THROTTLING_EXCEPTION, CheckpointError
from kcl_bridge.domain.messages import (
    InitializeInput,
    LeaseLostInput,
    ProcessRecordsInput,
    ShardEndedInput,
    ShutdownRequestedInput,
)
from kcl_bridge.ports.checkpointer import Checkpointer
from kcl_bridge.ports.record_processor import RecordProcessorBase


class SampleRecordProcessor(RecordProcessorBase):
    """Writes every record payload to a text stream or a per-shard file.

    Never write to stdout here: it carries the protocol. With ``output_dir``
    set, a ``<shard-id>-<epoch>.log`` file is opened on ``initialize``;
    otherwise payloads go to ``output`` (stderr by default, which the daemon
    echoes).
    """

    def __init__(
        self,
        output_dir: str | None = None,
        output: TextIO | None = None,
        checkpoint_on_shutdown: bool = True,
    ) -> None:
        self._output_dir = Path(output_dir) if output_dir is not None else None
        self._output: TextIO | None = None
        if self._output_dir is None:
            self._output = output if output is not None else sys.stderr
        self._owns_output = False
        self._checkpoint_on_shutdown = checkpoint_on_shutdown
        if self._output_dir is not None:
            # Fail before the session starts if the directory is not writable.
            self._output_dir.mkdir(parents=True, exist_ok=True)
            marker = self._output_dir / ".kcl_bridge_write_check"
            marker.touch()
            marker.unlink()

    def initialize(self, initialize_input: InitializeInput) -> None:
        if self._output_dir is not None and self._output is None:
            path = self._output_dir / f"{initialize_input.shard_id}-{int(time.time())}.log"
            self._output = path.open("w", encoding="utf-8")
            self._owns_output = True

    def process_records(self, process_records_input: ProcessRecordsInput) -> None:
        output = self._require_output()
        last_sequence_number: str | None = None
        for record in process_records_input.records:
            try:
                output.write(record.binary_data.decode("utf-8", errors="replace") + "\n")
                output.flush()
                last_sequence_number = record.sequence_number
            except (OSError, ValueError) as exc:
                # One bad record must not stop the batch.
                sys.stderr.write(f"{exc}: Failed to process record '{record.sequence_number}'\n")
        if last_sequence_number is not None:
            checkpoint_with_retry(process_records_input.checkpointer, last_sequence_number)

    def lease_lost(self, lease_lost_input: LeaseLostInput) -> None:
        _ = lease_lost_input
        self._close()

    def shard_ended(self, shard_ended_input: ShardEndedInput) -> None:
        try:
            checkpoint_with_retry(shard_ended_input.checkpointer)
        finally:
            self._close()

    def shutdown_requested(self, shutdown_requested_input: ShutdownRequestedInput) -> None:
        try:
            if self._checkpoint_on_shutdown:
                checkpoint_with_retry(shutdown_requested_input.checkpointer)
        finally:
            self._close()

    def _require_output(self) -> TextIO:
        if self._output is None:
            raise RuntimeError("process_records called before initialize")
        return self._output

    def _close(self) -> None:
        if self._owns_output and self._output is not None:
            self._output.close()
            self._output = None
            self._owns_output = False


def checkpoint_with_retry(checkpointer: Checkpointer, sequence_number: str | None = None) -> None:
    # Retry exactly once on throttling; anything else goes back to the caller.
    try:
        checkpointer.checkpoint(sequence_number)
    except CheckpointError as exc:
        if exc.value != THROTTLING_EXCEPTION:
            raise
        checkpointer.checkpoint(sequence_number)
