from __future__ import annotations

from dataclasses import dataclass

from kcl_bridge.adapters.io import ActionCodec
from kcl_bridge.domain.errors import INVALID_STATE_EXCEPTION, CheckpointError
from kcl_bridge.ports.checkpointer import Checkpointer


@dataclass(frozen=True, slots=True)
class ActionCheckpointer(Checkpointer):
    """Checkpoint client over the session's shared codec.

    Holds no state besides the codec reference, so one instance is shared
    by every callback in the session and nested calls simply serialize as
    full request/response round trips.
    """

    codec: ActionCodec

    def checkpoint(self, sequence_number: str | None = None) -> None:
        self.codec.write_action("checkpoint", {"sequenceNumber": sequence_number})
        # Blocks until the daemon answers; the daemon answers every request exactly once.
        response = self.codec.read_action()
        if response is not None and response.get("action") == "checkpoint":
            error = response.get("error")
            if error:
                raise CheckpointError(str(error))
            return
        # Stream closed or a different action arrived: the two sides are out of step.
        # Not retriable; processors should let the session end.
        raise CheckpointError(INVALID_STATE_EXCEPTION)
