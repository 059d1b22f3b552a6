from __future__ import annotations

from typing import Protocol, runtime_checkable


# Checkpointer port: the only capability a processor gets over the daemon-facing stream.
@runtime_checkable
class Checkpointer(Protocol):
    def checkpoint(self, sequence_number: str | None = None) -> None:
        """Record progress at ``sequence_number``, or at the farthest delivered record when ``None``.

        Raises ``CheckpointError`` when the daemon rejects the request or answers out of turn.
        """
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("Checkpointer is a port; use a concrete adapter.")
