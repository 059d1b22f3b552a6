from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kcl_bridge.domain.messages import (
        InitializeInput,
        LeaseLostInput,
        ProcessRecordsInput,
        Record,
        ShardEndedInput,
        ShutdownRequestedInput,
    )
    from kcl_bridge.ports.checkpointer import Checkpointer

# Contract versions reported through the `version` attribute of a processor.
LEGACY_CONTRACT_VERSION = 1
CURRENT_CONTRACT_VERSION = 2


@runtime_checkable
class RecordProcessor(Protocol):
    # Five-callback contract the dispatch loop always programs against.
    def initialize(self, initialize_input: InitializeInput) -> None: ...

    def process_records(self, process_records_input: ProcessRecordsInput) -> None: ...

    def lease_lost(self, lease_lost_input: LeaseLostInput) -> None: ...

    def shard_ended(self, shard_ended_input: ShardEndedInput) -> None: ...

    def shutdown_requested(self, shutdown_requested_input: ShutdownRequestedInput) -> None: ...


class RecordProcessorBase:
    """Base class for processors written against the current contract.

    Callbacks are invoked in this order for one shard:

    1. ``initialize`` once, before anything else;
    2. ``process_records`` zero or more times;
    3. exactly one of ``lease_lost``, ``shard_ended`` or ``shutdown_requested``.

    ``shard_ended`` must checkpoint (with no sequence number) so that child
    shards can be picked up. ``lease_lost`` must not checkpoint since another
    worker may already hold the lease.
    """

    version: ClassVar[int] = CURRENT_CONTRACT_VERSION

    def initialize(self, initialize_input: InitializeInput) -> None:
        raise NotImplementedError

    def process_records(self, process_records_input: ProcessRecordsInput) -> None:
        raise NotImplementedError

    def lease_lost(self, lease_lost_input: LeaseLostInput) -> None:
        raise NotImplementedError

    def shard_ended(self, shard_ended_input: ShardEndedInput) -> None:
        raise NotImplementedError

    def shutdown_requested(self, shutdown_requested_input: ShutdownRequestedInput) -> None:
        # Graceful shutdown checkpoint is optional.
        return None


class LegacyRecordProcessorBase:
    """Base class for processors written against the original three-callback contract.

    ``shutdown`` receives ``reason`` ``"TERMINATE"`` (checkpoint with no
    argument) or ``"ZOMBIE"`` (``checkpointer`` is ``None``; do not checkpoint).
    Subclasses may add ``shutdown_requested(checkpointer)``.
    """

    version: ClassVar[int] = LEGACY_CONTRACT_VERSION

    def initialize(self, shard_id: str) -> None:
        raise NotImplementedError

    def process_records(self, records: Sequence[Record], checkpointer: Checkpointer) -> None:
        raise NotImplementedError

    def shutdown(self, checkpointer: Checkpointer | None, reason: str) -> None:
        raise NotImplementedError
