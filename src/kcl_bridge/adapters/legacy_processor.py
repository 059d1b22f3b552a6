from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from kcl_bridge.domain.messages import (
    InitializeInput,
    LeaseLostInput,
    ProcessRecordsInput,
    ShardEndedInput,
    ShutdownReason,
    ShutdownRequestedInput,
)
from kcl_bridge.ports.record_processor import (
    CURRENT_CONTRACT_VERSION,
    LEGACY_CONTRACT_VERSION,
    RecordProcessor,
)


@dataclass(frozen=True, slots=True)
class LegacyProcessorAdapter:
    # Presents a three-callback processor through the five-callback contract.
    delegate: object
    # Optional legacy hook, looked up once at construction.
    _shutdown_requested_hook: Callable[[object], None] | None = field(
        init=False, repr=False, compare=False, default=None
    )

    version = CURRENT_CONTRACT_VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "_shutdown_requested_hook", getattr(self.delegate, "shutdown_requested", None))

    def initialize(self, initialize_input: InitializeInput) -> None:
        self.delegate.initialize(initialize_input.shard_id)

    def process_records(self, process_records_input: ProcessRecordsInput) -> None:
        self.delegate.process_records(process_records_input.records, process_records_input.checkpointer)

    def lease_lost(self, lease_lost_input: LeaseLostInput) -> None:
        _ = lease_lost_input
        self.delegate.shutdown(None, ShutdownReason.ZOMBIE.value)

    def shard_ended(self, shard_ended_input: ShardEndedInput) -> None:
        self.delegate.shutdown(shard_ended_input.checkpointer, ShutdownReason.TERMINATE.value)

    def shutdown_requested(self, shutdown_requested_input: ShutdownRequestedInput) -> None:
        # Absent hook means nothing to do.
        if self._shutdown_requested_hook is not None:
            self._shutdown_requested_hook(shutdown_requested_input.checkpointer)


def contract_version(processor: object) -> int:
    # Explicit `version` wins; otherwise infer from the callbacks the processor exposes.
    version = getattr(processor, "version", None)
    if version is not None:
        return int(version)
    if callable(getattr(processor, "lease_lost", None)):
        return CURRENT_CONTRACT_VERSION
    return LEGACY_CONTRACT_VERSION


def resolve_record_processor(processor: object) -> RecordProcessor:
    """Return ``processor`` as a five-callback processor, adapting legacy ones.

    Called once per session so the dispatch loop never inspects the
    processor again.
    """
    version = contract_version(processor)
    if version == LEGACY_CONTRACT_VERSION:
        return LegacyProcessorAdapter(processor)
    if version == CURRENT_CONTRACT_VERSION:
        return processor  # type: ignore[return-value]
    raise ValueError(f"Unsupported record processor contract version: {version}")
