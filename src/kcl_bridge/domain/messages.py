from __future__ import annotations

import base64
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from kcl_bridge.ports.checkpointer import Checkpointer


class ActionName(str, Enum):
    # Inbound action names understood by the dispatch loop.
    INITIALIZE = "initialize"
    PROCESS_RECORDS = "processRecords"
    LEASE_LOST = "leaseLost"
    SHARD_ENDED = "shardEnded"
    SHUTDOWN_REQUESTED = "shutdownRequested"
    # Older daemons signal both lease loss and shard end through one action.
    SHUTDOWN = "shutdown"


class ShutdownReason(str, Enum):
    # Reason values carried by the legacy `shutdown` action and legacy processor callback.
    TERMINATE = "TERMINATE"
    ZOMBIE = "ZOMBIE"


class Record(BaseModel):
    # One stream record as delivered by the daemon; `data` stays base64 encoded.
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )
    data: str
    partition_key: str = Field(alias="partitionKey")
    sequence_number: str = Field(alias="sequenceNumber")
    sub_sequence_number: int | None = Field(default=None, alias="subSequenceNumber")
    approximate_arrival_timestamp: float | None = Field(default=None, alias="approximateArrivalTimestamp")

    @property
    def binary_data(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass(frozen=True, slots=True)
class InitializeInput:
    shard_id: str
    sequence_number: str | None = None


@dataclass(frozen=True, slots=True)
class ProcessRecordsInput:
    records: Sequence[Record]
    millis_behind_latest: int | float
    checkpointer: Checkpointer


@dataclass(frozen=True, slots=True)
class LeaseLostInput:
    # Marker: another worker owns the shard now, checkpointing is not allowed.
    pass


@dataclass(frozen=True, slots=True)
class ShardEndedInput:
    # The shard is exhausted; processors must checkpoint to let child shards start.
    checkpointer: Checkpointer


@dataclass(frozen=True, slots=True)
class ShutdownRequestedInput:
    checkpointer: Checkpointer


ProcessorInput = (
    InitializeInput | ProcessRecordsInput | LeaseLostInput | ShardEndedInput | ShutdownRequestedInput
)
