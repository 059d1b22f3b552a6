from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from kcl_bridge.domain.errors import MalformedAction
from kcl_bridge.domain.messages import (
    ActionName,
    InitializeInput,
    LeaseLostInput,
    ProcessorInput,
    ProcessRecordsInput,
    Record,
    ShardEndedInput,
    ShutdownReason,
    ShutdownRequestedInput,
)
from kcl_bridge.ports.checkpointer import Checkpointer


def _whole_number_as_int(value: float) -> int | float:
    return int(value) if value.is_integer() else value


# Any finite JSON number or numeric string; whole numbers stay ints.
_Lag = Annotated[float, Field(allow_inf_nan=False), AfterValidator(_whole_number_as_int)]

# Wire-level views of inbound actions. Unknown fields are ignored; only the
# fields a typed input needs are fetched, and a missing one fails the action.


class _InitializeAction(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)
    shard_id: str = Field(alias="shardId")
    # Required but nullable: null means no checkpoint exists yet for the shard.
    sequence_number: str | None = Field(alias="sequenceNumber")


class _ProcessRecordsAction(BaseModel):
    model_config = ConfigDict(extra="ignore")
    records: list[Record]
    millis_behind_latest: _Lag = Field(alias="millisBehindLatest")


class _ShutdownAction(BaseModel):
    model_config = ConfigDict(extra="ignore")
    reason: ShutdownReason


def action_name(action: Mapping[str, object]) -> ActionName:
    name = action.get("action")
    if not isinstance(name, str):
        raise MalformedAction(action)
    try:
        return ActionName(name)
    except ValueError:
        raise MalformedAction(action) from None


def decode_action(
    action: Mapping[str, object], checkpointer: Checkpointer
) -> tuple[ActionName, ProcessorInput]:
    """Decode ``action`` into the callback it targets and that callback's typed input.

    The legacy ``shutdown`` action is folded into ``leaseLost`` (reason
    ``ZOMBIE``) or ``shardEnded`` (reason ``TERMINATE``). Raises
    ``MalformedAction`` for unknown names and missing or undecodable fields.
    """
    name = action_name(action)
    try:
        if name is ActionName.INITIALIZE:
            init = _InitializeAction.model_validate(action)
            return name, InitializeInput(shard_id=init.shard_id, sequence_number=init.sequence_number)
        if name is ActionName.PROCESS_RECORDS:
            batch = _ProcessRecordsAction.model_validate(action)
            return name, ProcessRecordsInput(
                records=tuple(batch.records),
                millis_behind_latest=batch.millis_behind_latest,
                checkpointer=checkpointer,
            )
        if name is ActionName.LEASE_LOST:
            return name, LeaseLostInput()
        if name is ActionName.SHARD_ENDED:
            return name, ShardEndedInput(checkpointer=checkpointer)
        if name is ActionName.SHUTDOWN_REQUESTED:
            return name, ShutdownRequestedInput(checkpointer=checkpointer)
        shutdown = _ShutdownAction.model_validate(action)
    except ValidationError as exc:
        raise MalformedAction(action, _first_error_field(exc), detail=_first_error_message(exc)) from exc
    if shutdown.reason is ShutdownReason.ZOMBIE:
        return ActionName.LEASE_LOST, LeaseLostInput()
    return ActionName.SHARD_ENDED, ShardEndedInput(checkpointer=checkpointer)


def _first_error_field(exc: ValidationError) -> str:
    # Dotted wire path of the first failing field, e.g. `records.0.partitionKey`.
    errors = exc.errors()
    if not errors or not errors[0].get("loc"):
        return "<unknown>"
    return ".".join(str(part) for part in errors[0]["loc"])


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    return str(errors[0].get("msg", ""))
