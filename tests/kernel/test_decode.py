from __future__ import annotations

import pytest

from kcl_bridge.domain.errors import MalformedAction
from kcl_bridge.domain.messages import (
    ActionName,
    InitializeInput,
    LeaseLostInput,
    ProcessRecordsInput,
    ShardEndedInput,
    ShutdownRequestedInput,
)
from kcl_bridge.kernel.decode import action_name, decode_action


class _StubCheckpointer:
    def checkpoint(self, sequence_number: str | None = None) -> None:
        _ = sequence_number


CHECKPOINTER = _StubCheckpointer()


def test_initialize_normalizes_numeric_sequence_number() -> None:
    target, payload = decode_action(
        {"action": "initialize", "shardId": "shardId-123", "sequenceNumber": 123}, CHECKPOINTER
    )
    assert target is ActionName.INITIALIZE
    assert payload == InitializeInput(shard_id="shardId-123", sequence_number="123")


def test_initialize_accepts_null_sequence_number() -> None:
    _, payload = decode_action({"action": "initialize", "shardId": "s", "sequenceNumber": None}, CHECKPOINTER)
    assert payload == InitializeInput(shard_id="s", sequence_number=None)


@pytest.mark.parametrize("missing", ["shardId", "sequenceNumber"])
def test_initialize_missing_field_is_malformed(missing: str) -> None:
    action = {"action": "initialize", "shardId": "s", "sequenceNumber": "1"}
    del action[missing]
    with pytest.raises(MalformedAction) as exc_info:
        decode_action(action, CHECKPOINTER)
    assert exc_info.value.field == missing
    assert exc_info.value.action is action


def test_process_records_builds_typed_records_and_shares_checkpointer() -> None:
    target, payload = decode_action(
        {
            "action": "processRecords",
            "records": [
                {"data": "bWVvdw==", "partitionKey": "cat", "sequenceNumber": "456", "ignored": True},
                {"data": "", "partitionKey": "dog", "sequenceNumber": 457, "subSequenceNumber": 2},
            ],
            "millisBehindLatest": "0",
        },
        CHECKPOINTER,
    )
    assert target is ActionName.PROCESS_RECORDS
    assert isinstance(payload, ProcessRecordsInput)
    assert payload.millis_behind_latest == 0
    assert payload.checkpointer is CHECKPOINTER
    assert [record.sequence_number for record in payload.records] == ["456", "457"]
    assert payload.records[0].binary_data == b"meow"
    assert payload.records[1].sub_sequence_number == 2


@pytest.mark.parametrize(
    ("action", "field"),
    [
        ({"action": "processRecords", "millisBehindLatest": 0}, "records"),
        ({"action": "processRecords", "records": []}, "millisBehindLatest"),
        ({"action": "processRecords", "records": [], "millisBehindLatest": "soon"}, "millisBehindLatest"),
        (
            {"action": "processRecords", "records": [{"data": "", "sequenceNumber": "1"}], "millisBehindLatest": 0},
            "records.0.partitionKey",
        ),
    ],
)
def test_process_records_bad_fields_are_malformed(action: dict[str, object], field: str) -> None:
    with pytest.raises(MalformedAction) as exc_info:
        decode_action(action, CHECKPOINTER)
    assert exc_info.value.field == field

@pytest.mark.parametrize(
    ("lag", "expected"),
    [(1.5, 1.5), ("0", 0), ("2.25", 2.25), (3.0, 3), (120, 120)],
)
def test_millis_behind_latest_accepts_any_finite_number(lag: object, expected: int | float) -> None:
    action = {"action": "processRecords", "records": [], "millisBehindLatest": lag}
    _, payload = decode_action(action, CHECKPOINTER)
    assert isinstance(payload, ProcessRecordsInput)
    assert payload.millis_behind_latest == expected
    assert type(payload.millis_behind_latest) is type(expected)


@pytest.mark.parametrize("lag", ["NaN", "inf", None])
def test_millis_behind_latest_rejects_non_finite_values(lag: object) -> None:
    with pytest.raises(MalformedAction) as exc_info:
        decode_action({"action": "processRecords", "records": [], "millisBehindLatest": lag}, CHECKPOINTER)
    assert exc_info.value.field == "millisBehindLatest"


def test_marker_actions_need_no_fields() -> None:
    assert decode_action({"action": "leaseLost"}, CHECKPOINTER) == (ActionName.LEASE_LOST, LeaseLostInput())
    target, shard_ended = decode_action({"action": "shardEnded"}, CHECKPOINTER)
    assert target is ActionName.SHARD_ENDED
    assert shard_ended == ShardEndedInput(checkpointer=CHECKPOINTER)
    target, requested = decode_action({"action": "shutdownRequested"}, CHECKPOINTER)
    assert target is ActionName.SHUTDOWN_REQUESTED
    assert requested == ShutdownRequestedInput(checkpointer=CHECKPOINTER)


def test_legacy_shutdown_folds_into_current_callbacks() -> None:
    assert decode_action({"action": "shutdown", "reason": "ZOMBIE"}, CHECKPOINTER) == (
        ActionName.LEASE_LOST,
        LeaseLostInput(),
    )
    assert decode_action({"action": "shutdown", "reason": "TERMINATE"}, CHECKPOINTER) == (
        ActionName.SHARD_ENDED,
        ShardEndedInput(checkpointer=CHECKPOINTER),
    )


@pytest.mark.parametrize("action", [{"action": "shutdown"}, {"action": "shutdown", "reason": "BORED"}])
def test_legacy_shutdown_requires_known_reason(action: dict[str, object]) -> None:
    with pytest.raises(MalformedAction) as exc_info:
        decode_action(action, CHECKPOINTER)
    assert exc_info.value.field == "reason"


@pytest.mark.parametrize("action", [{"action": "bogus"}, {"action": 5}, {"shardId": "s"}, {"action": "checkpoint"}])
def test_unknown_or_missing_action_name_is_malformed(action: dict[str, object]) -> None:
    with pytest.raises(MalformedAction) as exc_info:
        action_name(action)
    assert exc_info.value.field is None
