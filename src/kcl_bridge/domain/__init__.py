from .errors import (
    INVALID_STATE_EXCEPTION,
    THROTTLING_EXCEPTION,
    CheckpointError,
    FramingError,
    MalformedAction,
    ProtocolError,
    TransportError,
)
from .logging import LogLevel, LogMessage
from .messages import (
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

# Public domain exports keep imports explicit across layers.
__all__ = [
    "ActionName",
    "CheckpointError",
    "FramingError",
    "INVALID_STATE_EXCEPTION",
    "InitializeInput",
    "LeaseLostInput",
    "LogLevel",
    "LogMessage",
    "MalformedAction",
    "ProcessRecordsInput",
    "ProcessorInput",
    "ProtocolError",
    "Record",
    "ShardEndedInput",
    "ShutdownReason",
    "ShutdownRequestedInput",
    "THROTTLING_EXCEPTION",
    "TransportError",
]
