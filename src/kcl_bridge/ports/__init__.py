from .checkpointer import Checkpointer
from .log_sink import LogSink
from .record_processor import (
    CURRENT_CONTRACT_VERSION,
    LEGACY_CONTRACT_VERSION,
    LegacyRecordProcessorBase,
    RecordProcessor,
    RecordProcessorBase,
)

# Public port exports keep wiring explicit at composition time.
__all__ = [
    "CURRENT_CONTRACT_VERSION",
    "Checkpointer",
    "LEGACY_CONTRACT_VERSION",
    "LegacyRecordProcessorBase",
    "LogSink",
    "RecordProcessor",
    "RecordProcessorBase",
]
