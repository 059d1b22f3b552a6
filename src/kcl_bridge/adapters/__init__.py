from .checkpointer import ActionCheckpointer
from .io import ActionCodec, LineTransport, render_fault
from .legacy_processor import LegacyProcessorAdapter, contract_version, resolve_record_processor

# Public adapter exports are optional but make wiring simpler.
__all__ = [
    "ActionCheckpointer",
    "ActionCodec",
    "LegacyProcessorAdapter",
    "LineTransport",
    "contract_version",
    "render_fault",
    "resolve_record_processor",
]
