from __future__ import annotations

from collections.abc import Mapping

THROTTLING_EXCEPTION = "ThrottlingException"
INVALID_STATE_EXCEPTION = "InvalidStateException"


class ProtocolError(Exception):
    # Base for faults that leave the daemon-facing stream unusable; always session-fatal.
    pass


class FramingError(ProtocolError):
    # Input line is not a single JSON object.
    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class TransportError(FramingError):
    # Underlying stream failed while reading or writing.
    pass


class MalformedAction(ProtocolError):
    """Raised when an action cannot be decoded into a typed processor input.

    ``field`` names the offending field (dotted for nested values) or is
    ``None`` when the action name itself could not be understood.
    """

    def __init__(self, action: Mapping[str, object], field: str | None = None, detail: str | None = None) -> None:
        if field is None:
            message = f"Received an action which couldn't be understood. Action was '{dict(action)}'"
        else:
            message = f"Action '{dict(action)}': missing or invalid field '{field}'"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.action = action
        self.field = field


class CheckpointError(Exception):
    """Checkpoint failure reported by the daemon.

    ``value`` is the daemon's error name, forwarded untouched. By convention
    ``ThrottlingException`` may be retried while ``InvalidStateException``
    means the two sides of the pipe disagree and the session should end.
    """

    def __init__(self, value: str) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return str(self.value)
