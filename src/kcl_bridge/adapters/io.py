from __future__ import annotations

import json
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TextIO

from kcl_bridge.domain.errors import FramingError, TransportError


@dataclass(frozen=True, slots=True)
class LineTransport:
    """Line-oriented access to the daemon pipes.

    ``input`` and ``output`` carry protocol lines; ``error`` is the
    diagnostic channel the daemon echoes to its own logs. No JSON
    awareness lives here.
    """

    input: TextIO
    output: TextIO
    error: TextIO

    def read_line(self) -> str | None:
        # Skip blank and whitespace-only lines; None marks end of stream.
        while True:
            try:
                raw = self.input.readline()
            except (OSError, ValueError) as exc:
                raise TransportError(f"failed to read from input stream: {exc}") from exc
            if not raw:
                return None
            line = raw.strip()
            if line:
                return line

    def write_line(self, line: str) -> None:
        # Pad with newlines so stray writes sharing the stream never merge with ours.
        try:
            self.output.write(f"\n{line}\n")
            self.output.flush()
        except (OSError, ValueError) as exc:
            raise TransportError(f"failed to write to output stream: {exc}") from exc

    def write_error(self, error: BaseException | object) -> None:
        if isinstance(error, BaseException):
            text = render_fault(error)
        else:
            try:
                text = str(error)
            except Exception:
                text = f"{type(error).__name__}: <unprintable>"
        try:
            self.error.write(f"{text}\n")
            self.error.flush()
        except (OSError, ValueError):
            # Diagnostics are best effort; a broken error pipe must not end the session.
            pass


def render_fault(error: BaseException) -> str:
    # `<kind>: <message>` followed by one tab-indented line per stack frame.
    try:
        header = f"{type(error).__name__}: {error}"
    except Exception:
        # A processor exception whose __str__ fails still gets reported.
        header = f"{type(error).__name__}: <unprintable>"
    frames = [
        f"{frame.filename}:{frame.lineno}:in `{frame.name}'"
        for frame in traceback.extract_tb(error.__traceback__)
    ]
    if not frames:
        return header
    return header + "\n\t" + "\n\t".join(frames)


@dataclass(frozen=True, slots=True)
class ActionCodec:
    # Maps one JSON object per line to/from an action mapping.
    transport: LineTransport

    def read_action(self) -> dict[str, object] | None:
        line = self.transport.read_line()
        if line is None:
            return None
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise FramingError(f"input line is not valid JSON: {exc}", line=line) from exc
        if not isinstance(payload, dict):
            raise FramingError("input line is not a JSON object", line=line)
        return payload

    def write_action(self, action: str, fields: Mapping[str, object] | None = None) -> None:
        # `action` is always the first key; caller fields never override it.
        message: dict[str, object] = {"action": action}
        for key, value in (fields or {}).items():
            if key != "action":
                message[key] = value
        self.transport.write_line(json.dumps(message, separators=(",", ":"), ensure_ascii=False))
