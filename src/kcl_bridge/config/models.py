from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Config models map YAML sections to typed structures.


class ProcessorConfig(BaseModel):
    # `factory` is a `package.module:attribute` reference, called with `settings` as keyword arguments.
    model_config = ConfigDict(extra="forbid")
    factory: str = Field(pattern=r"^[\w.]+:[\w.]+$")
    settings: dict[str, Any] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    # Diagnostic sink selection; stdout is never an option since it carries the protocol.
    model_config = ConfigDict(extra="forbid")
    sink: Literal["none", "stderr", "jsonl"] = "none"
    path: str | None = None
    level: Literal["debug", "info", "warning", "error"] = "info"

    @model_validator(mode="after")
    def _require_path(self) -> LoggingConfig:
        if self.sink == "jsonl" and not self.path:
            raise ValueError("logging.path is required when sink is 'jsonl'")
        return self


class BridgeConfig(BaseModel):
    # Top-level typed view of the bridge configuration file.
    model_config = ConfigDict(extra="forbid")
    processor: ProcessorConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
