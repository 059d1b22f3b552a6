from __future__ import annotations

import importlib
from pathlib import Path
from typing import TextIO

import yaml
from pydantic import ValidationError

from kcl_bridge.config.models import BridgeConfig, LoggingConfig, ProcessorConfig
from kcl_bridge.domain.logging import PROCESSOR_FAULT, LogLevel
from kcl_bridge.observability.logging import JsonlLogSink, LevelFilter, NullLogSink, StderrLogSink
from kcl_bridge.ports.log_sink import LogSink


class ConfigError(ValueError):
    # Raised for invalid configuration (fail fast before the session starts).
    pass


def load_config(path: Path) -> BridgeConfig:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return parse_config(raw)


def parse_config(raw: dict[str, object]) -> BridgeConfig:
    try:
        return BridgeConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid bridge config: {exc}") from exc


def load_processor(config: ProcessorConfig) -> object:
    # Resolve `module:attr` and build the processor from its settings.
    module_name, _, attr_path = config.factory.partition(":")
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"processor.factory module cannot be imported: {module_name}") from exc
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ConfigError(f"processor.factory references unknown attribute: {config.factory}") from exc
    if not callable(target):
        raise ConfigError(f"processor.factory is not callable: {config.factory}")
    return target(**config.settings)


def build_log_sink(config: LoggingConfig, error_stream: TextIO | None = None) -> LogSink:
    sink: LogSink
    if config.sink == "jsonl":
        assert config.path is not None
        sink = JsonlLogSink(Path(config.path))
    elif config.sink == "stderr":
        # Processor faults are already rendered on the error stream by the dispatch loop.
        sink = StderrLogSink(error_stream, exclude=frozenset({PROCESSOR_FAULT}))
    else:
        sink = NullLogSink()
    return LevelFilter(sink, LogLevel.parse(config.level))
