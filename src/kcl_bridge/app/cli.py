from __future__ import annotations

import argparse
import io
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from kcl_bridge.config.loader import build_log_sink, load_config, load_processor
from kcl_bridge.config.models import BridgeConfig, LoggingConfig
from kcl_bridge.kernel.process import KCLProcess

# Thin shell around the dispatch loop: the daemon launches this process and
# owns stdin/stdout, so nothing here may print to stdout.


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kcl-bridge", description="Record processor bridge for a KCL daemon")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--processor", help="Override processor factory (module:attribute)")
    parser.add_argument("--log-path", help="Write structured diagnostics to this JSONL file")
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    # Parse CLI arguments; caller passes argv for testability.
    return build_parser().parse_args(argv)


def apply_overrides(config: BridgeConfig, args: argparse.Namespace) -> BridgeConfig:
    # CLI flags take precedence over the config file.
    if args.processor is not None:
        config = config.model_copy(
            update={"processor": config.processor.model_copy(update={"factory": args.processor})}
        )
    if args.log_path is not None:
        config = config.model_copy(
            update={"logging": LoggingConfig(sink="jsonl", path=args.log_path, level=config.logging.level)}
        )
    return config


def use_utf8(stream: TextIO, *, newline: str | None = None) -> None:
    # The daemon speaks UTF-8 with \n line endings whatever the host locale says.
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding="utf-8", newline=newline)


def run(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    config = apply_overrides(load_config(Path(args.config)), args)
    processor = load_processor(config.processor)
    use_utf8(sys.stdin)
    use_utf8(sys.stdout, newline="\n")
    log_sink = build_log_sink(config.logging, sys.stderr)
    try:
        KCLProcess(processor, sys.stdin, sys.stdout, sys.stderr, log_sink=log_sink).run()
    finally:
        log_sink.close()
    return 0
