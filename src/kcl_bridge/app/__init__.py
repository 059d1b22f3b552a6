from .cli import apply_overrides, build_parser, parse_args, run, use_utf8

__all__ = ["apply_overrides", "build_parser", "parse_args", "run", "use_utf8"]
