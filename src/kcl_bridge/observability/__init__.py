from .logging import JsonlLogSink, LevelFilter, NullLogSink, StderrLogSink

__all__ = ["JsonlLogSink", "LevelFilter", "NullLogSink", "StderrLogSink"]
