from .loader import ConfigError, build_log_sink, load_config, load_processor, parse_config
from .models import BridgeConfig, LoggingConfig, ProcessorConfig

__all__ = [
    "BridgeConfig",
    "ConfigError",
    "LoggingConfig",
    "ProcessorConfig",
    "build_log_sink",
    "load_config",
    "load_processor",
    "parse_config",
]
