"""ArtiFilter Infrastructure Layer.

This layer provides the services used by the rule engine and the CLI:
- ConfigManager: Hierarchical configuration (defaults, YAML, environment, CLI)
- Logger: Structured logging system
"""

from .config_manager import CONFIG_SCHEMA, ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import ConfigSource
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "CONFIG_SCHEMA",
    "ConfigSource",
    "ConfigError",
    "Config",
]
