#!/usr/bin/env python3
"""Hierarchical configuration manager for ArtiFilter.

This module provides configuration management with:
- 6-level precedence hierarchy
- YAML configuration files
- Environment variable overrides (ARTIFILTER_*)
- Dot-separated key access and deep merging
- Simple type-schema validation

Example:
    >>> config = ConfigManager()
    >>> config.load_file("artifilter.yaml")
    >>> config.get("artifilter.filter.includes", default=[])
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from artifilter.core.constants import DEFAULT_CONFIG, ENV_PREFIX, ConfigKey, ErrorCode


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    SYSTEM_CONFIG = 2
    USER_CONFIG = 3
    ENVIRONMENT = 4
    CLI_ARGS = 5
    RUNTIME = 6  # Highest precedence


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigManager:
    """Thread-safe hierarchical configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. System config (/etc/artifilter/config.yaml)
    3. User config (~/.config/artifilter/config.yaml or --config)
    4. Environment variables (ARTIFILTER_*)
    5. CLI arguments
    6. Runtime updates (highest)
    """

    DEFAULT_CONFIG = {ConfigKey.ROOT: DEFAULT_CONFIG}

    def __init__(self, config_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Optional config file to load
            load_environment: Whether to read ARTIFILTER_* variables
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        # Files may omit the top-level section
        if ConfigKey.ROOT not in config_data:
            config_data = {ConfigKey.ROOT: config_data}

        with self._lock:
            self._config[source] = config_data

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Variables look like ARTIFILTER_SECTION_KEY=value; the first
        underscore after the section separates section from key.
        Example: ARTIFILTER_FILTER_TRANSITIVE=true
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            section, _, name = key[len(ENV_PREFIX) :].lower().partition("_")
            if not section or not name:
                continue

            env_config.setdefault(section, {})[name] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {ConfigKey.ROOT: env_config}

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Whitespace-separated values become lists, so pattern lists can be
        given as ARTIFILTER_FILTER_INCLUDES="org.example:* !*:tests".

        Args:
            value: String value from environment

        Returns:
            Parsed value (bool, int, float, list or str)
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        items = value.split()
        if len(items) > 1:
            return items

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "artifilter.filter.transitive")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        """Get value from nested dictionary using dot notation."""
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}
            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])
            return merged

    def section(self) -> Dict[str, Any]:
        """Merged contents of the top-level ``artifilter`` section."""
        return self.get_all().get(ConfigKey.ROOT, {})

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, override wins."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def validate_schema(self, schema: Dict[str, Any]) -> bool:
        """Validate merged configuration against a type schema.

        Args:
            schema: Nested dict of expected types

        Returns:
            True if valid

        Raises:
            ConfigError: If validation fails
        """
        return self._validate_dict(self.get_all(), schema)

    def _validate_dict(self, config: Dict[str, Any], schema: Dict[str, Any]) -> bool:
        for key, expected_type in schema.items():
            if key not in config:
                continue  # Optional fields

            value = config[key]

            if isinstance(expected_type, dict):
                if not isinstance(value, dict):
                    raise ConfigError(f"Expected dict for {key}, got {type(value).__name__}")
                self._validate_dict(value, expected_type)
            elif isinstance(expected_type, (type, tuple)):
                if not isinstance(value, expected_type):
                    raise ConfigError(
                        f"Invalid type for {key}: got {type(value).__name__}"
                    )

        return True


CONFIG_SCHEMA = {
    ConfigKey.ROOT: {
        ConfigKey.FILTER: {
            ConfigKey.INCLUDES: (list, tuple, str),
            ConfigKey.EXCLUDES: (list, tuple, str),
            ConfigKey.TRANSITIVE: bool,
        },
        ConfigKey.LOGGING: {
            ConfigKey.LOG_LEVEL: str,
        },
        ConfigKey.REPORT: {
            ConfigKey.REPORT_MISSED: bool,
            ConfigKey.REPORT_FILTERED: bool,
        },
    }
}

