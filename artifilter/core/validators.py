"""
ArtiFilter Core: Input Validators.

This module provides the validation exceptions raised by the rule engine and
the validation functions for configuration and pattern inputs.
"""
from typing import Any, Dict, List, Optional

from artifilter.core.constants import LOG_LEVELS, ConfigKey, ErrorCode


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


class InvalidPatternError(ValidationError):
    """Raised when a raw pattern string cannot be compiled."""

    def __init__(self, message: str, pattern: Any = None):
        super().__init__(message)
        self.pattern = pattern


class MalformedAncestryEntry(ValidationError):
    """Raised when a trail entry has neither 4 nor 5 segments."""

    def __init__(self, message: str, entry: Optional[str] = None):
        super().__init__(message)
        self.entry = entry


def validate_pattern(pattern: Any) -> bool:
    """Validate a raw pattern string before compilation.

    Only the outer shape is checked here; token counts and version ranges
    are checked by the compiler. An empty string is a valid pattern: its
    single empty token counts as ``*``.

    Args:
        pattern: Raw pattern to validate

    Returns:
        True if valid

    Raises:
        InvalidPatternError: If pattern is not a string or holds a null byte
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(f"Pattern must be string, got {type(pattern)}", pattern)

    if "\x00" in pattern:
        raise InvalidPatternError("Invalid pattern: contains null bytes", pattern)

    return True


def validate_pattern_list(patterns: Any, name: str = "patterns") -> List[str]:
    """Validate a list of raw patterns from configuration.

    Args:
        patterns: Value expected to be a list of strings (or None)
        name: Field name used in error messages

    Returns:
        The patterns as a list

    Raises:
        ValidationError: If the value is not a list of strings
    """
    if patterns is None:
        return []

    if not isinstance(patterns, (list, tuple)):
        raise ValidationError(f"{name} must be a list, got {type(patterns).__name__}")

    for i, pattern in enumerate(patterns):
        if not isinstance(pattern, str):
            raise ValidationError(f"Invalid pattern in {name} at index {i}: {pattern!r}")

    return list(patterns)


def validate_filter_config(filter_config: Dict[str, Any]) -> bool:
    """Validate the filter section of the configuration.

    Args:
        filter_config: Filter configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If the section is invalid
    """
    if not isinstance(filter_config, dict):
        raise ValidationError("Filter configuration must be a dictionary")

    validate_pattern_list(filter_config.get(ConfigKey.INCLUDES), ConfigKey.INCLUDES)
    validate_pattern_list(filter_config.get(ConfigKey.EXCLUDES), ConfigKey.EXCLUDES)

    if ConfigKey.TRANSITIVE in filter_config:
        transitive = filter_config[ConfigKey.TRANSITIVE]
        if not isinstance(transitive, bool):
            raise ValidationError(f"Filter transitive must be boolean: {transitive}")

    return True


def validate_log_level(level: Any) -> bool:
    """Validate a log level name.

    Args:
        level: Level name (case-insensitive)

    Returns:
        True if valid

    Raises:
        ValidationError: If level is unknown
    """
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ValidationError(f"Invalid log level: {level}. Must be one of {list(LOG_LEVELS)}")
    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate ArtiFilter configuration structure.

    Accepts either the full document (with the top-level ``artifilter`` key)
    or its contents.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    section = config.get(ConfigKey.ROOT, config)
    if not isinstance(section, dict):
        raise ValidationError(f"'{ConfigKey.ROOT}' section must be a dictionary")

    if ConfigKey.FILTER in section:
        try:
            validate_filter_config(section[ConfigKey.FILTER])
        except ValidationError as e:
            raise ValidationError(f"Invalid filter configuration: {e}")

    logging_config = section.get(ConfigKey.LOGGING)
    if logging_config is not None:
        if not isinstance(logging_config, dict):
            raise ValidationError("Logging configuration must be a dictionary")
        if ConfigKey.LOG_LEVEL in logging_config:
            validate_log_level(logging_config[ConfigKey.LOG_LEVEL])

    report_config = section.get(ConfigKey.REPORT)
    if report_config is not None:
        if not isinstance(report_config, dict):
            raise ValidationError("Report configuration must be a dictionary")
        for key in (ConfigKey.REPORT_MISSED, ConfigKey.REPORT_FILTERED):
            if key in report_config and not isinstance(report_config[key], bool):
                raise ValidationError(f"Report {key} must be boolean: {report_config[key]}")

    return True
