"""
ArtiFilter Core: Constants and Type Definitions

This module provides system-wide constants, error codes, coordinate field
identifiers and configuration keys shared by the rule engine, the
configuration layer and the command-line front end.
"""
from enum import Enum, IntEnum
from typing import TypeAlias

# Version information
ARTIFILTER_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for ArtiFilter operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad pattern, trail entry or configuration
    NOT_FOUND = 2  # Config or input file doesn't exist
    INTERNAL_ERROR = 6  # Bug in ArtiFilter


# Type aliases for clarity
RawPattern: TypeAlias = str
TrailEntry: TypeAlias = str
DisplayId: TypeAlias = str


class Field(Enum):
    """Coordinate fields, in positional order."""

    GROUP_ID = "groupId"
    ARTIFACT_ID = "artifactId"
    TYPE = "type"
    CLASSIFIER = "classifier"
    BASE_VERSION = "baseVersion"


# Pattern syntax
ANY = "*"  # Match-all token
SINGLE = "?"  # Single-character wildcard
NEGATION_PREFIX = "!"
SEPARATOR = ":"


class Limits:
    """Syntax limits for patterns and trail entries."""

    MIN_PATTERN_TOKENS = 1
    MAX_PATTERN_TOKENS = 5

    # G:A:T:V or G:A:T:C:V
    TRAIL_SEGMENTS = (4, 5)


class FilterKind(Enum):
    """Flavour of a pattern filter."""

    INCLUDES = "includes"
    EXCLUDES = "excludes"

    @property
    def label(self) -> str:
        """Prefix used when describing the filter."""
        return "Includes filter:" if self is FilterKind.INCLUDES else "Excludes filter:"

    @property
    def description(self) -> str:
        """Wording used in statistics reports."""
        if self is FilterKind.INCLUDES:
            return "artifact inclusion filter"
        return "artifact exclusion filter"


# Configuration keys
class ConfigKey:
    """Configuration dictionary keys."""

    ROOT = "artifilter"

    FILTER = "filter"
    INCLUDES = "includes"
    EXCLUDES = "excludes"
    TRANSITIVE = "transitive"

    LOGGING = "logging"
    LOG_LEVEL = "level"
    LOG_FILE = "file"

    REPORT = "report"
    REPORT_MISSED = "missed_criteria"
    REPORT_FILTERED = "filtered"


# Environment variable prefix for configuration overrides
ENV_PREFIX = "ARTIFILTER_"

# Valid log levels accepted in configuration
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.FILTER: {
        ConfigKey.INCLUDES: [],
        ConfigKey.EXCLUDES: [],
        ConfigKey.TRANSITIVE: False,
    },
    ConfigKey.LOGGING: {
        ConfigKey.LOG_LEVEL: "INFO",
        ConfigKey.LOG_FILE: None,
    },
    ConfigKey.REPORT: {
        ConfigKey.REPORT_MISSED: True,
        ConfigKey.REPORT_FILTERED: False,
    },
}
