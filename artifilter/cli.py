#!/usr/bin/env python3
"""Command-line interface for ArtiFilter.

This module provides the CLI for filtering artifact coordinates:
- Argument parsing and validation
- Configuration loading (YAML file, environment, arguments)
- Logging setup
- Exit codes for errors and unmatched patterns

Example:
    >>> from artifilter.cli import parse_arguments
    >>> args = parse_arguments(['--include', 'org.example:*', '--input', 'deps.txt'])
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from artifilter.core.constants import ARTIFILTER_VERSION, ConfigKey
from artifilter.core.validators import ValidationError
from artifilter.infrastructure.config_manager import (
    CONFIG_SCHEMA,
    ConfigError,
    ConfigManager,
    ConfigSource,
)
from artifilter.infrastructure.logger import Logger, set_global_logger

# Version information
VERSION = ARTIFILTER_VERSION
DESCRIPTION = "ArtiFilter - Pattern-based artifact coordinate filter"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If the arguments fail validation
    """
    parser = argparse.ArgumentParser(
        prog="artifilter",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Patterns:
  [!]groupId[:artifactId[:type[:classifier|version[:version]]]]
  '*' and '?' are wildcards, empty tokens mean '*', a leading '!' rejects
  matches, and a version token may be a range such as [1.0,2.0).

Examples:
  # Keep one group, read coordinates from a file
  artifilter --include 'org.example:*' --input deps.txt

  # Drop test jars, consult dependency trails
  artifilter --exclude '*:*:test-jar' --transitive < deps.txt

  # Use a configuration file and fail when a pattern never matched
  artifilter --config artifilter.yaml --fail-on-missed --input deps.txt
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    # Filter options
    filter_group = parser.add_argument_group("filter options")

    filter_group.add_argument(
        "-i",
        "--include",
        metavar="PATTERN",
        action="append",
        dest="includes",
        help="Include pattern (can be specified multiple times)",
    )

    filter_group.add_argument(
        "-e",
        "--exclude",
        metavar="PATTERN",
        action="append",
        dest="excludes",
        help="Exclude pattern (can be specified multiple times)",
    )

    filter_group.add_argument(
        "-t",
        "--transitive",
        action="store_true",
        default=None,
        help="Match patterns against dependency trails too",
    )

    filter_group.add_argument(
        "--fail-on-missed",
        action="store_true",
        help="Exit with status 1 if a pattern never matched",
    )

    # Input options
    parser.add_argument(
        "--input",
        metavar="FILE",
        type=str,
        help="File with one coordinate per line (default: stdin)",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (also reports filtered artifacts)",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log output to FILE",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    if args.input:
        input_path = Path(args.input)

        if not input_path.exists():
            raise CLIError(f"Input file does not exist: {args.input}")

        if not input_path.is_file():
            raise CLIError(f"Input path is not a file: {args.input}")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the CLI-level configuration from command-line arguments.

    Only options actually given are set, so lower levels still apply.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    filter_config: Dict[str, Any] = {}
    if args.includes:
        filter_config[ConfigKey.INCLUDES] = list(args.includes)
    if args.excludes:
        filter_config[ConfigKey.EXCLUDES] = list(args.excludes)
    if args.transitive is not None:
        filter_config[ConfigKey.TRANSITIVE] = args.transitive

    logging_config: Dict[str, Any] = {}
    if args.debug:
        logging_config[ConfigKey.LOG_LEVEL] = "DEBUG"
    if args.log_file:
        logging_config[ConfigKey.LOG_FILE] = args.log_file

    section: Dict[str, Any] = {}
    if filter_config:
        section[ConfigKey.FILTER] = filter_config
    if logging_config:
        section[ConfigKey.LOGGING] = logging_config
    if args.debug:
        section[ConfigKey.REPORT] = {ConfigKey.REPORT_FILTERED: True}

    return {ConfigKey.ROOT: section}


def load_configuration(args: argparse.Namespace) -> ConfigManager:
    """
    Load configuration from defaults, file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Populated configuration manager

    Raises:
        ConfigError: If the file cannot be loaded or has wrong types
    """
    config = ConfigManager(args.config)
    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    config.validate_schema(CONFIG_SCHEMA)
    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Loaded configuration manager

    Returns:
        Configured logger instance, also installed as the global logger
    """
    logging_key = f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}"
    log_level = config.get(f"{logging_key}.{ConfigKey.LOG_LEVEL}", default="INFO")
    log_file = config.get(f"{logging_key}.{ConfigKey.LOG_FILE}")

    try:
        logger = Logger("artifilter", level=log_level)
    except KeyError:
        raise CLIError(f"Unknown log level: {log_level}")

    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, loads configuration and hands over to
    ``run_artifilter``.
    """
    try:
        args = parse_arguments(argv)

        config = load_configuration(args)
        section = config.section()

        logger = setup_logging(config)

        from artifilter.main import run_artifilter

        if args.input:
            with open(args.input, "r") as input_stream:
                return run_artifilter(
                    section, logger, input_stream, fail_on_missed=args.fail_on_missed
                )

        return run_artifilter(section, logger, fail_on_missed=args.fail_on_missed)

    except (CLIError, ConfigError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
