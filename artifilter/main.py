#!/usr/bin/env python3
"""ArtiFilter main controller.

Builds the include and exclude filters from configuration, runs a
stream of coordinates through them and reports the statistics.

Input lines hold one coordinate (``G:A:T:V`` or ``G:A:T:C:V``) optionally
followed by whitespace-separated trail entries, root first. Blank lines
and ``#`` comments are skipped.

Example:
    >>> from artifilter.main import run_artifilter
    >>> run_artifilter(section, logger, input_stream, output_stream)
"""

import sys
from typing import Any, Dict, Iterable, List, Optional, TextIO, Tuple

from artifilter.core.constants import ConfigKey, DisplayId, ErrorCode, TrailEntry
from artifilter.core.validators import MalformedAncestryEntry, ValidationError, validate_config
from artifilter.infrastructure.logger import Logger
from artifilter.rules.coordinate import Coordinate
from artifilter.rules.filters import PatternExcludesFilter, PatternIncludesFilter

COMMENT_PREFIX = "#"


def _as_pattern_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def build_filters(
    section: Dict[str, Any], logger: Optional[Logger] = None
) -> Tuple[PatternIncludesFilter, PatternExcludesFilter]:
    """Build the include and exclude filters from the ``artifilter`` section.

    Args:
        section: Merged contents of the ``artifilter`` configuration section
        logger: Logger handed to both filters

    Returns:
        (includes filter, excludes filter)

    Raises:
        ValidationError: If the filter section is invalid
        InvalidPatternError: If a pattern fails to compile
    """
    filter_config = dict(section.get(ConfigKey.FILTER) or {})
    for key in (ConfigKey.INCLUDES, ConfigKey.EXCLUDES):
        filter_config[key] = _as_pattern_list(filter_config.get(key))

    validate_config({ConfigKey.FILTER: filter_config})

    transitive = filter_config.get(ConfigKey.TRANSITIVE, False)
    includes = PatternIncludesFilter(filter_config[ConfigKey.INCLUDES], transitive, logger)
    excludes = PatternExcludesFilter(filter_config[ConfigKey.EXCLUDES], transitive, logger)
    return includes, excludes


def parse_input_line(
    line: str, line_number: int = 0
) -> Optional[Tuple[Coordinate, List[TrailEntry]]]:
    """Parse one input line into a coordinate and its trail.

    Args:
        line: Raw input line
        line_number: Line number used in error messages

    Returns:
        (coordinate, trail), or None for blank and comment lines

    Raises:
        ValidationError: If the coordinate is malformed
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None

    coordinate_text, *trail = stripped.split()
    try:
        coordinate = Coordinate.parse(coordinate_text)
    except MalformedAncestryEntry:
        raise ValidationError(
            f"Line {line_number}: invalid coordinate '{coordinate_text}', "
            "expected group:artifact:type[:classifier]:version"
        )
    return coordinate, trail


class ArtifilterMain:
    """
    Main class for filtering a stream of coordinates.

    Owns the filters for one run and their reports.
    """

    def __init__(self, section: Dict[str, Any], logger: Logger):
        """
        Initialize the controller.

        Args:
            section: Merged ``artifilter`` configuration section
            logger: Logger instance
        """
        self.section = section
        self.logger = logger
        self.includes: Optional[PatternIncludesFilter] = None
        self.excludes: Optional[PatternExcludesFilter] = None

    def initialize_filters(self) -> None:
        """Compile the filters from configuration."""
        self.includes, self.excludes = build_filters(self.section, self.logger)
        self.logger.debug(str(self.includes))
        self.logger.debug(str(self.excludes))

    def is_kept(self, coordinate: Coordinate, trail: List[TrailEntry]) -> bool:
        """Run a coordinate through both filters; the first rejection wins.

        An excludes filter without patterns would remove everything, so it
        is only consulted when it has patterns.
        """
        if not self.includes.include(coordinate, trail):
            return False
        if not self.excludes:
            return True
        return self.excludes.include(coordinate, trail)

    def process(self, lines: Iterable[str]) -> List[DisplayId]:
        """Filter input lines.

        Args:
            lines: Input lines

        Returns:
            Display ids of kept coordinates, in input order
        """
        if self.includes is None:
            self.initialize_filters()

        kept = []
        total = 0
        for line_number, line in enumerate(lines, start=1):
            parsed = parse_input_line(line, line_number)
            if parsed is None:
                continue

            coordinate, trail = parsed
            total += 1
            if self.is_kept(coordinate, trail):
                kept.append(coordinate.display_id)

        self.logger.info("Filtering complete", total=total, kept=len(kept))
        return kept

    def report(self) -> None:
        """Emit the statistics reports selected in configuration."""
        report_config = self.section.get(ConfigKey.REPORT) or {}

        for flt in (self.includes, self.excludes):
            if report_config.get(ConfigKey.REPORT_MISSED, True):
                flt.report_missed_criteria(self.logger)
            if report_config.get(ConfigKey.REPORT_FILTERED, False):
                flt.report_filtered_entities(self.logger)

    def has_missed_criteria(self) -> bool:
        """Return True if any pattern of either filter never matched."""
        return self.includes.has_missed_criteria() or self.excludes.has_missed_criteria()

    def run(
        self,
        input_stream: TextIO,
        output_stream: TextIO,
        fail_on_missed: bool = False,
    ) -> int:
        """
        Filter input_stream into output_stream.

        Args:
            input_stream: Source of coordinate lines
            output_stream: Destination for kept display ids
            fail_on_missed: Return 1 when a pattern never matched

        Returns:
            Exit code
        """
        self.initialize_filters()

        for display_id in self.process(input_stream):
            output_stream.write(display_id + "\n")

        self.report()

        if fail_on_missed and self.has_missed_criteria():
            self.logger.error("Some patterns were never triggered")
            return int(ErrorCode.INVALID_INPUT)

        return int(ErrorCode.SUCCESS)


def run_artifilter(
    section: Dict[str, Any],
    logger: Logger,
    input_stream: Optional[TextIO] = None,
    output_stream: Optional[TextIO] = None,
    fail_on_missed: bool = False,
) -> int:
    """
    Main entry point for running ArtiFilter.

    Args:
        section: Merged ``artifilter`` configuration section
        logger: Logger instance
        input_stream: Input (defaults to stdin)
        output_stream: Output (defaults to stdout)
        fail_on_missed: Return 1 when a pattern never matched

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    main = ArtifilterMain(section, logger)
    return main.run(
        input_stream if input_stream is not None else sys.stdin,
        output_stream if output_stream is not None else sys.stdout,
        fail_on_missed=fail_on_missed,
    )
