#!/usr/bin/env python3
"""Pattern filters deciding which artifacts are kept.

This module provides the include/exclude filters built on compiled patterns:
- First-match-wins evaluation in pattern order
- Negative (``!``) patterns reject what they match
- Optional fallback to the artifact's dependency trail
- Statistics: patterns never triggered, artifacts filtered out

Decision rules for ``PatternIncludesFilter.include``:
1. The first pattern matching the coordinate decides (False if negative)
2. Otherwise, when transitive and the trail has more than one entry,
   the first pattern matching any trail entry decides
3. Otherwise include only if the filter has no patterns at all

``PatternExcludesFilter`` inverts that decision.

Example:
    >>> flt = PatternIncludesFilter(["org.example:*", "!*:tests"])
    >>> flt.include(Coordinate("org.example", "lib", "jar", None, "1.0"))
    True
    >>> flt.missed_patterns()
    ['!*:tests']
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from artifilter.core.constants import DisplayId, FilterKind, RawPattern, TrailEntry
from artifilter.infrastructure.logger import Logger, LogLevel, get_logger
from artifilter.rules.compiler import compile_patterns
from artifilter.rules.coordinate import Coordinate
from artifilter.rules.patterns import Pattern, pattern_matches


class FilterStatistics:
    """Evaluation statistics owned by a single filter.

    Triggered patterns only grow and rejected coordinates are kept in
    evaluation order. Nothing here is reset by the filter.
    """

    def __init__(self):
        self._triggered: Dict[Pattern, None] = {}
        self._rejected: List[Coordinate] = []

    def record_triggered(self, pattern: Pattern) -> None:
        """Mark pattern as having matched at least once."""
        self._triggered.setdefault(pattern, None)

    def record_rejected(self, coordinate: Coordinate) -> None:
        """Append coordinate to the filtered-out list."""
        self._rejected.append(coordinate)

    def is_triggered(self, pattern: Pattern) -> bool:
        """Check if pattern has matched at least once."""
        return pattern in self._triggered

    @property
    def triggered(self) -> Tuple[Pattern, ...]:
        """Triggered patterns, in first-trigger order."""
        return tuple(self._triggered)

    @property
    def rejected(self) -> Tuple[Coordinate, ...]:
        """Filtered-out coordinates, in evaluation order."""
        return tuple(self._rejected)

    def rejected_ids(self) -> List[DisplayId]:
        """Display ids of filtered-out coordinates."""
        return [coordinate.display_id for coordinate in self._rejected]


class PatternIncludesFilter:
    """Keeps artifacts matched by its patterns.

    Patterns are compiled once, at construction. Compiled patterns are
    immutable; the statistics are not, so concurrent ``include`` calls on
    one filter need external locking.
    """

    kind = FilterKind.INCLUDES

    def __init__(
        self,
        patterns: Optional[Iterable[RawPattern]] = None,
        transitive: bool = False,
        logger: Optional[Logger] = None,
    ):
        """Initialize filter.

        Args:
            patterns: Raw pattern strings
            transitive: Whether to consult the dependency trail
            logger: Logger for rejections and reports (global logger if None)

        Raises:
            InvalidPatternError: If any pattern fails to compile
        """
        self._patterns = compile_patterns(patterns)
        self._transitive = transitive
        self._statistics = FilterStatistics()
        self._logger = logger

        self.logger.debug(
            f"Compiled {self.kind.description}",
            patterns=len(self._patterns),
            transitive=transitive,
        )

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_logger()

    @property
    def patterns(self) -> Tuple[Pattern, ...]:
        """Compiled patterns, in evaluation order."""
        return self._patterns

    @property
    def transitive(self) -> bool:
        return self._transitive

    @property
    def statistics(self) -> FilterStatistics:
        return self._statistics

    def include(
        self, coordinate: Coordinate, trail: Optional[Sequence[TrailEntry]] = None
    ) -> bool:
        """Decide whether coordinate is kept.

        Args:
            coordinate: Coordinate to evaluate
            trail: Dependency trail, root first, ending with the artifact itself

        Returns:
            True if the artifact is kept

        Raises:
            MalformedAncestryEntry: If a consulted trail entry is malformed
        """
        should_include = self.pattern_matches(coordinate, trail)
        if not should_include:
            self._record_filtered(coordinate)
        return should_include

    def pattern_matches(
        self, coordinate: Coordinate, trail: Optional[Sequence[TrailEntry]] = None
    ) -> bool:
        """Evaluate the include decision without recording statistics for it.

        Triggered patterns are still recorded.
        """
        decision = self._match(coordinate)
        if decision is not None:
            return decision

        if self._transitive and trail is not None and len(trail) > 1:
            for entry in trail:
                decision = self._match(Coordinate.parse(entry))
                if decision is not None:
                    return decision

        return not self._patterns

    def _match(self, coordinate: Coordinate) -> Optional[bool]:
        """Return the decision of the first matching pattern, or None."""
        for pattern in self._patterns:
            if pattern_matches(pattern, coordinate):
                self._statistics.record_triggered(pattern)
                return not pattern.is_negative
        return None

    def _record_filtered(self, coordinate: Coordinate) -> None:
        self._statistics.record_rejected(coordinate)
        self.logger.debug(f"Filtered out by {self.kind.description}", artifact=coordinate.display_id)

    def missed_patterns(self) -> List[RawPattern]:
        """Raw strings of patterns that never matched, in pattern order."""
        return [
            str(pattern)
            for pattern in self._patterns
            if not self._statistics.is_triggered(pattern)
        ]

    def has_missed_criteria(self) -> bool:
        """Return True if at least one pattern never matched."""
        return bool(self.missed_patterns())

    def rejected_entities(self) -> List[DisplayId]:
        """Display ids of artifacts filtered out so far, in evaluation order."""
        return self._statistics.rejected_ids()

    def describe(self) -> str:
        """Human-readable listing of the compiled patterns."""
        lines = [self.kind.label]
        lines.extend(f"o '{pattern}'" for pattern in self._patterns)
        return "\n".join(lines)

    def report_missed_criteria(self, logger: Optional[Logger] = None) -> None:
        """Log a warning listing the patterns that never matched."""
        logger = logger or self.logger
        missed = self.missed_patterns()
        if not missed or not logger.is_enabled_for(LogLevel.WARNING):
            return

        lines = [f"The following patterns were never triggered in this {self.kind.description}:"]
        lines.extend(f"o  '{raw}'" for raw in missed)
        logger.warning("\n".join(lines))

    def report_filtered_entities(self, logger: Optional[Logger] = None) -> None:
        """Log at debug level the artifacts removed by this filter."""
        logger = logger or self.logger
        rejected = self.rejected_entities()
        if not rejected or not logger.is_enabled_for(LogLevel.DEBUG):
            return

        lines = [f"The following artifacts were removed by this {self.kind.description}:"]
        lines.extend(rejected)
        logger.debug("\n".join(lines))

    def __len__(self) -> int:
        """Return number of compiled patterns."""
        return len(self._patterns)

    def __bool__(self) -> bool:
        """Return True if any patterns are compiled."""
        return bool(self._patterns)

    def __str__(self) -> str:
        return self.describe()


class PatternExcludesFilter(PatternIncludesFilter):
    """Removes artifacts matched by its patterns.

    Uses the same matching as ``PatternIncludesFilter`` and inverts the
    decision; the artifacts the include logic accepts are the ones
    reported as removed.
    """

    kind = FilterKind.EXCLUDES

    def include(
        self, coordinate: Coordinate, trail: Optional[Sequence[TrailEntry]] = None
    ) -> bool:
        should_include = not self.pattern_matches(coordinate, trail)
        if not should_include:
            self._record_filtered(coordinate)
        return should_include


def compile_filter(
    patterns: Optional[Iterable[RawPattern]],
    transitive: bool = False,
    excludes: bool = False,
    logger: Optional[Logger] = None,
) -> PatternIncludesFilter:
    """Build a filter from raw patterns.

    Args:
        patterns: Raw pattern strings
        transitive: Whether to consult the dependency trail
        excludes: Build a ``PatternExcludesFilter`` instead of an includes filter
        logger: Logger for the filter

    Returns:
        Compiled filter

    Raises:
        InvalidPatternError: If any pattern fails to compile
    """
    filter_class = PatternExcludesFilter if excludes else PatternIncludesFilter
    return filter_class(patterns, transitive=transitive, logger=logger)
