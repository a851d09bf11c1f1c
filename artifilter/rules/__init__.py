"""ArtiFilter Rules System.

This module provides coordinate pattern matching and filtering:
- Coordinate: the group:artifact:type:classifier:version identity
- Wildcard and version-range matching of single tokens
- Pattern compilation into immutable pattern trees
- Include/exclude filters with trail fallback and statistics

Patterns decide which artifacts are kept, in first-match-wins order.
"""

from .compiler import compile_pattern, compile_patterns
from .coordinate import Coordinate
from .filters import FilterStatistics, PatternExcludesFilter, PatternIncludesFilter, compile_filter
from .patterns import Pattern, PatternKind, pattern_matches
from .versions import ComparableVersion, InvalidVersionSpecError, VersionRange, version_in_range
from .wildcard import matches

__all__ = [
    # Coordinates
    "Coordinate",
    # Token matching
    "matches",
    "ComparableVersion",
    "VersionRange",
    "InvalidVersionSpecError",
    "version_in_range",
    # Patterns
    "PatternKind",
    "Pattern",
    "pattern_matches",
    "compile_pattern",
    "compile_patterns",
    # Filters
    "FilterStatistics",
    "PatternIncludesFilter",
    "PatternExcludesFilter",
    "compile_filter",
]
