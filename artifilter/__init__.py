"""ArtiFilter - Pattern-based artifact coordinate filter.

Decides whether artifact coordinates (group:artifact:type:classifier:version)
are kept by a list of glob-like patterns, optionally consulting each
artifact's dependency trail.

Example:
    >>> from artifilter import Coordinate, compile_filter
    >>> flt = compile_filter(["org.example:*:jar"])
    >>> flt.include(Coordinate("org.example", "lib", "jar", None, "1.0"))
    True
"""

from artifilter.core.constants import ARTIFILTER_VERSION
from artifilter.core.validators import InvalidPatternError, MalformedAncestryEntry, ValidationError
from artifilter.rules import (
    Coordinate,
    PatternExcludesFilter,
    PatternIncludesFilter,
    compile_filter,
    compile_pattern,
)

__version__ = ARTIFILTER_VERSION

__all__ = [
    "Coordinate",
    "PatternIncludesFilter",
    "PatternExcludesFilter",
    "compile_filter",
    "compile_pattern",
    "InvalidPatternError",
    "MalformedAncestryEntry",
    "ValidationError",
    "__version__",
]
