#!/usr/bin/env python3
"""Compiled coordinate patterns.

A pattern is one immutable ``Pattern`` value tagged with a ``PatternKind``:
- FIELD: a token matched against one or more coordinate fields
- MATCH_ALL: accepts every coordinate
- AND / OR: combinations of child patterns
- NEGATIVE: wraps an inner pattern (the filter inverts the decision)

Matching dispatches on the tag in ``pattern_matches``. Patterns compare
and hash structurally, so identical compilations collapse in a set.

Example:
    >>> pattern = field_match("org.*", [Field.GROUP_ID])
    >>> pattern_matches(pattern, Coordinate(group_id="org.example"))
    True
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple

from artifilter.core.constants import ANY, Field
from artifilter.rules.coordinate import Coordinate
from artifilter.rules.versions import VersionRange
from artifilter.rules.wildcard import has_asterisk, has_wildcard
from artifilter.rules.wildcard import matches as wildcard_matches


class PatternKind(Enum):
    """Pattern variant tag."""

    FIELD = "field"  # Token bound to coordinate fields
    MATCH_ALL = "match_all"  # Accepts anything
    AND = "and"  # All children must match
    OR = "or"  # Any child must match
    NEGATIVE = "negative"  # Inner pattern, decision inverted by the filter


@dataclass(frozen=True)
class Pattern:
    """A compiled, immutable pattern.

    ``raw`` keeps the text the pattern was compiled from; ``str()``
    returns it for reports.
    """

    kind: PatternKind
    raw: str
    token: Optional[str] = None
    fields: FrozenSet[Field] = frozenset()
    version_range: Optional[VersionRange] = None
    children: Tuple["Pattern", ...] = ()
    contains_asterisk: bool = field(default=False, compare=False)
    contains_wildcard: bool = field(default=False, compare=False)

    @property
    def is_negative(self) -> bool:
        """Return True for NEGATIVE patterns."""
        return self.kind is PatternKind.NEGATIVE

    @property
    def inner(self) -> "Pattern":
        """Wrapped pattern of a NEGATIVE pattern."""
        if not self.is_negative:
            raise AttributeError(f"{self.kind.value} pattern has no inner pattern")
        return self.children[0]

    def matches(self, coordinate: Coordinate) -> bool:
        """Check if coordinate matches this pattern."""
        return pattern_matches(self, coordinate)

    def __str__(self) -> str:
        return self.raw


MATCH_ALL = Pattern(kind=PatternKind.MATCH_ALL, raw=ANY)


def match_all(raw: str = ANY) -> Pattern:
    """Create a pattern accepting every coordinate."""
    if raw == ANY:
        return MATCH_ALL
    return Pattern(kind=PatternKind.MATCH_ALL, raw=raw)


def field_match(
    token: str,
    fields: Iterable[Field],
    raw: Optional[str] = None,
    version_range: Optional[VersionRange] = None,
) -> Pattern:
    """Create a pattern matching token against any of the given fields.

    Args:
        token: Literal or wildcard token
        fields: Fields the token may match
        raw: Text to report (defaults to token)
        version_range: Parsed range when the token is a version range

    Returns:
        FIELD pattern
    """
    return Pattern(
        kind=PatternKind.FIELD,
        raw=token if raw is None else raw,
        token=token,
        fields=frozenset(fields),
        version_range=version_range,
        contains_asterisk=has_asterisk(token),
        contains_wildcard=has_wildcard(token),
    )


def all_of(raw: str, children: Iterable[Pattern]) -> Pattern:
    """Create a pattern requiring every child to match."""
    return Pattern(kind=PatternKind.AND, raw=raw, children=tuple(children))


def any_of(raw: str, children: Iterable[Pattern]) -> Pattern:
    """Create a pattern requiring any child to match."""
    return Pattern(kind=PatternKind.OR, raw=raw, children=tuple(children))


def negative(raw: str, inner: Pattern) -> Pattern:
    """Wrap inner in a NEGATIVE pattern."""
    return Pattern(kind=PatternKind.NEGATIVE, raw=raw, children=(inner,))


def _field_matches(pattern: Pattern, coordinate: Coordinate) -> bool:
    for coordinate_field in pattern.fields:
        value = coordinate.get(coordinate_field)

        if coordinate_field is Field.BASE_VERSION and pattern.version_range is not None:
            if value is not None and pattern.version_range.contains(value):
                return True
        elif pattern.contains_wildcard:
            if wildcard_matches(pattern.token, value, pattern.contains_asterisk):
                return True
        elif pattern.token == value:
            return True

    return False


def pattern_matches(pattern: Pattern, coordinate: Coordinate) -> bool:
    """Check if coordinate matches a pattern.

    NEGATIVE patterns report whether their inner pattern matched.

    Args:
        pattern: Compiled pattern
        coordinate: Coordinate to test

    Returns:
        True if the pattern (or, for NEGATIVE, its inner pattern) matches
    """
    kind = pattern.kind

    if kind is PatternKind.FIELD:
        return _field_matches(pattern, coordinate)
    elif kind is PatternKind.MATCH_ALL:
        return True
    elif kind is PatternKind.AND:
        return all(pattern_matches(child, coordinate) for child in pattern.children)
    elif kind is PatternKind.OR:
        return any(pattern_matches(child, coordinate) for child in pattern.children)
    elif kind is PatternKind.NEGATIVE:
        return pattern_matches(pattern.inner, coordinate)

    raise ValueError(f"Unknown pattern kind: {kind}")
