#!/usr/bin/env python3
"""Artifact version ordering and version-range matching.

Versions are compared the way artifact repositories order them:
- The string is lower-cased and split on ``.``, ``-`` and on every
  transition between digits and letters
- Numeric items compare numerically, missing items count as zero
- Qualifiers order as alpha < beta < milestone < rc < snapshot
  < release < sp; unknown qualifiers sort after those, lexically

Ranges use interval notation. ``[`` and ``]`` are inclusive bounds,
``(`` and ``)`` exclusive ones, an empty bound is unbounded, ``[1.0]``
is an exact version and comma-separated groups form a union.

Example:
    >>> version_in_range("1.1", "[1.0,2.0)")
    True
    >>> version_in_range("2.0", "[1.0,2.0)")
    False
    >>> ComparableVersion("1.0-SNAPSHOT") < ComparableVersion("1.0")
    True
"""

from dataclasses import dataclass
from functools import total_ordering
from itertools import zip_longest
from typing import List, Optional, Tuple, Union

_QUALIFIERS = ("alpha", "beta", "milestone", "rc", "snapshot", "", "sp")
_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
_SHORT_QUALIFIERS = {"a": "alpha", "b": "beta", "m": "milestone"}
_RELEASE_KEY = str(_QUALIFIERS.index(""))


class InvalidVersionSpecError(ValueError):
    """Raised when a version range specification cannot be parsed."""


@dataclass(frozen=True)
class _Qualifier:
    """String item of a parsed version."""

    value: str

    @classmethod
    def of(cls, text: str, followed_by_digit: bool = False) -> "_Qualifier":
        if followed_by_digit and len(text) == 1:
            text = _SHORT_QUALIFIERS.get(text, text)
        return cls(_ALIASES.get(text, text))

    @property
    def key(self) -> str:
        if self.value in _QUALIFIERS:
            return str(_QUALIFIERS.index(self.value))
        return f"{len(_QUALIFIERS)}-{self.value}"


_Item = Union[int, _Qualifier, list]


def _sign(left, right) -> int:
    return (left > right) - (left < right)


def _compare(left: Optional[_Item], right: Optional[_Item]) -> int:
    """Three-way comparison of version items; None stands for a missing item."""
    if left is None:
        return 0 if right is None else -_compare(right, None)

    if isinstance(left, int):
        if right is None:
            return 0 if left == 0 else 1
        if isinstance(right, int):
            return _sign(left, right)
        return 1

    if isinstance(left, _Qualifier):
        if right is None:
            return _sign(left.key, _RELEASE_KEY)
        if isinstance(right, _Qualifier):
            return _sign(left.key, right.key)
        return -1

    if right is None:
        return _compare(left[0], None) if left else 0
    if isinstance(right, int):
        return -1
    if isinstance(right, _Qualifier):
        return 1
    for left_item, right_item in zip_longest(left, right):
        result = _compare(left_item, right_item)
        if result != 0:
            return result
    return 0


def _is_null(item: _Item) -> bool:
    if isinstance(item, int):
        return item == 0
    if isinstance(item, _Qualifier):
        return item.key == _RELEASE_KEY
    return not item


def _normalize(items: list) -> None:
    """Drop trailing null items; stop at the first non-null, non-list item."""
    for i in range(len(items) - 1, -1, -1):
        item = items[i]
        if _is_null(item):
            del items[i]
        elif not isinstance(item, list):
            break


def _parse_item(is_digit: bool, text: str) -> _Item:
    return int(text) if is_digit else _Qualifier.of(text)


def _is_ascii_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _parse(version: str) -> list:
    version = version.lower()
    items: list = []
    current = items
    stack: List[list] = [items]
    is_digit = False
    start = 0

    def open_sublist() -> list:
        sublist: list = []
        current.append(sublist)
        stack.append(sublist)
        return sublist

    for i, char in enumerate(version):
        if char in ".-":
            current.append(0 if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
            if char == "-":
                current = open_sublist()
        elif _is_ascii_digit(char):
            if not is_digit and i > start:
                current.append(_Qualifier.of(version[start:i], followed_by_digit=True))
                start = i
                current = open_sublist()
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(_parse_item(True, version[start:i]))
                start = i
                current = open_sublist()
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        _normalize(stack.pop())

    return items


def _freeze(items: list) -> tuple:
    return tuple(_freeze(item) if isinstance(item, list) else item for item in items)


@total_ordering
class ComparableVersion:
    """Version string with artifact-repository ordering."""

    def __init__(self, version: str):
        self.version = version
        self._items = _parse(version)

    def compare_to(self, other: "ComparableVersion") -> int:
        """Three-way comparison: negative, zero or positive."""
        return _compare(self._items, other._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare_to(other) == 0

    def __lt__(self, other: "ComparableVersion") -> bool:
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash(_freeze(self._items))

    def __str__(self) -> str:
        return self.version

    def __repr__(self) -> str:
        return f"ComparableVersion({self.version!r})"


@dataclass(frozen=True)
class Restriction:
    """One interval of a version range. A None bound is unbounded."""

    lower: Optional[ComparableVersion] = None
    lower_inclusive: bool = False
    upper: Optional[ComparableVersion] = None
    upper_inclusive: bool = False

    def contains(self, version: ComparableVersion) -> bool:
        """Check if version lies inside this interval."""
        if self.lower is not None:
            result = self.lower.compare_to(version)
            if result > 0 or (result == 0 and not self.lower_inclusive):
                return False

        if self.upper is not None:
            result = self.upper.compare_to(version)
            if result < 0 or (result == 0 and not self.upper_inclusive):
                return False

        return True

    def __str__(self) -> str:
        if self.lower is not None and self.lower == self.upper:
            return f"[{self.lower}]"
        return "{}{},{}{}".format(
            "[" if self.lower_inclusive else "(",
            "" if self.lower is None else self.lower,
            "" if self.upper is None else self.upper,
            "]" if self.upper_inclusive else ")",
        )


EVERYTHING = Restriction()


def _parse_restriction(spec: str) -> Restriction:
    lower_inclusive = spec.startswith("[")
    upper_inclusive = spec.endswith("]")
    body = spec[1:-1].strip()

    if "," not in body:
        if not lower_inclusive or not upper_inclusive:
            raise InvalidVersionSpecError(f"Single version must be surrounded by []: {spec}")
        if not body:
            raise InvalidVersionSpecError(f"Single version cannot be empty: {spec}")
        version = ComparableVersion(body)
        return Restriction(version, True, version, True)

    lower_text, _, upper_text = body.partition(",")
    lower_text = lower_text.strip()
    upper_text = upper_text.strip()
    if "," in upper_text:
        raise InvalidVersionSpecError(f"Range must have exactly two bounds: {spec}")

    lower = ComparableVersion(lower_text) if lower_text else None
    upper = ComparableVersion(upper_text) if upper_text else None

    if lower is not None and upper is not None:
        result = upper.compare_to(lower)
        if result < 0 or (result == 0 and (not lower_inclusive or not upper_inclusive)):
            raise InvalidVersionSpecError(f"Range defies version ordering: {spec}")

    return Restriction(lower, lower_inclusive, upper, upper_inclusive)


@dataclass(frozen=True)
class VersionRange:
    """Parsed version range: a union of restrictions.

    A plain version without brackets is a recommendation only and
    restricts nothing.
    """

    spec: str
    restrictions: Tuple[Restriction, ...]
    recommended: Optional[ComparableVersion] = None

    @classmethod
    def parse(cls, spec: str) -> "VersionRange":
        """Parse a range specification.

        Args:
            spec: Range such as ``[1.0,2.0)`` or ``(,1.0],[1.2,)``

        Returns:
            Parsed range

        Raises:
            InvalidVersionSpecError: If the specification is malformed
        """
        restrictions: List[Restriction] = []
        remaining = spec.strip()
        upper_bound: Optional[ComparableVersion] = None

        while remaining.startswith("[") or remaining.startswith("("):
            close_paren = remaining.find(")")
            close_bracket = remaining.find("]")
            index = close_bracket
            if close_bracket < 0 or close_paren < close_bracket:
                if close_paren >= 0:
                    index = close_paren
            if index < 0:
                raise InvalidVersionSpecError(f"Unbounded range: {spec}")

            restriction = _parse_restriction(remaining[: index + 1])
            if restrictions and upper_bound is not None:
                if restriction.lower is None or restriction.lower.compare_to(upper_bound) < 0:
                    raise InvalidVersionSpecError(f"Ranges overlap: {spec}")
            restrictions.append(restriction)
            upper_bound = restriction.upper

            remaining = remaining[index + 1 :].strip()
            if remaining.startswith(","):
                remaining = remaining[1:].strip()

        recommended = None
        if remaining:
            if restrictions:
                raise InvalidVersionSpecError(
                    f"Only fully-qualified sets allowed in multiple set scenario: {spec}"
                )
            recommended = ComparableVersion(remaining)
            restrictions.append(EVERYTHING)

        if not restrictions:
            raise InvalidVersionSpecError(f"Empty version range: {spec!r}")

        return cls(spec=spec, restrictions=tuple(restrictions), recommended=recommended)

    def contains(self, version: Union[str, ComparableVersion]) -> bool:
        """Check if version lies inside any restriction."""
        if isinstance(version, str):
            version = ComparableVersion(version)
        return any(restriction.contains(version) for restriction in self.restrictions)

    def __str__(self) -> str:
        return self.spec


def version_in_range(version: Optional[str], range_spec: str) -> bool:
    """Check a version string against a range specification.

    Args:
        version: Version to test; None never matches
        range_spec: Interval notation range

    Returns:
        True if version lies inside the range

    Raises:
        InvalidVersionSpecError: If range_spec is malformed
    """
    version_range = VersionRange.parse(range_spec)
    if version is None:
        return False
    return version_range.contains(version)
