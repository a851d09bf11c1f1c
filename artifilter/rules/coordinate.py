#!/usr/bin/env python3
"""Artifact coordinates evaluated by pattern filters.

A coordinate is the five-field identity of a filterable entity:
group, artifact id, type, classifier and base version. Trail entries
(the ancestry chain of an entity) are parsed into coordinates as well.

Example:
    >>> coordinate = Coordinate.parse("org.example:lib:jar:1.0")
    >>> coordinate.get(Field.ARTIFACT_ID)
    'lib'
    >>> coordinate.display_id
    'org.example:lib:jar:1.0'
"""

from dataclasses import dataclass
from typing import Optional

from artifilter.core.constants import SEPARATOR, DisplayId, Field, Limits, TrailEntry
from artifilter.core.validators import MalformedAncestryEntry


@dataclass(frozen=True)
class Coordinate:
    """Immutable artifact coordinate.

    Any field may be None. An absent classifier reads as an empty string
    when matched, but is left out of the display id.
    """

    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    type: Optional[str] = None
    classifier: Optional[str] = None
    base_version: Optional[str] = None

    @property
    def has_classifier(self) -> bool:
        """Return True if the coordinate carries a non-empty classifier."""
        return bool(self.classifier)

    def get(self, field: Field) -> Optional[str]:
        """Get the value matched for a field.

        Args:
            field: Coordinate field

        Returns:
            Field value, "" for an absent classifier
        """
        if field is Field.GROUP_ID:
            return self.group_id
        if field is Field.ARTIFACT_ID:
            return self.artifact_id
        if field is Field.TYPE:
            return self.type
        if field is Field.CLASSIFIER:
            return self.classifier if self.has_classifier else ""
        if field is Field.BASE_VERSION:
            return self.base_version
        raise ValueError(f"Unknown coordinate field: {field}")

    @property
    def display_id(self) -> DisplayId:
        """Identifier used in reports: ``group:artifact:type[:classifier]:version``."""
        parts = [self.group_id, self.artifact_id, self.type]
        if self.has_classifier:
            parts.append(self.classifier)
        parts.append(self.base_version)
        return SEPARATOR.join("" if part is None else part for part in parts)

    @classmethod
    def parse(cls, text: TrailEntry) -> "Coordinate":
        """Parse a ``G:A:T:V`` or ``G:A:T:C:V`` string.

        Trailing empty segments are dropped before counting, so
        ``g:a:jar:1.0:`` reads as ``G:A:T:V``.

        Args:
            text: Coordinate string

        Returns:
            Parsed coordinate

        Raises:
            MalformedAncestryEntry: If the string has neither 4 nor 5 segments
        """
        segments = text.split(SEPARATOR)
        while len(segments) > 1 and not segments[-1]:
            segments.pop()
        if len(segments) not in Limits.TRAIL_SEGMENTS:
            raise MalformedAncestryEntry(f"Bad dependency trail entry: {text}", text)

        if len(segments) == 5:
            group_id, artifact_id, type_, classifier, version = segments
        else:
            group_id, artifact_id, type_, version = segments
            classifier = None

        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            type=type_,
            classifier=classifier,
            base_version=version,
        )

    def __str__(self) -> str:
        return self.display_id
