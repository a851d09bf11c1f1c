"""Tests for shared constants."""

from typing import List, Optional, Sequence, get_type_hints

from artifilter.core.constants import (
    DEFAULT_CONFIG,
    ConfigKey,
    DisplayId,
    ErrorCode,
    Field,
    FilterKind,
    Limits,
    RawPattern,
    TrailEntry,
)
from artifilter.rules.coordinate import Coordinate
from artifilter.rules.filters import PatternIncludesFilter


class TestErrorCode:
    """Tests for ErrorCode."""

    def test_values(self):
        assert ErrorCode.SUCCESS == 0
        assert ErrorCode.INVALID_INPUT == 1
        assert ErrorCode.NOT_FOUND == 2


class TestField:
    """Tests for coordinate fields."""

    def test_positional_order(self):
        assert [f.value for f in Field] == [
            "groupId",
            "artifactId",
            "type",
            "classifier",
            "baseVersion",
        ]


class TestFilterKind:
    """Tests for FilterKind wording."""

    def test_labels(self):
        assert FilterKind.INCLUDES.label == "Includes filter:"
        assert FilterKind.EXCLUDES.label == "Excludes filter:"

    def test_descriptions(self):
        assert FilterKind.INCLUDES.description == "artifact inclusion filter"
        assert FilterKind.EXCLUDES.description == "artifact exclusion filter"


class TestDefaults:
    """Tests for default configuration."""

    def test_limits(self):
        assert Limits.MIN_PATTERN_TOKENS == 1
        assert Limits.MAX_PATTERN_TOKENS == 5
        assert Limits.TRAIL_SEGMENTS == (4, 5)

    def test_default_filter(self):
        filter_config = DEFAULT_CONFIG[ConfigKey.FILTER]
        assert filter_config[ConfigKey.INCLUDES] == []
        assert filter_config[ConfigKey.EXCLUDES] == []
        assert filter_config[ConfigKey.TRANSITIVE] is False

    def test_default_reports(self):
        report = DEFAULT_CONFIG[ConfigKey.REPORT]
        assert report[ConfigKey.REPORT_MISSED] is True
        assert report[ConfigKey.REPORT_FILTERED] is False


class TestAliases:
    """Tests for the string aliases used in public signatures."""

    def test_aliases_are_str(self):
        assert RawPattern is str
        assert TrailEntry is str
        assert DisplayId is str

    def test_signatures_use_aliases(self):
        hints = get_type_hints(PatternIncludesFilter.include)
        assert hints["trail"] == Optional[Sequence[TrailEntry]]
        assert get_type_hints(PatternIncludesFilter.missed_patterns)["return"] == List[RawPattern]
        assert get_type_hints(Coordinate.display_id.fget)["return"] is DisplayId
