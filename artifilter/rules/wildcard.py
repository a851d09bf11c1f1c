#!/usr/bin/env python3
"""Wildcard matching for coordinate tokens.

Tokens may contain ``*`` (any run of characters, including none) and
``?`` (exactly one character). Matching is case-sensitive and there is
no escape for a literal ``*`` or ``?``.

The matcher is the classic two-pointer algorithm: the literal prefix
before the first ``*`` and the literal suffix after the last ``*`` are
anchored, then every segment between two stars is searched first-fit,
left to right. There is no backtracking.

Example:
    >>> matches("a*b*c", "axxbyyc")
    True
    >>> matches("ver?ion", "version")
    True
"""

from typing import Optional

from artifilter.core.constants import ANY, SINGLE


def has_asterisk(token: str) -> bool:
    """Return True if token contains ``*``."""
    return ANY in token


def has_wildcard(token: str) -> bool:
    """Return True if token contains ``*`` or ``?``."""
    return ANY in token or SINGLE in token


def _char_matches(pattern_char: str, value_char: str) -> bool:
    return pattern_char == SINGLE or pattern_char == value_char


def _only_stars(pattern: str, start: int, end: int) -> bool:
    """Check that ``pattern[start:end + 1]`` holds nothing but ``*``."""
    for i in range(start, end + 1):
        if pattern[i] != ANY:
            return False
    return True


def matches(pattern: str, value: Optional[str], contains_asterisk: Optional[bool] = None) -> bool:
    """Match value against a wildcard pattern.

    Args:
        pattern: Pattern with optional ``*`` and ``?`` wildcards
        value: Value to test; None never matches
        contains_asterisk: Precomputed ``"*" in pattern``

    Returns:
        True if the whole value matches the pattern
    """
    if value is None:
        return False

    if contains_asterisk is None:
        contains_asterisk = has_asterisk(pattern)

    pat_start = 0
    pat_end = len(pattern) - 1
    str_start = 0
    str_end = len(value) - 1

    if not contains_asterisk:
        # No stars: same length, character by character
        if pat_end != str_end:
            return False
        for i in range(pat_end + 1):
            if not _char_matches(pattern[i], value[i]):
                return False
        return True

    if pat_end == 0:
        # Pattern is a lone star
        return True

    # Characters before the first star
    while pattern[pat_start] != ANY and str_start <= str_end:
        if not _char_matches(pattern[pat_start], value[str_start]):
            return False
        pat_start += 1
        str_start += 1
    if str_start > str_end:
        return _only_stars(pattern, pat_start, pat_end)

    # Characters after the last star
    while pattern[pat_end] != ANY and str_start <= str_end:
        if not _char_matches(pattern[pat_end], value[str_end]):
            return False
        pat_end -= 1
        str_end -= 1
    if str_start > str_end:
        return _only_stars(pattern, pat_start, pat_end)

    # Segments between stars; pat_start and pat_end both point at a star
    while pat_start != pat_end and str_start <= str_end:
        next_star = pattern.index(ANY, pat_start + 1, pat_end + 1)
        if next_star == pat_start + 1:
            # Adjacent stars collapse
            pat_start += 1
            continue

        segment_length = next_star - pat_start - 1
        remaining = str_end - str_start + 1
        found = -1
        for i in range(remaining - segment_length + 1):
            for j in range(segment_length):
                if not _char_matches(pattern[pat_start + j + 1], value[str_start + i + j]):
                    break
            else:
                found = str_start + i
                break

        if found == -1:
            return False

        pat_start = next_star
        str_start = found + segment_length

    return _only_stars(pattern, pat_start, pat_end)
