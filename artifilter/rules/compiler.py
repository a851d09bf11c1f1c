#!/usr/bin/env python3
"""Pattern compiler: raw pattern strings to ``Pattern`` trees.

Pattern syntax (1 to 5 colon-separated tokens, optional ``!`` prefix):

    [!]groupId[:artifactId[:type[:classifier|version[:version]]]]

Empty tokens count as ``*`` so ``::jar`` keeps "type" in third position.
Which fields a token binds to depends on the token count and, for 2 and
3 tokens, on which tokens are ``*``. Those cases are kept as explicit
decision tables keyed by a wildcard bitmask (bit i set when token i is
``*``), each row listing ``(token index, fields)`` clauses.

Example:
    >>> pattern = compile_pattern("org.example:*:jar")
    >>> pattern.kind
    <PatternKind.AND: 'and'>
    >>> str(pattern)
    'org.example:*:jar'
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from artifilter.core.constants import ANY, NEGATION_PREFIX, SEPARATOR, Field, Limits, RawPattern
from artifilter.core.validators import InvalidPatternError, validate_pattern
from artifilter.rules.patterns import Pattern, all_of, field_match, match_all, negative
from artifilter.rules.versions import InvalidVersionSpecError, VersionRange
from artifilter.rules.wildcard import has_wildcard

G = Field.GROUP_ID
A = Field.ARTIFACT_ID
T = Field.TYPE
C = Field.CLASSIFIER
V = Field.BASE_VERSION

Clause = Tuple[int, Tuple[Field, ...]]

# *:*      -> everything
# *:x      -> x on group, artifact, type or version
# x:*      -> x on group
# x:y      -> group x, artifact y
TWO_TOKEN_TABLE: Dict[int, Tuple[Clause, ...]] = {
    0b11: (),
    0b01: ((1, (G, A, T, V)),),
    0b10: ((0, (G,)),),
    0b00: ((0, (G,)), (1, (A,))),
}

# *:*:*    -> everything
# *:*:z    -> z on type or classifier
# *:y:*    -> y on artifact or type
# *:y:z    -> y on group or artifact, z on type or classifier
# x:*:*    -> x on group or artifact
# x:*:z    -> x on group, z on type or classifier
# x:y:*    -> group x, artifact y
# x:y:z    -> group x, artifact y, type z
THREE_TOKEN_TABLE: Dict[int, Tuple[Clause, ...]] = {
    0b111: (),
    0b011: ((2, (T, C)),),
    0b101: ((1, (A, T)),),
    0b001: ((1, (G, A)), (2, (T, C))),
    0b110: ((0, (G, A)),),
    0b010: ((0, (G,)), (2, (T, C))),
    0b100: ((0, (G,)), (1, (A,))),
    0b000: ((0, (G,)), (1, (A,)), (2, (T,))),
}

AMBIGUOUS_TABLES: Dict[int, Dict[int, Tuple[Clause, ...]]] = {
    2: TWO_TOKEN_TABLE,
    3: THREE_TOKEN_TABLE,
}

# Token counts where every position binds fixed fields
POSITIONAL_FIELDS: Dict[int, Tuple[Tuple[Field, ...], ...]] = {
    1: ((G,),),
    4: ((G,), (A,), (T,), (V, C)),
    5: ((G,), (A,), (T,), (C,), (V,)),
}


def split_tokens(pattern: str) -> List[str]:
    """Split a pattern on ``:``, turning empty tokens into ``*``."""
    return [token if token else ANY for token in pattern.split(SEPARATOR)]


def wildcard_mask(tokens: Sequence[str]) -> int:
    """Bitmask with bit i set when token i is ``*``."""
    mask = 0
    for i, token in enumerate(tokens):
        if token == ANY:
            mask |= 1 << i
    return mask


def resolve_clauses(tokens: Sequence[str]) -> Tuple[Clause, ...]:
    """Map tokens to ``(token index, fields)`` clauses.

    ``*`` tokens never produce a clause.

    Args:
        tokens: Tokens from :func:`split_tokens`

    Returns:
        Clauses that must all hold

    Raises:
        InvalidPatternError: If the token count is not supported
    """
    count = len(tokens)

    table = AMBIGUOUS_TABLES.get(count)
    if table is not None:
        return table[wildcard_mask(tokens)]

    positions = POSITIONAL_FIELDS.get(count)
    if positions is None:
        raise InvalidPatternError(f"Invalid pattern: {SEPARATOR.join(tokens)}", tokens)

    return tuple(
        (i, fields) for i, fields in enumerate(positions) if tokens[i] != ANY
    )


def _is_version_range(token: str, fields: Tuple[Field, ...]) -> bool:
    return (
        fields == (V,)
        and not has_wildcard(token)
        and (token.startswith("[") or token.startswith("("))
    )


def _field_pattern(
    token: str, fields: Tuple[Field, ...], source: str, raw: Optional[str] = None
) -> Pattern:
    version_range = None
    if _is_version_range(token, fields):
        try:
            version_range = VersionRange.parse(token)
        except InvalidVersionSpecError as e:
            raise InvalidPatternError(f"Wrong version spec: {token} in {source}", source) from e

    return field_match(token, fields, raw=raw, version_range=version_range)


def compile_pattern(raw: RawPattern) -> Pattern:
    """Compile a raw pattern string.

    Args:
        raw: Pattern such as ``org.example:*:jar`` or ``!*:tests``

    Returns:
        Compiled pattern; ``str()`` of it is ``raw``

    Raises:
        InvalidPatternError: On more than five tokens or an unparsable
            version range
    """
    validate_pattern(raw)

    if raw.startswith(NEGATION_PREFIX):
        return negative(raw, compile_pattern(raw[len(NEGATION_PREFIX) :]))

    tokens = split_tokens(raw)
    if not Limits.MIN_PATTERN_TOKENS <= len(tokens) <= Limits.MAX_PATTERN_TOKENS:
        raise InvalidPatternError(f"Invalid pattern: {raw}", raw)

    clauses = resolve_clauses(tokens)

    if not clauses:
        return match_all(raw)

    if len(clauses) == 1:
        index, fields = clauses[0]
        return _field_pattern(tokens[index], fields, raw, raw=raw)

    return all_of(raw, [_field_pattern(tokens[index], fields, raw) for index, fields in clauses])


def compile_patterns(raws: Optional[Iterable[RawPattern]]) -> Tuple[Pattern, ...]:
    """Compile raw patterns, dropping duplicates and keeping first-seen order.

    Args:
        raws: Raw pattern strings, or None

    Returns:
        Unique compiled patterns

    Raises:
        InvalidPatternError: If any pattern fails to compile
    """
    if not raws:
        return ()

    compiled: Dict[Pattern, None] = {}
    for raw in raws:
        compiled.setdefault(compile_pattern(raw), None)
    return tuple(compiled)
