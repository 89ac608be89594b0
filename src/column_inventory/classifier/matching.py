"""Rule matchers deciding whether a sensitive pattern rule applies to a column.

Two matching modes are supported:

- SHARED_TOKEN: a fixed token vocabulary is checked against both the column
  name and the rule's pattern text. This reproduces the classification
  stored by the original rule tables, including rules that can only match
  through a vocabulary token.
- LIKE_PATTERN: each of the rule's name patterns is evaluated as a SQL LIKE
  expression against the column name.
"""

import re
from enum import StrEnum
from functools import cache
from typing import Protocol

from column_inventory.rulesets.types import MatchingVocabulary, SensitivePatternRule


class MatchingMode(StrEnum):
    """How rule patterns are compared with column names and types."""

    SHARED_TOKEN = "shared_token"
    LIKE_PATTERN = "like_pattern"


@cache
def _compile_like_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a SQL LIKE pattern into an anchored case-insensitive regex.

    ``%`` matches any run of characters and ``_`` matches exactly one.
    ``[abc]`` or ``[a-z]`` matches one character from the set or range and
    ``[^...]`` one character outside it. A ``[`` without a closing bracket
    is literal.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        end = pattern.find("]", i + 2) if char == "[" else -1
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        elif end != -1:
            members = pattern[i + 1 : end]
            negate = members.startswith("^") and len(members) > 1
            if negate:
                members = members[1:]
            escaped = "".join("-" if c == "-" else re.escape(c) for c in members)
            parts.append(f"[{'^' if negate else ''}{escaped}]")
            i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def like(value: str, pattern: str) -> bool:
    """Return whether value matches the SQL LIKE pattern (case-insensitive)."""
    return _compile_like_pattern(pattern).fullmatch(value) is not None


class RuleMatcher(Protocol):
    """Decides name candidacy and type qualification for one rule."""

    def matches_name(self, column_name: str, rule: SensitivePatternRule) -> bool:
        """Return whether the rule is a name candidate for the column."""
        ...

    def matches_type(self, declared_type: str, rule: SensitivePatternRule) -> bool:
        """Return whether the declared type qualifies for the rule."""
        ...


class SharedTokenMatcher:
    """Mutual-substring matching over a configured token vocabulary.

    A rule is a name candidate when some vocabulary token occurs in both the
    column name and the rule's pattern text. A declared type qualifies when
    the rule has no type patterns, when the type contains the whole joined
    type pattern text, or when some type family occurs in both.
    """

    def __init__(self, vocabulary: MatchingVocabulary) -> None:
        """Initialise the matcher with its token vocabulary.

        Args:
            vocabulary: Name tokens and type families, already lowercased

        """
        self._vocabulary = vocabulary

    def matches_name(self, column_name: str, rule: SensitivePatternRule) -> bool:
        """Return whether a vocabulary token occurs in both column name and rule."""
        column_lower = column_name.lower()
        pattern_lower = rule.pattern_text.lower()
        return any(
            token in column_lower and token in pattern_lower
            for token in self._vocabulary.name_tokens
        )

    def matches_type(self, declared_type: str, rule: SensitivePatternRule) -> bool:
        """Return whether the declared type qualifies through the type families."""
        if not rule.type_patterns:
            return True
        type_lower = declared_type.lower()
        pattern_lower = rule.type_pattern_text.lower()
        if pattern_lower in type_lower:
            return True
        return any(
            family in type_lower and family in pattern_lower
            for family in self._vocabulary.type_families
        )


class LikePatternMatcher:
    """Direct matching of each rule alternative against the column."""

    def matches_name(self, column_name: str, rule: SensitivePatternRule) -> bool:
        """Return whether the column name matches any LIKE alternative."""
        return any(like(column_name, pattern) for pattern in rule.name_patterns)

    def matches_type(self, declared_type: str, rule: SensitivePatternRule) -> bool:
        """Return whether the declared type contains any type pattern."""
        if not rule.type_patterns:
            return True
        type_lower = declared_type.lower()
        return any(pattern.lower() in type_lower for pattern in rule.type_patterns)


def create_matcher(mode: MatchingMode, vocabulary: MatchingVocabulary) -> RuleMatcher:
    """Create the matcher for a matching mode.

    Args:
        mode: The matching mode
        vocabulary: Token vocabulary (used by SHARED_TOKEN only)

    Returns:
        A matcher implementing the mode's semantics

    """
    match mode:
        case MatchingMode.SHARED_TOKEN:
            return SharedTokenMatcher(vocabulary)
        case MatchingMode.LIKE_PATTERN:
            return LikePatternMatcher()
