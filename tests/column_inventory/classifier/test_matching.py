"""Tests for rule matchers."""

import pytest

from column_inventory.classifier import (
    LikePatternMatcher,
    MatchingMode,
    SharedTokenMatcher,
    create_matcher,
    like,
)
from column_inventory.rulesets import MatchingVocabulary, SensitivePatternRule

VOCABULARY = MatchingVocabulary(
    name_tokens=["ssn", "email", "salary"], type_families=["char", "money", "date"]
)


def _rule(name_patterns: list[str], type_patterns: list[str]) -> SensitivePatternRule:
    return SensitivePatternRule(
        name="Test",
        category="PII",
        name_patterns=name_patterns,
        type_patterns=type_patterns,
        risk_level="High",
    )


class TestLike:
    """Test SQL LIKE evaluation."""

    @pytest.mark.parametrize(
        ("value", "pattern", "expected"),
        [
            ("user_ssn", "%ssn%", True),
            ("SSN", "%ssn%", True),
            ("social_security_no", "%social%security%", True),
            ("email", "%e_mail%", False),
            ("e-mail", "%e_mail%", True),
            ("ssn", "ssn", True),
            ("user_ssn", "ssn", False),
            ("a.b", "a.b", True),
            ("axb", "a.b", False),
            ("", "%", True),
        ],
    )
    def test_like(self, value: str, pattern: str, expected: bool) -> None:
        """Percent matches any run and underscore exactly one character."""
        assert like(value, pattern) is expected

    @pytest.mark.parametrize(
        ("value", "pattern", "expected"),
        [
            ("phone1", "phone[0-9]", True),
            ("phonex", "phone[0-9]", False),
            ("phonex", "phone[^0-9]", True),
            ("phone1", "phone[^0-9]", False),
            ("ssn_b", "%ssn_[abc]", True),
            ("ssn_d", "%ssn_[abc]", False),
            ("rate50%", "%[%]", True),
            ("rate50", "%[%]", False),
            ("dob-1", "dob[-]1", True),
            ("a[b", "a[b", True),
            ("a^", "a[^]", True),
        ],
    )
    def test_bracket_classes(self, value: str, pattern: str, expected: bool) -> None:
        """Brackets match one character from, or outside, a set or range."""
        assert like(value, pattern) is expected


class TestSharedTokenMatcher:
    """Test vocabulary-based matching."""

    def test_name_candidate_needs_token_in_both(self) -> None:
        """A token must occur in both the column name and the pattern text."""
        matcher = SharedTokenMatcher(VOCABULARY)
        rule = _rule(["%ssn%", "%taxpayer%id%"], [])

        assert matcher.matches_name("customer_SSN", rule)
        assert not matcher.matches_name("taxpayer_id", rule)

    def test_type_qualifies_without_type_patterns(self) -> None:
        """Rules without type patterns accept any declared type."""
        matcher = SharedTokenMatcher(VOCABULARY)

        assert matcher.matches_type("xml", _rule(["%ssn%"], []))

    def test_type_qualifies_through_family(self) -> None:
        """A type family present in both the type and the pattern qualifies."""
        matcher = SharedTokenMatcher(VOCABULARY)
        rule = _rule(["%salary%"], ["money", "decimal", "float"])

        assert matcher.matches_type("smallmoney", rule)
        assert not matcher.matches_type("float", rule)

    def test_type_qualifies_on_whole_pattern_text(self) -> None:
        """A type containing the whole joined pattern text qualifies."""
        matcher = SharedTokenMatcher(VOCABULARY)
        rule = _rule(["%ssn%"], ["xml"])

        assert matcher.matches_type("XML", rule)


class TestLikePatternMatcher:
    """Test direct LIKE matching."""

    def test_name_matches_any_alternative(self) -> None:
        """Any LIKE alternative matching the column makes it a candidate."""
        matcher = LikePatternMatcher()
        rule = _rule(["%ssn%", "%taxpayer%id%"], [])

        assert matcher.matches_name("taxpayer_id", rule)
        assert not matcher.matches_name("tax_code", rule)

    def test_type_contains_any_pattern(self) -> None:
        """Declared types qualify when they contain any type pattern."""
        matcher = LikePatternMatcher()
        rule = _rule(["%salary%"], ["money", "decimal", "float"])

        assert matcher.matches_type("FLOAT", rule)
        assert not matcher.matches_type("int", rule)


class TestCreateMatcher:
    """Test matcher selection."""

    def test_selects_matcher_by_mode(self) -> None:
        """Each mode maps to its matcher."""
        assert isinstance(
            create_matcher(MatchingMode.SHARED_TOKEN, VOCABULARY), SharedTokenMatcher
        )
        assert isinstance(
            create_matcher(MatchingMode.LIKE_PATTERN, VOCABULARY), LikePatternMatcher
        )
