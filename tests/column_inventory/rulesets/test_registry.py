"""Tests for the ruleset registry, URI parsing and loader."""

from typing import ClassVar

import pytest

from column_inventory.rulesets import (
    DEFAULT_RULESET_URI,
    AbstractRuleset,
    Rule,
    RulesetLoader,
    RulesetNotFoundError,
    RulesetRegistry,
    RulesetURI,
    RulesetURIParseError,
    SensitiveDataPatternsRuleset,
    SensitivePatternRule,
    UnsupportedProviderError,
)
from column_inventory.rulesets.registry import extract_rule_type


class PlainRuleset(AbstractRuleset[Rule]):
    """Minimal ruleset with a different rule type."""

    ruleset_name: ClassVar[str] = "plain"
    ruleset_version: ClassVar[str] = "2.0.0"

    def get_rules(self) -> tuple[Rule, ...]:
        return (Rule(name="only"),)


class TestRulesetURI:
    """Test ruleset URI parsing."""

    def test_parses_components(self) -> None:
        """A URI splits into provider, name and version."""
        uri = RulesetURI.parse("local/sensitive_data_patterns/1.0.0")

        assert uri.provider == "local"
        assert uri.name == "sensitive_data_patterns"
        assert uri.version == "1.0.0"
        assert str(uri) == "local/sensitive_data_patterns/1.0.0"

    @pytest.mark.parametrize(
        "uri", ["sensitive_data_patterns", "local/sensitive_data_patterns", "a/b/c/d"]
    )
    def test_rejects_wrong_part_count(self, uri: str) -> None:
        """URIs must have exactly three parts."""
        with pytest.raises(RulesetURIParseError, match="Expected format"):
            RulesetURI.parse(uri)

    def test_rejects_empty_part(self) -> None:
        """No URI part may be empty."""
        with pytest.raises(RulesetURIParseError, match="cannot be empty"):
            RulesetURI.parse("local//1.0.0")

    @pytest.mark.parametrize("version", ["latest", "1.0.x", "v1"])
    def test_rejects_non_numeric_version(self, version: str) -> None:
        """Versions are dotted numbers."""
        with pytest.raises(RulesetURIParseError, match="dotted numbers"):
            RulesetURI.parse(f"local/sensitive_data_patterns/{version}")


class TestRulesetRegistry:
    """Test registry behaviour."""

    def test_is_singleton(self) -> None:
        """Every construction returns the same registry."""
        assert RulesetRegistry() is RulesetRegistry()

    def test_builtin_ruleset_is_registered(self) -> None:
        """The starter ruleset registers on package import."""
        registry = RulesetRegistry()

        assert registry.is_registered("sensitive_data_patterns", "1.0.0")
        assert (
            "sensitive_data_patterns",
            "1.0.0",
            SensitivePatternRule,
        ) in registry.list_registered()

    def test_get_ruleset_class_validates_rule_type(self) -> None:
        """Asking for the wrong rule type is a TypeError."""
        registry = RulesetRegistry()
        registry.register(PlainRuleset, Rule)

        with pytest.raises(TypeError, match="SensitivePatternRule was expected"):
            registry.get_ruleset_class("plain", "2.0.0", SensitivePatternRule)

    def test_unknown_version_lists_available(self) -> None:
        """A missing version reports the registered versions."""
        registry = RulesetRegistry()

        with pytest.raises(RulesetNotFoundError, match="Available versions: 1.0.0"):
            registry.get_ruleset_class(
                "sensitive_data_patterns", "9.9.9", SensitivePatternRule
            )

    def test_unknown_name(self) -> None:
        """A missing name has no versions available."""
        with pytest.raises(RulesetNotFoundError, match="no versions available"):
            RulesetRegistry().get_ruleset_class("missing", "1.0.0", SensitivePatternRule)

    def test_clear_is_undone_between_tests(self) -> None:
        """Clearing the registry empties it for the current test only."""
        registry = RulesetRegistry()
        registry.clear()

        assert registry.list_registered() == []

    def test_builtin_survives_previous_clear(self) -> None:
        """Registry state is restored after each test."""
        assert RulesetRegistry().is_registered("sensitive_data_patterns", "1.0.0")

    def test_register_requires_class_vars(self) -> None:
        """Ruleset classes must name themselves."""

        class Nameless(AbstractRuleset[Rule]):
            ruleset_version: ClassVar[str] = "1.0.0"

            def get_rules(self) -> tuple[Rule, ...]:
                return ()

        with pytest.raises(ValueError, match="ruleset_name"):
            RulesetRegistry().register(Nameless, Rule)

    def test_extract_rule_type(self) -> None:
        """The rule type is read from the generic base class."""
        assert extract_rule_type(SensitiveDataPatternsRuleset) is SensitivePatternRule
        assert extract_rule_type(PlainRuleset) is Rule


class TestRulesetLoader:
    """Test loading rulesets by URI."""

    def test_load_default_ruleset(self) -> None:
        """The default URI loads the starter rules."""
        rules = RulesetLoader.load_ruleset(DEFAULT_RULESET_URI, SensitivePatternRule)

        assert len(rules) == 24
        assert all(isinstance(rule, SensitivePatternRule) for rule in rules)

    def test_load_instance_exposes_vocabulary(self) -> None:
        """The ruleset instance carries the matching vocabulary."""
        ruleset = RulesetLoader.load_ruleset_instance(
            DEFAULT_RULESET_URI, SensitivePatternRule
        )

        assert "ssn" in ruleset.get_vocabulary().name_tokens

    def test_unsupported_provider(self) -> None:
        """Only bundled rulesets can be loaded."""
        with pytest.raises(UnsupportedProviderError, match="remote"):
            RulesetLoader.load_ruleset(
                "remote/sensitive_data_patterns/1.0.0", SensitivePatternRule
            )

    def test_unregistered_ruleset(self) -> None:
        """Unknown names surface as RulesetNotFoundError."""
        with pytest.raises(RulesetNotFoundError):
            RulesetLoader.load_ruleset("local/unknown/1.0.0", SensitivePatternRule)
