"""Tests for ClassifierConfiguration."""

import pytest
from pydantic import ValidationError

from column_inventory.classifier import MatchingMode
from column_inventory.configuration import ClassifierConfiguration
from column_inventory.rulesets import DEFAULT_RULESET_URI


class TestClassifierConfiguration:
    """Test classifier configuration validation."""

    def test_defaults(self) -> None:
        """The starter ruleset with shared-token matching is the default."""
        config = ClassifierConfiguration()

        assert config.ruleset == DEFAULT_RULESET_URI
        assert config.matching_mode is MatchingMode.SHARED_TOKEN

    def test_matching_mode_any_case(self) -> None:
        """Matching mode names are case-insensitive."""
        config = ClassifierConfiguration.from_properties({"matching_mode": "LIKE_PATTERN"})

        assert config.matching_mode is MatchingMode.LIKE_PATTERN

    def test_rejects_unknown_matching_mode(self) -> None:
        """Only the two matching modes are accepted."""
        with pytest.raises(ValidationError):
            ClassifierConfiguration(matching_mode="regex")  # type: ignore[arg-type]

    def test_rejects_malformed_ruleset_uri(self) -> None:
        """Ruleset URIs must have provider/name/version form."""
        with pytest.raises(
            ValidationError, match="Expected format: provider/name/version"
        ):
            ClassifierConfiguration(ruleset="sensitive_data_patterns")


class TestClassifierConfigurationFromProperties:
    """Test environment fallback."""

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Ruleset and mode come from the environment when not given."""
        monkeypatch.setenv("COLUMN_INVENTORY_RULESET", "local/custom/2.0.0")
        monkeypatch.setenv("COLUMN_INVENTORY_MATCHING_MODE", "like_pattern")

        config = ClassifierConfiguration.from_properties({})

        assert config.ruleset == "local/custom/2.0.0"
        assert config.matching_mode is MatchingMode.LIKE_PATTERN

    def test_properties_override_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Explicit properties win over the environment."""
        monkeypatch.setenv("COLUMN_INVENTORY_MATCHING_MODE", "like_pattern")

        config = ClassifierConfiguration.from_properties(
            {"matching_mode": MatchingMode.SHARED_TOKEN}
        )

        assert config.matching_mode is MatchingMode.SHARED_TOKEN

    def test_invalid_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An invalid environment value fails validation."""
        monkeypatch.setenv("COLUMN_INVENTORY_MATCHING_MODE", "fuzzy")

        with pytest.raises(ValidationError):
            ClassifierConfiguration.from_properties({})
