"""Protocols for rulesets that expose data beyond their rules."""

from typing import Protocol

from column_inventory.rulesets.types import MatchingVocabulary, SensitivePatternRule


class SensitivePatternRulesetProtocol(Protocol):
    """A sensitive pattern ruleset that also carries its matching vocabulary."""

    @property
    def name(self) -> str:
        """Canonical ruleset name."""
        ...

    @property
    def version(self) -> str:
        """Semantic version string."""
        ...

    def get_rules(self) -> tuple[SensitivePatternRule, ...]:
        """Return the rules in declaration order."""
        ...

    def get_vocabulary(self) -> MatchingVocabulary:
        """Return the shared-token matching vocabulary."""
        ...
