"""Immutable rule snapshots passed to the classifier."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cached_property

from column_inventory.classifier.matching import MatchingMode, RuleMatcher, create_matcher
from column_inventory.errors import RulesetError
from column_inventory.rulesets import DEFAULT_RULESET_URI, RulesetLoader
from column_inventory.rulesets.types import (
    MatchingVocabulary,
    SensitivePatternRule,
    find_duplicate_active_rules,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleSnapshot:
    """Active rules, vocabulary and matching mode for one scan batch.

    Load once per scan and pass by reference to every classify call.
    Rule order is preserved; it is the final tie-breaker between rules of
    equal risk and equal pattern length.
    """

    rules: tuple[SensitivePatternRule, ...]
    vocabulary: MatchingVocabulary
    mode: MatchingMode = MatchingMode.SHARED_TOKEN

    def __post_init__(self) -> None:
        """Reject inactive rules and duplicate active (category, name) pairs."""
        inactive = [rule.name for rule in self.rules if not rule.active]
        if inactive:
            raise RulesetError(f"Snapshot contains inactive rules: {inactive}")
        duplicates = find_duplicate_active_rules(self.rules)
        if duplicates:
            raise RulesetError(f"Duplicate active rules found: {duplicates}")

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[SensitivePatternRule],
        vocabulary: MatchingVocabulary,
        mode: MatchingMode = MatchingMode.SHARED_TOKEN,
    ) -> "RuleSnapshot":
        """Build a snapshot from a rule source, keeping only active rules.

        Args:
            rules: Rules in priority order, possibly including retired ones
            vocabulary: Shared-token matching vocabulary
            mode: Matching mode

        Returns:
            Snapshot of the active rules

        Raises:
            RulesetError: If two active rules share a (category, name) pair

        """
        active = tuple(rule for rule in rules if rule.active)
        return cls(rules=active, vocabulary=vocabulary, mode=mode)

    @classmethod
    def load(
        cls,
        ruleset_uri: str = DEFAULT_RULESET_URI,
        mode: MatchingMode = MatchingMode.SHARED_TOKEN,
    ) -> "RuleSnapshot":
        """Build a snapshot from a registered ruleset.

        Args:
            ruleset_uri: URI in format provider/name/version
            mode: Matching mode

        Returns:
            Snapshot of the ruleset's active rules and vocabulary

        """
        ruleset = RulesetLoader.load_ruleset_instance(ruleset_uri, SensitivePatternRule)
        snapshot = cls.from_rules(ruleset.get_rules(), ruleset.get_vocabulary(), mode)
        logger.debug(
            "Loaded snapshot of %d rules from %s (%s)",
            len(snapshot.rules),
            ruleset_uri,
            mode,
        )
        return snapshot

    @cached_property
    def matcher(self) -> RuleMatcher:
        """The matcher implementing this snapshot's mode."""
        return create_matcher(self.mode, self.vocabulary)
