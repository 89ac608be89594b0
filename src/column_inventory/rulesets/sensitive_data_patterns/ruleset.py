"""Sensitive data pattern ruleset.

Starter rules for classifying database columns by name and declared type
into sensitive data categories (PII, Financial, Auth, Contact, Health,
Biometric, Demographic, Location, Employment), each with a risk level and
the compliance frameworks it falls under.
"""

from typing import ClassVar, cast

from column_inventory.rulesets.base import YAMLRuleset
from column_inventory.rulesets.types import (
    MatchingVocabulary,
    SensitivePatternRule,
    SensitivePatternRulesetData,
)


class SensitiveDataPatternsRuleset(YAMLRuleset[SensitivePatternRule]):
    """Starter sensitive data pattern ruleset."""

    ruleset_name: ClassVar[str] = "sensitive_data_patterns"
    ruleset_version: ClassVar[str] = "1.0.0"
    _data_class: ClassVar[  # pyright: ignore[reportIncompatibleVariableOverride]
        type[SensitivePatternRulesetData]
    ] = SensitivePatternRulesetData

    def get_vocabulary(self) -> MatchingVocabulary:
        """Get the shared-token matching vocabulary shipped with the rules."""
        data = cast(SensitivePatternRulesetData, self._load_data())
        return data.vocabulary

    def get_categories(self) -> tuple[str, ...]:
        """Get the master list of sensitive data categories."""
        data = cast(SensitivePatternRulesetData, self._load_data())
        return tuple(data.categories)
