"""Sensitive data rulesets for the column inventory."""

from column_inventory.errors import (
    RulesetError,
    RulesetNotFoundError,
    RulesetURIParseError,
    UnsupportedProviderError,
)
from column_inventory.rulesets.base import AbstractRuleset, YAMLRuleset
from column_inventory.rulesets.loader import RulesetLoader
from column_inventory.rulesets.protocols import SensitivePatternRulesetProtocol
from column_inventory.rulesets.registry import RulesetRegistry, RulesetRegistryState
from column_inventory.rulesets.sensitive_data_patterns import (
    SensitiveDataPatternsRuleset,
)
from column_inventory.rulesets.types import (
    MatchingVocabulary,
    Rule,
    RulesetData,
    SensitivePatternRule,
    SensitivePatternRulesetData,
)
from column_inventory.rulesets.uri import RulesetURI

DEFAULT_RULESET_URI = "local/sensitive_data_patterns/1.0.0"

# Built-in rulesets with their corresponding rule types
_BUILTIN_RULESETS = [
    (SensitiveDataPatternsRuleset, SensitivePatternRule),
]

# Register all built-in rulesets on import
_registry = RulesetRegistry()
for _ruleset_class, _rule_type in _BUILTIN_RULESETS:
    _registry.register(_ruleset_class, _rule_type)

__all__ = [
    "DEFAULT_RULESET_URI",
    # Errors
    "RulesetError",
    "RulesetNotFoundError",
    "RulesetURIParseError",
    "UnsupportedProviderError",
    # URI, loader and registry
    "RulesetURI",
    "RulesetLoader",
    "RulesetRegistry",
    "RulesetRegistryState",
    # Rulesets
    "AbstractRuleset",
    "YAMLRuleset",
    "SensitiveDataPatternsRuleset",
    "SensitivePatternRulesetProtocol",
    # Rule types
    "MatchingVocabulary",
    "Rule",
    "RulesetData",
    "SensitivePatternRule",
    "SensitivePatternRulesetData",
]
