"""Sensitive data pattern ruleset."""

from column_inventory.rulesets.sensitive_data_patterns.ruleset import (
    SensitiveDataPatternsRuleset,
)

__all__ = ["SensitiveDataPatternsRuleset"]
