"""Pydantic-based types for sensitive data rulesets.

This module defines the rule type hierarchy and the YAML data models:

- Rule: Base class with common properties (name, description)
- SensitivePatternRule: Detector for one category of sensitive column
- MatchingVocabulary: Token lists used by shared-token matching
- RulesetData: Base ruleset data class for YAML parsing
- SensitivePatternRulesetData: Ruleset data with categories and vocabulary
"""

from collections import Counter

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from column_inventory.types import Classification, RiskLevel

# Separator the rule tables use when several alternatives share one column
PATTERN_SEPARATOR = "|"


def _to_tuple(value: list[str] | tuple[str, ...] | str | None) -> tuple[str, ...]:
    """Normalise list, tuple, or separator-joined string input to a tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part for part in value.split(PATTERN_SEPARATOR) if part)
    return tuple(value)


class Rule(BaseModel):
    """Base class for all inventory rules.

    Attributes:
        name: Unique identifier for this rule within its category
        description: Human-readable description of what this rule does

    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Unique name for this rule")
    description: str = Field(
        default="",
        description="Human-readable description of what this rule does",
    )


class SensitivePatternRule(Rule):
    """Rule identifying one detectable category of sensitive column.

    Column name patterns use SQL LIKE syntax (``%`` any run, ``_`` one
    character). The rule's pattern text is the alternatives joined with
    ``|``; its length is the specificity measure used for tie-breaking.

    Attributes:
        category: Sensitive data category (e.g., PII, Financial, Auth)
        name_patterns: LIKE-style column name alternatives
        type_patterns: Declared type substrings; empty matches any type
        risk_level: Severity of the category
        compliance_frameworks: Frameworks the category falls under
        active: Whether the rule takes part in classification

    """

    category: str = Field(min_length=1, description="Sensitive data category")
    name_patterns: tuple[str, ...] = Field(
        min_length=1, description="LIKE-style column name alternatives"
    )
    type_patterns: tuple[str, ...] = Field(
        default=(), description="Declared type substrings (empty matches any type)"
    )
    risk_level: RiskLevel
    compliance_frameworks: tuple[str, ...] = Field(
        default=(), description="Compliance frameworks (e.g., GDPR, HIPAA)"
    )
    active: bool = True

    @field_validator("name_patterns", "type_patterns", mode="before")
    @classmethod
    def convert_patterns_to_tuple(
        cls, v: list[str] | tuple[str, ...] | str | None
    ) -> tuple[str, ...]:
        """Convert list or pipe-joined string input to a tuple."""
        return _to_tuple(v)

    @field_validator("compliance_frameworks", mode="before")
    @classmethod
    def convert_frameworks_to_tuple(
        cls, v: list[str] | tuple[str, ...] | str | None
    ) -> tuple[str, ...]:
        """Convert list or comma-joined string input to a tuple."""
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return _to_tuple(v)

    @field_validator("name_patterns", "type_patterns")
    @classmethod
    def validate_patterns_not_empty_strings(
        cls, patterns: tuple[str, ...]
    ) -> tuple[str, ...]:
        """Validate that pattern tuples contain no empty strings."""
        if any(not pattern.strip() for pattern in patterns):
            raise ValueError("All patterns must be non-empty strings")
        return patterns

    @property
    def pattern_text(self) -> str:
        """Column name alternatives joined as they are stored in the rule table."""
        return PATTERN_SEPARATOR.join(self.name_patterns)

    @property
    def type_pattern_text(self) -> str:
        """Declared type alternatives joined as they are stored in the rule table."""
        return PATTERN_SEPARATOR.join(self.type_patterns)

    @property
    def identity(self) -> tuple[str, str]:
        """The (category, name) pair that must be unique among active rules."""
        return (self.category, self.name)

    def to_classification(self) -> Classification:
        """Project the rule onto the classification recorded for a column."""
        return Classification(
            category=self.category,
            pattern_name=self.name,
            risk_level=self.risk_level,
            compliance_frameworks=self.compliance_frameworks,
        )


def find_duplicate_active_rules(
    rules: tuple[SensitivePatternRule, ...] | list[SensitivePatternRule],
) -> list[tuple[str, str]]:
    """Return (category, name) pairs held by more than one active rule."""
    counts = Counter(rule.identity for rule in rules if rule.active)
    return sorted(identity for identity, count in counts.items() if count > 1)


class MatchingVocabulary(BaseModel):
    """Token vocabulary for shared-token matching.

    A rule is a name candidate when some token occurs in both the column
    name and the rule's pattern text; type families play the same role
    for declared types.
    """

    model_config = ConfigDict(frozen=True)

    name_tokens: tuple[str, ...] = Field(
        min_length=1, description="Tokens checked against column names"
    )
    type_families: tuple[str, ...] = Field(
        default=(), description="Type family substrings checked against declared types"
    )

    @field_validator("name_tokens", "type_families", mode="before")
    @classmethod
    def normalise_tokens(cls, v: list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase tokens and drop blanks, preserving order."""
        return tuple(token.strip().lower() for token in v if token.strip())


class RulesetData[RuleType: Rule](BaseModel):
    """Base ruleset data class for YAML parsing."""

    name: str = Field(min_length=1, description="Canonical name of the ruleset")
    version: str = Field(
        pattern=r"^\d+\.\d+\.\d+$", description='Semantic version (e.g., "1.0.0")'
    )
    description: str = Field(
        min_length=1, description="Description of what this ruleset does"
    )
    rules: list[RuleType] = Field(
        min_length=1, description="List of rules in this ruleset"
    )


class SensitivePatternRulesetData(RulesetData[SensitivePatternRule]):
    """Sensitive data pattern ruleset data with validation."""

    categories: list[str] = Field(
        min_length=1, description="Master list of valid sensitive data categories"
    )
    vocabulary: MatchingVocabulary

    @model_validator(mode="after")
    def validate_rules(self) -> "SensitivePatternRulesetData":
        """Validate categories and active (category, name) uniqueness."""
        valid_categories = set(self.categories)
        for rule in self.rules:
            if rule.category not in valid_categories:
                msg = (
                    f"Rule '{rule.name}' has invalid category "
                    f"'{rule.category}'. Valid: {sorted(valid_categories)}"
                )
                raise ValueError(msg)

        duplicates = find_duplicate_active_rules(self.rules)
        if duplicates:
            raise ValueError(f"Duplicate active rules found: {duplicates}")
        return self
