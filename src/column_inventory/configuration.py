"""Configuration classes for the column inventory.

All configuration objects inherit from BaseServiceConfiguration, which makes
them immutable and strict. Each supports explicit instantiation as well as
environment variable fallback through from_properties().
"""

from __future__ import annotations

import os
from typing import Any, Self, override

from pydantic import BaseModel, ConfigDict, Field, field_validator

from column_inventory.classifier.matching import MatchingMode
from column_inventory.rulesets import (
    DEFAULT_RULESET_URI,
    RulesetURI,
    RulesetURIParseError,
)

RULESET_ENV_VAR = "COLUMN_INVENTORY_RULESET"
MATCHING_MODE_ENV_VAR = "COLUMN_INVENTORY_MATCHING_MODE"


class BaseServiceConfiguration(BaseModel):
    """Frozen, strict settings model shared by every configurable component.

    Unknown fields are rejected. Subclasses override from_properties() to
    fill fields missing from the properties mapping from the environment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_assignment=True)

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Validate a properties mapping into a configuration.

        Raises:
            ValidationError: If a property is invalid, unknown or missing

        """
        return cls.model_validate(properties)


class ClassifierConfiguration(BaseServiceConfiguration):
    """Which ruleset the classifier loads and how it matches rules.

    Attributes:
        ruleset: Ruleset URI in format provider/name/version
        matching_mode: Rule matching semantics

    Example:
        ```python
        config = ClassifierConfiguration(matching_mode="like_pattern")
        config = ClassifierConfiguration.from_properties({})  # from the environment
        ```

    """

    ruleset: str = Field(
        default=DEFAULT_RULESET_URI, description="Ruleset URI (provider/name/version)"
    )
    matching_mode: MatchingMode = Field(
        default=MatchingMode.SHARED_TOKEN, description="Rule matching semantics"
    )

    @field_validator("ruleset")
    @classmethod
    def validate_ruleset(cls, v: str) -> str:
        """Validate that the ruleset URI is well formed.

        Raises:
            ValueError: If the URI does not have provider/name/version form

        """
        try:
            RulesetURI.parse(v)
        except RulesetURIParseError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("matching_mode", mode="before")
    @classmethod
    def normalise_matching_mode(cls, v: object) -> object:
        """Accept matching mode names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    @override
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Validate properties with environment fallback.

        Missing fields come from COLUMN_INVENTORY_RULESET and
        COLUMN_INVENTORY_MATCHING_MODE.

        Raises:
            ValidationError: If the ruleset URI or matching mode is invalid

        """
        defaults = {
            "ruleset": os.getenv(RULESET_ENV_VAR, DEFAULT_RULESET_URI),
            "matching_mode": os.getenv(
                MATCHING_MODE_ENV_VAR, MatchingMode.SHARED_TOKEN.value
            ),
        }
        return cls.model_validate(defaults | properties)
