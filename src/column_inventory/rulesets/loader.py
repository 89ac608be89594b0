"""Resolve ruleset URIs to registered ruleset instances."""

import logging
from typing import overload

from column_inventory.errors import UnsupportedProviderError
from column_inventory.rulesets.base import AbstractRuleset
from column_inventory.rulesets.protocols import SensitivePatternRulesetProtocol
from column_inventory.rulesets.registry import RulesetRegistry
from column_inventory.rulesets.types import Rule, SensitivePatternRule
from column_inventory.rulesets.uri import LOCAL_PROVIDER, RulesetURI

logger = logging.getLogger(__name__)


class RulesetLoader:
    """Loads rulesets named by ``{provider}/{name}/{version}`` URIs.

    Only the ``local`` provider exists; it looks rulesets up in the
    RulesetRegistry.
    """

    _SUPPORTED_PROVIDERS = frozenset({LOCAL_PROVIDER})

    @classmethod
    def load_ruleset[T: Rule](
        cls, ruleset_uri: str, rule_type: type[T]
    ) -> tuple[T, ...]:
        """Return the rules of the ruleset at ruleset_uri, in declaration order."""
        return cls.load_ruleset_instance(ruleset_uri, rule_type).get_rules()

    @overload
    @classmethod
    def load_ruleset_instance(  # pyright: ignore[reportOverlappingOverload]
        cls, ruleset_uri: str, rule_type: type[SensitivePatternRule]
    ) -> SensitivePatternRulesetProtocol: ...

    @overload
    @classmethod
    def load_ruleset_instance[T: Rule](
        cls, ruleset_uri: str, rule_type: type[T]
    ) -> AbstractRuleset[T]: ...

    @classmethod
    def load_ruleset_instance[T: Rule](  # pyright: ignore[reportInconsistentOverload]
        cls, ruleset_uri: str, rule_type: type[T]
    ) -> AbstractRuleset[T]:
        """Instantiate the ruleset at ruleset_uri.

        Sensitive pattern rulesets also expose get_vocabulary().

        Raises:
            RulesetURIParseError: If the URI is malformed
            UnsupportedProviderError: If the provider is not ``local``
            RulesetNotFoundError: If no ruleset is registered for the URI
            TypeError: If the ruleset produces a different rule type

        """
        uri = RulesetURI.parse(ruleset_uri)
        if uri.provider not in cls._SUPPORTED_PROVIDERS:
            raise UnsupportedProviderError(
                f"Unsupported ruleset provider '{uri.provider}' in '{ruleset_uri}'; "
                f"only '{LOCAL_PROVIDER}' rulesets can be loaded"
            )

        ruleset_class = RulesetRegistry().get_ruleset_class(
            uri.name, uri.version, rule_type
        )
        logger.debug("Loading ruleset %s as %s", uri, ruleset_class.__name__)
        return ruleset_class()
