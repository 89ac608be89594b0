"""Shared CLI infrastructure setup."""

from __future__ import annotations

import logging
from pathlib import Path

from column_inventory.classifier import MatchingMode, RuleSnapshot
from column_inventory.configuration import ClassifierConfiguration
from column_inventory.errors import ConfigurationError
from column_inventory.rulesets import RulesetLoader, SensitivePatternRule
from column_inventory.store import (
    InventoryStore,
    InventoryStoreFactory,
    StoreBackend,
    StoreConfiguration,
)
from column_inventory.store.configuration import (
    BACKEND_ENV_VAR,
    DATABASE_PATH_ENV_VAR,
)

logger = logging.getLogger(__name__)


def build_classifier_config(
    ruleset: str | None, mode: MatchingMode | None
) -> ClassifierConfiguration:
    """Build classifier configuration from CLI options with environment fallback."""
    properties: dict[str, object] = {}
    if ruleset is not None:
        properties["ruleset"] = ruleset
    if mode is not None:
        properties["matching_mode"] = mode
    return ClassifierConfiguration.from_properties(properties)


def build_store(database: Path | None) -> InventoryStore:
    """Open the inventory store.

    An explicit database path selects the SQLite backend; otherwise the
    backend is read from the environment.

    Raises:
        ConfigurationError: If no persistent backend is configured

    """
    if database is not None:
        config = StoreConfiguration(backend="sqlite", database_path=str(database))
    else:
        config = StoreConfiguration.from_properties({})

    if config.backend is not StoreBackend.SQLITE:
        raise ConfigurationError(
            f"The '{config.backend}' store does not persist findings between "
            f"commands. Pass --database or set {BACKEND_ENV_VAR}=sqlite and "
            f"{DATABASE_PATH_ENV_VAR}."
        )
    return InventoryStoreFactory(config).create()


def load_store_snapshot(
    store: InventoryStore, config: ClassifierConfiguration
) -> RuleSnapshot:
    """Build a snapshot of the store's active rules.

    The pattern table is seeded from the configured ruleset when empty. The
    matching vocabulary always comes from the configured ruleset.
    """
    ruleset = RulesetLoader.load_ruleset_instance(config.ruleset, SensitivePatternRule)
    seeded = store.seed_patterns(ruleset.get_rules())
    if seeded:
        logger.info("Seeded %d patterns from %s", seeded, config.ruleset)

    return RuleSnapshot.from_rules(
        store.list_patterns(active_only=True),
        ruleset.get_vocabulary(),
        config.matching_mode,
    )
