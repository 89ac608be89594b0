"""Workspace-level pytest configuration and fixtures."""

import pytest

from column_inventory.rulesets import RulesetRegistry


@pytest.fixture(autouse=True, scope="function")
def isolate_ruleset_registry():
    """Preserve and restore RulesetRegistry state around each test.

    RulesetRegistry is a singleton with mutable global state; tests that
    clear or extend it must not leak registrations into later tests.
    """
    saved_state = RulesetRegistry.snapshot_state()

    yield

    RulesetRegistry.restore_state(saved_state)


@pytest.fixture(autouse=True)
def clear_inventory_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove COLUMN_INVENTORY_* variables so tests start from defaults."""
    for var in (
        "COLUMN_INVENTORY_STORE_BACKEND",
        "COLUMN_INVENTORY_DATABASE_PATH",
        "COLUMN_INVENTORY_RULESET",
        "COLUMN_INVENTORY_MATCHING_MODE",
        "COLUMN_INVENTORY_ENV",
    ):
        monkeypatch.delenv(var, raising=False)
