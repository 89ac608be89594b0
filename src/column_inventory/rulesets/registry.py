"""Process-wide registry of sensitive data rulesets.

Rulesets are registered by class under their (name, version) pair together
with the rule type they produce. Built-in rulesets register on import of
``column_inventory.rulesets``; other distributions can publish rulesets
through the ``column_inventory.rulesets`` entry point group.
"""

import logging
import threading
from importlib.metadata import entry_points
from typing import Any, ClassVar, NamedTuple, TypedDict, get_args

from column_inventory.errors import RulesetNotFoundError
from column_inventory.rulesets.base import AbstractRuleset
from column_inventory.rulesets.types import Rule

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "column_inventory.rulesets"


class RulesetEntry(NamedTuple):
    """A registered ruleset class and the rule type it produces."""

    ruleset_class: type[AbstractRuleset[Any]]
    rule_type: type[Rule]


class RulesetRegistryState(TypedDict):
    """Copy of the registry contents, used to isolate tests."""

    entries: dict[tuple[str, str], RulesetEntry]


def _version_key(version: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError:
        return ()


def extract_rule_type(ruleset_class: type[AbstractRuleset[Any]]) -> type[Rule]:
    """Read the rule type from a ruleset class's generic base.

    For ``class X(YAMLRuleset[SensitivePatternRule])`` this returns
    SensitivePatternRule.

    Raises:
        ValueError: If no base is parameterised with a Rule subclass

    """
    for base in getattr(ruleset_class, "__orig_bases__", ()):
        args = get_args(base)
        if args and isinstance(args[0], type) and issubclass(args[0], Rule):
            return args[0]

    raise ValueError(
        f"Cannot extract rule type from {ruleset_class.__name__}: it must "
        "subclass AbstractRuleset[T] with T a Rule subclass"
    )


class RulesetRegistry:
    """Singleton mapping (name, version) to registered ruleset classes."""

    _lock: ClassVar[threading.Lock] = threading.Lock()
    _instance: "RulesetRegistry | None" = None
    _entries: dict[tuple[str, str], RulesetEntry]

    def __new__(cls, *args: Any, **kwargs: Any) -> "RulesetRegistry":  # noqa: ANN401
        """Return the process-wide registry, creating it on first use."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._entries = {}
                    cls._instance = instance
        return cls._instance

    def register[T: Rule](
        self, ruleset_class: type[AbstractRuleset[T]], rule_type: type[T]
    ) -> None:
        """Register a ruleset class under its ruleset_name and ruleset_version.

        Registering the same class twice is a no-op. A different class
        claiming an already registered (name, version) is ignored with a
        warning; the first registration wins.

        Raises:
            ValueError: If the class lacks ruleset_name or ruleset_version

        """
        key = self._key_for(ruleset_class)
        existing = self._entries.get(key)
        if existing is not None:
            if existing.ruleset_class is not ruleset_class:
                logger.warning(
                    "Ruleset %s/%s is already provided by %s; ignoring %s",
                    key[0],
                    key[1],
                    existing.ruleset_class.__name__,
                    ruleset_class.__name__,
                )
            return
        self._entries[key] = RulesetEntry(ruleset_class, rule_type)

    @staticmethod
    def _key_for(ruleset_class: type[AbstractRuleset[Any]]) -> tuple[str, str]:
        for attribute in ("ruleset_name", "ruleset_version"):
            if getattr(ruleset_class, attribute, None) is None:
                raise ValueError(
                    f"Ruleset class {ruleset_class.__name__} must define "
                    f"'{attribute}' ClassVar"
                )
        return (ruleset_class.ruleset_name, ruleset_class.ruleset_version)

    def get_ruleset_class[T: Rule](
        self, name: str, version: str, expected_rule_type: type[T]
    ) -> type[AbstractRuleset[T]]:
        """Look up a ruleset class, checking the rule type it produces.

        Raises:
            RulesetNotFoundError: If nothing is registered under name and version
            TypeError: If the ruleset produces a different rule type

        """
        entry = self._entries.get((name, version))
        if entry is None:
            available = self.get_available_versions(name)
            if available:
                raise RulesetNotFoundError(
                    f"Ruleset '{name}' has no version '{version}'. "
                    f"Available versions: {', '.join(available)}"
                )
            raise RulesetNotFoundError(
                f"Ruleset '{name}' not registered (no versions available)"
            )

        if entry.rule_type is not expected_rule_type:
            raise TypeError(
                f"Ruleset '{name}' produces {entry.rule_type.__name__} rules, "
                f"but {expected_rule_type.__name__} was expected"
            )
        return entry.ruleset_class

    def is_registered(self, name: str, version: str) -> bool:
        """Whether a ruleset is registered under name and version."""
        return (name, version) in self._entries

    def get_available_versions(self, name: str) -> tuple[str, ...]:
        """Registered versions of a ruleset, oldest first."""
        versions = [v for (n, v) in self._entries if n == name]
        return tuple(sorted(versions, key=_version_key))

    def list_registered(self) -> list[tuple[str, str, type[Rule]]]:
        """All registrations as (name, version, rule_type), by name then version."""
        rows = [(n, v, entry.rule_type) for (n, v), entry in self._entries.items()]
        return sorted(rows, key=lambda row: (row[0], _version_key(row[1])))

    def clear(self) -> None:
        """Remove every registration, built-in rulesets included."""
        self._entries.clear()

    def discover_from_entry_points(self, group: str = ENTRY_POINT_GROUP) -> int:
        """Register rulesets published by installed distributions.

        Entry points that fail to load are logged and skipped.

        Returns:
            Number of entry points registered

        """
        registered = 0
        for ep in entry_points(group=group):
            try:
                ruleset_class = ep.load()
                self.register(ruleset_class, extract_rule_type(ruleset_class))
            except Exception as e:
                logger.warning(
                    "Failed to load ruleset from entry point '%s': %s", ep.name, e
                )
                continue
            registered += 1
            logger.debug("Registered ruleset from entry point '%s'", ep.name)
        return registered

    @classmethod
    def snapshot_state(cls) -> RulesetRegistryState:
        """Copy the current registrations for later restore_state()."""
        return {"entries": dict(cls()._entries)}

    @classmethod
    def restore_state(cls, state: RulesetRegistryState) -> None:
        """Replace the registrations with a snapshot_state() copy."""
        cls()._entries = dict(state["entries"])
