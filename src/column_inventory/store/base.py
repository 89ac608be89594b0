"""Base InventoryStore interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from column_inventory.rulesets.types import SensitivePatternRule
from column_inventory.types import (
    Classification,
    ColumnFinding,
    ColumnKey,
    ConnectionAttempt,
    InstanceHealth,
    ReviewDecision,
    ReviewState,
    RiskLevel,
)


class InventoryStore(ABC):
    """Abstract base class for inventory store implementations.

    A store persists three things: the sensitive pattern rule table, the
    column findings keyed by their identity key, and the connection health
    of every scanned instance. Implementations must make each write atomic
    and enforce identity-key uniqueness themselves; callers never retry.
    """

    @abstractmethod
    def record_finding(
        self,
        key: ColumnKey,
        declared_type: str,
        classification: Classification | None,
        detected_at: datetime | None = None,
    ) -> None:
        """Insert or refresh the finding for a column.

        A None classification writes nothing. An existing finding has its
        declared type, matched fields and detection time overwritten while
        its review fields are kept. A new finding starts Unreviewed.

        Args:
            key: Identity key of the column
            declared_type: The column's declared data type
            classification: Winning rule from the classifier, or None
            detected_at: Detection time (defaults to now, UTC)

        Raises:
            StorageError: If the store is unavailable or rejects the write

        """
        pass

    @abstractmethod
    def get_finding(self, key: ColumnKey) -> ColumnFinding | None:
        """Return the finding for a key, or None if the column was never flagged."""
        pass

    @abstractmethod
    def list_findings(
        self,
        *,
        server: str | None = None,
        database: str | None = None,
        risk_level: RiskLevel | None = None,
        review_state: ReviewState | None = None,
    ) -> list[ColumnFinding]:
        """List findings matching every given filter, ordered by identity key."""
        pass

    @abstractmethod
    def apply_review(self, key: ColumnKey, decision: ReviewDecision) -> ColumnFinding:
        """Write a review decision's state, reviewer, time and notes atomically.

        Transition rules are enforced by the review workflow, not the store.

        Returns:
            The updated finding

        Raises:
            FindingNotFoundError: If no finding exists for the key
            StorageError: If the store rejects the write

        """
        pass

    @abstractmethod
    def seed_patterns(self, rules: Iterable[SensitivePatternRule]) -> int:
        """Insert the starter rules when the pattern table is empty.

        Returns:
            Number of rules inserted (0 when the table already held rules)

        """
        pass

    @abstractmethod
    def add_pattern(self, rule: SensitivePatternRule) -> None:
        """Add a rule generation, retiring any active rule with the same identity."""
        pass

    @abstractmethod
    def set_pattern_active(self, category: str, name: str, active: bool) -> int:
        """Activate or retire a rule identity.

        Activating restores the latest generation of the (category, name) pair
        and retires any other generation; retiring deactivates every active
        generation.

        Returns:
            Number of rules changed

        """
        pass

    @abstractmethod
    def list_patterns(self, *, active_only: bool = True) -> list[SensitivePatternRule]:
        """List rules in insertion order."""
        pass

    @abstractmethod
    def log_connection_attempt(self, attempt: ConnectionAttempt) -> InstanceHealth:
        """Record a connection attempt and fold it into the instance's health.

        The instance is registered on first sight.

        Returns:
            The instance's updated health record

        """
        pass

    @abstractmethod
    def get_instance_health(self, server: str, instance: str) -> InstanceHealth | None:
        """Return the health record of an instance, or None if never seen."""
        pass

    @abstractmethod
    def list_instance_health(self, *, active_only: bool = True) -> list[InstanceHealth]:
        """List instance health records ordered by server and instance."""
        pass

    def close(self) -> None:  # noqa: B027
        """Release backend resources. The default implementation holds none."""
        pass

    def __enter__(self) -> InventoryStore:
        """Return the store for use as a context manager."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Close the store on leaving the context."""
        self.close()
