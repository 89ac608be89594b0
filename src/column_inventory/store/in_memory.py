"""In-memory inventory store implementation.

Provides an in-memory implementation of the InventoryStore interface for
tests and one-off classification runs that need no persistence.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime
from typing import override

from column_inventory.errors import FindingNotFoundError
from column_inventory.health import apply_connection_attempt
from column_inventory.rulesets.types import SensitivePatternRule
from column_inventory.store.base import InventoryStore
from column_inventory.types import (
    Classification,
    ColumnFinding,
    ColumnKey,
    ConnectionAttempt,
    InstanceHealth,
    ReviewDecision,
    ReviewState,
    RiskLevel,
    utc_now,
)


class InMemoryInventoryStore(InventoryStore):
    """In-memory inventory store.

    Findings are held in a dictionary keyed by ColumnKey, so the identity key
    is unique by construction. Every read-modify-write runs under one lock.
    """

    def __init__(self) -> None:
        """Initialise empty storage."""
        self._lock = threading.Lock()
        self._findings: dict[ColumnKey, ColumnFinding] = {}
        # Rule generations in insertion order
        self._patterns: list[SensitivePatternRule] = []
        self._instances: dict[tuple[str, str], InstanceHealth] = {}
        self._connection_log: list[ConnectionAttempt] = []

    @override
    def record_finding(
        self,
        key: ColumnKey,
        declared_type: str,
        classification: Classification | None,
        detected_at: datetime | None = None,
    ) -> None:
        """Insert or refresh the finding for a column."""
        if classification is None:
            return
        detected = detected_at or utc_now()
        matched = {
            "declared_type": declared_type,
            "category": classification.category,
            "pattern_name": classification.pattern_name,
            "risk_level": classification.risk_level,
            "compliance_frameworks": classification.compliance_frameworks,
            "detected_at": detected,
        }

        with self._lock:
            existing = self._findings.get(key)
            if existing is None:
                self._findings[key] = ColumnFinding(key=key, **matched)
            else:
                self._findings[key] = existing.model_copy(update=matched)

    @override
    def get_finding(self, key: ColumnKey) -> ColumnFinding | None:
        """Return the finding for a key."""
        with self._lock:
            return self._findings.get(key)

    @override
    def list_findings(
        self,
        *,
        server: str | None = None,
        database: str | None = None,
        risk_level: RiskLevel | None = None,
        review_state: ReviewState | None = None,
    ) -> list[ColumnFinding]:
        """List findings matching every given filter."""
        with self._lock:
            findings = list(self._findings.values())

        selected = [
            finding
            for finding in findings
            if (server is None or finding.key.server == server)
            and (database is None or finding.key.database == database)
            and (risk_level is None or finding.risk_level == risk_level)
            and (review_state is None or finding.review_state == review_state)
        ]
        return sorted(selected, key=lambda finding: finding.key.as_tuple())

    @override
    def apply_review(self, key: ColumnKey, decision: ReviewDecision) -> ColumnFinding:
        """Write a review decision to an existing finding."""
        with self._lock:
            existing = self._findings.get(key)
            if existing is None:
                raise FindingNotFoundError(
                    f"No finding for column '{key.qualified_column}' "
                    f"in {key.server}/{key.instance}/{key.database}"
                )
            updated = existing.model_copy(
                update={
                    "review_state": decision.state,
                    "reviewer": decision.reviewer,
                    "reviewed_at": decision.reviewed_at,
                    "notes": decision.notes,
                }
            )
            self._findings[key] = updated
            return updated

    @override
    def seed_patterns(self, rules: Iterable[SensitivePatternRule]) -> int:
        """Insert the starter rules when no rule is stored yet."""
        with self._lock:
            if self._patterns:
                return 0
            self._patterns.extend(rules)
            return len(self._patterns)

    @override
    def add_pattern(self, rule: SensitivePatternRule) -> None:
        """Add a rule generation, retiring the active one with the same identity."""
        with self._lock:
            if rule.active:
                self._retire(rule.identity)
            self._patterns.append(rule)

    @override
    def set_pattern_active(self, category: str, name: str, active: bool) -> int:
        """Activate the latest generation of an identity, or retire it."""
        identity = (category, name)
        with self._lock:
            if not active:
                return self._retire(identity)

            positions = [
                position
                for position, rule in enumerate(self._patterns)
                if rule.identity == identity
            ]
            if not positions:
                return 0
            latest = positions[-1]
            changed = self._retire(identity, keep=latest)
            if not self._patterns[latest].active:
                self._patterns[latest] = self._patterns[latest].model_copy(
                    update={"active": True}
                )
                changed += 1
            return changed

    def _retire(self, identity: tuple[str, str], keep: int | None = None) -> int:
        """Deactivate active generations of an identity. Caller holds the lock."""
        changed = 0
        for position, rule in enumerate(self._patterns):
            if position != keep and rule.active and rule.identity == identity:
                self._patterns[position] = rule.model_copy(update={"active": False})
                changed += 1
        return changed

    @override
    def list_patterns(self, *, active_only: bool = True) -> list[SensitivePatternRule]:
        """List rules in insertion order."""
        with self._lock:
            return [rule for rule in self._patterns if rule.active or not active_only]

    @override
    def log_connection_attempt(self, attempt: ConnectionAttempt) -> InstanceHealth:
        """Record a connection attempt and update the instance's health."""
        instance_key = (attempt.server, attempt.instance)
        with self._lock:
            self._connection_log.append(attempt)
            health = apply_connection_attempt(self._instances.get(instance_key), attempt)
            self._instances[instance_key] = health
            return health

    @override
    def get_instance_health(self, server: str, instance: str) -> InstanceHealth | None:
        """Return the health record of an instance."""
        with self._lock:
            return self._instances.get((server, instance))

    @override
    def list_instance_health(self, *, active_only: bool = True) -> list[InstanceHealth]:
        """List instance health records ordered by server and instance."""
        with self._lock:
            records = [
                self._instances[instance_key] for instance_key in sorted(self._instances)
            ]
        return [record for record in records if record.active or not active_only]

    def connection_log(self) -> list[ConnectionAttempt]:
        """Return every logged attempt in the order it was recorded."""
        with self._lock:
            return list(self._connection_log)
