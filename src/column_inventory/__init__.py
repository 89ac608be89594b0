"""Column inventory and sensitive data classification."""

from column_inventory.classifier import (
    MatchingMode,
    PatternClassifier,
    RuleSnapshot,
    classify,
    find_candidates,
)
from column_inventory.errors import (
    ColumnInventoryError,
    ConfigurationError,
    FindingNotFoundError,
    InvalidArgumentError,
    ReviewError,
    RulesetError,
    SourceError,
    StorageError,
)
from column_inventory.review import review_finding
from column_inventory.scanner import ColumnScanner, ScanResult
from column_inventory.store import (
    InMemoryInventoryStore,
    InventoryStore,
    InventoryStoreFactory,
    SQLiteInventoryStore,
)
from column_inventory.types import (
    Classification,
    ColumnFinding,
    ColumnKey,
    ColumnObservation,
    ConnectionAttempt,
    HealthStatus,
    InstanceHealth,
    ReviewDecision,
    ReviewState,
    RiskLevel,
)

__all__ = [
    # Classification
    "MatchingMode",
    "PatternClassifier",
    "RuleSnapshot",
    "classify",
    "find_candidates",
    # Storage and workflow
    "ColumnScanner",
    "InMemoryInventoryStore",
    "InventoryStore",
    "InventoryStoreFactory",
    "SQLiteInventoryStore",
    "ScanResult",
    "review_finding",
    # Types
    "Classification",
    "ColumnFinding",
    "ColumnKey",
    "ColumnObservation",
    "ConnectionAttempt",
    "HealthStatus",
    "InstanceHealth",
    "ReviewDecision",
    "ReviewState",
    "RiskLevel",
    # Errors
    "ColumnInventoryError",
    "ConfigurationError",
    "FindingNotFoundError",
    "InvalidArgumentError",
    "ReviewError",
    "RulesetError",
    "SourceError",
    "StorageError",
]
