"""Core value types for the column inventory.

This module contains the enums and pydantic models shared by the classifier,
the inventory stores, the scan pipeline and the reports:

- RiskLevel: Ordinal severity with an explicit rank (Critical=1)
- ReviewState: Tri-state human review flag
- HealthStatus: Derived instance health tag
- ColumnKey: Identity key of a physically observed column
- ColumnObservation: One column row from a scan feed
- Classification: The single winning rule for a column
- ColumnFinding: A persisted classification plus review fields
- ReviewDecision: A human review to apply to a finding
- ConnectionAttempt, InstanceHealth: Scan connection tracking
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class RiskLevel(StrEnum):
    """Ordinal severity of a sensitive data category."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Severity rank used for ordering; 1 is the most severe."""
        return _RISK_RANKS[self]


_RISK_RANKS: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.MEDIUM: 3,
    RiskLevel.LOW: 4,
}


class ReviewState(StrEnum):
    """Human review status of a finding."""

    UNREVIEWED = "Unreviewed"
    CONFIRMED_SENSITIVE = "ConfirmedSensitive"
    FALSE_POSITIVE = "FalsePositive"

    @property
    def label(self) -> str:
        """Human-readable status label used in inventory listings."""
        return _REVIEW_LABELS[self]


_REVIEW_LABELS: dict[ReviewState, str] = {
    ReviewState.UNREVIEWED: "Pending Review",
    ReviewState.CONFIRMED_SENSITIVE: "Confirmed Sensitive",
    ReviewState.FALSE_POSITIVE: "False Positive",
}


class HealthStatus(StrEnum):
    """Health tag derived from consecutive connection failures."""

    HEALTHY = "Healthy"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @classmethod
    def from_failures(cls, consecutive_failures: int) -> HealthStatus:
        """Derive the health tag from a consecutive failure count.

        Args:
            consecutive_failures: Failed connection attempts since the last success

        Returns:
            HEALTHY for 0 failures, WARNING for 1-2, CRITICAL for 3 or more

        """
        if consecutive_failures <= 0:
            return cls.HEALTHY
        if consecutive_failures <= 2:  # noqa: PLR2004
            return cls.WARNING
        return cls.CRITICAL


class ColumnKey(BaseModel):
    """Identity key of a column across the monitored fleet."""

    model_config = ConfigDict(frozen=True)

    server: str = Field(min_length=1, description="Server host name")
    instance: str = Field(min_length=1, description="Instance name (DEFAULT for the default instance)")
    database: str = Field(min_length=1, description="Database name")
    schema_name: str = Field(min_length=1, description="Schema name")
    table: str = Field(min_length=1, description="Table name")
    column: str = Field(min_length=1, description="Column name")

    @property
    def qualified_column(self) -> str:
        """Return schema.table.column."""
        return f"{self.schema_name}.{self.table}.{self.column}"

    def as_tuple(self) -> tuple[str, str, str, str, str, str]:
        """Return the key components in storage order."""
        return (
            self.server,
            self.instance,
            self.database,
            self.schema_name,
            self.table,
            self.column,
        )


class ColumnObservation(BaseModel):
    """One non-system column enumerated from a database catalog."""

    model_config = ConfigDict(frozen=True)

    schema_name: str
    table: str
    column: str
    declared_type: str

    def key(self, server: str, instance: str, database: str) -> ColumnKey:
        """Build the fleet-wide identity key for this observation."""
        return ColumnKey(
            server=server,
            instance=instance,
            database=database,
            schema_name=self.schema_name,
            table=self.table,
            column=self.column,
        )


class Classification(BaseModel):
    """The single best-matching sensitive data rule for a column."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(description="Sensitive data category (e.g., PII, Financial)")
    pattern_name: str = Field(description="Human label of the matched rule")
    risk_level: RiskLevel
    compliance_frameworks: tuple[str, ...] = Field(
        default=(), description="Compliance frameworks the category falls under"
    )


class ColumnFinding(BaseModel):
    """A persisted record that a column matched a sensitive data rule."""

    model_config = ConfigDict(frozen=True)

    key: ColumnKey
    declared_type: str
    category: str
    pattern_name: str
    risk_level: RiskLevel
    compliance_frameworks: tuple[str, ...] = ()
    detected_at: datetime
    review_state: ReviewState = ReviewState.UNREVIEWED
    reviewer: str | None = None
    reviewed_at: datetime | None = None
    notes: str | None = None

    @property
    def counts_as_sensitive(self) -> bool:
        """Whether reports should count this finding (not a false positive)."""
        return self.review_state is not ReviewState.FALSE_POSITIVE


class ReviewDecision(BaseModel):
    """A human review to apply atomically to an existing finding."""

    model_config = ConfigDict(frozen=True)

    state: ReviewState
    reviewer: str = Field(min_length=1)
    reviewed_at: datetime = Field(default_factory=utc_now)
    notes: str | None = None

    @field_validator("reviewer")
    @classmethod
    def validate_reviewer_not_blank(cls, reviewer: str) -> str:
        """Reject whitespace-only reviewer names."""
        if not reviewer.strip():
            raise ValueError("reviewer must be a non-empty string")
        return reviewer.strip()


class ConnectionAttempt(BaseModel):
    """Outcome of one scan connection to a server instance."""

    model_config = ConfigDict(frozen=True)

    server: str = Field(min_length=1)
    instance: str = Field(min_length=1)
    success: bool
    error_number: int | None = None
    error_message: str | None = None
    databases_found: int | None = None
    columns_inventoried: int | None = None
    duration_ms: int | None = None
    attempted_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def failed(
        cls, server: str, instance: str, error: Exception, duration_ms: int | None = None
    ) -> Self:
        """Build a failed attempt from the exception that ended the scan."""
        return cls(
            server=server,
            instance=instance,
            success=False,
            error_message=str(error),
            duration_ms=duration_ms,
        )


class InstanceHealth(BaseModel):
    """Tracked connection health of one monitored server instance."""

    model_config = ConfigDict(frozen=True)

    server: str
    instance: str
    full_instance_name: str
    discovered_at: datetime
    active: bool = True
    consecutive_failures: int = 0
    last_successful_connection: datetime | None = None
    last_attempt_at: datetime | None = None
    last_error: str | None = None
    databases_found: int | None = None
    columns_inventoried: int | None = None

    @property
    def health_status(self) -> HealthStatus:
        """Health tag derived from consecutive failures."""
        return HealthStatus.from_failures(self.consecutive_failures)
