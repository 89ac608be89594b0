"""Tests for core value types."""

import pytest
from pydantic import ValidationError

from column_inventory.types import (
    ColumnFinding,
    ColumnKey,
    ColumnObservation,
    ConnectionAttempt,
    HealthStatus,
    ReviewDecision,
    ReviewState,
    RiskLevel,
    utc_now,
)


class TestRiskLevel:
    """Test risk level ordering."""

    def test_ranks_order_critical_first(self) -> None:
        """Critical ranks 1 and Low ranks 4."""
        assert [level.rank for level in RiskLevel] == [1, 2, 3, 4]
        assert RiskLevel.CRITICAL.rank < RiskLevel.LOW.rank

    def test_parses_stored_value(self) -> None:
        """Risk levels round-trip through their stored string value."""
        assert RiskLevel("High") is RiskLevel.HIGH


class TestReviewState:
    """Test review state labels."""

    @pytest.mark.parametrize(
        ("state", "label"),
        [
            (ReviewState.UNREVIEWED, "Pending Review"),
            (ReviewState.CONFIRMED_SENSITIVE, "Confirmed Sensitive"),
            (ReviewState.FALSE_POSITIVE, "False Positive"),
        ],
    )
    def test_labels(self, state: ReviewState, label: str) -> None:
        """Each state has the label used in inventory listings."""
        assert state.label == label


class TestHealthStatus:
    """Test health derivation from consecutive failures."""

    @pytest.mark.parametrize(
        ("failures", "expected"),
        [
            (0, HealthStatus.HEALTHY),
            (1, HealthStatus.WARNING),
            (2, HealthStatus.WARNING),
            (3, HealthStatus.CRITICAL),
            (10, HealthStatus.CRITICAL),
        ],
    )
    def test_from_failures(self, failures: int, expected: HealthStatus) -> None:
        """0 is Healthy, 1-2 is Warning, 3 or more is Critical."""
        assert HealthStatus.from_failures(failures) is expected


class TestColumnKey:
    """Test the column identity key."""

    def test_keys_with_same_components_are_equal_and_hashable(self) -> None:
        """Keys compare by value so they can index findings."""
        first = ColumnKey(
            server="s", instance="i", database="d", schema_name="dbo", table="t", column="c"
        )
        second = ColumnKey(
            server="s", instance="i", database="d", schema_name="dbo", table="t", column="c"
        )

        assert first == second
        assert len({first, second}) == 1

    def test_rejects_empty_component(self) -> None:
        """Every key component must be non-empty."""
        with pytest.raises(ValidationError):
            ColumnKey(
                server="s", instance="i", database="d", schema_name="", table="t", column="c"
            )

    def test_qualified_column(self, column_key: ColumnKey) -> None:
        """Qualified column is schema.table.column."""
        assert column_key.qualified_column == "dbo.Users.Email"

    def test_is_immutable(self, column_key: ColumnKey) -> None:
        """Keys cannot be modified after creation."""
        with pytest.raises(ValidationError):
            column_key.column = "Other"  # type: ignore[misc]


class TestColumnObservation:
    """Test scan feed observations."""

    def test_key_combines_location_and_observation(self) -> None:
        """The key carries the scan location plus schema, table and column."""
        observation = ColumnObservation(
            schema_name="dbo", table="Users", column="Email", declared_type="nvarchar"
        )

        key = observation.key("SRV1", "DEFAULT", "AppDb")

        assert key.as_tuple() == ("SRV1", "DEFAULT", "AppDb", "dbo", "Users", "Email")


class TestColumnFinding:
    """Test finding defaults."""

    def test_new_finding_is_unreviewed(self, column_key: ColumnKey) -> None:
        """Findings start Unreviewed with no review fields."""
        finding = ColumnFinding(
            key=column_key,
            declared_type="nvarchar",
            category="Contact",
            pattern_name="Email Address",
            risk_level=RiskLevel.MEDIUM,
            detected_at=utc_now(),
        )

        assert finding.review_state is ReviewState.UNREVIEWED
        assert finding.reviewer is None
        assert finding.reviewed_at is None
        assert finding.counts_as_sensitive

    def test_false_positive_does_not_count_as_sensitive(
        self, column_key: ColumnKey
    ) -> None:
        """Findings reviewed as false positives drop out of sensitive counts."""
        finding = ColumnFinding(
            key=column_key,
            declared_type="nvarchar",
            category="Contact",
            pattern_name="Email Address",
            risk_level=RiskLevel.MEDIUM,
            detected_at=utc_now(),
            review_state=ReviewState.FALSE_POSITIVE,
        )

        assert not finding.counts_as_sensitive


class TestReviewDecision:
    """Test review decision validation."""

    def test_defaults_reviewed_at_to_now(self) -> None:
        """Reviewed time defaults to a timezone-aware now."""
        decision = ReviewDecision(state=ReviewState.CONFIRMED_SENSITIVE, reviewer="alice")

        assert decision.reviewed_at.tzinfo is not None

    def test_strips_reviewer(self) -> None:
        """Surrounding whitespace is removed from reviewer names."""
        decision = ReviewDecision(state=ReviewState.FALSE_POSITIVE, reviewer="  bob ")

        assert decision.reviewer == "bob"

    @pytest.mark.parametrize("reviewer", ["", "   "])
    def test_rejects_blank_reviewer(self, reviewer: str) -> None:
        """A review must name its reviewer."""
        with pytest.raises(ValidationError):
            ReviewDecision(state=ReviewState.FALSE_POSITIVE, reviewer=reviewer)


class TestConnectionAttempt:
    """Test connection attempt construction."""

    def test_failed_records_error_message(self) -> None:
        """A failed attempt carries the exception text."""
        attempt = ConnectionAttempt.failed(
            "SRV1", "DEFAULT", RuntimeError("login timeout"), duration_ms=15
        )

        assert not attempt.success
        assert attempt.error_message == "login timeout"
        assert attempt.duration_ms == 15
