"""Tests for inventory reports."""

from datetime import UTC, datetime

import pytest

from column_inventory.reports import (
    compliance_breakdown,
    critical_findings,
    false_positive_rates,
    summarize_by_risk,
)
from column_inventory.types import ColumnFinding, ColumnKey, ReviewState, RiskLevel

DETECTED = datetime(2024, 5, 1, tzinfo=UTC)

RULES = {
    "ssn": ("PII", "Social Security Number", RiskLevel.CRITICAL, ("GDPR", "HIPAA")),
    "card": ("Financial", "Credit Card", RiskLevel.CRITICAL, ("PCI-DSS",)),
    "email": ("Contact", "Email Address", RiskLevel.MEDIUM, ("GDPR",)),
    "title": ("Employment", "Job Title", RiskLevel.LOW, ("GDPR",)),
}


def _finding(
    rule: str,
    column: str,
    server: str = "SRV1",
    database: str = "AppDb",
    state: ReviewState = ReviewState.UNREVIEWED,
) -> ColumnFinding:
    category, pattern_name, risk_level, frameworks = RULES[rule]
    return ColumnFinding(
        key=ColumnKey(
            server=server,
            instance="DEFAULT",
            database=database,
            schema_name="dbo",
            table="T",
            column=column,
        ),
        declared_type="varchar",
        category=category,
        pattern_name=pattern_name,
        risk_level=risk_level,
        compliance_frameworks=frameworks,
        detected_at=DETECTED,
        review_state=state,
    )


@pytest.fixture
def findings() -> list[ColumnFinding]:
    return [
        _finding("ssn", "ssn"),
        _finding("ssn", "ssn", server="SRV2"),
        _finding("card", "card_no", database="Billing"),
        _finding("card", "card_number", database="Billing"),
        _finding("email", "email"),
        _finding("email", "email_alt", state=ReviewState.CONFIRMED_SENSITIVE),
        _finding("email", "mailbox", state=ReviewState.FALSE_POSITIVE),
        _finding("email", "e_mail", state=ReviewState.FALSE_POSITIVE),
        _finding("title", "title", state=ReviewState.FALSE_POSITIVE),
    ]


class TestSummarizeByRisk:
    """Test the risk summary."""

    def test_groups_by_risk_and_category(self, findings: list[ColumnFinding]) -> None:
        """Counts are grouped per risk level and category, most severe first."""
        summary = summarize_by_risk(findings)

        assert [(s.risk_level, s.category) for s in summary] == [
            (RiskLevel.CRITICAL, "Financial"),
            (RiskLevel.CRITICAL, "PII"),
            (RiskLevel.MEDIUM, "Contact"),
        ]
        pii = summary[1]
        assert pii.column_count == 2
        assert pii.server_count == 2
        assert pii.database_count == 2
        assert pii.compliance_frameworks == ("GDPR", "HIPAA")

    def test_false_positives_excluded(self, findings: list[ColumnFinding]) -> None:
        """Findings reviewed as false positives are not counted."""
        contact = next(s for s in summarize_by_risk(findings) if s.category == "Contact")

        assert contact.column_count == 2

    def test_empty(self) -> None:
        """No findings give an empty summary."""
        assert summarize_by_risk([]) == []


class TestCriticalFindings:
    """Test the critical findings rollup."""

    def test_rolls_up_per_database(self, findings: list[ColumnFinding]) -> None:
        """Databases with the most critical columns come first."""
        rollup = critical_findings(findings)

        assert [(r.server, r.database, r.critical_columns) for r in rollup] == [
            ("SRV1", "Billing", 2),
            ("SRV1", "AppDb", 1),
            ("SRV2", "AppDb", 1),
        ]
        billing = rollup[0]
        assert billing.affected_columns == ("dbo.T.card_no", "dbo.T.card_number")
        assert billing.categories == ("Financial",)
        assert billing.compliance_impact == ("PCI-DSS",)

    def test_false_positive_critical_excluded(self) -> None:
        """A critical finding reviewed as false positive is not reported."""
        rollup = critical_findings(
            [_finding("ssn", "ssn", state=ReviewState.FALSE_POSITIVE)]
        )

        assert rollup == []


class TestFalsePositiveRates:
    """Test the false positive analysis."""

    def test_rates_per_pattern(self, findings: list[ColumnFinding]) -> None:
        """Rates are percentages over all detections, highest first."""
        stats = false_positive_rates(findings)

        assert [(s.pattern_name, s.false_positive_rate) for s in stats] == [
            ("Job Title", 100.0),
            ("Email Address", 50.0),
            ("Credit Card", 0.0),
            ("Social Security Number", 0.0),
        ]
        email = stats[1]
        assert email.total_detections == 4
        assert email.false_positives == 2
        assert email.confirmed_sensitive == 1
        assert email.pending_review == 1

    def test_min_detections(self, findings: list[ColumnFinding]) -> None:
        """Patterns with too few detections are left out."""
        stats = false_positive_rates(findings, min_detections=3)

        assert [s.pattern_name for s in stats] == ["Email Address"]

    def test_rate_rounded_to_two_decimals(self) -> None:
        """Rates are rounded to two decimal places."""
        stats = false_positive_rates(
            [
                _finding("email", "a", state=ReviewState.FALSE_POSITIVE),
                _finding("email", "b"),
                _finding("email", "c"),
            ]
        )

        assert stats[0].false_positive_rate == 33.33


class TestComplianceBreakdown:
    """Test the compliance breakdown."""

    def test_counts_per_framework(self, findings: list[ColumnFinding]) -> None:
        """Each framework counts the sensitive columns it covers."""
        breakdown = {s.framework: s for s in compliance_breakdown(findings)}

        assert list(breakdown) == ["GDPR", "HIPAA", "PCI-DSS"]
        gdpr = breakdown["GDPR"]
        assert gdpr.total_columns == 4
        assert gdpr.servers_affected == 2
        assert gdpr.databases_affected == 2
        assert gdpr.critical_issues == 2
        assert breakdown["PCI-DSS"].critical_issues == 2

    def test_single_framework_case_insensitive(
        self, findings: list[ColumnFinding]
    ) -> None:
        """Filtering by framework ignores case."""
        breakdown = compliance_breakdown(findings, framework="hipaa")

        assert [s.framework for s in breakdown] == ["HIPAA"]
        assert breakdown[0].total_columns == 2
