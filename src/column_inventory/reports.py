"""Read-side reports over column findings.

All reports are pure functions over findings. Findings reviewed as false
positives are excluded from the sensitive data rollups and only counted by
the false positive analysis.
"""

from collections import defaultdict
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from column_inventory.types import ColumnFinding, ReviewState, RiskLevel


class RiskSummary(BaseModel):
    """Sensitive column counts for one risk level and category."""

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel
    category: str
    column_count: int
    database_count: int
    server_count: int
    compliance_frameworks: tuple[str, ...]


class CriticalFindingSummary(BaseModel):
    """Critical-risk columns of one database."""

    model_config = ConfigDict(frozen=True)

    server: str
    instance: str
    database: str
    critical_columns: int
    affected_columns: tuple[str, ...]
    categories: tuple[str, ...]
    compliance_impact: tuple[str, ...]


class PatternReviewStats(BaseModel):
    """Review outcome counts for one matched pattern."""

    model_config = ConfigDict(frozen=True)

    category: str
    pattern_name: str
    total_detections: int
    false_positives: int
    confirmed_sensitive: int
    pending_review: int

    @property
    def false_positive_rate(self) -> float:
        """Percentage of detections reviewed as false positives (2 decimals)."""
        if self.total_detections == 0:
            return 0.0
        return round(self.false_positives * 100.0 / self.total_detections, 2)


class ComplianceSummary(BaseModel):
    """Sensitive column counts for one compliance framework."""

    model_config = ConfigDict(frozen=True)

    framework: str
    total_columns: int
    servers_affected: int
    databases_affected: int
    critical_issues: int


def _sensitive(findings: Iterable[ColumnFinding]) -> list[ColumnFinding]:
    return [finding for finding in findings if finding.counts_as_sensitive]


def _distinct_frameworks(findings: Iterable[ColumnFinding]) -> tuple[str, ...]:
    return tuple(
        sorted({fw for finding in findings for fw in finding.compliance_frameworks})
    )


def summarize_by_risk(findings: Iterable[ColumnFinding]) -> list[RiskSummary]:
    """Group sensitive findings by risk level and category.

    Returns:
        One summary per (risk level, category), most severe level first

    """
    groups: dict[tuple[RiskLevel, str], list[ColumnFinding]] = defaultdict(list)
    for finding in _sensitive(findings):
        groups[(finding.risk_level, finding.category)].append(finding)

    summaries = [
        RiskSummary(
            risk_level=risk_level,
            category=category,
            column_count=len(group),
            database_count=len({(f.key.server, f.key.database) for f in group}),
            server_count=len({f.key.server for f in group}),
            compliance_frameworks=_distinct_frameworks(group),
        )
        for (risk_level, category), group in groups.items()
    ]
    return sorted(
        summaries, key=lambda summary: (summary.risk_level.rank, summary.category)
    )


def critical_findings(
    findings: Iterable[ColumnFinding],
) -> list[CriticalFindingSummary]:
    """Roll up critical-risk sensitive findings per database.

    Returns:
        One summary per (server, instance, database) holding critical columns,
        databases with the most critical columns first

    """
    groups: dict[tuple[str, str, str], list[ColumnFinding]] = defaultdict(list)
    for finding in _sensitive(findings):
        if finding.risk_level is RiskLevel.CRITICAL:
            key = finding.key
            groups[(key.server, key.instance, key.database)].append(finding)

    summaries = [
        CriticalFindingSummary(
            server=server,
            instance=instance,
            database=database,
            critical_columns=len(group),
            affected_columns=tuple(sorted(f.key.qualified_column for f in group)),
            categories=tuple(sorted({f.category for f in group})),
            compliance_impact=_distinct_frameworks(group),
        )
        for (server, instance, database), group in groups.items()
    ]
    return sorted(
        summaries,
        key=lambda s: (-s.critical_columns, s.server, s.instance, s.database),
    )


def false_positive_rates(
    findings: Iterable[ColumnFinding], min_detections: int = 1
) -> list[PatternReviewStats]:
    """Review outcomes per matched pattern, highest false positive rate first.

    Args:
        findings: All findings, including those reviewed as false positives
        min_detections: Patterns with fewer detections are left out

    """
    groups: dict[tuple[str, str], list[ColumnFinding]] = defaultdict(list)
    for finding in findings:
        groups[(finding.category, finding.pattern_name)].append(finding)

    stats: list[PatternReviewStats] = []
    for (category, pattern_name), group in groups.items():
        if len(group) < min_detections:
            continue
        states = [finding.review_state for finding in group]
        stats.append(
            PatternReviewStats(
                category=category,
                pattern_name=pattern_name,
                total_detections=len(group),
                false_positives=states.count(ReviewState.FALSE_POSITIVE),
                confirmed_sensitive=states.count(ReviewState.CONFIRMED_SENSITIVE),
                pending_review=states.count(ReviewState.UNREVIEWED),
            )
        )
    return sorted(
        stats, key=lambda s: (-s.false_positive_rate, s.category, s.pattern_name)
    )


def compliance_breakdown(
    findings: Iterable[ColumnFinding], framework: str | None = None
) -> list[ComplianceSummary]:
    """Sensitive findings per compliance framework.

    Args:
        findings: Findings to aggregate
        framework: Restrict the report to one framework (case-insensitive)

    Returns:
        One summary per framework, ordered by framework name

    """
    groups: dict[str, list[ColumnFinding]] = defaultdict(list)
    for finding in _sensitive(findings):
        for fw in finding.compliance_frameworks:
            if framework is None or fw.lower() == framework.lower():
                groups[fw].append(finding)

    return [
        ComplianceSummary(
            framework=fw,
            total_columns=len(group),
            servers_affected=len({f.key.server for f in group}),
            databases_affected=len({(f.key.server, f.key.database) for f in group}),
            critical_issues=sum(
                1 for f in group if f.risk_level is RiskLevel.CRITICAL
            ),
        )
        for fw, group in sorted(groups.items())
    ]
