"""Output formatting for column inventory CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from column_inventory.reports import (
    ComplianceSummary,
    CriticalFindingSummary,
    PatternReviewStats,
    RiskSummary,
)
from column_inventory.rulesets.types import SensitivePatternRule
from column_inventory.scanner import InstanceScanResult
from column_inventory.types import (
    Classification,
    ColumnFinding,
    HealthStatus,
    InstanceHealth,
    RiskLevel,
)

logger = logging.getLogger(__name__)
console = Console()

RISK_STYLES: dict[RiskLevel, str] = {
    RiskLevel.CRITICAL: "bold red",
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
}

HEALTH_STYLES: dict[HealthStatus, str] = {
    HealthStatus.HEALTHY: "green",
    HealthStatus.WARNING: "yellow",
    HealthStatus.CRITICAL: "bold red",
}


def _risk(risk_level: RiskLevel) -> str:
    style = RISK_STYLES[risk_level]
    return f"[{style}]{risk_level.value}[/{style}]"


def _join(values: Sequence[str]) -> str:
    return ", ".join(values) if values else "-"


def _empty_panel(message: str) -> None:
    console.print(
        Panel(f"[yellow]{message}[/yellow]", title="⚠️  Warning", border_style="yellow")
    )


class OutputFormatter:
    """Handles formatting CLI output for different commands."""

    def format_classification(
        self,
        column_name: str,
        declared_type: str,
        classification: Classification | None,
        candidates: Sequence[SensitivePatternRule] = (),
    ) -> None:
        """Print the classification of one column, optionally with all candidates."""
        if classification is None:
            console.print(
                Panel(
                    f"[green]{column_name} ({declared_type}) "
                    "matches no sensitive data pattern[/green]",
                    title="✅ Not sensitive",
                    border_style="green",
                )
            )
            return

        console.print(
            Panel(
                f"Category: [cyan]{classification.category}[/cyan]\n"
                f"Pattern: [white]{classification.pattern_name}[/white]\n"
                f"Risk: {_risk(classification.risk_level)}\n"
                f"Frameworks: {_join(classification.compliance_frameworks)}",
                title=f"🔍 {column_name} ({declared_type})",
                border_style=RISK_STYLES[classification.risk_level],
            )
        )

        if candidates:
            table = Table(
                title="Qualifying Patterns (winner first)",
                show_header=True,
                header_style="bold magenta",
            )
            table.add_column("#", style="dim")
            table.add_column("Category", style="cyan", no_wrap=True)
            table.add_column("Pattern", style="white", no_wrap=True)
            table.add_column("Risk", no_wrap=True)
            table.add_column("Pattern Text", style="dim", overflow="fold")
            for position, rule in enumerate(candidates, start=1):
                table.add_row(
                    str(position),
                    rule.category,
                    rule.name,
                    _risk(rule.risk_level),
                    rule.pattern_text,
                )
            console.print(table)

    def format_patterns(
        self, rules: Sequence[SensitivePatternRule], source: str
    ) -> None:
        """Print a table of sensitive data pattern rules."""
        if not rules:
            _empty_panel(f"No patterns found in {source}.")
            return

        table = Table(
            title=f"🔧 Sensitive Data Patterns ({source})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Category", style="cyan", no_wrap=True)
        table.add_column("Pattern", style="white", no_wrap=True)
        table.add_column("Risk")
        table.add_column("Frameworks", style="dim")
        table.add_column("Active")
        for rule in rules:
            table.add_row(
                rule.category,
                rule.name,
                _risk(rule.risk_level),
                _join(rule.compliance_frameworks),
                "yes" if rule.active else "no",
            )
        console.print(table)

    def format_findings(self, findings: Sequence[ColumnFinding]) -> None:
        """Print the sensitive data inventory."""
        if not findings:
            _empty_panel("No findings match the given filters.")
            return

        table = Table(
            title="📋 Sensitive Data Inventory",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Server", style="cyan")
        table.add_column("Database", style="cyan")
        table.add_column("Column", style="white")
        table.add_column("Type", style="dim")
        table.add_column("Pattern")
        table.add_column("Risk")
        table.add_column("Review")
        for finding in findings:
            table.add_row(
                finding.key.server,
                finding.key.database,
                finding.key.qualified_column,
                finding.declared_type,
                finding.pattern_name,
                _risk(finding.risk_level),
                finding.review_state.label,
            )
        console.print(table)

    def format_scan_result(self, result: InstanceScanResult) -> None:
        """Print a scan summary with any per-column failures."""
        table = Table(
            title="📊 Scan Results Summary",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Database", style="cyan", no_wrap=True)
        table.add_column("Columns", style="white")
        table.add_column("Sensitive", style="yellow")
        table.add_column("Failed", style="red")
        for db_result in result.databases:
            table.add_row(
                db_result.database,
                str(db_result.columns_scanned),
                str(db_result.findings_recorded),
                str(len(db_result.failures)),
            )
        console.print(table)

        for failure in result.failures:
            console.print(
                Panel(
                    f"[red]{failure.error}[/red]",
                    title=f"Error in {failure.database}.{failure.qualified_column}",
                    border_style="red",
                )
            )
            logger.error(
                "Column %s failed: %s", failure.qualified_column, failure.error
            )

        status = HEALTH_STYLES[result.health.health_status]
        console.print(
            f"\nInstance [cyan]{result.health.full_instance_name}[/cyan]: "
            f"[{status}]{result.health.health_status.value}[/{status}] "
            f"({result.columns_scanned} columns, "
            f"{result.findings_recorded} sensitive)"
        )

    def format_health(self, records: Sequence[InstanceHealth]) -> None:
        """Print the instance health table."""
        if not records:
            _empty_panel("No instances have been scanned yet.")
            return

        table = Table(
            title="🩺 Instance Status",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Instance", style="cyan", no_wrap=True)
        table.add_column("Health")
        table.add_column("Failures", style="white")
        table.add_column("Last Success", style="dim")
        table.add_column("Databases", style="white")
        table.add_column("Columns", style="white")
        table.add_column("Last Error", style="red")
        for record in records:
            style = HEALTH_STYLES[record.health_status]
            last_success = record.last_successful_connection
            table.add_row(
                record.full_instance_name,
                f"[{style}]{record.health_status.value}[/{style}]",
                str(record.consecutive_failures),
                last_success.strftime("%Y-%m-%d %H:%M:%S") if last_success else "-",
                str(record.databases_found) if record.databases_found is not None else "-",
                str(record.columns_inventoried)
                if record.columns_inventoried is not None
                else "-",
                record.last_error or "-",
            )
        console.print(table)

    def format_risk_summary(self, summaries: Sequence[RiskSummary]) -> None:
        """Print sensitive column counts by risk level and category."""
        if not summaries:
            _empty_panel("No sensitive findings recorded.")
            return

        table = Table(
            title="📊 Sensitive Data Summary",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Risk")
        table.add_column("Category", style="cyan")
        table.add_column("Columns", style="white")
        table.add_column("Databases", style="white")
        table.add_column("Servers", style="white")
        table.add_column("Frameworks", style="dim")
        for summary in summaries:
            table.add_row(
                _risk(summary.risk_level),
                summary.category,
                str(summary.column_count),
                str(summary.database_count),
                str(summary.server_count),
                _join(summary.compliance_frameworks),
            )
        console.print(table)

    def format_critical_findings(
        self, summaries: Sequence[CriticalFindingSummary]
    ) -> None:
        """Print the critical findings rollup."""
        if not summaries:
            _empty_panel("No critical findings recorded.")
            return

        table = Table(
            title="🚨 Critical Findings",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Server", style="cyan")
        table.add_column("Instance", style="cyan")
        table.add_column("Database", style="cyan")
        table.add_column("Critical", style="bold red")
        table.add_column("Categories", style="white")
        table.add_column("Compliance Impact", style="dim")
        for summary in summaries:
            table.add_row(
                summary.server,
                summary.instance,
                summary.database,
                str(summary.critical_columns),
                _join(summary.categories),
                _join(summary.compliance_impact),
            )
        console.print(table)

    def format_false_positive_rates(self, stats: Sequence[PatternReviewStats]) -> None:
        """Print the false positive analysis per pattern."""
        if not stats:
            _empty_panel("Not enough detections for false positive analysis.")
            return

        table = Table(
            title="🔎 False Positive Analysis",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Category", style="cyan")
        table.add_column("Pattern", style="white")
        table.add_column("Detections", style="white")
        table.add_column("False Positives", style="red")
        table.add_column("Confirmed", style="green")
        table.add_column("Pending", style="yellow")
        table.add_column("FP Rate", style="bold")
        for entry in stats:
            table.add_row(
                entry.category,
                entry.pattern_name,
                str(entry.total_detections),
                str(entry.false_positives),
                str(entry.confirmed_sensitive),
                str(entry.pending_review),
                f"{entry.false_positive_rate:.2f}%",
            )
        console.print(table)

    def format_compliance_breakdown(
        self, summaries: Sequence[ComplianceSummary]
    ) -> None:
        """Print sensitive column counts per compliance framework."""
        if not summaries:
            _empty_panel("No findings fall under the requested frameworks.")
            return

        table = Table(
            title="⚖️  Compliance Breakdown",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Framework", style="cyan")
        table.add_column("Columns", style="white")
        table.add_column("Servers", style="white")
        table.add_column("Databases", style="white")
        table.add_column("Critical", style="bold red")
        for summary in summaries:
            table.add_row(
                summary.framework,
                str(summary.total_columns),
                str(summary.servers_affected),
                str(summary.databases_affected),
                str(summary.critical_issues),
            )
        console.print(table)
