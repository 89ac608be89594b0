"""CLI command implementations for read-side reports."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path

from column_inventory.cli.errors import cli_error_handler
from column_inventory.cli.formatting import OutputFormatter
from column_inventory.cli.infrastructure import build_store
from column_inventory.logging import setup_logging
from column_inventory.reports import (
    compliance_breakdown,
    critical_findings,
    false_positive_rates,
    summarize_by_risk,
)
from column_inventory.types import RiskLevel

logger = logging.getLogger(__name__)


class ReportKind(StrEnum):
    """Reports available from the command line."""

    INVENTORY = "inventory"
    SUMMARY = "summary"
    CRITICAL = "critical"
    FALSE_POSITIVES = "false-positives"
    COMPLIANCE = "compliance"


def report_command(  # noqa: PLR0913 - mirrors the CLI options
    database: Path | None,
    kind: ReportKind,
    server: str | None = None,
    risk_level: RiskLevel | None = None,
    framework: str | None = None,
    min_detections: int = 1,
    log_level: str = "WARNING",
) -> None:
    """CLI command implementation for printing a report over stored findings.

    Args:
        database: SQLite inventory database path (None reads the environment)
        kind: Report to print
        server: Restrict findings to one server
        risk_level: Restrict the inventory report to one risk level
        framework: Restrict the compliance report to one framework
        min_detections: Minimum detections per pattern for false positive analysis
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("report", "Failed to build report"):
        with build_store(database) as store:
            findings = store.list_findings(server=server, risk_level=risk_level)
        logger.info("Building %s report over %d findings", kind, len(findings))

        formatter = OutputFormatter()
        match kind:
            case ReportKind.INVENTORY:
                formatter.format_findings(findings)
            case ReportKind.SUMMARY:
                formatter.format_risk_summary(summarize_by_risk(findings))
            case ReportKind.CRITICAL:
                formatter.format_critical_findings(critical_findings(findings))
            case ReportKind.FALSE_POSITIVES:
                formatter.format_false_positive_rates(
                    false_positive_rates(findings, min_detections=min_detections)
                )
            case ReportKind.COMPLIANCE:
                formatter.format_compliance_breakdown(
                    compliance_breakdown(findings, framework=framework)
                )
