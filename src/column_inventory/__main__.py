"""Main entry point for the column inventory.

This module provides the command-line interface, including commands for:
- Classifying a single column
- Creating and seeding an inventory database
- Scanning SQLite database files into the inventory
- Reviewing findings
- Printing reports, patterns, rulesets and instance health
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from column_inventory.classifier import MatchingMode
from column_inventory.cli import (
    ReportKind,
    ReviewChoice,
    classify_command,
    health_command,
    init_store_command,
    list_patterns_command,
    list_rulesets_command,
    report_command,
    review_command,
    scan_command,
)
from column_inventory.health import DEFAULT_INSTANCE
from column_inventory.rulesets import RulesetRegistry
from column_inventory.types import ColumnKey, RiskLevel

# Load environment variables from a .env file in the working directory
load_dotenv()

app = typer.Typer(name="column-inventory")

LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
]
DatabaseOption = Annotated[
    Path | None,
    typer.Option(
        "--database",
        "-d",
        help="SQLite inventory database (defaults to COLUMN_INVENTORY_* environment)",
        dir_okay=False,
    ),
]
RulesetOption = Annotated[
    str | None,
    typer.Option(
        "--ruleset",
        help="Ruleset URI, e.g. local/sensitive_data_patterns/1.0.0",
    ),
]
ModeOption = Annotated[
    MatchingMode | None,
    typer.Option(
        "--mode",
        help="Rule matching mode",
        case_sensitive=False,
    ),
]


@app.callback()
def main() -> None:
    """Inventory database columns and classify sensitive data."""
    RulesetRegistry().discover_from_entry_points()


@app.command()
def classify(
    column_name: Annotated[str, typer.Argument(help="Column name to classify")],
    declared_type: Annotated[str, typer.Argument(help="Declared data type")],
    ruleset: RulesetOption = None,
    mode: ModeOption = None,
    explain: Annotated[
        bool,
        typer.Option("--explain", help="List every qualifying pattern, winner first"),
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Classify one column by name and declared type.

    Example:
        column-inventory classify password_hash varchar --explain

    """
    classify_command(column_name, declared_type, ruleset, mode, explain, log_level)


@app.command(name="init-store")
def init_store(
    database: Annotated[
        Path,
        typer.Option("--database", "-d", help="SQLite inventory database to create"),
    ],
    ruleset: RulesetOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Create an inventory database and seed its pattern table."""
    init_store_command(database, ruleset, log_level)


@app.command()
def scan(  # noqa: PLR0913 - CLI entry point with many options
    source: Annotated[
        Path,
        typer.Argument(
            help="SQLite database file to scan",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    database: DatabaseOption = None,
    server: Annotated[
        str, typer.Option("--server", help="Server name to record findings under")
    ] = "localhost",
    instance: Annotated[
        str, typer.Option("--instance", help="Instance name to record findings under")
    ] = DEFAULT_INSTANCE,
    ruleset: RulesetOption = None,
    mode: ModeOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Classify every column of a SQLite database and record the findings.

    Example:
        column-inventory scan app.db --database inventory.db --server SRV1

    """
    scan_command(source, database, server, instance, ruleset, mode, log_level)


@app.command()
def review(  # noqa: PLR0913 - identity key plus decision
    server: Annotated[str, typer.Option("--server", help="Server name")],
    db: Annotated[str, typer.Option("--db", help="Database name")],
    table: Annotated[str, typer.Option("--table", help="Table name")],
    column: Annotated[str, typer.Option("--column", help="Column name")],
    decision: Annotated[
        ReviewChoice, typer.Option("--decision", help="Review outcome")
    ],
    reviewer: Annotated[str, typer.Option("--reviewer", help="Reviewer name")],
    database: DatabaseOption = None,
    instance: Annotated[
        str, typer.Option("--instance", help="Instance name")
    ] = DEFAULT_INSTANCE,
    schema: Annotated[str, typer.Option("--schema", help="Schema name")] = "dbo",
    notes: Annotated[
        str | None, typer.Option("--notes", help="Reviewer notes")
    ] = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Mark a finding as confirmed sensitive or as a false positive."""
    key = ColumnKey(
        server=server,
        instance=instance,
        database=db,
        schema_name=schema,
        table=table,
        column=column,
    )
    review_command(database, key, decision, reviewer, notes, log_level)


@app.command()
def report(  # noqa: PLR0913 - CLI entry point with many options
    kind: Annotated[
        ReportKind, typer.Argument(help="Report to print")
    ] = ReportKind.SUMMARY,
    database: DatabaseOption = None,
    server: Annotated[
        str | None, typer.Option("--server", help="Only findings of this server")
    ] = None,
    risk_level: Annotated[
        RiskLevel | None,
        typer.Option(
            "--risk", help="Only findings of this risk level", case_sensitive=False
        ),
    ] = None,
    framework: Annotated[
        str | None,
        typer.Option("--framework", help="Compliance report for one framework"),
    ] = None,
    min_detections: Annotated[
        int,
        typer.Option(
            "--min-detections",
            min=1,
            help="Minimum detections per pattern for false positive analysis",
        ),
    ] = 1,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print a report over recorded findings."""
    report_command(
        database, kind, server, risk_level, framework, min_detections, log_level
    )


@app.command(name="ls-rulesets")
def list_available_rulesets(log_level: LogLevelOption = "WARNING") -> None:
    """List registered rulesets."""
    list_rulesets_command(log_level)


@app.command(name="ls-patterns")
def list_patterns(
    database: DatabaseOption = None,
    ruleset: RulesetOption = None,
    include_inactive: Annotated[
        bool, typer.Option("--all", help="Include retired patterns")
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """List sensitive data patterns from a ruleset or an inventory database."""
    list_patterns_command(database, ruleset, include_inactive, log_level)


@app.command()
def health(
    database: DatabaseOption = None,
    include_inactive: Annotated[
        bool, typer.Option("--all", help="Include deactivated instances")
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Show connection health of scanned instances."""
    health_command(database, include_inactive, log_level)


if __name__ == "__main__":
    app()
