"""CLI command implementations that write to the inventory store."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path

from rich.console import Console

from column_inventory.classifier import MatchingMode
from column_inventory.cli.errors import CLIError, cli_error_handler
from column_inventory.cli.formatting import OutputFormatter
from column_inventory.cli.infrastructure import (
    build_classifier_config,
    build_store,
    load_store_snapshot,
)
from column_inventory.logging import setup_logging
from column_inventory.review import review_finding
from column_inventory.rulesets import RulesetLoader, SensitivePatternRule
from column_inventory.scanner import ColumnScanner
from column_inventory.sources import SQLiteColumnSource
from column_inventory.types import ColumnKey, ReviewDecision, ReviewState

logger = logging.getLogger(__name__)
console = Console()


class ReviewChoice(StrEnum):
    """Review outcomes a reviewer can record from the command line."""

    CONFIRMED = "confirmed"
    FALSE_POSITIVE = "false-positive"

    @property
    def state(self) -> ReviewState:
        """The review state this choice records."""
        if self is ReviewChoice.CONFIRMED:
            return ReviewState.CONFIRMED_SENSITIVE
        return ReviewState.FALSE_POSITIVE


def init_store_command(
    database: Path, ruleset: str | None = None, log_level: str = "WARNING"
) -> None:
    """CLI command implementation for creating and seeding an inventory database.

    Args:
        database: SQLite inventory database path
        ruleset: Ruleset URI whose rules seed the pattern table
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("init-store", "Failed to initialise inventory store"):
        config = build_classifier_config(ruleset, None)
        rules = RulesetLoader.load_ruleset(config.ruleset, SensitivePatternRule)
        with build_store(database) as store:
            seeded = store.seed_patterns(rules)
            active = len(store.list_patterns(active_only=True))

        if seeded:
            console.print(
                f"[green]✅ Seeded {seeded} patterns from {config.ruleset} "
                f"into {database}[/green]"
            )
        else:
            console.print(
                f"[yellow]Pattern table in {database} already holds "
                f"{active} active patterns; nothing seeded[/yellow]"
            )


def scan_command(  # noqa: PLR0913 - mirrors the CLI options
    source: Path,
    database: Path | None,
    server: str,
    instance: str,
    ruleset: str | None = None,
    mode: MatchingMode | None = None,
    log_level: str = "WARNING",
) -> None:
    """CLI command implementation for scanning a SQLite database file.

    Args:
        source: SQLite database file whose columns are classified
        database: SQLite inventory database path (None reads the environment)
        server: Server name findings are recorded under
        instance: Instance name findings are recorded under
        ruleset: Ruleset URI supplying seed rules and vocabulary
        mode: Matching mode
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("scan", "Scan failed"):
        config = build_classifier_config(ruleset, mode)
        with build_store(database) as store:
            snapshot = load_store_snapshot(store, config)
            scanner = ColumnScanner(store, snapshot)
            result = scanner.scan_instance(server, instance, SQLiteColumnSource(source))

        OutputFormatter().format_scan_result(result)
        if result.failures:
            raise CLIError(
                f"{len(result.failures)} columns could not be recorded", command="scan"
            )


def review_command(  # noqa: PLR0913 - identity key plus decision
    database: Path | None,
    key: ColumnKey,
    choice: ReviewChoice,
    reviewer: str,
    notes: str | None = None,
    log_level: str = "WARNING",
) -> None:
    """CLI command implementation for recording a review decision.

    Args:
        database: SQLite inventory database path (None reads the environment)
        key: Identity key of the reviewed column
        choice: Review outcome
        reviewer: Name of the reviewer
        notes: Optional reviewer notes
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("review", "Failed to review finding"):
        decision = ReviewDecision(state=choice.state, reviewer=reviewer, notes=notes)
        with build_store(database) as store:
            finding = review_finding(store, key, decision)

        console.print(
            f"[green]✅ {finding.key.qualified_column} on {finding.key.server}/"
            f"{finding.key.database} marked {finding.review_state.label} "
            f"by {finding.reviewer}[/green]"
        )
