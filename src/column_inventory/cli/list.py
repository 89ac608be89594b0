"""CLI command implementations for listing rulesets, patterns and instances."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from column_inventory.cli.errors import cli_error_handler
from column_inventory.cli.formatting import OutputFormatter
from column_inventory.cli.infrastructure import build_classifier_config, build_store
from column_inventory.logging import setup_logging
from column_inventory.rulesets import (
    RulesetLoader,
    RulesetRegistry,
    RulesetURI,
    SensitivePatternRule,
)
from column_inventory.rulesets.uri import LOCAL_PROVIDER

logger = logging.getLogger(__name__)
console = Console()


def list_rulesets_command(log_level: str = "WARNING") -> None:
    """Print every registered ruleset."""
    setup_logging(level=log_level)

    with cli_error_handler("ls-rulesets", "Failed to list rulesets"):
        rulesets = RulesetRegistry().list_registered()
        logger.info("Found %d registered rulesets", len(rulesets))

        if not rulesets:
            console.print(
                Panel(
                    "[yellow]No rulesets are registered.[/yellow]",
                    title="⚠️  Warning",
                    border_style="yellow",
                )
            )
            return

        table = Table(title="🔧 Registered Rulesets", header_style="bold magenta")
        for column, style in (("URI", "cyan"), ("Rule Type", "dim")):
            table.add_column(column, style=style, no_wrap=True)
        for name, version, rule_type in rulesets:
            uri = RulesetURI(LOCAL_PROVIDER, name, version)
            table.add_row(str(uri), rule_type.__name__)
        console.print(table)


def list_patterns_command(
    database: Path | None = None,
    ruleset: str | None = None,
    include_inactive: bool = False,
    log_level: str = "WARNING",
) -> None:
    """CLI command implementation for listing sensitive data patterns.

    Args:
        database: List the pattern table of this inventory database instead
                  of the ruleset
        ruleset: Ruleset URI to list when no database is given
        include_inactive: Also list retired patterns (database only)
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("ls-patterns", "Failed to list patterns"):
        if database is not None:
            with build_store(database) as store:
                rules = store.list_patterns(active_only=not include_inactive)
            source = str(database)
        else:
            config = build_classifier_config(ruleset, None)
            rules = list(RulesetLoader.load_ruleset(config.ruleset, SensitivePatternRule))
            source = config.ruleset

        logger.info("Found %d patterns in %s", len(rules), source)
        OutputFormatter().format_patterns(rules, source)


def health_command(
    database: Path | None, include_inactive: bool = False, log_level: str = "WARNING"
) -> None:
    """CLI command implementation for showing instance health.

    Args:
        database: SQLite inventory database path (None reads the environment)
        include_inactive: Also list deactivated instances
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("health", "Failed to read instance health"):
        with build_store(database) as store:
            records = store.list_instance_health(active_only=not include_inactive)
        OutputFormatter().format_health(records)
