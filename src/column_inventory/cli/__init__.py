"""CLI command implementations for the column inventory."""

from column_inventory.cli.classify import classify_command
from column_inventory.cli.errors import CLIError
from column_inventory.cli.inventory import (
    ReviewChoice,
    init_store_command,
    review_command,
    scan_command,
)
from column_inventory.cli.list import (
    health_command,
    list_patterns_command,
    list_rulesets_command,
)
from column_inventory.cli.report import ReportKind, report_command

__all__ = [
    "CLIError",
    "ReportKind",
    "ReviewChoice",
    "classify_command",
    "health_command",
    "init_store_command",
    "list_patterns_command",
    "list_rulesets_command",
    "report_command",
    "review_command",
    "scan_command",
]
