"""Error reporting for column-inventory commands.

Inventory errors are shown as a red panel carrying a remediation hint and
the command exits with status 1. Anything else is an unexpected failure and
is logged with its traceback.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import override

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from column_inventory.errors import (
    ColumnInventoryError,
    ConfigurationError,
    FindingNotFoundError,
    InvalidArgumentError,
    ReviewError,
    RulesetError,
    SourceError,
    StorageError,
)

logger = logging.getLogger(__name__)
console = Console()

# Checked in order; subclasses come before their bases
_HINTS: tuple[tuple[type[Exception], str], ...] = (
    (
        FindingNotFoundError,
        "Only flagged columns can be reviewed. Check the key options or "
        "run 'column-inventory report inventory'.",
    ),
    (StorageError, "Check that --database points at a writable SQLite file."),
    (ReviewError, "Findings can only be marked confirmed or false-positive."),
    (RulesetError, "Run 'column-inventory ls-rulesets' to see available rulesets."),
    (SourceError, "Check that the source is a readable SQLite database."),
    (
        ConfigurationError,
        "Check the COLUMN_INVENTORY_* environment variables or your .env file.",
    ),
    (InvalidArgumentError, "Column name and type must both be non-empty."),
    (ValidationError, "Check the values passed on the command line."),
)


def _hint_for(error: Exception) -> str | None:
    for error_type, hint in _HINTS:
        if isinstance(error, error_type):
            return hint
    return None


class CLIError(Exception):
    """A command failure to report to the user."""

    def __init__(
        self, message: str, command: str | None = None, hint: str | None = None
    ) -> None:
        """Initialise the error.

        Args:
            message: What went wrong
            command: Name of the failing command (e.g., "scan", "review")
            hint: What the user can do about it

        """
        super().__init__(message)
        self.command = command
        self.hint = hint

    @classmethod
    def from_error(cls, error: Exception, command: str) -> CLIError:
        """Wrap an inventory or validation error raised by a command."""
        return cls(str(error), command=command, hint=_hint_for(error))

    @override
    def __str__(self) -> str:
        """Return the message prefixed with the failing command."""
        message = super().__str__()
        if self.command:
            return f"column-inventory {self.command}: {message}"
        return message


def _print_error(title: str, error: CLIError) -> None:
    body = f"[red]{error}[/red]"
    if error.hint:
        body += f"\n\n[dim]{error.hint}[/dim]"
    console.print(Panel(body, title=f"❌ {title}", border_style="red"))


@contextmanager
def cli_error_handler(command: str, title: str) -> Generator[None]:
    """Report errors raised by a command and exit with status 1.

    Args:
        command: Command name shown in the message
        title: Panel title

    """
    try:
        yield
    except CLIError as e:
        logger.error("%s: %s", title, e)
        _print_error(title, e)
        raise typer.Exit(1) from e
    except (ColumnInventoryError, ValidationError) as e:
        cli_error = CLIError.from_error(e, command)
        logger.error("%s: %s", title, cli_error)
        _print_error(title, cli_error)
        raise typer.Exit(1) from e
    except Exception as e:
        logger.exception("Unexpected failure in '%s'", command)
        _print_error(title, CLIError(f"Unexpected error: {e}", command=command))
        raise typer.Exit(1) from e
