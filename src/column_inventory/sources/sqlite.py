"""SQLite catalog column source."""

import logging
import sqlite3
from pathlib import Path

from column_inventory.errors import SourceError
from column_inventory.types import ColumnObservation

logger = logging.getLogger(__name__)

SQLITE_SCHEMA_NAME = "main"


class SQLiteColumnSource:
    """Enumerates the columns of one SQLite database file.

    The database is named after the file stem. SQLite has a single schema
    per file, reported as ``main``; internal ``sqlite_%`` tables are skipped
    and columns declared without a type are reported as TEXT.
    """

    def __init__(self, database_path: str | Path) -> None:
        """Initialise the source for a database file.

        Args:
            database_path: Path to an existing SQLite database file

        """
        self._database_path = Path(database_path)

    @property
    def database_name(self) -> str:
        """Name the database is reported under."""
        return self._database_path.stem

    def list_databases(self) -> list[str]:
        """Return the single database held by the file."""
        if not self._database_path.is_file():
            raise SourceError(f"SQLite database file not found: {self._database_path}")
        return [self.database_name]

    def iter_columns(self, database: str) -> list[ColumnObservation]:
        """Enumerate the columns of every user table.

        Args:
            database: Database name, which must be the file stem

        Returns:
            Column observations ordered by table name, then column position

        Raises:
            SourceError: If the file is missing, unreadable, or not this database

        """
        if database != self.database_name:
            raise SourceError(
                f"Unknown database '{database}' for source {self._database_path}"
            )
        if not self._database_path.is_file():
            raise SourceError(f"SQLite database file not found: {self._database_path}")

        observations: list[ColumnObservation] = []
        try:
            # Read-only URI so enumeration never creates or modifies the file
            conn = sqlite3.connect(
                f"{self._database_path.resolve().as_uri()}?mode=ro", uri=True
            )
            try:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT name FROM sqlite_master "
                    "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
                )
                table_names = [row[0] for row in cursor.fetchall()]

                for table_name in table_names:
                    quoted = table_name.replace('"', '""')
                    cursor.execute(f'PRAGMA table_info("{quoted}")')
                    for col_info in cursor.fetchall():
                        observations.append(
                            ColumnObservation(
                                schema_name=SQLITE_SCHEMA_NAME,
                                table=table_name,
                                column=col_info[1],
                                declared_type=col_info[2] or "TEXT",
                            )
                        )
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(
                "Failed to enumerate columns of %s: %s", self._database_path, e
            )
            raise SourceError(f"Column enumeration failed: {e}") from e

        logger.debug(
            "Enumerated %d columns in %d tables of %s",
            len(observations),
            len(table_names),
            self.database_name,
        )
        return observations
