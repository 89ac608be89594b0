"""Tests for the SQLite column source."""

from pathlib import Path

import pytest

from column_inventory.errors import SourceError
from column_inventory.sources import SQLiteColumnSource


class TestSQLiteColumnSource:
    """Test column enumeration from SQLite files."""

    def test_lists_file_stem_as_database(self, app_database: Path) -> None:
        """The database is named after the file stem."""
        source = SQLiteColumnSource(app_database)

        assert source.list_databases() == ["app"]

    def test_iter_columns(self, app_database: Path) -> None:
        """Columns are listed by table name, then column position."""
        columns = SQLiteColumnSource(app_database).iter_columns("app")

        assert [(c.table, c.column) for c in columns] == [
            ("orders", "order_id"),
            ("orders", "widget_color"),
            ("orders", "credit_card_number"),
            ("users", "id"),
            ("users", "email"),
            ("users", "ssn"),
            ("users", "password_hash"),
            ("users", "notes"),
        ]
        assert {c.schema_name for c in columns} == {"main"}

    def test_declared_types(self, app_database: Path) -> None:
        """Declared types are reported as written, TEXT when omitted."""
        columns = {
            c.column: c.declared_type
            for c in SQLiteColumnSource(app_database).iter_columns("app")
        }

        assert columns["email"] == "VARCHAR(255)"
        assert columns["ssn"] == "CHAR(11)"
        assert columns["notes"] == "TEXT"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file cannot be enumerated."""
        source = SQLiteColumnSource(tmp_path / "missing.db")

        with pytest.raises(SourceError, match="not found"):
            source.list_databases()
        assert not (tmp_path / "missing.db").exists()

    def test_unknown_database(self, app_database: Path) -> None:
        """Only the file's own database can be enumerated."""
        with pytest.raises(SourceError, match="Unknown database"):
            SQLiteColumnSource(app_database).iter_columns("other")

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """Files that are not SQLite databases raise SourceError."""
        path = tmp_path / "broken.db"
        path.write_bytes(b"this is not a database" * 100)

        with pytest.raises(SourceError, match="enumeration failed"):
            SQLiteColumnSource(path).iter_columns("broken")
