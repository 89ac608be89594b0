"""SQLite-specific inventory store tests."""

import sqlite3
from pathlib import Path

import pytest

from column_inventory.errors import StorageError
from column_inventory.store import SQLiteInventoryStore
from column_inventory.types import (
    Classification,
    ColumnKey,
    ConnectionAttempt,
    ReviewDecision,
    ReviewState,
    RiskLevel,
)

EMAIL = Classification(
    category="Contact",
    pattern_name="Email Address",
    risk_level=RiskLevel.MEDIUM,
    compliance_frameworks=("GDPR",),
)


class TestSQLiteInventoryStore:
    """Test persistence and storage error handling."""

    def test_findings_persist_across_reopen(
        self, tmp_path: Path, column_key: ColumnKey
    ) -> None:
        """Findings and reviews survive closing and reopening the database."""
        path = tmp_path / "inventory.db"
        with SQLiteInventoryStore(path) as store:
            store.record_finding(column_key, "nvarchar", EMAIL)
            store.apply_review(
                column_key,
                ReviewDecision(state=ReviewState.CONFIRMED_SENSITIVE, reviewer="alice"),
            )

        with SQLiteInventoryStore(path) as reopened:
            finding = reopened.get_finding(column_key)

        assert finding is not None
        assert finding.review_state is ReviewState.CONFIRMED_SENSITIVE
        assert finding.reviewer == "alice"

    def test_instance_health_persists_across_reopen(self, tmp_path: Path) -> None:
        """Connection attempts are logged and read back by instance."""
        path = tmp_path / "inventory.db"
        with SQLiteInventoryStore(path) as store:
            store.log_connection_attempt(
                ConnectionAttempt(server="SRV1", instance="DEFAULT", success=False)
            )
            logged = store.log_connection_attempt(
                ConnectionAttempt(
                    server="SRV1",
                    instance="DEFAULT",
                    success=True,
                    columns_inventoried=12,
                )
            )

        with SQLiteInventoryStore(path) as reopened:
            health = reopened.get_instance_health("SRV1", "DEFAULT")
            listed = reopened.list_instance_health()

        assert logged.consecutive_failures == 0
        assert health == logged
        assert health.columns_inventoried == 12
        assert listed == [logged]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """The database file's directory is created on open."""
        path = tmp_path / "nested" / "dir" / "inventory.db"

        with SQLiteInventoryStore(path) as store:
            assert store.database_path == str(path)

        assert path.exists()

    def test_review_states_stored_as_confirmed_flag(
        self, tmp_path: Path, column_key: ColumnKey
    ) -> None:
        """is_confirmed is NULL when unreviewed, 1 confirmed and 0 false positive."""
        path = tmp_path / "inventory.db"
        other = column_key.model_copy(update={"column": "Mail"})
        third = column_key.model_copy(update={"column": "EmailAlt"})
        with SQLiteInventoryStore(path) as store:
            for key in (column_key, other, third):
                store.record_finding(key, "nvarchar", EMAIL)
            store.apply_review(
                other, ReviewDecision(state=ReviewState.CONFIRMED_SENSITIVE, reviewer="a")
            )
            store.apply_review(
                third, ReviewDecision(state=ReviewState.FALSE_POSITIVE, reviewer="a")
            )

        conn = sqlite3.connect(path)
        try:
            rows = dict(
                conn.execute(
                    "SELECT column_name, is_confirmed FROM sensitive_columns"
                ).fetchall()
            )
        finally:
            conn.close()

        assert rows == {"Email": None, "Mail": 1, "EmailAlt": 0}

    def test_unique_key_constraint(self, tmp_path: Path, column_key: ColumnKey) -> None:
        """The table itself rejects a second row for the same key."""
        path = tmp_path / "inventory.db"
        with SQLiteInventoryStore(path) as store:
            store.record_finding(column_key, "nvarchar", EMAIL)

        conn = sqlite3.connect(path)
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO sensitive_columns (server_name, instance_name, "
                    "database_name, schema_name, table_name, column_name, data_type, "
                    "category_name, pattern_name, risk_level, detected_date) "
                    "VALUES (?, ?, ?, ?, ?, ?, 'x', 'x', 'x', 'Low', 'x')",
                    column_key.as_tuple(),
                )
        finally:
            conn.close()

    def test_closed_store_raises_storage_error(self, column_key: ColumnKey) -> None:
        """Driver errors surface as StorageError."""
        store = SQLiteInventoryStore()
        store.close()

        with pytest.raises(StorageError):
            store.get_finding(column_key)

    def test_unopenable_path_raises_storage_error(self, tmp_path: Path) -> None:
        """A path that cannot hold a database raises StorageError."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(StorageError, match="Cannot open inventory database"):
            SQLiteInventoryStore(blocker / "inventory.db")
