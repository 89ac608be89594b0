"""SQLite inventory store.

Persists the pattern table, column findings and instance health in a single
SQLite database. The tables mirror the inventory schema used by the fleet
scanner: findings carry a nullable ``is_confirmed`` flag (NULL = not
reviewed, 1 = confirmed sensitive, 0 = false positive) and the identity key
is enforced by a UNIQUE constraint so that record_finding is one atomic
``INSERT ... ON CONFLICT DO UPDATE`` statement.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, override

from column_inventory.errors import FindingNotFoundError, StorageError
from column_inventory.health import full_instance_name
from column_inventory.rulesets.types import SensitivePatternRule
from column_inventory.store.base import InventoryStore
from column_inventory.types import (
    Classification,
    ColumnFinding,
    ColumnKey,
    ConnectionAttempt,
    InstanceHealth,
    ReviewDecision,
    ReviewState,
    RiskLevel,
    utc_now,
)

logger = logging.getLogger(__name__)

IN_MEMORY_DATABASE = ":memory:"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sql_instances (
    instance_id INTEGER PRIMARY KEY AUTOINCREMENT,
    server_name TEXT NOT NULL,
    instance_name TEXT NOT NULL,
    full_instance_name TEXT NOT NULL,
    discovered_date TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    last_successful_connection TEXT NULL,
    consecutive_failures INTEGER NOT NULL DEFAULT 0,
    UNIQUE (server_name, instance_name)
);

CREATE TABLE IF NOT EXISTS connection_log (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    instance_id INTEGER NOT NULL REFERENCES sql_instances (instance_id),
    attempt_date TEXT NOT NULL,
    success INTEGER NOT NULL,
    error_number INTEGER NULL,
    error_message TEXT NULL,
    databases_found INTEGER NULL,
    columns_inventoried INTEGER NULL,
    duration_ms INTEGER NULL
);

CREATE INDEX IF NOT EXISTS ix_connection_log_instance
    ON connection_log (instance_id, attempt_date);

CREATE TABLE IF NOT EXISTS sensitive_data_patterns (
    pattern_id INTEGER PRIMARY KEY AUTOINCREMENT,
    category_name TEXT NOT NULL,
    pattern_name TEXT NOT NULL,
    column_name_pattern TEXT NOT NULL,
    data_type_pattern TEXT NULL,
    risk_level TEXT NOT NULL
        CHECK (risk_level IN ('Critical', 'High', 'Medium', 'Low')),
    compliance_framework TEXT NULL,
    description TEXT NULL,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_date TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ux_active_pattern
    ON sensitive_data_patterns (category_name, pattern_name)
    WHERE is_active = 1;

CREATE TABLE IF NOT EXISTS sensitive_columns (
    sensitive_column_id INTEGER PRIMARY KEY AUTOINCREMENT,
    server_name TEXT NOT NULL,
    instance_name TEXT NOT NULL,
    database_name TEXT NOT NULL,
    schema_name TEXT NOT NULL,
    table_name TEXT NOT NULL,
    column_name TEXT NOT NULL,
    data_type TEXT NOT NULL,
    category_name TEXT NOT NULL,
    pattern_name TEXT NOT NULL,
    risk_level TEXT NOT NULL,
    compliance_framework TEXT NULL,
    detected_date TEXT NOT NULL,
    is_confirmed INTEGER NULL,
    reviewed_by TEXT NULL,
    reviewed_date TEXT NULL,
    notes TEXT NULL,
    UNIQUE (server_name, instance_name, database_name,
            schema_name, table_name, column_name)
);

CREATE INDEX IF NOT EXISTS ix_sensitive_columns_server_database
    ON sensitive_columns (server_name, database_name);
CREATE INDEX IF NOT EXISTS ix_sensitive_columns_risk_level
    ON sensitive_columns (risk_level);
"""

_UPSERT_FINDING = """
INSERT INTO sensitive_columns (
    server_name, instance_name, database_name, schema_name, table_name,
    column_name, data_type, category_name, pattern_name, risk_level,
    compliance_framework, detected_date
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (server_name, instance_name, database_name,
             schema_name, table_name, column_name)
DO UPDATE SET
    data_type = excluded.data_type,
    category_name = excluded.category_name,
    pattern_name = excluded.pattern_name,
    risk_level = excluded.risk_level,
    compliance_framework = excluded.compliance_framework,
    detected_date = excluded.detected_date
"""

_KEY_CLAUSE = (
    "server_name = ? AND instance_name = ? AND database_name = ? "
    "AND schema_name = ? AND table_name = ? AND column_name = ?"
)

_IS_CONFIRMED: dict[ReviewState, int | None] = {
    ReviewState.UNREVIEWED: None,
    ReviewState.CONFIRMED_SENSITIVE: 1,
    ReviewState.FALSE_POSITIVE: 0,
}


def _review_state(is_confirmed: int | None) -> ReviewState:
    if is_confirmed is None:
        return ReviewState.UNREVIEWED
    return ReviewState.CONFIRMED_SENSITIVE if is_confirmed else ReviewState.FALSE_POSITIVE


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _to_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


def _split_frameworks(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


class SQLiteInventoryStore(InventoryStore):
    """Inventory store backed by a SQLite database file.

    One connection is opened per store and shared between threads; a lock
    serialises every statement so each operation runs as one transaction.
    """

    def __init__(self, database_path: str | Path = IN_MEMORY_DATABASE) -> None:
        """Open (creating if needed) the inventory database.

        Args:
            database_path: Path to the database file, or ":memory:"

        Raises:
            StorageError: If the database cannot be opened or initialised

        """
        self._database_path = str(database_path)
        self._lock = threading.Lock()
        try:
            if self._database_path != IN_MEMORY_DATABASE:
                Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(
                self._database_path, check_same_thread=False
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
            self._connection.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            logger.error(
                "Failed to open inventory database %s: %s", self._database_path, e
            )
            raise StorageError(
                f"Cannot open inventory database '{self._database_path}': {e}"
            ) from e
        logger.debug("Opened inventory database %s", self._database_path)

    @property
    def database_path(self) -> str:
        """Path of the underlying database file."""
        return self._database_path

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements in one transaction, wrapping driver errors."""
        with self._lock:
            try:
                with self._connection:
                    yield self._connection
            except sqlite3.Error as e:
                logger.error("Inventory database operation failed: %s", e)
                raise StorageError(f"Inventory database operation failed: {e}") from e

    # Findings

    @override
    def record_finding(
        self,
        key: ColumnKey,
        declared_type: str,
        classification: Classification | None,
        detected_at: datetime | None = None,
    ) -> None:
        """Insert or refresh the finding for a column in one statement."""
        if classification is None:
            return
        params = (
            *key.as_tuple(),
            declared_type,
            classification.category,
            classification.pattern_name,
            classification.risk_level.value,
            ",".join(classification.compliance_frameworks),
            _to_text(detected_at or utc_now()),
        )
        with self._transaction() as conn:
            conn.execute(_UPSERT_FINDING, params)

    @override
    def get_finding(self, key: ColumnKey) -> ColumnFinding | None:
        """Return the finding for a key."""
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT * FROM sensitive_columns WHERE {_KEY_CLAUSE}",  # noqa: S608
                key.as_tuple(),
            ).fetchone()
        return self._finding_from_row(row) if row is not None else None

    @override
    def list_findings(
        self,
        *,
        server: str | None = None,
        database: str | None = None,
        risk_level: RiskLevel | None = None,
        review_state: ReviewState | None = None,
    ) -> list[ColumnFinding]:
        """List findings matching every given filter."""
        clauses: list[str] = []
        params: list[Any] = []
        if server is not None:
            clauses.append("server_name = ?")
            params.append(server)
        if database is not None:
            clauses.append("database_name = ?")
            params.append(database)
        if risk_level is not None:
            clauses.append("risk_level = ?")
            params.append(risk_level.value)
        if review_state is not None:
            is_confirmed = _IS_CONFIRMED[review_state]
            if is_confirmed is None:
                clauses.append("is_confirmed IS NULL")
            else:
                clauses.append("is_confirmed = ?")
                params.append(is_confirmed)

        query = "SELECT * FROM sensitive_columns"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += (
            " ORDER BY server_name, instance_name, database_name,"
            " schema_name, table_name, column_name"
        )

        with self._transaction() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._finding_from_row(row) for row in rows]

    @override
    def apply_review(self, key: ColumnKey, decision: ReviewDecision) -> ColumnFinding:
        """Write a review decision to an existing finding."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE sensitive_columns SET is_confirmed = ?, reviewed_by = ?, "  # noqa: S608
                f"reviewed_date = ?, notes = ? WHERE {_KEY_CLAUSE}",
                (
                    _IS_CONFIRMED[decision.state],
                    decision.reviewer,
                    _to_text(decision.reviewed_at),
                    decision.notes,
                    *key.as_tuple(),
                ),
            )
            if cursor.rowcount == 0:
                raise FindingNotFoundError(
                    f"No finding for column '{key.qualified_column}' "
                    f"in {key.server}/{key.instance}/{key.database}"
                )
            row = conn.execute(
                f"SELECT * FROM sensitive_columns WHERE {_KEY_CLAUSE}",  # noqa: S608
                key.as_tuple(),
            ).fetchone()
        return self._finding_from_row(row)

    @staticmethod
    def _finding_from_row(row: sqlite3.Row) -> ColumnFinding:
        return ColumnFinding(
            key=ColumnKey(
                server=row["server_name"],
                instance=row["instance_name"],
                database=row["database_name"],
                schema_name=row["schema_name"],
                table=row["table_name"],
                column=row["column_name"],
            ),
            declared_type=row["data_type"],
            category=row["category_name"],
            pattern_name=row["pattern_name"],
            risk_level=RiskLevel(row["risk_level"]),
            compliance_frameworks=_split_frameworks(row["compliance_framework"]),
            detected_at=_to_datetime(row["detected_date"]),
            review_state=_review_state(row["is_confirmed"]),
            reviewer=row["reviewed_by"],
            reviewed_at=_to_datetime(row["reviewed_date"]),
            notes=row["notes"],
        )

    # Patterns

    @override
    def seed_patterns(self, rules: Iterable[SensitivePatternRule]) -> int:
        """Insert the starter rules when the pattern table is empty."""
        with self._transaction() as conn:
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM sensitive_data_patterns"
            ).fetchone()
            if count:
                logger.debug("Pattern table already holds %d rules, not seeding", count)
                return 0
            inserted = 0
            for rule in rules:
                self._insert_pattern(conn, rule)
                inserted += 1
        logger.info("Seeded %d sensitive data patterns", inserted)
        return inserted

    @override
    def add_pattern(self, rule: SensitivePatternRule) -> None:
        """Add a rule generation, retiring the active one with the same identity."""
        with self._transaction() as conn:
            if rule.active:
                conn.execute(
                    "UPDATE sensitive_data_patterns SET is_active = 0 "
                    "WHERE category_name = ? AND pattern_name = ? AND is_active = 1",
                    rule.identity,
                )
            self._insert_pattern(conn, rule)

    @override
    def set_pattern_active(self, category: str, name: str, active: bool) -> int:
        """Activate the latest generation of an identity, or retire it."""
        with self._transaction() as conn:
            if not active:
                cursor = conn.execute(
                    "UPDATE sensitive_data_patterns SET is_active = 0 "
                    "WHERE category_name = ? AND pattern_name = ? AND is_active = 1",
                    (category, name),
                )
                return cursor.rowcount

            row = conn.execute(
                "SELECT pattern_id, is_active FROM sensitive_data_patterns "
                "WHERE category_name = ? AND pattern_name = ? "
                "ORDER BY pattern_id DESC LIMIT 1",
                (category, name),
            ).fetchone()
            if row is None:
                return 0
            changed = conn.execute(
                "UPDATE sensitive_data_patterns SET is_active = 0 "
                "WHERE category_name = ? AND pattern_name = ? AND is_active = 1 "
                "AND pattern_id != ?",
                (category, name, row["pattern_id"]),
            ).rowcount
            if not row["is_active"]:
                conn.execute(
                    "UPDATE sensitive_data_patterns SET is_active = 1 WHERE pattern_id = ?",
                    (row["pattern_id"],),
                )
                changed += 1
            return changed

    @override
    def list_patterns(self, *, active_only: bool = True) -> list[SensitivePatternRule]:
        """List rules in insertion order."""
        query = "SELECT * FROM sensitive_data_patterns"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY pattern_id"
        with self._transaction() as conn:
            rows = conn.execute(query).fetchall()
        return [
            SensitivePatternRule(
                name=row["pattern_name"],
                description=row["description"] or "",
                category=row["category_name"],
                name_patterns=row["column_name_pattern"],
                type_patterns=row["data_type_pattern"],
                risk_level=RiskLevel(row["risk_level"]),
                compliance_frameworks=row["compliance_framework"] or (),
                active=bool(row["is_active"]),
            )
            for row in rows
        ]

    @staticmethod
    def _insert_pattern(conn: sqlite3.Connection, rule: SensitivePatternRule) -> None:
        conn.execute(
            "INSERT INTO sensitive_data_patterns (category_name, pattern_name, "
            "column_name_pattern, data_type_pattern, risk_level, "
            "compliance_framework, description, is_active, created_date) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                rule.category,
                rule.name,
                rule.pattern_text,
                rule.type_pattern_text or None,
                rule.risk_level.value,
                ",".join(rule.compliance_frameworks) or None,
                rule.description or None,
                int(rule.active),
                _to_text(utc_now()),
            ),
        )

    # Instance health

    @override
    def log_connection_attempt(self, attempt: ConnectionAttempt) -> InstanceHealth:
        """Record a connection attempt and update the instance's health."""
        attempted_at = _to_text(attempt.attempted_at)
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO sql_instances (server_name, instance_name, "
                "full_instance_name, discovered_date) VALUES (?, ?, ?, ?) "
                "ON CONFLICT (server_name, instance_name) DO NOTHING",
                (
                    attempt.server,
                    attempt.instance,
                    full_instance_name(attempt.server, attempt.instance),
                    attempted_at,
                ),
            )
            (instance_id,) = conn.execute(
                "SELECT instance_id FROM sql_instances "
                "WHERE server_name = ? AND instance_name = ?",
                (attempt.server, attempt.instance),
            ).fetchone()

            conn.execute(
                "INSERT INTO connection_log (instance_id, attempt_date, success, "
                "error_number, error_message, databases_found, columns_inventoried, "
                "duration_ms) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    instance_id,
                    attempted_at,
                    int(attempt.success),
                    attempt.error_number,
                    attempt.error_message,
                    attempt.databases_found,
                    attempt.columns_inventoried,
                    attempt.duration_ms,
                ),
            )

            if attempt.success:
                conn.execute(
                    "UPDATE sql_instances SET last_successful_connection = ?, "
                    "consecutive_failures = 0 WHERE instance_id = ?",
                    (attempted_at, instance_id),
                )
            else:
                conn.execute(
                    "UPDATE sql_instances SET consecutive_failures = "
                    "consecutive_failures + 1 WHERE instance_id = ?",
                    (instance_id,),
                )

            health = self._read_instance_health(
                conn, "si.instance_id = ?", (instance_id,)
            )
        return health[0]

    @override
    def get_instance_health(self, server: str, instance: str) -> InstanceHealth | None:
        """Return the health record of an instance."""
        with self._transaction() as conn:
            records = self._read_instance_health(
                conn, "si.server_name = ? AND si.instance_name = ?", (server, instance)
            )
        return records[0] if records else None

    @override
    def list_instance_health(self, *, active_only: bool = True) -> list[InstanceHealth]:
        """List instance health records ordered by server and instance."""
        where = "si.is_active = 1" if active_only else "1 = 1"
        with self._transaction() as conn:
            return self._read_instance_health(conn, where, ())

    @staticmethod
    def _read_instance_health(
        conn: sqlite3.Connection, where: str, params: tuple[Any, ...]
    ) -> list[InstanceHealth]:
        """Join instances with their most recent connection attempt.

        ``where`` must qualify instance columns with the ``si`` alias.
        """
        rows = conn.execute(
            "SELECT si.*, recent.attempt_date, recent.error_message, "
            "recent.databases_found, recent.columns_inventoried "
            "FROM sql_instances si "
            "LEFT JOIN connection_log recent ON recent.log_id = ("
            "    SELECT cl.log_id FROM connection_log cl "
            "    WHERE cl.instance_id = si.instance_id "
            "    ORDER BY cl.attempt_date DESC, cl.log_id DESC LIMIT 1"
            f") WHERE {where} "  # noqa: S608
            "ORDER BY si.server_name, si.instance_name",
            params,
        ).fetchall()
        return [
            InstanceHealth(
                server=row["server_name"],
                instance=row["instance_name"],
                full_instance_name=row["full_instance_name"],
                discovered_at=_to_datetime(row["discovered_date"]),
                active=bool(row["is_active"]),
                consecutive_failures=row["consecutive_failures"],
                last_successful_connection=_to_datetime(
                    row["last_successful_connection"]
                ),
                last_attempt_at=_to_datetime(row["attempt_date"]),
                last_error=row["error_message"],
                databases_found=row["databases_found"],
                columns_inventoried=row["columns_inventoried"],
            )
            for row in rows
        ]

    @override
    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._connection.close()
        logger.debug("Closed inventory database %s", self._database_path)
