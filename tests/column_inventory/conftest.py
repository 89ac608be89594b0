"""Shared fixtures for column inventory tests."""

import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from column_inventory.classifier import MatchingMode, RuleSnapshot
from column_inventory.store import (
    InMemoryInventoryStore,
    InventoryStore,
    SQLiteInventoryStore,
)
from column_inventory.types import ColumnKey


@pytest.fixture(scope="session")
def snapshot() -> RuleSnapshot:
    """Starter ruleset snapshot with shared-token matching."""
    return RuleSnapshot.load()


@pytest.fixture(scope="session")
def like_snapshot() -> RuleSnapshot:
    """Starter ruleset snapshot with LIKE pattern matching."""
    return RuleSnapshot.load(mode=MatchingMode.LIKE_PATTERN)


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest) -> Iterator[InventoryStore]:
    """Each inventory store backend, freshly created."""
    if request.param == "memory":
        backend: InventoryStore = InMemoryInventoryStore()
    else:
        backend = SQLiteInventoryStore()
    yield backend
    backend.close()


@pytest.fixture
def column_key() -> ColumnKey:
    """Identity key of the Users.Email column on SRV1."""
    return ColumnKey(
        server="SRV1",
        instance="DEFAULT",
        database="AppDb",
        schema_name="dbo",
        table="Users",
        column="Email",
    )


@pytest.fixture
def app_database(tmp_path: Path) -> Path:
    """A small application database with a mix of sensitive columns."""
    path = tmp_path / "app.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                email VARCHAR(255),
                ssn CHAR(11),
                password_hash VARCHAR(128),
                notes
            );
            CREATE TABLE orders (
                order_id INTEGER PRIMARY KEY,
                widget_color VARCHAR(20),
                credit_card_number VARCHAR(19)
            );
            """
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Put root and package loggers back the way the test found them.

    CLI commands and setup_logging() reconfigure logging globally.
    """
    root = logging.getLogger()
    package = logging.getLogger("column_inventory")
    saved = (
        root.level,
        list(root.handlers),
        package.level,
        list(package.handlers),
        package.propagate,
    )

    yield

    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    package.setLevel(saved[2])
    package.handlers[:] = saved[3]
    package.propagate = saved[4]
