"""Scan pipeline: classify and record every column a source enumerates.

Each column is classified and recorded independently. A rejected column or
a failed write is logged and collected, and the scan carries on with the
sibling columns of the same table and database.
"""

import logging
import time
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, ValidationError

from column_inventory.classifier import RuleSnapshot, classify
from column_inventory.errors import InvalidArgumentError, SourceError, StorageError
from column_inventory.sources.base import ColumnSource
from column_inventory.store.base import InventoryStore
from column_inventory.types import (
    ColumnObservation,
    ConnectionAttempt,
    InstanceHealth,
    utc_now,
)

logger = logging.getLogger(__name__)


class ColumnFailure(BaseModel):
    """A column whose classification or recording failed."""

    model_config = ConfigDict(frozen=True)

    database: str
    observation: ColumnObservation
    error: str

    @property
    def qualified_column(self) -> str:
        """Return schema.table.column of the failed observation."""
        observation = self.observation
        return f"{observation.schema_name}.{observation.table}.{observation.column}"


class ScanResult(BaseModel):
    """Outcome of scanning one database."""

    model_config = ConfigDict(frozen=True)

    server: str
    instance: str
    database: str
    columns_scanned: int = 0
    findings_recorded: int = 0
    failures: tuple[ColumnFailure, ...] = ()

    @property
    def succeeded(self) -> bool:
        """Whether every column was classified and recorded."""
        return not self.failures


class InstanceScanResult(BaseModel):
    """Outcome of scanning every database of an instance."""

    model_config = ConfigDict(frozen=True)

    databases: tuple[ScanResult, ...]
    health: InstanceHealth

    @property
    def columns_scanned(self) -> int:
        """Total columns enumerated across databases."""
        return sum(result.columns_scanned for result in self.databases)

    @property
    def findings_recorded(self) -> int:
        """Total findings inserted or refreshed across databases."""
        return sum(result.findings_recorded for result in self.databases)

    @property
    def failures(self) -> tuple[ColumnFailure, ...]:
        """Per-column failures across databases."""
        return tuple(
            failure for result in self.databases for failure in result.failures
        )


class ColumnScanner:
    """Drives classify then record_finding for each column of a scan pass.

    The scanner holds one rule snapshot for the whole pass, so every column
    of the pass is judged against the same rules.
    """

    def __init__(self, store: InventoryStore, snapshot: RuleSnapshot) -> None:
        """Initialise the scanner.

        Args:
            store: Store receiving findings and connection attempts
            snapshot: Active rules for this scan pass

        """
        self._store = store
        self._snapshot = snapshot

    def scan_database(
        self,
        server: str,
        instance: str,
        database: str,
        columns: Iterable[ColumnObservation],
    ) -> ScanResult:
        """Classify and record every column of one database.

        Args:
            server: Server host name
            instance: Instance name (DEFAULT for the default instance)
            database: Database name
            columns: Column observations enumerated from the database

        Returns:
            Counts of scanned columns and recorded findings, plus failures

        """
        detected_at = utc_now()
        scanned = 0
        recorded = 0
        failures: list[ColumnFailure] = []

        for observation in columns:
            scanned += 1
            try:
                classification = classify(
                    observation.column, observation.declared_type, self._snapshot
                )
                key = observation.key(server, instance, database)
                self._store.record_finding(
                    key, observation.declared_type, classification, detected_at
                )
            except (InvalidArgumentError, ValidationError, StorageError) as e:
                failure = ColumnFailure(
                    database=database, observation=observation, error=str(e)
                )
                logger.warning(
                    "Skipping column %s in %s/%s/%s: %s",
                    failure.qualified_column,
                    server,
                    instance,
                    database,
                    e,
                )
                failures.append(failure)
                continue
            if classification is not None:
                recorded += 1
                logger.debug(
                    "%s classified as %s/%s (%s)",
                    key.qualified_column,
                    classification.category,
                    classification.pattern_name,
                    classification.risk_level,
                )

        logger.info(
            "Scanned %d columns in %s/%s/%s: %d sensitive, %d failed",
            scanned,
            server,
            instance,
            database,
            recorded,
            len(failures),
        )
        return ScanResult(
            server=server,
            instance=instance,
            database=database,
            columns_scanned=scanned,
            findings_recorded=recorded,
            failures=tuple(failures),
        )

    def scan_instance(
        self, server: str, instance: str, source: ColumnSource
    ) -> InstanceScanResult:
        """Scan every database a source lists and log the connection attempt.

        Args:
            server: Server host name
            instance: Instance name (DEFAULT for the default instance)
            source: Column feed for the instance

        Returns:
            Per-database results and the instance's updated health

        Raises:
            SourceError: If the source cannot be enumerated; the failed
                attempt is logged to the store before re-raising

        """
        started = time.perf_counter()
        results: list[ScanResult] = []
        try:
            for database in source.list_databases():
                results.append(
                    self.scan_database(
                        server, instance, database, source.iter_columns(database)
                    )
                )
        except SourceError as e:
            logger.error("Scan of %s/%s failed: %s", server, instance, e)
            self._store.log_connection_attempt(
                ConnectionAttempt.failed(
                    server, instance, e, duration_ms=_elapsed_ms(started)
                )
            )
            raise

        health = self._store.log_connection_attempt(
            ConnectionAttempt(
                server=server,
                instance=instance,
                success=True,
                databases_found=len(results),
                columns_inventoried=sum(result.columns_scanned for result in results),
                duration_ms=_elapsed_ms(started),
            )
        )
        return InstanceScanResult(databases=tuple(results), health=health)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
