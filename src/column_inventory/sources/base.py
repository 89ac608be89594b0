"""Column source protocol."""

from collections.abc import Iterable
from typing import Protocol

from column_inventory.types import ColumnObservation


class ColumnSource(Protocol):
    """A feed of column observations grouped by database.

    Implementations raise SourceError when the backing catalog cannot be
    reached or enumerated.
    """

    def list_databases(self) -> list[str]:
        """Return the names of the databases this source can enumerate."""
        ...

    def iter_columns(self, database: str) -> Iterable[ColumnObservation]:
        """Yield every non-system column of a database."""
        ...
