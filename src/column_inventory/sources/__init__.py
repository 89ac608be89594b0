"""Column feeds for the scan pipeline."""

from column_inventory.sources.base import ColumnSource
from column_inventory.sources.sqlite import SQLiteColumnSource

__all__ = ["ColumnSource", "SQLiteColumnSource"]
