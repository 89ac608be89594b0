"""Finding, pattern and instance health storage."""

from column_inventory.store.base import InventoryStore
from column_inventory.store.configuration import StoreBackend, StoreConfiguration
from column_inventory.store.factory import InventoryStoreFactory
from column_inventory.store.in_memory import InMemoryInventoryStore
from column_inventory.store.sqlite import SQLiteInventoryStore

__all__ = [
    "InMemoryInventoryStore",
    "InventoryStore",
    "InventoryStoreFactory",
    "SQLiteInventoryStore",
    "StoreBackend",
    "StoreConfiguration",
]
