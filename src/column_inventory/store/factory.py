"""Inventory store factory."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from column_inventory.errors import ConfigurationError
from column_inventory.store.base import InventoryStore
from column_inventory.store.configuration import StoreBackend, StoreConfiguration
from column_inventory.store.in_memory import InMemoryInventoryStore
from column_inventory.store.sqlite import SQLiteInventoryStore

logger = logging.getLogger(__name__)


class InventoryStoreFactory:
    """Factory for creating inventory store instances.

    Configuration can be provided explicitly or will be read from environment
    variables as a fallback.

    Example:
        ```python
        # Zero-config (reads from environment)
        store = InventoryStoreFactory().create()

        # Explicit configuration
        config = StoreConfiguration(backend="sqlite", database_path="inventory.db")
        store = InventoryStoreFactory(config).create()
        ```

    """

    def __init__(self, config: StoreConfiguration | None = None) -> None:
        """Initialise factory with optional configuration.

        Args:
            config: Optional explicit configuration. If None, configuration
                   is created from environment variables.

        """
        self._config = config

    def _get_config(self) -> StoreConfiguration:
        """Get configuration, either from constructor or environment.

        Raises:
            ConfigurationError: If the environment holds an invalid configuration

        """
        if self._config:
            return self._config

        try:
            return StoreConfiguration.from_properties({})
        except ValidationError as e:
            logger.debug("Cannot create store configuration from environment: %s", e)
            raise ConfigurationError(f"Invalid store configuration: {e}") from e

    def can_create(self) -> bool:
        """Check if a store can be created with the current configuration."""
        try:
            self._get_config()
        except ConfigurationError:
            return False
        return True

    def create(self) -> InventoryStore:
        """Create an inventory store instance.

        Returns:
            The configured store

        Raises:
            ConfigurationError: If the configuration is invalid
            StorageError: If the sqlite database cannot be opened

        """
        config = self._get_config()

        match config.backend:
            case StoreBackend.SQLITE if config.database_path:
                logger.info("Creating SQLite inventory store at %s", config.database_path)
                return SQLiteInventoryStore(config.database_path)
            case StoreBackend.MEMORY:
                logger.info("Creating in-memory inventory store")
                return InMemoryInventoryStore()
            case _:
                raise ConfigurationError(
                    f"Unsupported inventory store backend: '{config.backend}'"
                )
