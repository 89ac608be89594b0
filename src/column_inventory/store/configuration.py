"""Inventory store configuration.

Fields not passed explicitly to StoreConfiguration.from_properties() are read
from COLUMN_INVENTORY_* environment variables.
"""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Any, Self, override

from pydantic import Field, field_validator, model_validator

from column_inventory.configuration import BaseServiceConfiguration

BACKEND_ENV_VAR = "COLUMN_INVENTORY_STORE_BACKEND"
DATABASE_PATH_ENV_VAR = "COLUMN_INVENTORY_DATABASE_PATH"


class StoreBackend(StrEnum):
    """Available inventory store backends."""

    MEMORY = "memory"
    SQLITE = "sqlite"


SUPPORTED_BACKENDS = frozenset(backend.value for backend in StoreBackend)

# Field name -> environment variable consulted when the field is not given
_ENVIRONMENT_FALLBACKS = {
    "backend": BACKEND_ENV_VAR,
    "database_path": DATABASE_PATH_ENV_VAR,
}


class StoreConfiguration(BaseServiceConfiguration):
    """Which store backend to open, and where.

    Example:
        ```python
        config = StoreConfiguration(backend="sqlite", database_path="inventory.db")
        config = StoreConfiguration.from_properties({})  # from the environment
        ```

    """

    backend: StoreBackend = Field(
        default=StoreBackend.MEMORY, description="'memory' or 'sqlite'"
    )
    database_path: str | None = Field(
        default=None, description="SQLite database file, required for 'sqlite'"
    )

    @field_validator("backend", mode="before")
    @classmethod
    def normalise_backend(cls, v: object) -> object:
        """Accept backend names in any case and with surrounding blanks."""
        if not isinstance(v, str):
            return v
        name = v.strip().lower()
        if name not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Backend must be one of {sorted(SUPPORTED_BACKENDS)}, got: {v}"
            )
        return name

    @model_validator(mode="after")
    def require_database_path(self) -> Self:
        """The sqlite backend needs a file to open."""
        if self.backend is StoreBackend.SQLITE and not self.database_path:
            raise ValueError(
                "database_path is required for the sqlite backend. "
                f"Set it explicitly or via {DATABASE_PATH_ENV_VAR}."
            )
        return self

    @classmethod
    @override
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Validate properties, filling missing fields from the environment.

        Unset variables leave the field at its default.

        Raises:
            ValidationError: If the resulting configuration is invalid

        """
        data = dict(properties)
        for field, env_var in _ENVIRONMENT_FALLBACKS.items():
            if field not in data and (value := os.getenv(env_var)) is not None:
                data[field] = value
        return cls.model_validate(data)
