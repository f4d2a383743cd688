"""
Table storage backends used to resolve row counts.

Provides a TableStore interface with PostgreSQL, SQL Server and in-memory
implementations. Database drivers are imported lazily by create_store so
the in-memory store works without them.
"""

import logging
from typing import Any

from .base import StorageUnavailableError, TableReference, TableStore
from .memory import InMemoryTableStore

logger = logging.getLogger(__name__)

BACKENDS = ("postgresql", "sqlserver")


def create_store(backend: str, config: dict[str, Any]) -> TableStore:
    """
    Create a connected table store

    Args:
        backend: 'postgresql' or 'sqlserver'
        config: Connection configuration for the backend

    Returns:
        Connected TableStore

    Raises:
        ValueError: If backend is not supported
        StorageUnavailableError: If the connection fails
    """
    if backend == "postgresql":
        from .postgres import PostgresTableStore
        return PostgresTableStore.from_config(config)
    elif backend == "sqlserver":
        from .sqlserver import SQLServerTableStore
        return SQLServerTableStore.from_config(config)
    else:
        raise ValueError(
            f"Unsupported backend: {backend}. Must be one of {', '.join(BACKENDS)}"
        )


__all__ = [
    "TableStore",
    "TableReference",
    "StorageUnavailableError",
    "InMemoryTableStore",
    "create_store",
    "BACKENDS",
]
