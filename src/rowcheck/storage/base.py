"""
Base classes for the table storage collaborator.

A TableStore answers two questions about a table reference: does it exist,
and how many rows does it hold. Backends translate driver failures into
StorageUnavailableError so callers never see driver-specific exceptions.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class StorageUnavailableError(Exception):
    """Raised when the storage backend cannot answer a query."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


@dataclass(frozen=True)
class TableReference:
    """A table name, optionally qualified by a namespace (schema/library)."""

    name: str
    namespace: str | None = None

    @classmethod
    def parse(cls, token: str) -> "TableReference":
        """
        Build a reference from an expression token

        Args:
            token: 'name' or 'namespace.name'

        Returns:
            TableReference
        """
        if "." in token:
            namespace, name = token.split(".", 1)
            return cls(name=name, namespace=namespace)
        return cls(name=token)

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def __str__(self) -> str:
        return self.qualified_name


class TableStore(ABC):
    """Abstract storage collaborator used to resolve row counts."""

    db_type = "unknown"

    @abstractmethod
    def exists(self, ref: TableReference) -> bool:
        """Return True if the referenced table exists."""

    @abstractmethod
    def row_count(self, ref: TableReference) -> int:
        """Return the number of rows in the referenced table."""

    def close(self) -> None:
        """Release backend resources (no-op by default)."""

    def __enter__(self) -> "TableStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
