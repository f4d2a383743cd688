"""In-memory table store for tests and dry runs."""

from .base import StorageUnavailableError, TableReference, TableStore


class InMemoryTableStore(TableStore):
    """
    Table store holding row counts in a dictionary.

    Keys are table names, optionally namespace-qualified. Lookups are
    case-insensitive. Every call is recorded in ``calls`` as
    ``(operation, qualified_name)``.
    """

    db_type = "memory"

    def __init__(self, tables: dict[str, int] | None = None):
        self.tables: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        for name, count in (tables or {}).items():
            self.add_table(name, count)

    def add_table(self, name: str, row_count: int) -> None:
        if row_count < 0:
            raise ValueError(f"Row count cannot be negative: {name}={row_count}")
        self.tables[name.lower()] = row_count

    def exists(self, ref: TableReference) -> bool:
        self.calls.append(("exists", ref.qualified_name))
        return ref.qualified_name.lower() in self.tables

    def row_count(self, ref: TableReference) -> int:
        self.calls.append(("row_count", ref.qualified_name))
        try:
            return self.tables[ref.qualified_name.lower()]
        except KeyError as e:
            raise StorageUnavailableError(
                f"Table {ref} vanished during row count", str(ref)
            ) from e
