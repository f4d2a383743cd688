"""
Row count assertions for data pipelines

rowcheck validates expressions such as ``orders = new_orders + old_orders``
by replacing each table name with its row count, evaluating the comparison
and reporting the result as a note, warning, error or fatal abend.

Components:
- check: expression parsing, row count resolution, evaluation and reporting
- storage: PostgreSQL, SQL Server and in-memory table stores
- cli: the ``rowcheck`` command

Usage:
    from rowcheck import assert_row_counts
    from rowcheck.storage import InMemoryTableStore

    store = InMemoryTableStore({"one": 5, "two": 5})
    outcome = assert_row_counts("one = two", store, severity="warn")
"""

from .check import Outcome, Severity, assert_row_counts, run_check
from .storage import StorageUnavailableError, TableReference, TableStore

__version__ = "1.0.0"
__all__ = [
    "assert_row_counts",
    "run_check",
    "Outcome",
    "Severity",
    "TableStore",
    "TableReference",
    "StorageUnavailableError",
]
