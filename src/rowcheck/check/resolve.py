"""
Table resolution and row counting.

This is the only stage of an assertion that talks to the storage backend.
Existence of every referenced table is confirmed before any row is counted,
so an expression naming a missing table never triggers a COUNT query.
"""

import logging

from rowcheck.storage.base import StorageUnavailableError, TableReference, TableStore
from rowcheck.utils.metrics import CheckMetrics
from rowcheck.utils.tracing import trace_operation

from .errors import TableNotFoundError

logger = logging.getLogger(__name__)


class TableResolver:
    """
    Resolve table tokens to row counts for a single assertion.

    Results are cached per token for the lifetime of the resolver, so a
    table referenced twice is counted once and both occurrences see the same
    value. Create a new resolver for every assertion.
    """

    def __init__(self, store: TableStore, metrics: CheckMetrics | None = None):
        self.store = store
        self.metrics = metrics
        self._exists: dict[str, bool] = {}
        self._counts: dict[str, int] = {}

    def table_exists(self, token: str) -> bool:
        if token not in self._exists:
            self._exists[token] = self.store.exists(TableReference.parse(token))
        return self._exists[token]

    def row_count(self, token: str) -> int:
        if token not in self._counts:
            with trace_operation("row_count", table=token) as span:
                count = self.store.row_count(TableReference.parse(token))
                span.set_attribute("row_count", count)

            if count < 0:
                raise StorageUnavailableError(
                    f"Backend returned a negative row count for {token}: {count}", token
                )

            logger.debug(f"Row count for {token}: {count}")
            if self.metrics is not None:
                self.metrics.record_row_count(token, count)
            self._counts[token] = count
        return self._counts[token]

    def resolve(self, tokens: list[str], expression: str | None = None) -> dict[str, int]:
        """
        Check existence of every token, then count rows

        Args:
            tokens: Table tokens in left-to-right order (duplicates allowed)
            expression: Original expression text, carried into errors

        Returns:
            Mapping of token to row count

        Raises:
            TableNotFoundError: For the first token whose table is missing
            StorageUnavailableError: If the backend fails
        """
        for token in tokens:
            if not self.table_exists(token):
                raise TableNotFoundError(token, expression)

        return {token: self.row_count(token) for token in tokens}
