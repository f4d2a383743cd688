"""PostgreSQL table store."""

import logging
from typing import Any

import psycopg2
import psycopg2.extensions
from opentelemetry import trace
from psycopg2 import sql

from rowcheck.utils.sql_safety import validate_table_reference
from rowcheck.utils.tracing import trace_operation

from .base import StorageUnavailableError, TableReference, TableStore

logger = logging.getLogger(__name__)

EXISTS_QUERY = (
    "SELECT 1 FROM information_schema.tables "
    "WHERE table_schema = %s AND table_name = %s"
)


class PostgresTableStore(TableStore):
    """
    Table store backed by a PostgreSQL connection.

    Unqualified references resolve against default_schema. Identifiers are
    folded to lower case, as PostgreSQL does for unquoted names.
    """

    db_type = "postgresql"

    def __init__(
        self,
        connection: psycopg2.extensions.connection,
        default_schema: str = "public",
    ):
        """
        Initialize PostgreSQL table store.

        Args:
            connection: Open psycopg2 connection (closed by close())
            default_schema: Schema used for unqualified table names
        """
        self.connection = connection
        self.default_schema = default_schema

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "PostgresTableStore":
        """
        Connect using a configuration dictionary

        Args:
            config: host, port, database, username, password and optional schema

        Raises:
            StorageUnavailableError: If the connection cannot be established
        """
        with trace_operation(
            "postgres_connect",
            kind=trace.SpanKind.CLIENT,
            db_host=config["host"],
            db_name=config["database"],
        ):
            try:
                conn = psycopg2.connect(
                    host=config["host"],
                    port=config.get("port", 5432),
                    database=config["database"],
                    user=config["username"],
                    password=config["password"],
                    connect_timeout=10,
                )
            except psycopg2.Error as e:
                raise StorageUnavailableError(
                    f"Cannot connect to PostgreSQL at {config['host']}: {e}"
                ) from e
        conn.set_session(readonly=True, autocommit=True)
        logger.info(f"Connected to PostgreSQL {config['host']}/{config['database']}")
        return cls(conn, default_schema=config.get("schema") or "public")

    def _split(self, ref: TableReference) -> tuple[str, str]:
        validate_table_reference(ref.qualified_name)
        schema = (ref.namespace or self.default_schema).lower()
        return schema, ref.name.lower()

    def exists(self, ref: TableReference) -> bool:
        schema, name = self._split(ref)

        with trace_operation(
            "postgres_table_exists",
            kind=trace.SpanKind.CLIENT,
            table=f"{schema}.{name}",
        ):
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(EXISTS_QUERY, (schema, name))
                    return cursor.fetchone() is not None
            except psycopg2.Error as e:
                raise StorageUnavailableError(
                    f"Existence check failed for {ref}: {e}", str(ref)
                ) from e

    def row_count(self, ref: TableReference) -> int:
        schema, name = self._split(ref)
        query = sql.SQL("SELECT COUNT(*) FROM {}").format(sql.Identifier(schema, name))

        with trace_operation(
            "postgres_row_count",
            kind=trace.SpanKind.CLIENT,
            table=f"{schema}.{name}",
        ):
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(query)
                    result = cursor.fetchone()
            except psycopg2.Error as e:
                raise StorageUnavailableError(
                    f"Row count failed for {ref}: {e}", str(ref)
                ) from e

        return int(result[0])

    def close(self) -> None:
        if self.connection is not None and not self.connection.closed:
            self.connection.close()
