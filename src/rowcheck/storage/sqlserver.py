"""SQL Server table store."""

import logging
from typing import Any

import pyodbc
from opentelemetry import trace

from rowcheck.utils.sql_safety import bracket_quote, validate_table_reference
from rowcheck.utils.tracing import trace_operation

from .base import StorageUnavailableError, TableReference, TableStore

logger = logging.getLogger(__name__)

EXISTS_QUERY = (
    "SELECT 1 FROM INFORMATION_SCHEMA.TABLES "
    "WHERE TABLE_SCHEMA = ? AND TABLE_NAME = ?"
)


class SQLServerTableStore(TableStore):
    """Table store backed by a pyodbc SQL Server connection."""

    db_type = "sqlserver"

    def __init__(self, connection: pyodbc.Connection, default_schema: str = "dbo"):
        """
        Initialize SQL Server table store.

        Args:
            connection: Open pyodbc connection (closed by close())
            default_schema: Schema used for unqualified table names
        """
        self.connection = connection
        self.default_schema = default_schema

    @staticmethod
    def build_connection_string(config: dict[str, Any]) -> str:
        """Build an ODBC connection string from a configuration dictionary"""
        if config.get("connection_string"):
            return config["connection_string"]

        server = config["server"]
        if config.get("port"):
            server = f"{server},{config['port']}"

        return (
            f"DRIVER={{{config.get('driver', 'ODBC Driver 18 for SQL Server')}}};"
            f"SERVER={server};"
            f"DATABASE={config['database']};"
            f"UID={config['username']};"
            f"PWD={config['password']};"
            f"TrustServerCertificate=yes;"
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SQLServerTableStore":
        """
        Connect using a configuration dictionary

        Args:
            config: server, database, username, password and optional
                port, driver, schema or a complete connection_string

        Raises:
            StorageUnavailableError: If the connection cannot be established
        """
        with trace_operation(
            "sqlserver_connect",
            kind=trace.SpanKind.CLIENT,
            db_host=config.get("server", "unknown"),
            db_name=config.get("database", "unknown"),
        ):
            try:
                conn = pyodbc.connect(cls.build_connection_string(config), timeout=10)
            except pyodbc.Error as e:
                raise StorageUnavailableError(
                    f"Cannot connect to SQL Server at {config.get('server')}: {e}"
                ) from e
        conn.autocommit = True
        logger.info(f"Connected to SQL Server {config.get('server')}/{config.get('database')}")
        return cls(conn, default_schema=config.get("schema") or "dbo")

    def _split(self, ref: TableReference) -> tuple[str, str]:
        validate_table_reference(ref.qualified_name)
        return ref.namespace or self.default_schema, ref.name

    def exists(self, ref: TableReference) -> bool:
        schema, name = self._split(ref)

        with trace_operation(
            "sqlserver_table_exists",
            kind=trace.SpanKind.CLIENT,
            table=f"{schema}.{name}",
        ):
            try:
                cursor = self.connection.cursor()
                try:
                    cursor.execute(EXISTS_QUERY, schema, name)
                    return cursor.fetchone() is not None
                finally:
                    cursor.close()
            except pyodbc.Error as e:
                raise StorageUnavailableError(
                    f"Existence check failed for {ref}: {e}", str(ref)
                ) from e

    def row_count(self, ref: TableReference) -> int:
        schema, name = self._split(ref)
        quoted = bracket_quote(f"{schema}.{name}")

        with trace_operation(
            "sqlserver_row_count",
            kind=trace.SpanKind.CLIENT,
            table=f"{schema}.{name}",
        ):
            try:
                cursor = self.connection.cursor()
                try:
                    cursor.execute(f"SELECT COUNT_BIG(*) FROM {quoted}")
                    result = cursor.fetchone()
                finally:
                    cursor.close()
            except pyodbc.Error as e:
                raise StorageUnavailableError(
                    f"Row count failed for {ref}: {e}", str(ref)
                ) from e

        return int(result[0])

    def close(self) -> None:
        if self.connection is not None:
            self.connection.close()
