"""
Identifier checks for table references interpolated into SQL.

PostgreSQL queries compose identifiers with psycopg2.sql. SQL Server
queries are built as text, so references are validated and bracket-quoted
here before they reach the cursor.
"""

import re

TABLE_REFERENCE_PATTERN = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)?", re.ASCII)


def validate_table_reference(reference: str) -> None:
    """
    Check a 'name' or 'schema.name' reference

    Raises:
        ValueError: Unless both parts are ASCII word characters not
            starting with a digit
    """
    if not isinstance(reference, str) or not TABLE_REFERENCE_PATTERN.fullmatch(reference):
        raise ValueError(
            f"Invalid table reference: {reference!r}. "
            "Expected name or schema.name using ASCII letters, digits and underscores."
        )


def bracket_quote(reference: str) -> str:
    """
    Quote a table reference for SQL Server

    >>> bracket_quote("dbo.orders")
    '[dbo].[orders]'
    """
    validate_table_reference(reference)
    return ".".join(f"[{part}]" for part in reference.split("."))
