"""
Tests for table reference validation and SQL Server quoting
"""

import pytest

from rowcheck.utils.sql_safety import bracket_quote, validate_table_reference


class TestValidateTableReference:
    """Test validate_table_reference"""

    @pytest.mark.parametrize("ref", ["orders", "_tmp", "staging.orders", "Table_1"])
    def test_valid(self, ref):
        validate_table_reference(ref)

    @pytest.mark.parametrize("ref", [
        "",
        "1orders",
        "a.b.c",
        ".orders",
        "staging.",
        "staging.ord-ers",
        "orders; DROP TABLE users--",
        "orders\n",
        "tablé",
        None,
    ])
    def test_invalid(self, ref):
        with pytest.raises(ValueError):
            validate_table_reference(ref)


class TestBracketQuote:
    """Test bracket_quote"""

    def test_quotes_each_part(self):
        assert bracket_quote("dbo.orders") == "[dbo].[orders]"
        assert bracket_quote("orders") == "[orders]"

    def test_validates_first(self):
        with pytest.raises(ValueError):
            bracket_quote("orders]; DROP TABLE x")
