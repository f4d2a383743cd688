"""
Expression parsing and operand validation.

An assertion expression has the shape ``<operand> <comparator> <operand>``
where each operand is a sum, difference or product of table references and
integer literals, e.g. ``orders = new_orders + staging.orders - 3``.

All patterns are ASCII-only: ``\\w`` never matches non-ASCII letters.
"""

import re
from dataclasses import dataclass

from .errors import InvalidOperandError, MalformedExpressionError

COMPARATORS = ("<>", ">=", "<=", "=", "<", ">")

# Two-character comparators come first so '<>' is never split as '<' + '>'
EXPRESSION_PATTERN = re.compile(
    r"([\s\w+\-*.]+?)(<>|>=|<=|=|<|>)([\s\w+\-*.]+)",
    re.ASCII,
)

# Namespace up to 8 characters, table name up to 32 characters
IDENTIFIER = r"(?:[A-Za-z_]\w{0,7}\.)?[A-Za-z_]\w{0,31}"
TERM = rf"(?:{IDENTIFIER}|\d+)"

OPERAND_PATTERN = re.compile(
    rf"\s*(?:{TERM}\s*[-+*]\s*)*{TERM}\s*",
    re.ASCII,
)

TOKEN_SPLIT_PATTERN = re.compile(r"[\s+\-*]+", re.ASCII)
TABLE_TOKEN_PATTERN = re.compile(r"[A-Za-z_]", re.ASCII)


@dataclass(frozen=True)
class ParsedExpression:
    """An expression split at its comparator."""

    lhs: str
    operator: str
    rhs: str

    def operands(self) -> dict[str, str]:
        return {"lhs": self.lhs, "rhs": self.rhs}


def parse_expression(expr: str) -> ParsedExpression:
    """
    Split an expression into left operand, comparator and right operand

    The left operand is matched non-greedily, so the first comparator in the
    string is the split point. Operand characters are restricted to
    whitespace, word characters, '+', '-', '*' and '.'.

    Args:
        expr: Raw comparison expression

    Returns:
        ParsedExpression

    Raises:
        MalformedExpressionError: If no comparator is found, an operand is
            empty, or the expression contains a disallowed character
    """
    if not isinstance(expr, str) or not expr.strip():
        raise MalformedExpressionError("Expression is empty", expr if isinstance(expr, str) else None)

    match = EXPRESSION_PATTERN.fullmatch(expr)
    if not match:
        raise MalformedExpressionError(
            "Expression must be '<operand> <comparator> <operand>' using only "
            "table names, integers, '+', '-', '*' and exactly one of "
            f"{', '.join(COMPARATORS)}",
            expr,
        )

    lhs, operator, rhs = match.groups()
    return ParsedExpression(lhs=lhs, operator=operator, rhs=rhs)


def is_valid_operand(operand: str) -> bool:
    """Check an operand against the term grammar"""
    return OPERAND_PATTERN.fullmatch(operand) is not None


def validate_operands(parsed: ParsedExpression, expr: str | None = None) -> None:
    """
    Confirm both operands are well-formed sums/differences/products of terms

    Args:
        parsed: Parsed expression
        expr: Original expression text, carried into the error

    Raises:
        InvalidOperandError: With side 'lhs', 'rhs' or 'both'
    """
    lhs_ok = is_valid_operand(parsed.lhs)
    rhs_ok = is_valid_operand(parsed.rhs)

    if lhs_ok and rhs_ok:
        return

    if not lhs_ok and not rhs_ok:
        side = "both"
    elif not lhs_ok:
        side = "lhs"
    else:
        side = "rhs"

    raise InvalidOperandError(side, parsed.operands(), expr)


def split_tokens(operand: str) -> list[str]:
    """Split an operand on whitespace and arithmetic operators"""
    return [token for token in TOKEN_SPLIT_PATTERN.split(operand) if token]


def operand_table_tokens(operand: str) -> list[str]:
    """Table tokens of a single operand, integer literals dropped"""
    return [token for token in split_tokens(operand) if TABLE_TOKEN_PATTERN.match(token)]


def extract_table_tokens(parsed: ParsedExpression) -> list[str]:
    """
    Extract table references from both operands

    Tokens are returned left to right, LHS before RHS, duplicates included.
    Integer literals are dropped.

    Args:
        parsed: Validated expression

    Returns:
        List of table tokens, e.g. ['orders', 'staging.orders']
    """
    return operand_table_tokens(parsed.lhs) + operand_table_tokens(parsed.rhs)
