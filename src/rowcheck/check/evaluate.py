"""
Substitution of row counts and integer evaluation of an assertion.

Operands are evaluated with a small integer evaluator rather than eval():
``*`` binds tighter than ``+`` and ``-``, which associate left to right.
"""

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass

from .errors import InternalCheckError
from .expression import ParsedExpression

COMPARISON_OPERATORS: dict[str, Callable[[int, int], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    "<": operator.lt,
    ">": operator.gt,
}

# A table term, never starting inside another identifier or after a '.'
TABLE_TERM_PATTERN = re.compile(
    r"(?<![\w.])[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)?(?![\w.])", re.ASCII
)
ARITHMETIC_TOKEN_PATTERN = re.compile(r"\d+|[-+*]|\S", re.ASCII)
DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class EvaluationResult:
    """Values of both operands and whether the comparison holds."""

    lhs_value: int
    rhs_value: int
    comparison_holds: bool


def substitute(operand: str, counts: dict[str, int]) -> str:
    """
    Replace every table term in an operand with its row count

    Only whole terms are replaced: 'one' inside 'oneX' or 'lib.one' is left
    alone.

    Args:
        operand: Validated operand text
        counts: Mapping of table token to row count

    Returns:
        Operand text containing only integers and arithmetic operators

    Raises:
        InternalCheckError: If a table term has no resolved count
    """
    def _replace(match: re.Match) -> str:
        token = match.group(0)
        if token not in counts:
            raise InternalCheckError(f"No row count resolved for table {token}")
        return str(counts[token])

    return TABLE_TERM_PATTERN.sub(_replace, operand)


def evaluate_operand(text: str) -> int:
    """
    Evaluate a substituted operand as integer arithmetic

    Args:
        text: e.g. '10 - 3 * 2'

    Returns:
        Integer value

    Raises:
        InternalCheckError: If the text is not numbers joined by + - *
    """
    tokens = ARITHMETIC_TOKEN_PATTERN.findall(text)
    if not tokens or len(tokens) % 2 == 0:
        raise InternalCheckError(f"Cannot evaluate operand: {text!r}")

    numbers = tokens[0::2]
    operators = tokens[1::2]
    if not all(n.isdigit() for n in numbers) or not all(op in "+-*" for op in operators):
        raise InternalCheckError(f"Cannot evaluate operand: {text!r}")

    total = 0
    sign = 1
    product = int(numbers[0])
    for op, number in zip(operators, numbers[1:]):
        if op == "*":
            product *= int(number)
        else:
            total += sign * product
            sign = 1 if op == "+" else -1
            product = int(number)

    return total + sign * product


def evaluate(parsed: ParsedExpression, counts: dict[str, int]) -> EvaluationResult:
    """
    Substitute row counts into both operands and evaluate the comparison

    Args:
        parsed: Validated expression
        counts: Mapping of table token to row count

    Returns:
        EvaluationResult
    """
    lhs_value = evaluate_operand(substitute(parsed.lhs, counts))
    rhs_value = evaluate_operand(substitute(parsed.rhs, counts))

    compare = COMPARISON_OPERATORS.get(parsed.operator)
    if compare is None:
        raise InternalCheckError(f"Unsupported comparator: {parsed.operator}")

    return EvaluationResult(
        lhs_value=lhs_value,
        rhs_value=rhs_value,
        comparison_holds=compare(lhs_value, rhs_value),
    )


def _group_digits(digits: str) -> str:
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return ",".join(groups)


def insert_commas(text: str) -> str:
    """
    Insert thousands separators into every run of digits in text

    >>> insert_commas("1234567 = 1000 + 12")
    '1,234,567 = 1,000 + 12'
    """
    return DIGITS_PATTERN.sub(lambda m: _group_digits(m.group(0)), text)


def format_comparison(lhs: str, operator_: str, rhs: str, commas: bool = True) -> str:
    """Render '<lhs> <op> <rhs>' with operands stripped"""
    text = f"{lhs.strip()} {operator_} {rhs.strip()}"
    return insert_commas(text) if commas else text
