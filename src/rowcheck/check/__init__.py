"""
Row count assertions.

This submodule validates a comparison expression over table names, resolves
each table to its row count, evaluates the comparison and reports the
outcome with a configurable severity:
- severity: severity levels and synonyms
- expression: parsing and operand validation
- resolve: existence checks and row counting
- evaluate: substitution, integer evaluation, comma formatting
- report: outcomes, exit status accumulation, host boundary
- runner: the top-level routine
"""

from .errors import (
    CheckError,
    ExpressionFalseError,
    InternalCheckError,
    InvalidOperandError,
    InvalidSeverityError,
    MalformedExpressionError,
    TableNotFoundError,
)
from .evaluate import EvaluationResult, evaluate, insert_commas, substitute
from .expression import (
    ParsedExpression,
    extract_table_tokens,
    parse_expression,
    validate_operands,
)
from .report import (
    ExitStatus,
    Host,
    LoggingHost,
    MessageType,
    Outcome,
    deliver,
    get_process_exit_status,
)
from .resolve import TableResolver
from .runner import assert_row_counts, parse_commas, report_outcome, run_check
from .severity import Severity, normalize_severity

__all__ = [
    'assert_row_counts',
    'run_check',
    'report_outcome',
    'parse_commas',
    'Severity',
    'normalize_severity',
    'ParsedExpression',
    'parse_expression',
    'validate_operands',
    'extract_table_tokens',
    'TableResolver',
    'EvaluationResult',
    'evaluate',
    'substitute',
    'insert_commas',
    'Outcome',
    'MessageType',
    'ExitStatus',
    'Host',
    'LoggingHost',
    'deliver',
    'get_process_exit_status',
    'CheckError',
    'InvalidSeverityError',
    'MalformedExpressionError',
    'InvalidOperandError',
    'TableNotFoundError',
    'ExpressionFalseError',
    'InternalCheckError',
]
