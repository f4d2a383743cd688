"""
Top-level routine for row count assertions.

run_check() executes the stages in order (severity, parse, validate,
resolve, evaluate) and returns an Outcome. Every CheckError raised along
the way is caught here, once, and turned into a failure outcome.
StorageUnavailableError is not a CheckError and propagates to the caller.

assert_row_counts() additionally delivers the outcome to a host, which is
where messages are written and the process may be terminated.
"""

import logging
import time
from typing import Any

from rowcheck.storage.base import TableStore
from rowcheck.utils.metrics import CheckMetrics
from rowcheck.utils.tracing import trace_operation

from .errors import CheckError, ExpressionFalseError
from .evaluate import evaluate, format_comparison, substitute
from .expression import (
    extract_table_tokens,
    operand_table_tokens,
    parse_expression,
    validate_operands,
)
from .report import Host, LoggingHost, Outcome, deliver, failure_outcome, success_outcome
from .resolve import TableResolver
from .severity import DEFAULT_SEVERITY, Severity, normalize_severity

logger = logging.getLogger(__name__)

TRUTHY_COMMAS = ("yes", "y", "true", "1", "on")


def parse_commas(value: Any) -> bool:
    """
    Interpret the commas option

    Args:
        value: bool, or a string such as 'yes'/'no' (case-insensitive)

    Returns:
        True if thousands separators should be inserted
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_COMMAS


def run_check(
    expr: str,
    store: TableStore,
    *,
    severity: str | Severity | None = DEFAULT_SEVERITY,
    success_msg: str | None = None,
    commas: Any = "yes",
    metrics: CheckMetrics | None = None,
) -> Outcome:
    """
    Evaluate a row count assertion without reporting it

    Args:
        expr: Comparison expression, e.g. 'orders = new_orders + old_orders'
        store: Storage backend used to resolve table row counts
        severity: note, warning/warn, error/err or abend/abort
        success_msg: Primary message on success
        commas: Insert thousands separators into echoed expressions
        metrics: Optional metrics collector

    Returns:
        Outcome describing success or failure

    Raises:
        StorageUnavailableError: If the storage backend fails
    """
    text = expr if isinstance(expr, str) else str(expr)
    use_commas = parse_commas(commas)
    start_time = time.monotonic()

    # Reporting falls back to ERROR when the requested severity is invalid
    level = Severity.ERROR
    counts: dict[str, int] = {}
    substituted_echo = None
    subtotal_echo = None

    with trace_operation("row_count_assertion", expression=text, severity=severity) as span:
        try:
            level = normalize_severity(severity)
            parsed = parse_expression(expr)
            validate_operands(parsed, text)

            tokens = extract_table_tokens(parsed)
            logger.debug(f"Tables referenced by {text!r}: {tokens}")
            counts = TableResolver(store, metrics).resolve(tokens, text)

            result = evaluate(parsed, counts)
            substituted_echo = format_comparison(
                substitute(parsed.lhs, counts),
                parsed.operator,
                substitute(parsed.rhs, counts),
                use_commas,
            )
            if len(operand_table_tokens(parsed.lhs)) > 1 or len(operand_table_tokens(parsed.rhs)) > 1:
                subtotal_echo = format_comparison(
                    str(result.lhs_value), parsed.operator, str(result.rhs_value), use_commas
                )

            if not result.comparison_holds:
                raise ExpressionFalseError(result, text)

            outcome = success_outcome(
                text,
                level,
                substituted_echo,
                result,
                counts,
                subtotal_echo=subtotal_echo,
                success_msg=success_msg,
            )
        except CheckError as e:
            if e.expression is None:
                e.expression = text
            outcome = failure_outcome(
                text,
                level,
                e,
                substituted_echo=substituted_echo,
                subtotal_echo=subtotal_echo,
                row_counts=counts,
            )

        span.set_attribute("passed", outcome.passed)

    if metrics is not None:
        metrics.record_check(
            "passed" if outcome.passed else outcome.error.kind,
            level.value,
            time.monotonic() - start_time,
        )

    return outcome


def assert_row_counts(
    expr: str,
    store: TableStore,
    *,
    severity: str | Severity | None = DEFAULT_SEVERITY,
    success_msg: str | None = None,
    commas: Any = "yes",
    host: Host | None = None,
    metrics: CheckMetrics | None = None,
) -> Outcome:
    """
    Evaluate a row count assertion and report it through a host

    On success a NOTE is written. On failure the message type and exit
    status floor follow the severity; with ABEND the host terminates the
    process after writing every message.

    Args:
        expr: Comparison expression, e.g. 'one = two'
        store: Storage backend used to resolve table row counts
        severity: note, warning/warn, error/err or abend/abort
        success_msg: Primary message on success
        commas: Insert thousands separators into echoed expressions
        host: Reporting boundary (default: LoggingHost on the process exit status)
        metrics: Optional metrics collector

    Returns:
        The delivered Outcome

    Raises:
        StorageUnavailableError: If the storage backend fails
    """
    outcome = run_check(
        expr,
        store,
        severity=severity,
        success_msg=success_msg,
        commas=commas,
        metrics=metrics,
    )
    return report_outcome(outcome, host, metrics)


def report_outcome(
    outcome: Outcome,
    host: Host | None = None,
    metrics: CheckMetrics | None = None,
) -> Outcome:
    """Record the exit status metric and deliver an outcome to a host"""
    host = host if host is not None else LoggingHost()

    if metrics is not None and outcome.exit_code_contribution:
        metrics.record_exit_status(outcome.exit_code_contribution)

    return deliver(outcome, host)
