"""
Outcome reporting for row count assertions.

The reporter turns an evaluation (or a CheckError) into an Outcome, and
deliver() hands the Outcome to a Host: the boundary that writes messages,
accumulates the process exit status and, for ABEND, terminates the process.
Building an Outcome never has side effects; only deliver() does.
"""

import logging
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from rowcheck.utils.logging import flush_logging

from .errors import CheckError, ExpressionFalseError
from .evaluate import EvaluationResult
from .severity import Severity

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "Row count assertion passed"


class MessageType(Enum):
    """Message types written by the host, with their logging levels."""

    NOTE = "NOTE"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def log_level(self) -> int:
        return {
            MessageType.NOTE: logging.INFO,
            MessageType.WARNING: logging.WARNING,
            MessageType.ERROR: logging.ERROR,
        }[self]


# severity -> (message type, exit status floor, terminate process)
FAILURE_REPORTING = {
    Severity.NOTE: (MessageType.NOTE, 0, False),
    Severity.WARNING: (MessageType.WARNING, 4, False),
    Severity.ERROR: (MessageType.ERROR, 8, False),
    Severity.ABEND: (MessageType.ERROR, 8, True),
}
INTERNAL_ERROR_FLOOR = 8


@dataclass
class Outcome:
    """Everything the host needs to report one assertion."""

    expression: str
    severity: Any
    message_type: MessageType
    primary_message: str
    expression_echo: str
    substituted_echo: str | None = None
    subtotal_echo: str | None = None
    exit_code_contribution: int = 0
    fatal: bool = False
    passed: bool = False
    error: CheckError | None = None
    result: EvaluationResult | None = None
    row_counts: dict[str, int] = field(default_factory=dict)

    def messages(self) -> list[str]:
        """Message lines in the order they are emitted"""
        lines = [self.primary_message, f"  Expression: {self.expression_echo}"]
        if self.substituted_echo is not None:
            lines.append(f"  Evaluated:  {self.substituted_echo}")
        if self.subtotal_echo is not None:
            lines.append(f"  Subtotals:  {self.subtotal_echo}")
        return lines

    def to_dict(self) -> dict[str, Any]:
        severity = self.severity.value if isinstance(self.severity, Severity) else str(self.severity)
        return {
            "expression": self.expression,
            "passed": self.passed,
            "severity": severity,
            "message_type": self.message_type.value,
            "messages": self.messages(),
            "exit_code_contribution": self.exit_code_contribution,
            "fatal": self.fatal,
            "error": self.error.to_dict() if self.error else None,
            "row_counts": dict(self.row_counts),
            "lhs_value": self.result.lhs_value if self.result else None,
            "rhs_value": self.result.rhs_value if self.result else None,
        }


def success_outcome(
    expression: str,
    severity: Severity,
    substituted_echo: str,
    result: EvaluationResult,
    row_counts: dict[str, int],
    subtotal_echo: str | None = None,
    success_msg: str | None = None,
) -> Outcome:
    """Build the outcome for a comparison that holds (always NOTE, no exit floor)"""
    return Outcome(
        expression=expression,
        severity=severity,
        message_type=MessageType.NOTE,
        primary_message=success_msg or DEFAULT_SUCCESS_MESSAGE,
        expression_echo=expression.strip(),
        substituted_echo=substituted_echo,
        subtotal_echo=subtotal_echo,
        passed=True,
        result=result,
        row_counts=row_counts,
    )


def failure_outcome(
    expression: str,
    severity: Any,
    error: CheckError,
    substituted_echo: str | None = None,
    subtotal_echo: str | None = None,
    row_counts: dict[str, int] | None = None,
) -> Outcome:
    """
    Build the outcome for a failed assertion

    The message type and exit status floor follow the severity. A severity
    that is not a Severity member yields the internal-error outcome.

    Args:
        expression: Original expression text
        severity: Normalized severity
        error: The failure being reported
        substituted_echo: Expression with counts substituted, if evaluated
        subtotal_echo: Evaluated operand values, if computed
        row_counts: Resolved row counts, if any

    Returns:
        Outcome
    """
    result = error.result if isinstance(error, ExpressionFalseError) else None

    if not isinstance(severity, Severity) or severity not in FAILURE_REPORTING:
        return Outcome(
            expression=expression,
            severity=severity,
            message_type=MessageType.ERROR,
            primary_message=(
                f"Internal error: unrecognized severity {severity!r} "
                f"while reporting: {error.message}"
            ),
            expression_echo=expression.strip(),
            substituted_echo=substituted_echo,
            subtotal_echo=subtotal_echo,
            exit_code_contribution=INTERNAL_ERROR_FLOOR,
            error=error,
            result=result,
            row_counts=row_counts or {},
        )

    message_type, floor, fatal = FAILURE_REPORTING[severity]
    return Outcome(
        expression=expression,
        severity=severity,
        message_type=message_type,
        primary_message=f"Row count assertion failed: {error.message}",
        expression_echo=expression.strip(),
        substituted_echo=substituted_echo,
        subtotal_echo=subtotal_echo,
        exit_code_contribution=floor,
        fatal=fatal,
        error=error,
        result=result,
        row_counts=row_counts or {},
    )


class ExitStatus:
    """
    Process-wide exit status accumulator.

    The status only ever rises: raising it to a value at or below the
    current one is a no-op. Raises from concurrent checks are serialized.
    """

    def __init__(self, code: int = 0):
        self.code = code
        self._lock = threading.Lock()

    def raise_floor(self, minimum: int) -> int:
        with self._lock:
            if minimum > self.code:
                self.code = minimum
            return self.code


_process_exit_status = ExitStatus()


def get_process_exit_status() -> ExitStatus:
    """Return the exit status shared by LoggingHost instances in this process"""
    return _process_exit_status


class Host(Protocol):
    """Reporting boundary consumed by deliver()."""

    def emit(self, level: MessageType, text: str) -> None: ...

    def raise_exit_status(self, minimum: int) -> None: ...

    def terminate_abnormally(self) -> None: ...


class LoggingHost:
    """
    Host writing messages through the logging module.

    terminate_abnormally() flushes every handler and raises SystemExit with
    the accumulated exit status. SystemExit rather than os._exit() so that
    context managers still close storage connections on the way out; a
    caller catching BaseException can intercept it. The rowcheck CLI writes
    its report before delivering a fatal outcome and catches nothing after.
    """

    def __init__(
        self,
        exit_status: ExitStatus | None = None,
        logger_name: str = "rowcheck.check",
    ):
        self.exit_status = exit_status if exit_status is not None else get_process_exit_status()
        self.logger = logging.getLogger(logger_name)

    def emit(self, level: MessageType, text: str) -> None:
        self.logger.log(level.log_level, text, extra={"message_type": level.value})

    def raise_exit_status(self, minimum: int) -> None:
        self.exit_status.raise_floor(minimum)

    def terminate_abnormally(self) -> None:
        flush_logging()
        sys.stdout.flush()
        sys.stderr.flush()
        sys.exit(self.exit_status.code or INTERNAL_ERROR_FLOOR)


def deliver(outcome: Outcome, host: Host) -> Outcome:
    """
    Emit an outcome through a host

    All message lines are written before the exit status is raised, and
    termination (for fatal outcomes) happens only after both.

    Args:
        outcome: Outcome to report
        host: Reporting boundary

    Returns:
        The same outcome (never returns for fatal outcomes on a LoggingHost)
    """
    for line in outcome.messages():
        host.emit(outcome.message_type, line)

    if outcome.exit_code_contribution:
        host.raise_exit_status(outcome.exit_code_contribution)

    if outcome.fatal:
        logger.debug("Fatal outcome, terminating process")
        host.terminate_abnormally()

    return outcome
