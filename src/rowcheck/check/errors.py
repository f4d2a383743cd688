"""
Failure taxonomy for row count assertions.

Every validation or evaluation failure is raised as a subclass of
CheckError and caught once by the runner, which hands it to the reporter.
Storage failures are outside this hierarchy (see
rowcheck.storage.base.StorageUnavailableError) and propagate to the caller.
"""

from typing import Any


class CheckError(Exception):
    """Base exception for a failed row count assertion."""

    kind = "CHECK_ERROR"

    def __init__(self, message: str, expression: str | None = None):
        super().__init__(message)
        self.message = message
        self.expression = expression

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class InvalidSeverityError(CheckError):
    """Raised when the requested severity is not a recognized level."""

    kind = "INVALID_SEVERITY"

    def __init__(self, severity: Any, expression: str | None = None):
        super().__init__(
            f"Invalid severity {severity!r}. "
            "Valid values are NOTE, WARNING (WARN), ERROR (ERR) and ABEND (ABORT)",
            expression,
        )
        self.severity = severity


class MalformedExpressionError(CheckError):
    """Raised when the expression is not '<operand> <comparator> <operand>'."""

    kind = "MALFORMED_EXPRESSION"


class InvalidOperandError(CheckError):
    """Raised when one or both operands break the term grammar."""

    kind = "INVALID_OPERAND"

    SIDES = {
        "lhs": "left-hand side",
        "rhs": "right-hand side",
        "both": "both sides",
    }

    def __init__(self, side: str, operands: dict[str, str], expression: str | None = None):
        if side not in self.SIDES:
            raise ValueError(f"Invalid operand side: {side}")

        if side == "both":
            message = (
                f"Invalid operands on both sides: {operands['lhs'].strip()!r} "
                f"and {operands['rhs'].strip()!r}"
            )
        else:
            message = (
                f"Invalid {self.SIDES[side]} operand: {operands[side].strip()!r}"
            )
        super().__init__(message, expression)
        self.side = side
        self.operands = operands

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["side"] = self.side
        return data


class TableNotFoundError(CheckError):
    """Raised for the first referenced table that does not exist."""

    kind = "TABLE_NOT_FOUND"

    def __init__(self, table: str, expression: str | None = None):
        super().__init__(f"Table {table} does not exist", expression)
        self.table = table

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["table"] = self.table
        return data


class ExpressionFalseError(CheckError):
    """Raised when a well-formed comparison evaluates to false."""

    kind = "EXPRESSION_FALSE"

    def __init__(self, result: Any, expression: str | None = None):
        super().__init__("Row count assertion is false", expression)
        self.result = result


class InternalCheckError(CheckError):
    """Raised when the reporter reaches a state it should never see."""

    kind = "INTERNAL_ERROR"
