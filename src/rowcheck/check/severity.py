"""
Severity levels for reporting a failed assertion.

The severity decides the message type of a failure and how far the process
exit status is raised. ABEND additionally requests process termination.
"""

import re
from enum import Enum

from .errors import InvalidSeverityError


class Severity(Enum):
    """Canonical severity levels."""

    NOTE = "NOTE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    ABEND = "ABEND"


DEFAULT_SEVERITY = "error"

SEVERITY_PATTERN = re.compile(
    r"^\s*(note|warning|warn|error|err|abend|abort)\s*$", re.IGNORECASE
)

SEVERITY_SYNONYMS = {
    "note": Severity.NOTE,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "abend": Severity.ABEND,
    "abort": Severity.ABEND,
}


def normalize_severity(raw: str | Severity | None = DEFAULT_SEVERITY) -> Severity:
    """
    Validate and canonicalize a requested severity

    Args:
        raw: Severity name or synonym, case-insensitive. None means the
            default (error). A Severity member is returned unchanged.

    Returns:
        Canonical Severity member

    Raises:
        InvalidSeverityError: If raw is not a recognized severity word
    """
    if isinstance(raw, Severity):
        return raw

    if raw is None:
        raw = DEFAULT_SEVERITY

    if not isinstance(raw, str):
        raise InvalidSeverityError(raw)

    match = SEVERITY_PATTERN.match(raw)
    if not match:
        raise InvalidSeverityError(raw)

    return SEVERITY_SYNONYMS[match.group(1).lower()]
