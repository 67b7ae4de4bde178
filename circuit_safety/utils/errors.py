"""
Error taxonomy for circuit_safety.

Configuration problems are raised as ``CircuitConfigError`` subclasses at the
seam where the value is checked, and collected as ``Issue`` records by the
facade so callers get a structured report instead of an exception.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional


INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
OUT_OF_RANGE = "OUT_OF_RANGE"


class Level(str, Enum):
    """Severity of a reported issue."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Issue:
    """Structured description of a configuration problem.

    Attributes:
        level: Severity
        code: Machine-readable error kind
        message: Human-readable description
        field: Name of the offending input, if any
        hint: Optional suggestion for fixing it
    """
    level: Level
    code: str
    message: str
    field: Optional[str] = None
    hint: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'level': self.level.value,
            'code': self.code,
            'message': self.message,
            'field': self.field,
            'hint': self.hint,
        }


class CircuitConfigError(ValueError):
    """Base class for configuration errors detected before simulation."""

    code = INVALID_CONFIGURATION

    def __init__(self, message: str, field: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.hint = hint

    def to_issue(self) -> Issue:
        """Convert the exception to a structured issue."""
        return Issue(
            level=Level.ERROR,
            code=self.code,
            message=self.message,
            field=self.field,
            hint=self.hint,
        )


class InvalidConfiguration(CircuitConfigError):
    """A circuit, catalog or consumer parameter is unusable."""

    code = INVALID_CONFIGURATION


class OutOfRange(CircuitConfigError):
    """A simulation parameter is outside its permitted range."""

    code = OUT_OF_RANGE


def raise_for_issues(issues: Iterable[Issue]) -> None:
    """Raise the first error-level issue as the matching exception."""
    for issue in issues:
        if issue.level is not Level.ERROR:
            continue
        exc_type = OutOfRange if issue.code == OUT_OF_RANGE else InvalidConfiguration
        raise exc_type(issue.message, field=issue.field, hint=issue.hint)


def errors_only(issues: Iterable[Issue]) -> List[Issue]:
    """Filter issues down to the error-level ones."""
    return [issue for issue in issues if issue.level is Level.ERROR]
