"""
Exception types for the monitoring core.

Only structurally invalid input raises. Empty batches, unknown alert ids
on dismissal and stale data are normal conditions that produce well-defined
results instead of errors.

Exceptions:
    FieldwatchError: Base class for all package errors
    InputValidationError: Malformed Reading / Finding / ThresholdSet shape
    ConfigLoadError: Configuration file missing, unreadable or invalid
"""

from pathlib import Path
from typing import Optional


class FieldwatchError(Exception):
    """
    Base class for monitoring core errors.

    Attributes:
        message: Error message describing what went wrong.
        cause: Original exception that caused the error, if any.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class InputValidationError(FieldwatchError, ValueError):
    """
    Raised when input to the core is structurally invalid.

    Callers should treat this as an integration bug, not a transient
    condition; nothing inside the core retries.

    Attributes:
        message: Error message.
        field: Name of the offending field, if known.
        cause: Original exception (usually a pydantic ValidationError).
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.field = field
        super().__init__(message, cause=cause)


class ConfigLoadError(FieldwatchError):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.file_path = file_path
        super().__init__(message, cause=cause)
