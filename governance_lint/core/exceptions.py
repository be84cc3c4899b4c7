"""
Custom Exceptions
=================

Exception hierarchy for governance-lint tool failures.

Validation problems found in documents are never raised: they are reported
as findings. The classes here cover failures of the tool itself:
- Bad or unreadable configuration
- A docs root that does not exist when one was explicitly requested
- Corrupt status snapshot files
- Lookups for records that do not exist
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of tool errors."""

    CONFIGURATION = "configuration"
    RESOURCE = "resource"
    STATE = "state"
    INTERNAL = "internal"
    USER_INPUT = "user_input"


class ErrorSeverity(Enum):
    """Severity levels for error handling."""

    LOW = "low"  # Run can continue
    MEDIUM = "medium"  # Current pass is aborted
    HIGH = "high"  # Whole run is aborted


@dataclass
class ErrorContext:
    """Structured context for error debugging."""

    operation: str = ""
    path: str = ""
    record_id: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        if self.operation:
            result["operation"] = self.operation
        if self.path:
            result["path"] = self.path
        if self.record_id:
            result["record_id"] = self.record_id
        result.update(self.extra)
        return result


class GovernanceError(Exception):
    """
    Base exception for all governance-lint errors.

    Carries an error code, category and severity so the CLI can log a
    structured record before exiting.
    """

    error_code: str = "GOVERNANCE_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.HIGH

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.cause = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.context.path:
            parts.append(f"[path={self.context.path}]")
        if self.cause:
            parts.append(f"[caused by: {type(self.cause).__name__}: {self.cause}]")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_code": self.error_code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


# Configuration Errors


class ConfigurationError(GovernanceError):
    """Error in configuration or settings."""

    error_code = "CONFIG_ERROR"
    category = ErrorCategory.CONFIGURATION


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "INVALID_CONFIG"


class DocsRootNotFoundError(ConfigurationError):
    """An explicitly requested docs root does not exist."""

    error_code = "DOCS_ROOT_NOT_FOUND"


# Resource Errors


class RecordNotFoundError(GovernanceError):
    """A governance record with the requested id does not exist."""

    error_code = "RECORD_NOT_FOUND"
    category = ErrorCategory.RESOURCE
    severity = ErrorSeverity.LOW

    def __init__(
        self,
        record_id: str,
        context: ErrorContext | None = None,
    ):
        if context is None:
            context = ErrorContext()
        context.record_id = record_id
        super().__init__(f"Record not found: {record_id}", context)
        self.record_id = record_id


# State Errors


class SnapshotError(GovernanceError):
    """The status snapshot file is unreadable or malformed."""

    error_code = "SNAPSHOT_ERROR"
    category = ErrorCategory.STATE


# Helper functions


def get_error_code(error: Exception) -> str:
    """Get the error code for an exception."""
    if isinstance(error, GovernanceError):
        return error.error_code
    return type(error).__name__.upper()


def wrap_error(
    error: Exception,
    wrapper_class: type[GovernanceError],
    message: str | None = None,
    context: ErrorContext | None = None,
) -> GovernanceError:
    """
    Wrap an exception in a GovernanceError.

    Args:
        error: Original exception
        wrapper_class: GovernanceError subclass to wrap with
        message: Optional message (defaults to str(error))
        context: Optional error context

    Returns:
        Wrapped exception
    """
    if message is None:
        message = str(error)
    return wrapper_class(message=message, context=context, cause=error)
