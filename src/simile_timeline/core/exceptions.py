"""
Unified Exception Hierarchy for Simile Timeline.

Exception Hierarchy:
    TimelineError (base)
    ├── ValidationError
    │   ├── DateParseError
    │   ├── DateFormatError
    │   ├── InvalidParameterError
    │   └── EventValidationError
    ├── DataError
    │   └── DatasetError
    └── ConfigError

Per-record layout failures are not exceptions: they are reported as
``RecordSkipped`` values (see ``simile_timeline.domain.entities.timeline``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Bad input, caller can correct and continue
    ERROR = auto()        # Operation failed
    CRITICAL = auto()     # Object cannot be constructed


class ErrorCategory(Enum):
    """Categories for error classification."""
    VALIDATION = "validation"
    DATA = "data"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context for error messages."""
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    example: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class TimelineError(Exception):
    """
    Base exception for all Simile Timeline errors.

    Provides:
    - Structured error context
    - Severity classification
    - JSON-friendly formatting
    """

    __slots__ = ('context', 'severity', 'category')

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.DATA,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.input_value is not None:
            result["input"] = repr(self.context.input_value)
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.example:
            result["example"] = self.context.example
        return result


def _with_defaults(
    context: ErrorContext | None,
    *,
    operation: str | None = None,
    input_value: Any = None,
    suggestion: str | None = None,
    example: str | None = None,
) -> ErrorContext:
    """Merge default fields into a (possibly missing) caller context."""
    ctx = context or ErrorContext()
    return ErrorContext(
        operation=ctx.operation or operation,
        input_value=ctx.input_value if ctx.input_value is not None else input_value,
        suggestion=ctx.suggestion or suggestion,
        example=ctx.example or example,
        metadata=ctx.metadata,
    )


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(TimelineError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
        )


class DateParseError(ValidationError):
    """Raised when a date string matches none of the supported grammars."""

    def __init__(
        self,
        value: Any,
        reason: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = _with_defaults(
            context,
            operation="parse",
            input_value=value,
            suggestion="Use ISO-8601, 'Month D, YYYY', an epoch-ms integer or 'N BCE'",
            example='parse("2006-06-28T00:00:00Z")',
        )
        message = reason or f"Unable to parse date: {value}"
        super().__init__(message, context=ctx)
        self.value = value


class DateFormatError(ValidationError):
    """Raised when a format pattern contains an unknown token."""

    def __init__(
        self,
        pattern: str,
        token: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = _with_defaults(
            context,
            operation="format",
            input_value=pattern,
            suggestion="Supported tokens: yyyy yy MMMM MMM MM M dd d EEEE EEE HH H hh h mm ss SSS a",
            example='format(t, "MMM d, yyyy")',
        )
        super().__init__(f"Unknown format token {token!r} in pattern {pattern!r}", context=ctx)
        self.pattern = pattern
        self.token = token


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is invalid."""

    def __init__(
        self,
        param_name: str,
        value: Any,
        expected: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = _with_defaults(context, input_value=value, suggestion=f"Expected {expected}")
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )
        self.param_name = param_name


class EventValidationError(ValidationError):
    """Raised (in strict loading) for a single invalid event record."""

    def __init__(
        self,
        label: str,
        errors: list[str],
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = _with_defaults(context, operation="validate_event", input_value=label)
        super().__init__(f"{label}: " + "; ".join(errors), context=ctx)
        self.errors = list(errors)


# =============================================================================
# Data Errors
# =============================================================================

class DataError(TimelineError):
    """Base class for data-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
        )


class DatasetError(DataError):
    """Raised when a dataset document is malformed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Dataset error: {message}"
        if source:
            full_msg = f"Dataset error ({source}): {message}"
        super().__init__(full_msg, context=context)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigError(TimelineError):
    """Raised for invalid construction parameters (ethers, bands, layout)."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
        )


# =============================================================================
# Multi-Error Handling
# =============================================================================

def create_error_group(
    message: str,
    errors: list[Exception],
) -> ExceptionGroup[Exception]:
    """
    Create an ExceptionGroup from multiple errors.

    Example:
        try:
            source.load_data(data, strict=True)
        except* EventValidationError as eg:
            for exc in eg.exceptions:
                log_error(exc)
    """
    return ExceptionGroup(message, errors)
