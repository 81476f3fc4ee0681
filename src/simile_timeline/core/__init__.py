"""
Core module for Simile Timeline.

Provides:
- Unified exception hierarchy
"""

from .exceptions import (
    # Base
    TimelineError,
    ErrorContext,
    ErrorSeverity,
    ErrorCategory,
    # Validation errors
    ValidationError,
    DateParseError,
    DateFormatError,
    InvalidParameterError,
    EventValidationError,
    # Data errors
    DataError,
    DatasetError,
    # Configuration errors
    ConfigError,
    # Utilities
    create_error_group,
)

__all__ = [
    "TimelineError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ValidationError",
    "DateParseError",
    "DateFormatError",
    "InvalidParameterError",
    "EventValidationError",
    "DataError",
    "DatasetError",
    "ConfigError",
    "create_error_group",
]
