"""
Events - Dataset Loading, Validation and Queries
"""

from .event_source import (
    BoundaryStatus,
    EventSource,
    calculate_event_date_bounds,
    clamp_to_bounds,
    default_center,
    is_at_boundary,
    median_time,
)
from .validation import (
    DatasetValidationResult,
    EventValidationResult,
    format_validation_errors,
    validate_dataset,
    validate_event,
)

__all__ = [
    # Store
    "EventSource",
    "calculate_event_date_bounds",
    "clamp_to_bounds",
    "is_at_boundary",
    "BoundaryStatus",
    "default_center",
    "median_time",
    # Validation
    "validate_event",
    "validate_dataset",
    "format_validation_errors",
    "EventValidationResult",
    "DatasetValidationResult",
]
