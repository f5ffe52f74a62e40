"""rulecraft: declarative property rules with sync/async execution."""
from rulecraft.validation import (
    AbstractValidator,
    ApplyConditionTo,
    CascadeMode,
    Severity,
    ValidationError,
    ValidationFailure,
    ValidationResult,
)

__version__ = "0.1.0"

__all__ = [
    "AbstractValidator",
    "ApplyConditionTo",
    "CascadeMode",
    "Severity",
    "ValidationError",
    "ValidationFailure",
    "ValidationResult",
]
