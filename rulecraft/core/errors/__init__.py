"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction
- Exceptions: RuleConfigurationError, AsyncValidatorInvokedSynchronouslyError

Usage:
    from rulecraft.core.errors import Ok, Err, null_argument, raise_error

    if predicate is None:
        raise_error(null_argument("predicate", origin="PredicateValidator").error)

    match validator.try_validate(order):
        case Ok(order):
            ...
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    ok,
    err,
)

from .builders import (
    # Setup (E1xxx)
    setup_error,
    null_argument,
    invalid_argument,
    invalid_bounds,
    not_an_enum,
    property_name_unresolved,
    no_current_validator,
    # Validation (E2xxx)
    validation_failed,
    # Execution (E3xxx)
    async_invoked_synchronously,
)

from .exceptions import (
    AppErrorException,
    RuleConfigurationError,
    AsyncValidatorInvokedSynchronouslyError,
    raise_error,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "ok",
    "err",
    "setup_error",
    "null_argument",
    "invalid_argument",
    "invalid_bounds",
    "not_an_enum",
    "property_name_unresolved",
    "no_current_validator",
    "validation_failed",
    "async_invoked_synchronously",
    "AppErrorException",
    "RuleConfigurationError",
    "AsyncValidatorInvokedSynchronouslyError",
    "raise_error",
    "raise_result",
]
