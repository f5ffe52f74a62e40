"""Ergonomic Error Builders

Factory functions for the error taxonomy. Every builder returns
Err[AppError]; raise the wrapped error with raise_error(builder(...).error)
where exceptions are the contract (rule construction, sync/async mismatch).
"""
from __future__ import annotations

from typing import Any

from .types import AppError, Err, ErrorCode, err


# ============================================================================
# Setup (E1xxx)
# ============================================================================

def setup_error(message: str, *, origin: str = "", **metadata: Any) -> Err[AppError]:
    return err(ErrorCode.E1000_SETUP_GENERIC, message, origin=origin, **metadata)


def null_argument(argument: str, *, origin: str = "") -> Err[AppError]:
    return err(ErrorCode.E1001_NULL_ARGUMENT, f"'{argument}' must not be None", origin=origin, argument=argument)


def invalid_argument(argument: str, reason: str, *, origin: str = "", **metadata: Any) -> Err[AppError]:
    return err(ErrorCode.E1002_INVALID_ARGUMENT, f"Invalid '{argument}': {reason}", origin=origin,
        argument=argument, **metadata)


def invalid_bounds(min_value: int, max_value: int, *, origin: str = "") -> Err[AppError]:
    return err(ErrorCode.E1003_INVALID_BOUNDS,
        f"Max should be larger than min (min={min_value}, max={max_value})",
        origin=origin, min=min_value, max=max_value)


def not_an_enum(type_: Any, *, origin: str = "") -> Err[AppError]:
    name = getattr(type_, "__name__", repr(type_))
    return err(ErrorCode.E1004_NOT_AN_ENUM, f"The type '{name}' is not an Enum and can't be used with an enum name check",
        origin=origin, type=name)


def property_name_unresolved(*, origin: str = "") -> Err[AppError]:
    return err(ErrorCode.E1005_PROPERTY_NAME_UNRESOLVED,
        "Property name could not be automatically determined for the accessor; pass an explicit name",
        origin=origin)


def no_current_validator(*, origin: str = "") -> Err[AppError]:
    return err(ErrorCode.E1006_NO_CURRENT_VALIDATOR,
        "The rule has no validator to configure; add a validator first", origin=origin)


# ============================================================================
# Validation (E2xxx)
# ============================================================================

def validation_failed(failure_count: int, *, origin: str = "", **metadata: Any) -> Err[AppError]:
    return err(ErrorCode.E2001_VALIDATION_FAILED, f"Validation failed: {failure_count} error(s)",
        origin=origin, error_count=failure_count, **metadata)


# ============================================================================
# Execution (E3xxx)
# ============================================================================

def async_invoked_synchronously(validator_name: str, property_name: str | None, *, origin: str = "") -> Err[AppError]:
    return err(ErrorCode.E3001_ASYNC_INVOKED_SYNCHRONOUSLY,
        f"Validator '{validator_name}' on property '{property_name}' requires asynchronous execution "
        "but was invoked synchronously; call validate_async instead",
        origin=origin, validator=validator_name, property=property_name)
