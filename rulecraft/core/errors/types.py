"""Monadic Error Handling Types

Result/Either types for composable error propagation, plus the error code
taxonomy shared by rule setup, rule execution and the web boundary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")
F = TypeVar("F", bound="AppError")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E1xxx: Rule setup/configuration errors (raised while building rules)
    E2xxx: Validation outcomes (failures reported as data)
    E3xxx: Rule execution errors (raised while running rules)
    E9xxx: Internal/Unknown errors
    """
    # Setup (E1xxx)
    E1000_SETUP_GENERIC = 1000
    E1001_NULL_ARGUMENT = 1001
    E1002_INVALID_ARGUMENT = 1002
    E1003_INVALID_BOUNDS = 1003
    E1004_NOT_AN_ENUM = 1004
    E1005_PROPERTY_NAME_UNRESOLVED = 1005
    E1006_NO_CURRENT_VALIDATOR = 1006

    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_VALIDATION_FAILED = 2001

    # Execution (E3xxx)
    E3000_EXECUTION_GENERIC = 3000
    E3001_ASYNC_INVOKED_SYNCHRONOUSLY = 3001

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def http_status(self) -> int:
        """Map error code to appropriate HTTP status."""
        code = self.value
        if 2000 <= code < 3000:
            return 400
        return 500

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 1000 <= code < 2000:
            return "setup"
        if 2000 <= code < 3000:
            return "validation"
        if 3000 <= code < 4000:
            return "execution"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Immutable context for error tracing and debugging."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class AppError:
    """Base application error with full context.

    All errors carry:
    - Typed error code from taxonomy
    - Human-readable message
    - Structured metadata for debugging
    - Tracing context
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_context(self, **kwargs) -> AppError:
        """Create new error with updated context."""
        new_ctx = ErrorContext(
            correlation_id=kwargs.get("correlation_id") or self.context.correlation_id,
            timestamp=self.context.timestamp,
            origin=kwargs.get("origin", self.context.origin),
            request_id=kwargs.get("request_id", self.context.request_id),
        )
        return AppError(code=self.code, message=self.message, context=new_ctx,
            metadata={**self.metadata, **kwargs.get("metadata", {})}, cause=self.cause)

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(code=self.code, message=self.message, context=self.context,
            metadata={**self.metadata, **kwargs}, cause=self.cause)

    def to_dict(self) -> dict:
        """Serialize error for API responses."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result monad."""
    value: T

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T: return self.value

    def unwrap_or(self, default: T) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, AppError]:
        """Transform the success value."""
        return Ok(f(self.value))


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result monad."""
    error: E

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T: return default

    def unwrap_err(self) -> E: return self.error

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore


Result = Union[Ok[T], Err[E]]


def ok(value: T) -> Ok[T]:
    return Ok(value)


def err(code: ErrorCode, message: str, *, origin: str = "", cause: Exception | None = None, **metadata) -> Err[AppError]:
    """Shorthand for building an Err[AppError]."""
    return Err(AppError(code=code, message=message, context=ErrorContext(origin=origin), metadata=metadata, cause=cause))
