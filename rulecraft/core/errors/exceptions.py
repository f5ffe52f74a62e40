"""Exception wrappers for AppError.

Rule construction and the sync/async contract are exception-based; these
classes carry the AppError so boundaries can serialize them uniformly.
"""
from __future__ import annotations

from typing import NoReturn

from .types import AppError


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self):
        return self.error.code


class RuleConfigurationError(AppErrorException, ValueError):
    """Invalid rule or validator construction (bounds, missing predicate, bad enum type)."""


class AsyncValidatorInvokedSynchronouslyError(AppErrorException, RuntimeError):
    """An async-only validator or async condition was reached during a synchronous run."""


_EXCEPTION_BY_CATEGORY: dict[str, type[AppErrorException]] = {
    "setup": RuleConfigurationError,
    "execution": AsyncValidatorInvokedSynchronouslyError,
}


def raise_error(error: AppError) -> NoReturn:
    """Raise AppError as the exception matching its category.

    Usage:
        if predicate is None:
            raise_error(null_argument("predicate").error)
    """
    raise _EXCEPTION_BY_CATEGORY.get(error.code.category, AppErrorException)(error)


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return."""
    if result.is_err():
        raise_error(result.unwrap_err())
