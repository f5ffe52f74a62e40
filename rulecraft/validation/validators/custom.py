from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from rulecraft.core.errors import null_argument, raise_error

from ..enums import Capability
from .base import Validator

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext

CustomAction = Callable[[Any, "PropertyValidatorContext"], None]
AsyncCustomAction = Callable[[Any, "PropertyValidatorContext"], Awaitable[None]]


class CustomValidator(Validator):
    """Runs user callables that record failures themselves via context.add_failure(...).

    With only `action`, both sync and async runs call it. With only
    `async_action`, the validator is async-only.
    """

    name = "CustomValidator"
    capabilities = frozenset({Capability.CUSTOM})

    def __init__(self, action: CustomAction | None = None, async_action: AsyncCustomAction | None = None):
        if action is None and async_action is None:
            raise_error(null_argument("action", origin=self.name).error)
        self.action, self.async_action = action, async_action
        self.supports_sync = action is not None
        self.supports_async = True

    def validate(self, context: PropertyValidatorContext) -> None:
        if self.action is None:
            super().validate(context)
            return
        self.action(context.property_value, context)

    async def validate_async(self, context: PropertyValidatorContext) -> None:
        if self.async_action is None:
            self.validate(context)
            return
        await self.async_action(context.property_value, context)
