from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, ClassVar

from rulecraft.core.errors import null_argument, raise_error

from ..enums import Capability
from .base import AsyncPropertyValidator, PropertyValidator

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext

Predicate = Callable[[Any, Any, "PropertyValidatorContext"], bool]
AsyncPredicate = Callable[[Any, Any, "PropertyValidatorContext"], Awaitable[bool]]


@dataclass(frozen=True, slots=True)
class PredicateValidator(PropertyValidator):
    """Passes when predicate(instance, value, context) is truthy."""
    predicate: Predicate

    name: ClassVar[str] = "PredicateValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.PREDICATE})

    def __post_init__(self):
        if self.predicate is None: raise_error(null_argument("predicate", origin=self.name).error)

    def is_valid(self, context: PropertyValidatorContext) -> bool:
        return bool(self.predicate(context.instance_to_validate, context.property_value, context))


@dataclass(frozen=True, slots=True)
class AsyncPredicateValidator(AsyncPropertyValidator):
    """Awaits predicate(instance, value, context); usable only from validate_async."""
    predicate: AsyncPredicate

    name: ClassVar[str] = "AsyncPredicateValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.PREDICATE})

    def __post_init__(self):
        if self.predicate is None: raise_error(null_argument("predicate", origin=self.name).error)

    async def is_valid_async(self, context: PropertyValidatorContext) -> bool:
        return bool(await self.predicate(context.instance_to_validate, context.property_value, context))
