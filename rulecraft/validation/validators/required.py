"""Required-value checks."""
from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from ..enums import Capability
from .base import PropertyValidator

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext


@dataclass(frozen=True, slots=True)
class NotNullValidator(PropertyValidator):
    name: ClassVar[str] = "NotNullValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.REQUIRED})

    def is_valid(self, context: PropertyValidatorContext) -> bool:
        return context.property_value is not None


@dataclass(frozen=True, slots=True)
class NotEmptyValidator(PropertyValidator):
    """Fails on None, blank strings and empty collections."""
    name: ClassVar[str] = "NotEmptyValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.REQUIRED})

    def is_valid(self, context: PropertyValidatorContext) -> bool:
        value = context.property_value
        if value is None: return False
        if isinstance(value, str): return bool(value.strip())
        if isinstance(value, Sized): return len(value) > 0
        return True
