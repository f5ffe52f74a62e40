from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from rulecraft.core.errors import not_an_enum, null_argument, raise_error

from ..enums import Capability
from .base import PropertyValidator

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext


@dataclass(frozen=True, slots=True)
class StringEnumValidator(PropertyValidator):
    """Passes when a string value names a member of enum_type."""
    enum_type: type[Enum]
    case_sensitive: bool = True
    names: frozenset[str] = field(init=False, repr=False, compare=False)

    name: ClassVar[str] = "StringEnumValidator"
    message_key: ClassVar[str] = "EnumValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.STRING_ENUM})

    def __post_init__(self):
        if self.enum_type is None: raise_error(null_argument("enum_type", origin=self.name).error)
        if not (isinstance(self.enum_type, type) and issubclass(self.enum_type, Enum)):
            raise_error(not_an_enum(self.enum_type, origin=self.name).error)
        object.__setattr__(self, "names", frozenset(self.enum_type.__members__))

    def is_valid(self, context: PropertyValidatorContext) -> bool:
        value = context.property_value
        if value is None: return True
        if not isinstance(value, str): return False
        if self.case_sensitive: return value in self.names
        folded = value.casefold()
        return any(n.casefold() == folded for n in self.names)
