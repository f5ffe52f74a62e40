"""String/collection length validators.

Bounds are ints or callables taking the validated instance. An upper bound
of None means unbounded. None values always pass; pair with NotNullValidator
to require a value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Union

from rulecraft.core.errors import invalid_bounds, raise_error

from ..enums import Capability
from ..languages import NO_DEFAULT_MESSAGE
from .base import PropertyValidator

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext
    from ..languages import LanguageManager

Bound = Union[int, Callable[[Any], int], None]


def _resolve(bound: Bound, instance: Any) -> int | None:
    return bound(instance) if callable(bound) else bound


@dataclass(frozen=True, slots=True)
class LengthValidator(PropertyValidator):
    """Fails when len(value) < min_length, or > max_length when an upper bound is set."""
    min_length: Bound = 0
    max_length: Bound = None

    name: ClassVar[str] = "LengthValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.LENGTH})

    def __post_init__(self):
        if (isinstance(self.min_length, int) and isinstance(self.max_length, int)
                and self.max_length < self.min_length):
            raise_error(invalid_bounds(self.min_length, self.max_length, origin=self.name).error)

    def is_valid(self, context: PropertyValidatorContext) -> bool:
        value = context.property_value
        if value is None: return True

        instance = context.instance_to_validate
        min_length, max_length = _resolve(self.min_length, instance) or 0, _resolve(self.max_length, instance)
        length = len(value)

        if length < min_length or (max_length is not None and length > max_length):
            (context.message_formatter
                .append_argument("MinLength", min_length)
                .append_argument("MaxLength", max_length)
                .append_argument("TotalLength", length))
            return False
        return True

    def get_default_message_template(self, language_manager: LanguageManager, error_code: str | None = None) -> str:
        """Without an upper bound the check reads as a minimum-length check."""
        if self.max_length is not None or (error_code and language_manager.get_string(error_code)):
            return PropertyValidator.get_default_message_template(self, language_manager, error_code)
        return language_manager.get_string(MinimumLengthValidator.name) or NO_DEFAULT_MESSAGE


@dataclass(frozen=True, slots=True, init=False)
class ExactLengthValidator(LengthValidator):
    """Same checks as LengthValidator(n, n), reported with its own name and message."""

    name: ClassVar[str] = "ExactLengthValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.LENGTH, Capability.EXACT_LENGTH})

    def __init__(self, length: Bound):
        object.__setattr__(self, "min_length", length); object.__setattr__(self, "max_length", length)

    @property
    def length(self) -> Bound: return self.max_length


@dataclass(frozen=True, slots=True, init=False)
class MaximumLengthValidator(LengthValidator):
    name: ClassVar[str] = "MaximumLengthValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.LENGTH, Capability.MAXIMUM_LENGTH})

    def __init__(self, max_length: Bound):
        object.__setattr__(self, "min_length", 0); object.__setattr__(self, "max_length", max_length)


@dataclass(frozen=True, slots=True, init=False)
class MinimumLengthValidator(LengthValidator):
    name: ClassVar[str] = "MinimumLengthValidator"
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.LENGTH, Capability.MINIMUM_LENGTH})

    def __init__(self, min_length: Bound):
        object.__setattr__(self, "min_length", min_length); object.__setattr__(self, "max_length", None)
