"""Validator base classes.

A validator inspects the execution context and records failures through
context.add_failure(). It declares:
- name: stable identifier, also the default error code
- message_key: key of its default template in the LanguageManager
- capabilities: tags adapters dispatch on (never on concrete type)
- supports_sync / supports_async: which execution behaviours it has
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from rulecraft.core.errors import async_invoked_synchronously, raise_error

from ..enums import Capability
from ..languages import NO_DEFAULT_MESSAGE, LanguageManager

if TYPE_CHECKING:
    from ..execution import PropertyValidatorContext


class Validator(ABC):
    """Base class for every validator attached to a rule."""

    name: ClassVar[str] = "Validator"
    message_key: ClassVar[str | None] = None
    capabilities: ClassVar[frozenset[Capability]] = frozenset()
    supports_sync: ClassVar[bool] = True
    supports_async: ClassVar[bool] = False

    def validate(self, context: PropertyValidatorContext) -> None:
        raise_error(async_invoked_synchronously(self.name, context.property_name,
            origin=type(self).__name__).error)

    async def validate_async(self, context: PropertyValidatorContext) -> None:
        self.validate(context)

    @property
    def is_async_only(self) -> bool:
        return self.supports_async and not self.supports_sync

    def has_capability(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def get_default_message_template(self, language_manager: LanguageManager, error_code: str | None = None) -> str:
        """Template registered for the explicit error code, else for message_key, else a generic text."""
        if error_code and (template := language_manager.get_string(error_code)):
            return template
        return language_manager.get_string(self.message_key or self.name) or NO_DEFAULT_MESSAGE

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class PropertyValidator(Validator):
    """Synchronous validator expressed as a boolean check."""

    def validate(self, context: PropertyValidatorContext) -> None:
        if not self.is_valid(context):
            context.add_failure()

    @abstractmethod
    def is_valid(self, context: PropertyValidatorContext) -> bool:
        """True when the property value passes."""


class AsyncPropertyValidator(Validator):
    """Asynchronous-only validator expressed as an awaitable boolean check."""

    supports_sync: ClassVar[bool] = False
    supports_async: ClassVar[bool] = True

    async def validate_async(self, context: PropertyValidatorContext) -> None:
        if not await self.is_valid_async(context):
            context.add_failure()

    @abstractmethod
    async def is_valid_async(self, context: PropertyValidatorContext) -> bool:
        """True when the property value passes."""
