"""Per-binding options: conditions, messages, error codes, state and severity.

Features:
- AND-composed sync and async conditions (newest predicate evaluated first)
- Message resolution: factory, then static template, then language default
- Error code resolution: explicit code, then the configured resolver
- Mode decision for sync/async execution of a binding
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .enums import Severity
from .languages import LanguageManager

if TYPE_CHECKING:
    from .context import ValidationContext
    from .execution import PropertyValidatorContext
    from .rule import PropertyRule
    from .validators.base import Validator

Condition = Callable[["ValidationContext"], bool]
AsyncCondition = Callable[["ValidationContext"], Awaitable[bool]]
MessageFactory = Callable[["PropertyValidatorContext | None"], str]

_FALLBACK_LANGUAGE_MANAGER = LanguageManager()


def and_condition(new: Condition, original: Condition | None) -> Condition:
    if original is None: return new
    return lambda ctx: bool(new(ctx)) and bool(original(ctx))


def and_async_condition(new: AsyncCondition, original: AsyncCondition | None) -> AsyncCondition:
    if original is None: return new

    async def _composed(ctx: ValidationContext) -> bool:
        return bool(await new(ctx)) and bool(await original(ctx))

    return _composed


class PropertyValidatorOptions:
    """Everything configurable about one validator attached to one rule."""

    __slots__ = (
        "condition", "async_condition", "_error_message", "_error_message_factory", "error_code",
        "custom_state_provider", "severity_provider", "on_failure", "parent_rule", "validator",
    )

    def __init__(self) -> None:
        self.condition: Condition | None = None
        self.async_condition: AsyncCondition | None = None
        self._error_message: str | None = None
        self._error_message_factory: MessageFactory | None = None
        self.error_code: str | None = None
        self.custom_state_provider: Callable[[PropertyValidatorContext], Any] | None = None
        self.severity_provider: Callable[[PropertyValidatorContext], Severity] | None = None
        self.on_failure: Callable[[Any, PropertyValidatorContext, str], None] | None = None
        self.parent_rule: PropertyRule | None = None
        self.validator: Validator | None = None

    # ------------------------------------------------------------------ conditions

    @property
    def has_condition(self) -> bool: return self.condition is not None

    @property
    def has_async_condition(self) -> bool: return self.async_condition is not None

    def apply_condition(self, condition: Condition) -> None:
        self.condition = and_condition(condition, self.condition)

    def apply_async_condition(self, condition: AsyncCondition) -> None:
        self.async_condition = and_async_condition(condition, self.async_condition)

    def invoke_condition(self, context: ValidationContext) -> bool:
        return self.condition is None or bool(self.condition(context))

    async def invoke_async_condition(self, context: ValidationContext) -> bool:
        return self.async_condition is None or bool(await self.async_condition(context))

    def should_validate_asynchronously(self, context: ValidationContext) -> bool:
        """Async condition, or async-only validator, or dual validator inside an async run."""
        if self.async_condition is not None: return True
        validator = self.validator
        if validator is None: return False
        if validator.supports_async and not validator.supports_sync: return True
        if validator.supports_async and validator.supports_sync: return context.is_async
        return False

    # ------------------------------------------------------------------ messages

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def has_custom_message(self) -> bool:
        return self._error_message is not None or self._error_message_factory is not None

    def set_error_message(self, message: str | MessageFactory) -> None:
        if callable(message):
            self._error_message_factory, self._error_message = message, None
        else:
            self._error_message, self._error_message_factory = message, None

    @property
    def language_manager(self) -> LanguageManager:
        if self.parent_rule is None: return _FALLBACK_LANGUAGE_MANAGER
        return self.parent_rule.configuration.language_manager

    def get_unformatted_message(self, context: PropertyValidatorContext | None = None) -> str:
        if self._error_message_factory is not None: return self._error_message_factory(context)
        if self._error_message is not None: return self._error_message
        return self.validator.get_default_message_template(self.language_manager, self.error_code)

    def get_error_message(self, context: PropertyValidatorContext | None = None) -> str:
        """Resolved message; placeholders substituted only when a context is supplied."""
        raw = self.get_unformatted_message(context)
        if context is None: return raw
        return context.message_formatter.build_message(raw)

    # ------------------------------------------------------------------ codes, state, severity

    def resolve_error_code(self) -> str | None:
        if self.error_code: return self.error_code
        if self.validator is None: return None
        if self.parent_rule is None: return self.validator.name
        return self.parent_rule.configuration.error_code_resolver(self.validator, self)

    def resolve_severity(self, context: PropertyValidatorContext) -> Severity:
        return Severity.ERROR if self.severity_provider is None else self.severity_provider(context)

    def resolve_custom_state(self, context: PropertyValidatorContext) -> Any:
        return None if self.custom_state_provider is None else self.custom_state_provider(context)


@dataclass(frozen=True, slots=True)
class ValidatorBinding:
    """A validator and its options, in the order they were attached to a rule."""
    validator: Validator
    options: PropertyValidatorOptions
