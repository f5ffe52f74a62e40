"""Thin fluent wrapper over PropertyRule.

Validator methods append a binding; option methods configure the binding
added last. Predicates and providers receive the validated instance.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar

from rulecraft.core.errors import invalid_argument, no_current_validator, null_argument, raise_error

from .enums import ApplyConditionTo, CascadeMode, Severity
from .validators.base import Validator
from .validators.child import ChildValidatorAdaptor
from .validators.custom import CustomValidator
from .validators.length import ExactLengthValidator, LengthValidator, MaximumLengthValidator, MinimumLengthValidator
from .validators.predicate import AsyncPredicateValidator, PredicateValidator
from .validators.required import NotEmptyValidator, NotNullValidator
from .validators.string_enum import StringEnumValidator

if TYPE_CHECKING:
    from .failure import ValidationFailure
    from .options import PropertyValidatorOptions
    from .rule import PropertyRule
    from .validator import AbstractValidator

T = TypeVar("T")


class RuleBuilder(Generic[T]):
    __slots__ = ("rule", "parent")

    def __init__(self, rule: PropertyRule[T], parent: AbstractValidator[T]):
        self.rule = rule
        self.parent = parent

    def _current_options(self) -> PropertyValidatorOptions:
        if (binding := self.rule.current_validator) is None:
            raise_error(no_current_validator(origin=type(self).__name__).error)
        return binding.options

    # ========================================================================
    # Validators
    # ========================================================================

    def set_validator(self, validator: Validator | AbstractValidator | Callable[[T, Any], AbstractValidator | None],
                      *rule_sets: str) -> RuleBuilder[T]:
        """Attach a validator, a nested AbstractValidator, or a provider(instance, value) of one."""
        from .validator import AbstractValidator

        if validator is None:
            raise_error(null_argument("validator", origin=type(self).__name__).error)
        if isinstance(validator, Validator):
            self.rule.add_validator(validator)
        elif isinstance(validator, AbstractValidator):
            self.rule.add_validator(ChildValidatorAdaptor(validator, rule_sets=rule_sets))
        elif callable(validator):
            self.rule.add_validator(ChildValidatorAdaptor(
                provider=lambda ctx: validator(ctx.instance_to_validate, ctx.property_value), rule_sets=rule_sets))
        else:
            raise_error(invalid_argument("validator", f"unsupported type {type(validator).__name__}",
                origin=type(self).__name__).error)
        return self

    def length(self, min_length: int | Callable[[T], int], max_length: int | Callable[[T], int] | None) -> RuleBuilder[T]:
        return self.set_validator(LengthValidator(min_length, max_length))

    def exact_length(self, length: int | Callable[[T], int]) -> RuleBuilder[T]:
        return self.set_validator(ExactLengthValidator(length))

    def max_length(self, max_length: int | Callable[[T], int]) -> RuleBuilder[T]:
        return self.set_validator(MaximumLengthValidator(max_length))

    def min_length(self, min_length: int | Callable[[T], int]) -> RuleBuilder[T]:
        return self.set_validator(MinimumLengthValidator(min_length))

    def must(self, predicate: Callable[[Any], bool]) -> RuleBuilder[T]:
        """predicate(value); use PredicateValidator directly to also see the instance."""
        if predicate is None:
            raise_error(null_argument("predicate", origin=type(self).__name__).error)
        return self.set_validator(PredicateValidator(lambda instance, value, ctx: predicate(value)))

    def must_async(self, predicate: Callable[[Any], Awaitable[bool]]) -> RuleBuilder[T]:
        if predicate is None:
            raise_error(null_argument("predicate", origin=type(self).__name__).error)

        async def _check(instance: T, value: Any, ctx: Any) -> bool:
            return await predicate(value)

        return self.set_validator(AsyncPredicateValidator(_check))

    def is_enum_name(self, enum_type: type[Enum], case_sensitive: bool = True) -> RuleBuilder[T]:
        return self.set_validator(StringEnumValidator(enum_type, case_sensitive))

    def not_null(self) -> RuleBuilder[T]:
        return self.set_validator(NotNullValidator())

    def not_empty(self) -> RuleBuilder[T]:
        return self.set_validator(NotEmptyValidator())

    def custom(self, action: Callable[[Any, Any], None]) -> RuleBuilder[T]:
        """action(value, context) records failures with context.add_failure(...)."""
        return self.set_validator(CustomValidator(action=action))

    def custom_async(self, action: Callable[[Any, Any], Awaitable[None]]) -> RuleBuilder[T]:
        return self.set_validator(CustomValidator(async_action=action))

    # ========================================================================
    # Conditions
    # ========================================================================

    def when(self, predicate: Callable[[T], bool],
             apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder[T]:
        self.rule.apply_condition(lambda ctx: bool(predicate(ctx.instance_to_validate)), apply_to)
        return self

    def unless(self, predicate: Callable[[T], bool],
               apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder[T]:
        return self.when(lambda instance: not predicate(instance), apply_to)

    def when_async(self, predicate: Callable[[T], Awaitable[bool]],
                   apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder[T]:
        async def _condition(ctx: Any) -> bool:
            return bool(await predicate(ctx.instance_to_validate))

        self.rule.apply_async_condition(_condition, apply_to)
        return self

    def unless_async(self, predicate: Callable[[T], Awaitable[bool]],
                     apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder[T]:
        async def _negated(instance: T) -> bool:
            return not await predicate(instance)

        return self.when_async(_negated, apply_to)

    # ========================================================================
    # Options of the current validator
    # ========================================================================

    def with_message(self, message: str | Callable[[T | None], str]) -> RuleBuilder[T]:
        """Static template, or message(instance) (instance is None when rendered without a context)."""
        if callable(message):
            self._current_options().set_error_message(
                lambda ctx: message(ctx.instance_to_validate if ctx is not None else None))
        else:
            self._current_options().set_error_message(message)
        return self

    def with_error_code(self, error_code: str) -> RuleBuilder[T]:
        self._current_options().error_code = error_code
        return self

    def with_state(self, provider: Callable[[T], Any]) -> RuleBuilder[T]:
        self._current_options().custom_state_provider = lambda ctx: provider(ctx.instance_to_validate)
        return self

    def with_severity(self, severity: Severity | Callable[[T], Severity]) -> RuleBuilder[T]:
        if callable(severity):
            self._current_options().severity_provider = lambda ctx: severity(ctx.instance_to_validate)
        else:
            self._current_options().severity_provider = lambda ctx: severity
        return self

    def on_failure(self, callback: Callable[[T, Any, str], None]) -> RuleBuilder[T]:
        """callback(instance, execution_context, message) when the current validator fails."""
        self._current_options().on_failure = callback
        return self

    # ========================================================================
    # Rule-level settings
    # ========================================================================

    def with_name(self, name: str | Callable[[T], str]) -> RuleBuilder[T]:
        """Display name used in messages; the property path is unchanged."""
        if callable(name):
            self.rule.set_display_name(lambda ctx: name(ctx.instance_to_validate))
        else:
            self.rule.set_display_name(name)
        return self

    def override_property_name(self, name: str) -> RuleBuilder[T]:
        self.rule.property_name = name
        return self

    def on_any_failure(self, callback: Callable[[T, list[ValidationFailure]], None]) -> RuleBuilder[T]:
        self.rule.on_failure = callback
        return self

    def cascade(self, mode: CascadeMode) -> RuleBuilder[T]:
        self.rule.cascade_mode = mode
        return self

    def dependent_rules(self, action: Callable[[], None]) -> RuleBuilder[T]:
        """Rules declared in action run after this rule, whenever this rule's condition holds."""
        self.rule.add_dependent_rules(self.parent.capture_rules(action, detach=True))
        return self

    def configure(self, fn: Callable[[PropertyRule[T]], None]) -> RuleBuilder[T]:
        fn(self.rule)
        return self
