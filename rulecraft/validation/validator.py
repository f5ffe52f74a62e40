"""AbstractValidator: owns a rule graph and runs it against instances.

Usage:
    class AddressValidator(AbstractValidator[Address]):
        def __init__(self):
            super().__init__()
            self.rule_for("postcode").not_null().length(5, 8)

    class CustomerValidator(AbstractValidator[Customer]):
        def __init__(self):
            super().__init__()
            self.rule_for("name").length(2, 50).when(lambda c: c.active)
            self.rule_for("address").set_validator(AddressValidator())
            self.rule_set("admin", lambda: self.rule_for("role").is_enum_name(Role))

    result = CustomerValidator().validate(customer)
    result = await CustomerValidator().validate_async(customer, rule_sets=["admin"])
"""
from __future__ import annotations

import asyncio
from operator import attrgetter
from typing import Any, Awaitable, Callable, ClassVar, Generic, Iterable, TypeVar

from rulecraft.core.errors import AppError, Result, invalid_argument, null_argument, raise_error
from rulecraft.core.logging import validation_logger

from .builder import RuleBuilder
from .configuration import ValidatorConfiguration
from .context import ValidationContext
from .descriptor import ValidatorDescriptor
from .enums import CascadeMode
from .failure import ValidationResult
from .rule import CollectionPropertyRule, PropertyRule
from .selectors import DefaultValidatorSelector, RulesetValidatorSelector

T = TypeVar("T")

log = validation_logger()


def _split_rule_sets(rule_sets: str | Iterable[str] | None) -> tuple[str, ...]:
    if rule_sets is None: return ()
    if isinstance(rule_sets, str): rule_sets = rule_sets.split(",")
    return tuple(r.strip() for r in rule_sets if r and r.strip())


class AbstractValidator(Generic[T]):
    """Base class for validators; subclasses declare rules in __init__."""

    model: ClassVar[type | None] = None

    def __init__(self, configuration: ValidatorConfiguration | None = None):
        self.configuration = configuration or ValidatorConfiguration.from_settings()
        self.class_level_cascade_mode: CascadeMode = self.configuration.default_class_level_cascade_mode
        self._rule_level_cascade_mode: CascadeMode | None = None
        self._rules: list[PropertyRule] = []
        self._rule_set_scope: tuple[str, ...] = ()

    # ========================================================================
    # Rule declaration
    # ========================================================================

    @property
    def rules(self) -> tuple[PropertyRule, ...]: return tuple(self._rules)

    @property
    def rule_level_cascade_mode(self) -> CascadeMode:
        """Default cascade for this validator's rules, read on every run."""
        if self._rule_level_cascade_mode is not None: return self._rule_level_cascade_mode
        return self.configuration.default_rule_level_cascade_mode

    @rule_level_cascade_mode.setter
    def rule_level_cascade_mode(self, value: CascadeMode | None) -> None:
        self._rule_level_cascade_mode = value

    def add_rule(self, rule: PropertyRule) -> PropertyRule:
        if self._rule_set_scope and not rule.rule_sets:
            rule.rule_sets = list(self._rule_set_scope)
        self._rules.append(rule)
        return rule

    def _create_rule(self, rule_type: type[PropertyRule], accessor: str | Callable[[T], Any], name: str | None) -> PropertyRule:
        if accessor is None:
            raise_error(null_argument("accessor", origin=type(self).__name__).error)
        if isinstance(accessor, str):
            member, func = accessor, attrgetter(accessor)
        elif callable(accessor):
            member, func = None, accessor
        else:
            raise_error(invalid_argument("accessor", "expected an attribute name or a callable",
                origin=type(self).__name__).error)
        rule = rule_type(func, name, member=member, container_type=self.model, configuration=self.configuration,
            cascade_mode_thunk=lambda: self.rule_level_cascade_mode)
        return self.add_rule(rule)

    def rule_for(self, accessor: str | Callable[[T], Any], name: str | None = None) -> RuleBuilder[T]:
        """Start a rule for an attribute name ("email", "address.postcode") or a callable with a name."""
        return RuleBuilder(self._create_rule(PropertyRule, accessor, name), self)

    def rule_for_each(self, accessor: str | Callable[[T], Any], name: str | None = None) -> RuleBuilder[T]:
        """Start a rule applied to every element of an iterable property."""
        return RuleBuilder(self._create_rule(CollectionPropertyRule, accessor, name), self)

    def capture_rules(self, action: Callable[[], None], *, detach: bool = False) -> list[PropertyRule]:
        """Rules declared while running action; detached rules are removed from the top level."""
        start = len(self._rules)
        action()
        captured = self._rules[start:]
        if detach: del self._rules[start:]
        return captured

    def rule_set(self, names: str | Iterable[str], action: Callable[[], None]) -> None:
        """Declare rules that only run when one of the named rule sets is requested."""
        previous, self._rule_set_scope = self._rule_set_scope, _split_rule_sets(names)
        try:
            action()
        finally:
            self._rule_set_scope = previous

    def when(self, predicate: Callable[[T], bool], action: Callable[[], None]) -> None:
        """Rules declared in action run only when predicate(instance) holds."""
        for rule in self.capture_rules(action):
            rule.apply_shared_condition(lambda ctx: bool(predicate(ctx.instance_to_validate)))

    def unless(self, predicate: Callable[[T], bool], action: Callable[[], None]) -> None:
        self.when(lambda instance: not predicate(instance), action)

    def when_async(self, predicate: Callable[[T], Awaitable[bool]], action: Callable[[], None]) -> None:
        async def _condition(ctx: ValidationContext) -> bool:
            return bool(await predicate(ctx.instance_to_validate))

        for rule in self.capture_rules(action):
            rule.apply_shared_async_condition(_condition)

    def unless_async(self, predicate: Callable[[T], Awaitable[bool]], action: Callable[[], None]) -> None:
        async def _negated(instance: T) -> bool:
            return not await predicate(instance)

        self.when_async(_negated, action)

    # ========================================================================
    # Execution
    # ========================================================================

    def _create_context(
        self,
        instance: T | ValidationContext,
        rule_sets: str | Iterable[str] | None,
        *,
        is_async: bool,
        cancellation: asyncio.Event | None = None,
    ) -> ValidationContext:
        if isinstance(instance, ValidationContext): return instance
        if instance is None:
            raise_error(null_argument("instance", origin=type(self).__name__).error)
        requested = _split_rule_sets(rule_sets)
        default = self.configuration.default_rule_set
        selector = RulesetValidatorSelector(requested, default) if requested else DefaultValidatorSelector(default)
        return ValidationContext(instance, selector=selector, is_async=is_async, cancellation=cancellation,
            message_formatter=self.configuration.message_formatter_factory())

    def _result(self, context: ValidationContext, *, is_async: bool) -> ValidationResult:
        rule_sets = getattr(context.selector, "rule_sets", None) or (self.configuration.default_rule_set,)
        result = ValidationResult(errors=list(context.failures), rule_sets_executed=tuple(rule_sets))
        log.debug("validation_completed", validator=type(self).__name__, failures=len(result.errors),
            is_async=is_async, nested=context.is_child_context)
        return result

    def _class_cascade_stops(self, context: ValidationContext, before: int, rule: PropertyRule) -> bool:
        if self.class_level_cascade_mode is CascadeMode.STOP and len(context.failures) > before:
            log.debug("class_cascade_stopped", validator=type(self).__name__, property=rule.property_name)
            return True
        return False

    def validate(self, instance: T | ValidationContext, *, rule_sets: str | Iterable[str] | None = None) -> ValidationResult:
        """Run every selected rule synchronously.

        Raises AsyncValidatorInvokedSynchronouslyError if a selected rule needs
        asynchronous execution.
        """
        context = self._create_context(instance, rule_sets, is_async=False)
        for rule in self._rules:
            before = len(context.failures)
            rule.validate(context)
            if self._class_cascade_stops(context, before, rule): break
        return self._result(context, is_async=False)

    async def validate_async(
        self,
        instance: T | ValidationContext,
        *,
        rule_sets: str | Iterable[str] | None = None,
        cancellation: asyncio.Event | None = None,
    ) -> ValidationResult:
        """Run every selected rule, awaiting async conditions and validators.

        Setting `cancellation` aborts the traversal with asyncio.CancelledError
        at the next rule, binding or nested validator.
        """
        context = self._create_context(instance, rule_sets, is_async=True, cancellation=cancellation)
        try:
            for rule in self._rules:
                context.throw_if_cancelled()
                before = len(context.failures)
                await rule.validate_async(context)
                if self._class_cascade_stops(context, before, rule): break
        except asyncio.CancelledError:
            log.debug("validation_cancelled", validator=type(self).__name__, failures=len(context.failures))
            raise
        return self._result(context, is_async=True)

    def validate_and_throw(self, instance: T, *, rule_sets: str | Iterable[str] | None = None,
                           sensitive_fields: frozenset[str] | None = None) -> ValidationResult:
        """validate(), raising ValidationError when any failure was recorded."""
        result = self.validate(instance, rule_sets=rule_sets)
        result.raise_if_invalid(sensitive_fields=sensitive_fields)
        return result

    async def validate_and_throw_async(self, instance: T, *, rule_sets: str | Iterable[str] | None = None,
                                       sensitive_fields: frozenset[str] | None = None,
                                       cancellation: asyncio.Event | None = None) -> ValidationResult:
        result = await self.validate_async(instance, rule_sets=rule_sets, cancellation=cancellation)
        result.raise_if_invalid(sensitive_fields=sensitive_fields)
        return result

    def try_validate(self, instance: T, *, rule_sets: str | Iterable[str] | None = None) -> Result[T, AppError]:
        """Ok(instance) when valid, Err(AppError) with the failures otherwise."""
        return self.validate(instance, rule_sets=rule_sets).to_result(instance, origin=type(self).__name__)

    def create_descriptor(self) -> ValidatorDescriptor:
        return ValidatorDescriptor(self._rules)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} rules={len(self._rules)}>"
