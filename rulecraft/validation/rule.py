"""Property rules: ordered validator bindings for one property.

Features:
- Insertion-ordered bindings; the current validator is always the last one
- Binding-level and rule-level (shared) conditions, sync and async
- Cascade policy resolved lazily at execution time
- Dependent rules gated only by the parent's rule-level condition
- Collection rules validating each element under "name[index]"
- Identical traversal order in sync and async execution
"""
from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, Sequence, TypeVar

from rulecraft.core.errors import (
    async_invoked_synchronously, no_current_validator, property_name_unresolved, raise_error,
)
from rulecraft.core.logging import rules_logger

from .configuration import ValidatorConfiguration, humanize
from .context import ValidationContext
from .enums import ApplyConditionTo, CascadeMode
from .execution import MessageBuilderContext, PropertyValidatorContext
from .failure import ValidationFailure
from .options import AsyncCondition, Condition, PropertyValidatorOptions, ValidatorBinding, and_async_condition, and_condition
from .validators.base import Validator

T = TypeVar("T")

log = rules_logger()

DisplayNameFactory = Callable[[ValidationContext | None], str | None]


class PropertyRule(Generic[T]):
    """Validators attached to one property accessor of T."""

    def __init__(
        self,
        property_func: Callable[[T], Any],
        property_name: str | None = None,
        *,
        member: str | None = None,
        container_type: type | None = None,
        configuration: ValidatorConfiguration | None = None,
        cascade_mode_thunk: Callable[[], CascadeMode] | None = None,
    ):
        self.configuration = configuration or ValidatorConfiguration.from_settings()
        self.property_func = property_func
        self.member = member
        self.container_type = container_type
        resolved = property_name or self.configuration.property_name_resolver(container_type, member)
        if not resolved:
            raise_error(property_name_unresolved(origin=type(self).__name__).error)
        self._property_name: str = resolved
        self._derived_display_name = self._derive_display_name()
        self._display_name: str | None = None
        self.display_name_factory: DisplayNameFactory | None = None
        self._bindings: list[ValidatorBinding] = []
        self.rule_sets: list[str] = []
        self.condition: Condition | None = None
        self.async_condition: AsyncCondition | None = None
        self.dependent_rules: list[PropertyRule] = []
        self.on_failure: Callable[[T, list[ValidationFailure]], None] | None = None
        self.message_builder: Callable[[MessageBuilderContext], str] | None = None
        self._cascade_mode_thunk = cascade_mode_thunk or (lambda: self.configuration.default_rule_level_cascade_mode)

    # ------------------------------------------------------------------ naming

    def _derive_display_name(self) -> str | None:
        return (self.configuration.display_name_resolver(self.container_type, self.member)
            or humanize(self._property_name))

    @property
    def property_name(self) -> str: return self._property_name

    @property_name.setter
    def property_name(self, value: str) -> None:
        self._property_name = value
        self._derived_display_name = humanize(value)

    def set_display_name(self, name: str | DisplayNameFactory) -> None:
        if callable(name): self.display_name_factory, self._display_name = name, None
        else: self._display_name, self.display_name_factory = name, None

    def get_display_name(self, context: ValidationContext | None = None) -> str | None:
        """Factory result (needs a context), else static override, else derived name."""
        if self.display_name_factory is not None and context is not None:
            if (name := self.display_name_factory(context)) is not None:
                return name
        return self._display_name or self._derived_display_name

    # ------------------------------------------------------------------ bindings

    @property
    def bindings(self) -> tuple[ValidatorBinding, ...]: return tuple(self._bindings)

    @property
    def validators(self) -> tuple[Validator, ...]: return tuple(b.validator for b in self._bindings)

    @property
    def current_validator(self) -> ValidatorBinding | None:
        return self._bindings[-1] if self._bindings else None

    def add_validator(self, validator: Validator, options: PropertyValidatorOptions | None = None) -> ValidatorBinding:
        options = options or PropertyValidatorOptions()
        options.parent_rule, options.validator = self, validator
        binding = ValidatorBinding(validator, options)
        self._bindings.append(binding)
        return binding

    # ------------------------------------------------------------------ conditions

    def apply_condition(self, predicate: Condition, apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        """Guard existing bindings; bindings added later are not affected."""
        if apply_to is ApplyConditionTo.CURRENT_VALIDATOR:
            self._require_current().options.apply_condition(predicate)
            return
        for binding in self._bindings:
            binding.options.apply_condition(predicate)
        for dependent in self.dependent_rules:
            dependent.apply_condition(predicate, apply_to)

    def apply_async_condition(self, predicate: AsyncCondition,
                              apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        if apply_to is ApplyConditionTo.CURRENT_VALIDATOR:
            self._require_current().options.apply_async_condition(predicate)
            return
        for binding in self._bindings:
            binding.options.apply_async_condition(predicate)
        for dependent in self.dependent_rules:
            dependent.apply_async_condition(predicate, apply_to)

    def apply_shared_condition(self, predicate: Condition) -> None:
        self.condition = and_condition(predicate, self.condition)

    def apply_shared_async_condition(self, predicate: AsyncCondition) -> None:
        self.async_condition = and_async_condition(predicate, self.async_condition)

    def _require_current(self) -> ValidatorBinding:
        if (binding := self.current_validator) is None:
            raise_error(no_current_validator(origin=type(self).__name__).error)
        return binding

    # ------------------------------------------------------------------ structure

    def add_dependent_rules(self, rules: Sequence[PropertyRule]) -> None:
        """Dependent rules without rule sets of their own inherit this rule's."""
        for rule in rules:
            if self.rule_sets and not rule.rule_sets:
                rule.rule_sets = list(self.rule_sets)
            self.dependent_rules.append(rule)

    @property
    def cascade_mode(self) -> CascadeMode: return self._cascade_mode_thunk()

    @cascade_mode.setter
    def cascade_mode(self, value: CascadeMode) -> None:
        self._cascade_mode_thunk = lambda: value

    # ------------------------------------------------------------------ execution

    def _can_execute(self, context: ValidationContext) -> bool:
        path = context.property_chain.build_property_name(self._property_name)
        return context.selector.can_execute(self, path, context)

    def _execution_contexts(self, context: ValidationContext) -> Iterator[PropertyValidatorContext]:
        path = context.property_chain.build_property_name(self._property_name)
        yield PropertyValidatorContext(context, self, path,
            accessor=lambda: self.property_func(context.instance_to_validate))

    def _stop_after(self, context: ValidationContext, before: int, binding: ValidatorBinding, cascade: CascadeMode) -> bool:
        if cascade is CascadeMode.STOP and len(context.failures) > before:
            log.debug("rule_cascade_stopped", property=self._property_name, validator=binding.validator.name)
            return True
        return False

    def _notify_failures(self, context: ValidationContext, before: int) -> None:
        if self.on_failure is not None and len(context.failures) > before:
            self.on_failure(context.instance_to_validate, context.failures[before:])

    def validate(self, context: ValidationContext) -> None:
        """Run the rule synchronously, appending failures to context.failures."""
        if not self._can_execute(context): return
        if self.async_condition is not None:
            log.warning("async_validator_invoked_synchronously", property=self._property_name, source="rule_condition")
            raise_error(async_invoked_synchronously("rule condition", self._property_name, origin=type(self).__name__).error)
        if self.condition is not None and not self.condition(context): return

        before = len(context.failures)
        cascade = self.cascade_mode
        for execution in self._execution_contexts(context):
            self._run_bindings(execution, cascade)
        self._notify_failures(context, before)

        for dependent in self.dependent_rules:
            dependent.validate(context)

    def _run_bindings(self, execution: PropertyValidatorContext, cascade: CascadeMode) -> None:
        context = execution.parent_context
        for binding in self._bindings:
            options = binding.options
            if options.should_validate_asynchronously(context):
                log.warning("async_validator_invoked_synchronously", property=execution.property_name,
                    validator=binding.validator.name)
                raise_error(async_invoked_synchronously(binding.validator.name, execution.property_name,
                    origin=type(self).__name__).error)
            if not options.invoke_condition(context): continue

            before = len(context.failures)
            execution.initialize(binding)
            binding.validator.validate(execution)
            if self._stop_after(context, before, binding, cascade): break

    async def validate_async(self, context: ValidationContext) -> None:
        """Async counterpart of validate(); same order, same failures."""
        context.throw_if_cancelled()
        if not self._can_execute(context): return
        if self.condition is not None and not self.condition(context): return
        if self.async_condition is not None and not await self.async_condition(context): return

        before = len(context.failures)
        cascade = self.cascade_mode
        for execution in self._execution_contexts(context):
            await self._run_bindings_async(execution, cascade)
        self._notify_failures(context, before)

        for dependent in self.dependent_rules:
            await dependent.validate_async(context)

    async def _run_bindings_async(self, execution: PropertyValidatorContext, cascade: CascadeMode) -> None:
        context = execution.parent_context
        for binding in self._bindings:
            context.throw_if_cancelled()
            options = binding.options
            if not options.invoke_condition(context): continue
            if not await options.invoke_async_condition(context): continue

            before = len(context.failures)
            execution.initialize(binding)
            if options.should_validate_asynchronously(context):
                await binding.validator.validate_async(execution)
            else:
                binding.validator.validate(execution)
            if self._stop_after(context, before, binding, cascade): break

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._property_name!r} validators={[v.name for v in self.validators]}>"


class CollectionPropertyRule(PropertyRule[T]):
    """Applies its bindings to every element of an iterable property."""

    def _execution_contexts(self, context: ValidationContext) -> Iterator[PropertyValidatorContext]:
        collection = self.property_func(context.instance_to_validate)
        if collection is None: return
        for index, element in enumerate(collection):
            element_context = context.clone_for_child_collection_validator(
                context.instance_to_validate, preserve_parent_context=True)
            element_context.property_chain.add(self._property_name)
            element_context.property_chain.add_indexer(index)
            yield PropertyValidatorContext(element_context, self, str(element_context.property_chain),
                property_value=element, collection_index=index)
