"""Adaptor that runs a nested validator against a property value.

The nested run shares the caller's failure list and ambient data, extends the
property path, and inherits the execution mode of the outer call.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from rulecraft.core.errors import null_argument, raise_error

from ..enums import Capability
from ..selectors import RulesetValidatorSelector
from .base import Validator

if TYPE_CHECKING:
    from ..context import ValidationContext
    from ..execution import PropertyValidatorContext
    from ..validator import AbstractValidator

ValidatorProvider = Callable[["PropertyValidatorContext"], "AbstractValidator | None"]


class ChildValidatorAdaptor(Validator):
    name = "ChildValidatorAdaptor"
    capabilities = frozenset({Capability.CHILD_VALIDATOR})
    supports_sync = True
    supports_async = True

    def __init__(
        self,
        validator: AbstractValidator | None = None,
        *,
        provider: ValidatorProvider | None = None,
        rule_sets: Iterable[str] = (),
    ):
        if validator is None and provider is None:
            raise_error(null_argument("validator", origin=self.name).error)
        self.validator = validator
        self.validator_provider = provider
        self.rule_sets = tuple(rule_sets)

    def get_validator(self, context: PropertyValidatorContext) -> AbstractValidator | None:
        return self.validator_provider(context) if self.validator_provider is not None else self.validator

    def create_child_context(self, context: PropertyValidatorContext, validator: AbstractValidator) -> ValidationContext:
        parent = context.parent_context
        selector = (RulesetValidatorSelector(self.rule_sets, validator.configuration.default_rule_set)
            if self.rule_sets else None)
        child = parent.clone_for_child_validator(context.property_value, preserve_parent_context=True, selector=selector)
        # Collection element contexts already end with "name[index]"
        if not parent.is_child_collection_context:
            child.property_chain.add(context.rule.property_name)
        return child

    def validate(self, context: PropertyValidatorContext) -> None:
        if context.property_value is None: return
        validator = self.get_validator(context)
        if validator is None: return
        child = self.create_child_context(context, validator)
        with context.parent_context.propagate_collection_index(context.message_formatter):
            validator.validate(child)

    async def validate_async(self, context: PropertyValidatorContext) -> None:
        if context.property_value is None: return
        validator = self.get_validator(context)
        if validator is None: return
        child = self.create_child_context(context, validator)
        with context.parent_context.propagate_collection_index(context.message_formatter):
            await validator.validate_async(child)
