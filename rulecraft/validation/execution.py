"""Execution context handed to a validator for one property of one instance.

Features:
- Lazy, memoized property value (the accessor runs at most once per rule run)
- Failure construction with resolved message, code, severity and state
- Escape hatches for custom validators: add_failure(message | failure)
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .context import COLLECTION_INDEX_KEY, ValidationContext
from .failure import ValidationFailure
from .formatter import COLLECTION_INDEX, MessageFormatter

if TYPE_CHECKING:
    from .options import PropertyValidatorOptions, ValidatorBinding
    from .rule import PropertyRule
    from .validators.base import Validator

_UNSET = object()


class PropertyValidatorContext:
    def __init__(
        self,
        parent_context: ValidationContext,
        rule: PropertyRule,
        property_name: str | None,
        *,
        accessor: Callable[[], Any] | None = None,
        property_value: Any = _UNSET,
        collection_index: int | None = None,
    ):
        self.parent_context = parent_context
        self.rule = rule
        self.property_name = property_name
        self.collection_index = collection_index
        self.binding: ValidatorBinding | None = None
        self._accessor = accessor
        self._property_value = property_value

    def initialize(self, binding: ValidatorBinding) -> None:
        """Point the context at the next binding and clear placeholders from the previous one."""
        self.binding = binding
        self.message_formatter.reset()
        if self.collection_index is not None:
            self.message_formatter.append_argument(COLLECTION_INDEX, self.collection_index)

    @property
    def instance_to_validate(self) -> Any: return self.parent_context.instance_to_validate

    @property
    def property_value(self) -> Any:
        if self._property_value is _UNSET:
            self._property_value = self._accessor() if self._accessor is not None else None
        return self._property_value

    @property
    def raw_property_name(self) -> str | None: return self.rule.property_name

    @property
    def display_name(self) -> str | None: return self.rule.get_display_name(self.parent_context)

    @property
    def message_formatter(self) -> MessageFormatter: return self.parent_context.message_formatter

    @property
    def options(self) -> PropertyValidatorOptions | None:
        return self.binding.options if self.binding is not None else None

    @property
    def validator(self) -> Validator | None:
        return self.binding.validator if self.binding is not None else None

    def add_failure(self, failure: ValidationFailure | str | None = None, /, *, property_name: str | None = None) -> None:
        """Record a failure.

        add_failure()                      -> failure built from the binding's options
        add_failure("msg")                 -> custom message for this property
        add_failure("msg", property_name=) -> custom message for another property
        add_failure(ValidationFailure(...))-> pre-built failure appended as is
        """
        self._prepare_message_formatter()
        if isinstance(failure, ValidationFailure):
            self.parent_context.failures.append(failure)
        elif isinstance(failure, str):
            self.parent_context.failures.append(self._create_custom_failure(failure, property_name))
        else:
            self.parent_context.failures.append(self._create_failure())

    def _prepare_message_formatter(self) -> None:
        formatter = self.message_formatter
        formatter.append_property_name(self.display_name)
        formatter.append_property_value(self.property_value)
        ambient = self.parent_context.root_context_data
        if COLLECTION_INDEX not in formatter.placeholder_values and COLLECTION_INDEX_KEY in ambient:
            formatter.append_argument(COLLECTION_INDEX, ambient[COLLECTION_INDEX_KEY])

    def _create_failure(self) -> ValidationFailure:
        options = self.options
        if self.rule.message_builder is not None:
            message = self.rule.message_builder(MessageBuilderContext(self))
        else:
            message = options.get_error_message(self)
        failure = ValidationFailure(
            property_name=self.property_name,
            error_message=message,
            attempted_value=self.property_value,
            error_code=options.resolve_error_code(),
            severity=options.resolve_severity(self),
            custom_state=options.resolve_custom_state(self),
            placeholder_values=dict(self.message_formatter.placeholder_values),
        )
        if options.on_failure is not None:
            options.on_failure(self.instance_to_validate, self, message)
        return failure

    def _create_custom_failure(self, message: str, property_name: str | None) -> ValidationFailure:
        other_property = property_name is not None
        return ValidationFailure(
            property_name=property_name if other_property else self.property_name,
            error_message=self.message_formatter.build_message(message),
            attempted_value=None if other_property else self.property_value,
            error_code=self.options.resolve_error_code() if self.options is not None else None,
            placeholder_values=dict(self.message_formatter.placeholder_values),
        )

    def __repr__(self) -> str:
        return f"<PropertyValidatorContext property={self.property_name!r} validator={self.validator!r}>"


class MessageBuilderContext:
    """Read-only view passed to a rule's custom message builder."""

    __slots__ = ("_inner",)

    def __init__(self, inner: PropertyValidatorContext):
        self._inner = inner

    @property
    def property_name(self) -> str | None: return self._inner.property_name

    @property
    def display_name(self) -> str | None: return self._inner.display_name

    @property
    def message_formatter(self) -> MessageFormatter: return self._inner.message_formatter

    @property
    def instance_to_validate(self) -> Any: return self._inner.instance_to_validate

    @property
    def property_value(self) -> Any: return self._inner.property_value

    @property
    def parent_context(self) -> ValidationContext: return self._inner.parent_context

    @property
    def rule(self) -> PropertyRule: return self._inner.rule

    @property
    def options(self) -> PropertyValidatorOptions: return self._inner.options

    @property
    def validator(self) -> Validator: return self._inner.validator

    def get_default_message(self) -> str:
        """The message the binding would produce without a custom builder."""
        return self._inner.options.get_error_message(self._inner)
