"""Declarative Rule Engine

Rules attach ordered validators to property accessors, optionally guarded by
sync/async conditions, grouped into rule sets and chained as dependent rules.
Running a validator produces an ordered list of structured failures.

Key Features:
- PropertyRule with insertion-ordered validator bindings
- Per-binding options: conditions, messages, codes, severity, state, callbacks
- Cascade control per rule (CONTINUE / STOP) and per validator class
- Sync and async execution with identical ordering and results
- Nested validators sharing one failure list and extending the property path
- Collection rules with CollectionIndex placeholders
- Capability tags for adapter dispatch, plus a ValidatorDescriptor

Usage:
    from rulecraft.validation import AbstractValidator, CascadeMode

    class UserValidator(AbstractValidator[User]):
        def __init__(self):
            super().__init__()
            self.rule_for("username").cascade(CascadeMode.STOP).not_empty().length(3, 20)
            self.rule_for("email").must_async(email_is_unique).when(lambda u: u.is_new)

    result = await UserValidator().validate_async(user)
    if not result.is_valid:
        ...
"""
from .builder import RuleBuilder
from .configuration import ValidatorConfiguration, humanize
from .context import PropertyChain, ValidationContext
from .descriptor import ValidatorDescriptor
from .enums import ApplyConditionTo, Capability, CascadeMode, Severity
from .execution import MessageBuilderContext, PropertyValidatorContext
from .failure import ValidationError, ValidationFailure, ValidationResult
from .formatter import MessageFormatter
from .languages import LanguageManager
from .options import PropertyValidatorOptions, ValidatorBinding
from .rule import CollectionPropertyRule, PropertyRule
from .selectors import DefaultValidatorSelector, RulesetValidatorSelector
from .validator import AbstractValidator
from .validators import (
    AsyncPredicateValidator,
    AsyncPropertyValidator,
    ChildValidatorAdaptor,
    CustomValidator,
    ExactLengthValidator,
    LengthValidator,
    MaximumLengthValidator,
    MinimumLengthValidator,
    NotEmptyValidator,
    NotNullValidator,
    PredicateValidator,
    PropertyValidator,
    StringEnumValidator,
    Validator,
)

__all__ = [
    # Engine
    "AbstractValidator",
    "RuleBuilder",
    "PropertyRule",
    "CollectionPropertyRule",
    "ValidatorBinding",
    "PropertyValidatorOptions",
    "ValidationContext",
    "PropertyValidatorContext",
    "MessageBuilderContext",
    "PropertyChain",
    "DefaultValidatorSelector",
    "RulesetValidatorSelector",
    "ValidatorDescriptor",
    "ValidatorConfiguration",
    "humanize",
    # Results
    "ValidationFailure",
    "ValidationResult",
    "ValidationError",
    # Messages
    "MessageFormatter",
    "LanguageManager",
    # Enums
    "ApplyConditionTo",
    "Capability",
    "CascadeMode",
    "Severity",
    # Validators
    "Validator",
    "PropertyValidator",
    "AsyncPropertyValidator",
    "ChildValidatorAdaptor",
    "CustomValidator",
    "LengthValidator",
    "ExactLengthValidator",
    "MaximumLengthValidator",
    "MinimumLengthValidator",
    "PredicateValidator",
    "AsyncPredicateValidator",
    "NotNullValidator",
    "NotEmptyValidator",
    "StringEnumValidator",
]
