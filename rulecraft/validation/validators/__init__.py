from .base import AsyncPropertyValidator, PropertyValidator, Validator
from .child import ChildValidatorAdaptor
from .custom import CustomValidator
from .length import ExactLengthValidator, LengthValidator, MaximumLengthValidator, MinimumLengthValidator
from .predicate import AsyncPredicateValidator, PredicateValidator
from .required import NotEmptyValidator, NotNullValidator
from .string_enum import StringEnumValidator

__all__ = [
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
