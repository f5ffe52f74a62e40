"""Enumerations shared by rules, validators and options."""
from __future__ import annotations

from enum import Enum


class CascadeMode(str, Enum):
    """Whether a rule keeps running validators after one of them fails."""
    CONTINUE = "continue"
    STOP = "stop"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ApplyConditionTo(str, Enum):
    """Which bindings of a rule a newly applied condition guards."""
    ALL_VALIDATORS = "all_validators"
    CURRENT_VALIDATOR = "current_validator"


class Capability(str, Enum):
    """Tags a validator declares so adapters can dispatch without type checks."""
    LENGTH = "length"
    EXACT_LENGTH = "exact_length"
    MINIMUM_LENGTH = "minimum_length"
    MAXIMUM_LENGTH = "maximum_length"
    PREDICATE = "predicate"
    STRING_ENUM = "string_enum"
    REQUIRED = "required"
    CHILD_VALIDATOR = "child_validator"
    CUSTOM = "custom"
