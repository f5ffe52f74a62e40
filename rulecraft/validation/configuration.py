"""Per-validator configuration: resolvers, templates and cascade defaults.

Each AbstractValidator owns one ValidatorConfiguration, built from
Settings unless one is injected. Nothing here is process-global.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from rulecraft.core.config import Settings, get_settings

from .enums import CascadeMode
from .formatter import MessageFormatter
from .languages import LanguageManager

if TYPE_CHECKING:
    from .options import PropertyValidatorOptions
    from .validators.base import Validator

NameResolver = Callable[[Any, str | None], str | None]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def humanize(name: str | None) -> str | None:
    """Words for the last path segment: first_name, FirstName and customer.first_name become First Name."""
    if not name: return name
    words = [w for part in name.rsplit(".", 1)[-1].replace("-", "_").split("_") for w in _CAMEL_BOUNDARY.split(part) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def default_property_name_resolver(container_type: Any, member: str | None) -> str | None:
    return member


def default_display_name_resolver(container_type: Any, member: str | None) -> str | None:
    return None


def default_error_code_resolver(validator: Validator, options: PropertyValidatorOptions) -> str:
    return validator.name


@dataclass(slots=True)
class ValidatorConfiguration:
    """Collaborators injected into rules at construction time."""
    property_name_resolver: NameResolver = default_property_name_resolver
    display_name_resolver: NameResolver = default_display_name_resolver
    error_code_resolver: Callable[[Validator, PropertyValidatorOptions], str] = default_error_code_resolver
    language_manager: LanguageManager = field(default_factory=LanguageManager)
    message_formatter_factory: Callable[[], MessageFormatter] = MessageFormatter
    default_rule_level_cascade_mode: CascadeMode = CascadeMode.CONTINUE
    default_class_level_cascade_mode: CascadeMode = CascadeMode.CONTINUE
    default_rule_set: str = "default"

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> ValidatorConfiguration:
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "default_rule_level_cascade_mode": CascadeMode(settings.DEFAULT_CASCADE_MODE),
            "default_class_level_cascade_mode": CascadeMode(settings.CLASS_CASCADE_MODE),
            "default_rule_set": settings.DEFAULT_RULESET,
            "language_manager": LanguageManager(enabled=settings.LANGUAGE_ENABLED),
        }
        values.update(overrides)
        return cls(**values)
