"""Default English message templates keyed by validator message key."""
from __future__ import annotations

from typing import Mapping

ENGLISH_TEMPLATES = {
    "LengthValidator": "'{PropertyName}' must be between {MinLength} and {MaxLength} characters. You entered {TotalLength} characters.",
    "ExactLengthValidator": "'{PropertyName}' must be {MaxLength} characters in length. You entered {TotalLength} characters.",
    "MaximumLengthValidator": "The length of '{PropertyName}' must be {MaxLength} characters or fewer. You entered {TotalLength} characters.",
    "MinimumLengthValidator": "The length of '{PropertyName}' must be at least {MinLength} characters. You entered {TotalLength} characters.",
    "PredicateValidator": "The specified condition was not met for '{PropertyName}'.",
    "AsyncPredicateValidator": "The specified condition was not met for '{PropertyName}'.",
    "EnumValidator": "'{PropertyName}' has a range of values which does not include '{PropertyValue}'.",
    "NotNullValidator": "'{PropertyName}' must not be empty.",
    "NotEmptyValidator": "'{PropertyName}' must not be empty.",
    # Variants without the property name, for adapters that render it elsewhere
    "Length_Simple": "The length must be between {MinLength} and {MaxLength} characters. You entered {TotalLength} characters.",
    "ExactLength_Simple": "The length must be {MaxLength} characters. You entered {TotalLength} characters.",
}

NO_DEFAULT_MESSAGE = "No default error message has been specified"


class LanguageManager:
    """Template source for default messages.

    Overrides win over the built-in English templates. With `enabled=False`
    every lookup misses, so callers fall back to explicit messages only.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None, *, enabled: bool = True):
        self.enabled = enabled
        self._overrides: dict[str, str] = dict(overrides or {})

    def add_translation(self, key: str, template: str) -> None:
        self._overrides[key] = template

    def clear(self) -> None:
        self._overrides.clear()

    def get_string(self, key: str | None) -> str | None:
        if not self.enabled or not key: return None
        return self._overrides.get(key) or ENGLISH_TEMPLATES.get(key)
