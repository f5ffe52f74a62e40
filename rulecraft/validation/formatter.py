"""Placeholder substitution for error message templates.

Templates use `{Name}` or `{Name:format_spec}`. Unknown placeholders are left
untouched so a template can be rendered in stages.
"""
from __future__ import annotations

import re
from typing import Any

PROPERTY_NAME = "PropertyName"
PROPERTY_VALUE = "PropertyValue"
COLLECTION_INDEX = "CollectionIndex"

_PLACEHOLDER = re.compile(r"\{([^{}:]+)(?::([^{}]*))?\}")


class MessageFormatter:
    """Collects placeholder values and renders templates with them."""

    __slots__ = ("_placeholder_values",)

    def __init__(self) -> None:
        self._placeholder_values: dict[str, Any] = {}

    @property
    def placeholder_values(self) -> dict[str, Any]:
        return self._placeholder_values

    def append_argument(self, name: str, value: Any) -> MessageFormatter:
        self._placeholder_values[name] = value
        return self

    def append_property_name(self, name: str | None) -> MessageFormatter:
        return self.append_argument(PROPERTY_NAME, name)

    def append_property_value(self, value: Any) -> MessageFormatter:
        return self.append_argument(PROPERTY_VALUE, value)

    def reset(self) -> None:
        self._placeholder_values.clear()

    def build_message(self, template: str) -> str:
        """Substitute every known placeholder in the template."""

        def _replace(match: re.Match) -> str:
            key, spec = match.group(1), match.group(2)
            if key not in self._placeholder_values:
                return match.group(0)
            value = self._placeholder_values[key]
            if value is None:
                return ""
            if spec:
                return format(value, spec)
            return str(value)

        return _PLACEHOLDER.sub(_replace, template)
