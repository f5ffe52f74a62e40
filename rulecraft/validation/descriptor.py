"""Read-only introspection of a validator's rules, keyed by member name.

Adapters (client-side rule generation, documentation) use this to find the
validators attached to a property and dispatch on their capabilities.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Sequence

from .enums import Capability

if TYPE_CHECKING:
    from .options import ValidatorBinding
    from .rule import PropertyRule
    from .validators.base import Validator


class ValidatorDescriptor:
    def __init__(self, rules: Sequence[PropertyRule]):
        self.rules = tuple(rules)

    def _all_rules(self) -> Iterator[PropertyRule]:
        stack = list(reversed(self.rules))
        while stack:
            rule = stack.pop()
            yield rule
            stack.extend(reversed(rule.dependent_rules))

    def get_name(self, property_name: str) -> str | None:
        """Display name of the first rule for property_name."""
        return next((r.get_display_name() for r in self.get_rules_for_member(property_name)), None)

    def get_members_with_validators(self) -> dict[str, list[Validator]]:
        members: dict[str, list[Validator]] = {}
        for rule in self._all_rules():
            members.setdefault(rule.property_name, []).extend(rule.validators)
        return members

    def get_rules_for_member(self, name: str) -> list[PropertyRule]:
        return [r for r in self._all_rules() if r.property_name == name]

    def get_validators_for_member(self, name: str) -> list[ValidatorBinding]:
        return [b for r in self.get_rules_for_member(name) for b in r.bindings]

    def get_validators_with_capability(self, name: str, capability: Capability) -> list[ValidatorBinding]:
        return [b for b in self.get_validators_for_member(name) if b.validator.has_capability(capability)]

    def get_unconditional_validators_for_member(self, name: str) -> list[ValidatorBinding]:
        """Bindings that always run: no rule-level or binding-level condition of either kind."""
        return [
            b for r in self.get_rules_for_member(name)
            if r.condition is None and r.async_condition is None
            for b in r.bindings
            if not b.options.has_condition and not b.options.has_async_condition
        ]
