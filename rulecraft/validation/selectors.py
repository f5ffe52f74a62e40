"""Rule-set selectors: decide which rules run for a given call."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from .context import ValidationContext
    from .rule import PropertyRule

DEFAULT_RULESET = "default"
WILDCARD_RULESET = "*"


class ValidatorSelector(Protocol):
    def can_execute(self, rule: PropertyRule, property_path: str | None, context: ValidationContext) -> bool: ...


class DefaultValidatorSelector:
    """Runs rules without rule-set membership plus members of the default rule set."""

    __slots__ = ("default_rule_set",)

    def __init__(self, default_rule_set: str = DEFAULT_RULESET):
        self.default_rule_set = default_rule_set.casefold()

    def can_execute(self, rule: PropertyRule, property_path: str | None, context: ValidationContext) -> bool:
        return not rule.rule_sets or any(r.casefold() == self.default_rule_set for r in rule.rule_sets)


class RulesetValidatorSelector:
    """Runs rules belonging to any of the requested rule sets (case-insensitive).

    `"*"` selects every rule; the default rule set name also selects rules
    that belong to no rule set.
    """

    __slots__ = ("rule_sets", "_requested", "default_rule_set")

    def __init__(self, rule_sets: Iterable[str], default_rule_set: str = DEFAULT_RULESET):
        self.rule_sets = tuple(rule_sets)
        self._requested = frozenset(r.casefold() for r in self.rule_sets)
        self.default_rule_set = default_rule_set.casefold()

    def can_execute(self, rule: PropertyRule, property_path: str | None, context: ValidationContext) -> bool:
        if WILDCARD_RULESET in self._requested: return True
        if not rule.rule_sets:
            return not self._requested or self.default_rule_set in self._requested
        return any(r.casefold() in self._requested for r in rule.rule_sets)
