"""Helpers for exercising single rules and validators."""
from __future__ import annotations

from operator import attrgetter
from typing import Any

from rulecraft.validation import PropertyRule, ValidationContext, ValidatorConfiguration
from rulecraft.validation.validators import Validator


def make_rule(name: str = "name", *validators: Validator, configuration: ValidatorConfiguration | None = None) -> PropertyRule:
    rule = PropertyRule(attrgetter(name), name, configuration=configuration or ValidatorConfiguration())
    for validator in validators:
        rule.add_validator(validator)
    return rule


def run_rule(rule: PropertyRule, instance: Any) -> list:
    context = ValidationContext(instance)
    rule.validate(context)
    return context.failures


async def run_rule_async(rule: PropertyRule, instance: Any) -> list:
    context = ValidationContext(instance, is_async=True)
    await rule.validate_async(context)
    return context.failures
