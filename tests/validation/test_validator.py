"""Tests for AbstractValidator, the fluent builder and the descriptor."""

from __future__ import annotations

import pytest

from rulecraft.core.errors import Err, ErrorCode, Ok, RuleConfigurationError
from rulecraft.validation import (
    AbstractValidator,
    ApplyConditionTo,
    Capability,
    CascadeMode,
    Severity,
    ValidationError,
    ValidatorConfiguration,
)
from tests.models import Color, Customer


class _Validator(AbstractValidator[Customer]):
    """Validator whose rules are declared by the test."""

    model = Customer

    def __init__(self, declare=None):
        super().__init__(ValidatorConfiguration())
        if declare is not None:
            declare(self)


class TestRuleDeclaration:
    """Test rule_for and friends."""

    def test_rule_for_attribute_name(self):
        """A string accessor names the rule after the attribute."""
        validator = _Validator(lambda v: v.rule_for("first_name").length(2, 5))

        (rule,) = validator.rules
        assert rule.property_name == "first_name"
        assert rule.get_display_name() == "First Name"

    def test_rule_for_callable_requires_name(self):
        """Callables need an explicit name."""
        with pytest.raises(RuleConfigurationError):
            _Validator(lambda v: v.rule_for(lambda c: c.name))

        validator = _Validator(lambda v: v.rule_for(lambda c: c.name.strip(), "name").length(2, 5))
        assert validator.validate(Customer(name="  a  ")).errors[0].attempted_value == "a"

    def test_dotted_accessor(self):
        """Dotted attribute names reach nested attributes."""
        validator = _Validator(lambda v: v.rule_for("address.postcode").length(5, 8))

        from tests.models import Address
        (failure,) = validator.validate(Customer(address=Address(postcode="1"))).errors
        assert failure.property_name == "address.postcode"

    def test_condition_methods_need_a_validator(self):
        """Options cannot be set before a validator is attached."""
        with pytest.raises(RuleConfigurationError):
            _Validator(lambda v: v.rule_for("name").with_message("x"))

    def test_none_instance_rejected(self):
        """Validating None is a setup error."""
        with pytest.raises(RuleConfigurationError):
            _Validator().validate(None)


class TestBuilderOptions:
    """Test options set through the builder."""

    def test_message_code_severity_state(self):
        """Builder options reach the failure."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5)
            .with_message(lambda c: f"{c.email}: {{PropertyName}} invalid")
            .with_error_code("NAME_LEN")
            .with_severity(Severity.WARNING)
            .with_state(lambda c: c.email))

        (failure,) = validator.validate(Customer(name="a", email="a@b")).errors

        assert failure.error_message == "a@b: Name invalid"
        assert failure.error_code == "NAME_LEN"
        assert failure.severity is Severity.WARNING
        assert failure.custom_state == "a@b"

    def test_with_name_and_override_property_name(self):
        """with_name changes messages; override_property_name changes the path."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5)
            .with_name("Full name").override_property_name("full_name"))

        (failure,) = validator.validate(Customer(name="a")).errors

        assert failure.property_name == "full_name"
        assert failure.error_message.startswith("'Full name' must be")

    def test_when_current_validator(self):
        """when(..., CURRENT_VALIDATOR) guards only the last validator."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5).must(str.isupper)
            .when(lambda c: c.active, ApplyConditionTo.CURRENT_VALIDATOR))

        result = validator.validate(Customer(name="a", active=False))

        assert [f.error_code for f in result.errors] == ["LengthValidator"]

    def test_unless(self):
        """unless negates the predicate."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5).unless(lambda c: c.active))

        assert validator.validate(Customer(name="a", active=True)).is_valid
        assert not validator.validate(Customer(name="a", active=False)).is_valid

    def test_is_enum_name_and_not_null(self):
        """Enum-name and not-null checks are available on the builder."""
        validator = _Validator(lambda v: v.rule_for("color").not_null().is_enum_name(Color, case_sensitive=False))

        assert validator.validate(Customer(color="red")).is_valid
        assert [f.error_code for f in validator.validate(Customer(color=None)).errors] == ["NotNullValidator"]

    def test_binding_and_rule_callbacks(self):
        """on_failure fires per binding, on_any_failure once per rule run."""
        bindings, rules = [], []
        validator = _Validator(lambda v: v.rule_for("name")
            .length(2, 5).on_failure(lambda c, ctx, message: bindings.append(message))
            .must(str.isupper)
            .on_any_failure(lambda c, failures: rules.append(len(failures))))

        validator.validate(Customer(name="a"))

        assert len(bindings) == 1
        assert rules == [2]

    def test_configure_exposes_rule(self):
        """configure hands the underlying rule to a callback."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5)
            .configure(lambda rule: setattr(rule, "message_builder", lambda mb: "built")))

        assert validator.validate(Customer(name="a")).errors[0].error_message == "built"


class TestCascadeModes:
    """Test rule-level and class-level cascade on the validator."""

    def test_rule_cascade_on_builder(self):
        """cascade(STOP) stops at the first failure of that rule."""
        validator = _Validator(lambda v: v.rule_for("name").cascade(CascadeMode.STOP).length(2, 5).must(str.isupper))

        assert len(validator.validate(Customer(name="a")).errors) == 1

    def test_validator_default_read_lazily(self):
        """Changing rule_level_cascade_mode after declaration affects existing rules."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5).must(str.isupper))
        validator.rule_level_cascade_mode = CascadeMode.STOP

        assert len(validator.validate(Customer(name="a")).errors) == 1

    def test_class_level_stop(self):
        """Class-level STOP skips rules after the first failing rule."""
        def declare(v):
            v.rule_for("name").length(2, 5)
            v.rule_for("email").not_null()

        validator = _Validator(declare)
        validator.class_level_cascade_mode = CascadeMode.STOP

        assert [f.property_name for f in validator.validate(Customer(name="a")).errors] == ["name"]


class TestRuleSetsAndGroups:
    """Test rule sets, when groups and dependent rules."""

    @staticmethod
    def _declare(v):
        v.rule_for("name").not_null()
        v.rule_set("admin, audit", lambda: v.rule_for("email").not_null())
        v.rule_set("billing", lambda: v.rule_for("color").not_null())

    def test_default_selection(self):
        """Without rule sets only rules outside any rule set run."""
        result = _Validator(self._declare).validate(Customer())

        assert [f.property_name for f in result.errors] == ["name"]
        assert result.rule_sets_executed == ("default",)

    def test_named_selection(self):
        """Requesting a rule set runs only its members; names are case-insensitive."""
        result = _Validator(self._declare).validate(Customer(), rule_sets=["AUDIT"])

        assert [f.property_name for f in result.errors] == ["email"]

    def test_default_plus_named(self):
        """'default' adds rules without membership."""
        result = _Validator(self._declare).validate(Customer(), rule_sets="default,billing")

        assert [f.property_name for f in result.errors] == ["name", "color"]

    def test_wildcard(self):
        """'*' runs every rule."""
        assert len(_Validator(self._declare).validate(Customer(), rule_sets="*").errors) == 3

    def test_when_group(self):
        """Rules declared in a when group share its condition."""
        def declare(v):
            v.when(lambda c: c.active, lambda: v.rule_for("name").not_null())
            v.rule_for("email").not_null()

        validator = _Validator(declare)

        assert [f.property_name for f in validator.validate(Customer(active=False)).errors] == ["email"]
        assert len(validator.validate(Customer(active=True)).errors) == 2

    def test_dependent_rules_run_after_failure(self):
        """Dependent rules run after the parent chain even when it failed."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5)
            .dependent_rules(lambda: v.rule_for("email").not_null()))

        assert len(validator.rules) == 1
        assert [f.property_name for f in validator.validate(Customer(name="a")).errors] == ["name", "email"]

    def test_dependent_rules_gated_by_parent_condition(self):
        """A parent's when() also guards its dependent rules."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5)
            .dependent_rules(lambda: v.rule_for("email").not_null())
            .when(lambda c: c.active))

        assert validator.validate(Customer(name="a", active=False)).is_valid

    def test_dependent_rules_inherit_rule_set(self):
        """Dependent rules stay inside their parent's rule set."""
        def declare(v):
            rule = v.rule_for("name").not_null()
            rule.rule.rule_sets = ["admin"]
            rule.dependent_rules(lambda: v.rule_for("email").not_null())

        validator = _Validator(declare)

        assert validator.validate(Customer()).is_valid
        assert len(validator.validate(Customer(), rule_sets="admin").errors) == 2


class TestResultsAndErrors:
    """Test result helpers."""

    def test_validate_and_throw(self):
        """validate_and_throw raises ValidationError carrying the failures."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5))

        with pytest.raises(ValidationError) as exc_info:
            validator.validate_and_throw(Customer(name="a"))

        error = exc_info.value
        assert str(error).startswith("name: 'Name' must be between")
        assert error.to_app_error().code is ErrorCode.E2001_VALIDATION_FAILED

    def test_sensitive_values_redacted(self):
        """Sensitive fields are redacted when serialized."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5))

        with pytest.raises(ValidationError) as exc_info:
            validator.validate_and_throw(Customer(name="a"), sensitive_fields=frozenset({"name"}))

        assert exc_info.value.to_dict()["error"]["errors"][0]["value"] == "[REDACTED]"
        assert exc_info.value.to_dict(redact_sensitive=False)["error"]["errors"][0]["value"] == "a"

    def test_try_validate(self):
        """try_validate returns Ok or Err."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5))
        customer = Customer(name="abc")

        assert validator.try_validate(customer) == Ok(customer)
        result = validator.try_validate(Customer(name="a"))
        assert isinstance(result, Err)
        assert result.error.metadata["field"] == "name"

    def test_to_dictionary(self):
        """Messages group by property path."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5).must(str.isupper))

        assert list(validator.validate(Customer(name="a")).to_dictionary()) == ["name"]


class TestDescriptor:
    """Test introspection through ValidatorDescriptor."""

    def test_members_and_capabilities(self):
        """Bindings are found by member and capability."""
        def declare(v):
            v.rule_for("name").not_null().max_length(10)
            v.rule_for("email").min_length(3).when(lambda c: c.active)

        descriptor = _Validator(declare).create_descriptor()

        assert set(descriptor.get_members_with_validators()) == {"name", "email"}
        (binding,) = descriptor.get_validators_with_capability("name", Capability.MAXIMUM_LENGTH)
        assert binding.validator.max_length == 10
        assert descriptor.get_validators_with_capability("name", Capability.MINIMUM_LENGTH) == []
        assert len(descriptor.get_unconditional_validators_for_member("name")) == 2
        assert descriptor.get_unconditional_validators_for_member("email") == []
        assert descriptor.get_name("name") == "Name"

    def test_includes_dependent_rules(self):
        """Dependent rules are visible to introspection."""
        descriptor = _Validator(lambda v: v.rule_for("name").not_null()
            .dependent_rules(lambda: v.rule_for("email").not_null())).create_descriptor()

        assert len(descriptor.get_rules_for_member("email")) == 1
