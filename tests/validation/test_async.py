"""Tests for async execution, sync misuse and cancellation."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from rulecraft.core.errors import AsyncValidatorInvokedSynchronouslyError, ErrorCode
from rulecraft.validation import AbstractValidator, CascadeMode, ValidatorConfiguration
from tests.models import Address, Customer


class _Validator(AbstractValidator[Customer]):
    model = Customer

    def __init__(self, declare=None):
        super().__init__(ValidatorConfiguration())
        if declare is not None:
            declare(self)


async def _is_upper(value):
    await asyncio.sleep(0)
    return value is not None and value.isupper()


async def _is_active(customer):
    return customer.active


class TestSyncMisuse:
    """Test that sync runs refuse async-only work."""

    def test_async_validator_in_sync_run(self):
        """An async-only validator raises in a sync run."""
        validator = _Validator(lambda v: v.rule_for("name").must_async(_is_upper))

        with pytest.raises(AsyncValidatorInvokedSynchronouslyError) as exc_info:
            validator.validate(Customer(name="a"))

        assert exc_info.value.code is ErrorCode.E3001_ASYNC_INVOKED_SYNCHRONOUSLY

    def test_async_condition_in_sync_run(self):
        """An async binding condition makes the binding async-only."""
        validator = _Validator(lambda v: v.rule_for("name").length(2, 5).when_async(_is_active))

        with pytest.raises(AsyncValidatorInvokedSynchronouslyError):
            validator.validate(Customer(name="a"))

    def test_async_group_condition_in_sync_run(self):
        """A validator-level async group cannot run synchronously."""
        validator = _Validator(lambda v: v.when_async(_is_active, lambda: v.rule_for("name").not_null()))

        with pytest.raises(AsyncValidatorInvokedSynchronouslyError):
            validator.validate(Customer())

    def test_warning_logged(self):
        """The misuse is logged before raising."""
        validator = _Validator(lambda v: v.rule_for("name").must_async(_is_upper))

        with capture_logs() as logs:
            with pytest.raises(AsyncValidatorInvokedSynchronouslyError):
                validator.validate(Customer(name="a"))

        assert any(entry["event"] == "async_validator_invoked_synchronously" for entry in logs)

    def test_skipped_rule_set_does_not_raise(self):
        """Async rules outside the selected rule sets are never touched."""
        validator = _Validator(lambda v: v.rule_set("remote", lambda: v.rule_for("name").must_async(_is_upper)))

        assert validator.validate(Customer(name="a")).is_valid


class TestAsyncRuns:
    """Test async validation."""

    @pytest.mark.anyio
    async def test_async_validator(self):
        """Async validators are awaited in async runs."""
        validator = _Validator(lambda v: v.rule_for("name").must_async(_is_upper))

        assert (await validator.validate_async(Customer(name="ABC"))).is_valid
        (failure,) = (await validator.validate_async(Customer(name="abc"))).errors
        assert failure.error_message == "The specified condition was not met for 'Name'."

    @pytest.mark.anyio
    async def test_async_conditions(self):
        """Binding and group async conditions gate execution."""
        def declare(v):
            v.rule_for("name").length(2, 5).when_async(_is_active)
            v.unless_async(_is_active, lambda: v.rule_for("email").not_null())

        validator = _Validator(declare)

        active = await validator.validate_async(Customer(name="a", active=True))
        inactive = await validator.validate_async(Customer(name="a", active=False))

        assert [f.property_name for f in active.errors] == ["name"]
        assert [f.property_name for f in inactive.errors] == ["email"]

    @pytest.mark.anyio
    async def test_sync_validators_run_in_async_mode(self):
        """Sync-only validators give the same failures in both modes."""
        def declare(v):
            v.rule_for("name").length(2, 5).must(str.isupper)
            v.rule_for("email").not_empty()

        validator = _Validator(declare)
        customer = Customer(name="a", email="")

        sync_failures = [(f.property_name, f.error_code) for f in validator.validate(customer).errors]
        async_failures = [(f.property_name, f.error_code) for f in (await validator.validate_async(customer)).errors]

        assert async_failures == sync_failures
        assert len(sync_failures) == 3

    @pytest.mark.anyio
    async def test_mixed_bindings_keep_declaration_order(self):
        """Sync and async validators on one rule run and fail in declaration order."""
        calls = []

        def first(value):
            calls.append("first")
            return False

        async def remote(value):
            calls.append("remote")
            return False

        def last(value):
            calls.append("last")
            return False

        validator = _Validator(lambda v: v.rule_for("name").must(first).must_async(remote).must(last))

        result = await validator.validate_async(Customer(name="a"))

        assert calls == ["first", "remote", "last"]
        assert [f.error_code for f in result.errors] == [
            "PredicateValidator", "AsyncPredicateValidator", "PredicateValidator"]

    @pytest.mark.anyio
    async def test_stop_cascade_in_async_mode(self):
        """STOP ends the chain at the first failure in async runs too."""
        later = []

        async def remote(value):
            return False

        validator = _Validator(lambda v: v.rule_for("name").cascade(CascadeMode.STOP)
            .must_async(remote).must(lambda value: later.append(value) or True))

        result = await validator.validate_async(Customer(name="a"))

        assert [f.error_code for f in result.errors] == ["AsyncPredicateValidator"]
        assert later == []

    @pytest.mark.anyio
    async def test_validate_and_throw_async(self):
        """The async throwing variant raises ValidationError."""
        from rulecraft.validation import ValidationError

        validator = _Validator(lambda v: v.rule_for("name").must_async(_is_upper))

        with pytest.raises(ValidationError):
            await validator.validate_and_throw_async(Customer(name="abc"))


class TestCancellation:
    """Test cooperative cancellation."""

    @pytest.mark.anyio
    async def test_cancelled_before_start(self):
        """A set event aborts before any rule runs."""
        calls = []

        async def record(value):
            calls.append(value)
            return True

        validator = _Validator(lambda v: v.rule_for("name").must_async(record))
        cancelled = asyncio.Event()
        cancelled.set()

        with pytest.raises(asyncio.CancelledError):
            await validator.validate_async(Customer(name="a"), cancellation=cancelled)

        assert calls == []

    @pytest.mark.anyio
    async def test_cancelled_mid_run(self):
        """Setting the event during a run stops later rules."""
        cancelled = asyncio.Event()
        later = []

        async def cancel(value):
            cancelled.set()
            return True

        async def record(value):
            later.append(value)
            return True

        def declare(v):
            v.rule_for("name").must_async(cancel)
            v.rule_for("email").must_async(record)

        with pytest.raises(asyncio.CancelledError):
            await _Validator(declare).validate_async(Customer(name="a", email="b"), cancellation=cancelled)

        assert later == []

    @pytest.mark.anyio
    async def test_cancelled_inside_nested_validator(self):
        """Cancellation raised in a nested validator aborts the whole traversal."""
        cancelled = asyncio.Event()
        later = []

        async def cancel(value):
            cancelled.set()
            return True

        async def record(value):
            later.append(value)
            return True

        class InnerValidator(AbstractValidator[Address]):
            def __init__(self):
                super().__init__(ValidatorConfiguration())
                self.rule_for("postcode").must_async(cancel)
                self.rule_for("line1").must_async(record)

        def declare(v):
            v.rule_for("address").set_validator(InnerValidator())
            v.rule_for("email").must_async(record)

        customer = Customer(email="e", address=Address(postcode="12345", line1="x"))

        with pytest.raises(asyncio.CancelledError):
            await _Validator(declare).validate_async(customer, cancellation=cancelled)

        assert later == []


class TestFaultPropagation:
    """Test that validator faults escape the run unchanged."""

    def test_sync_fault_propagates(self):
        """An exception raised by a predicate reaches the caller of validate()."""
        validator = _Validator(lambda v: v.rule_for("name").must(lambda value: 1 / 0))

        with pytest.raises(ZeroDivisionError):
            validator.validate(Customer(name="a"))

    @pytest.mark.anyio
    async def test_async_fault_propagates(self):
        """An exception raised by an async predicate reaches the caller of validate_async()."""
        async def broken(value):
            raise LookupError("remote lookup failed")

        validator = _Validator(lambda v: v.rule_for("name").must_async(broken))

        with pytest.raises(LookupError):
            await validator.validate_async(Customer(name="a"))
