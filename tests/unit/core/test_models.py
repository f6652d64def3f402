"""
Unit tests for the weighbench.core.models module.

Focus areas:
1. Component range validation
2. Origin construction
3. Result and plan models
"""
import pytest
from pydantic import ValidationError

from weighbench.core.models import (
    U32_MAX, BenchmarkPlan, BenchmarkResult, Component, Invocation, Origin, RunRequest,
)


class TestComponent:
    def test_width_and_mid(self):
        c = Component(name="x", low=1, high=16)
        assert c.width == 15
        assert c.mid == 8

    def test_mid_of_zero_width_is_low(self):
        c = Component(name="x", low=5, high=5)
        assert c.width == 0
        assert c.mid == 5

    def test_low_above_high_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Component(name="x", low=10, high=3)
        assert "greater than high" in str(exc_info.value)

    @pytest.mark.parametrize("low,high", [(-1, 5), (0, U32_MAX + 1)])
    def test_bounds_limited_to_u32(self, low, high):
        with pytest.raises(ValidationError):
            Component(name="x", low=low, high=high)

    def test_name_must_be_identifier(self):
        with pytest.raises(ValidationError):
            Component(name="1x", low=0, high=1)

    def test_contains_is_inclusive(self):
        c = Component(name="x", low=2, high=4)
        assert c.contains(2) and c.contains(4)
        assert not c.contains(1) and not c.contains(5)

    def test_frozen(self):
        c = Component(name="x", low=0, high=1)
        with pytest.raises(ValidationError):
            c.low = 1


class TestOrigin:
    def test_constructors(self):
        assert Origin.root().kind == "root"
        assert Origin.none().account is None
        assert Origin.signed("0xabc").account == "0xabc"

    def test_str(self):
        assert str(Origin.root()) == "Root"
        assert str(Origin.none()) == "None"
        assert str(Origin.signed("alice")) == "Signed(alice)"

    def test_signed_requires_account(self):
        with pytest.raises(ValidationError):
            Origin(kind="signed")

    def test_root_cannot_carry_account(self):
        with pytest.raises(ValidationError):
            Origin(kind="root", account="alice")

    def test_invocation_of(self):
        inv = Invocation.of("balances.transfer", "bob", 5, origin=Origin.signed("alice"))
        assert inv.call.name == "balances.transfer"
        assert inv.call.args == ("bob", 5)


class TestBenchmarkResult:
    def test_accessors(self):
        r = BenchmarkResult(assignment=(("a", 1), ("b", 2)), elapsed_ns=42)
        assert r.values == {"a": 1, "b": 2}
        assert r.value_of("b") == 2
        assert r.to_dict() == {"assignment": {"a": 1, "b": 2}, "elapsed_ns": 42}
        with pytest.raises(KeyError):
            r.value_of("c")

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValidationError):
            BenchmarkResult(assignment=(), elapsed_ns=-1)


class TestBenchmarkPlan:
    def test_resolved_runs_fill_defaults(self):
        plan = BenchmarkPlan(
            steps=4,
            repeat=2,
            runs=[
                RunRequest(pallet="identity", extrinsic="set_subs"),
                RunRequest(pallet="identity", extrinsic="add_registrar", steps=1),
            ],
        )
        runs = plan.resolved_runs()
        assert [(r.steps, r.repeat) for r in runs] == [(4, 2), (1, 2)]
        # the plan itself is untouched
        assert plan.runs[0].steps is None

    def test_empty_runs_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BenchmarkPlan(runs=[])
        assert "at least one run" in str(exc_info.value)

    def test_steps_must_be_positive(self):
        with pytest.raises(ValidationError):
            RunRequest(pallet="p", extrinsic="e", steps=0)
