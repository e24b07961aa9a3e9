from decimal import Decimal

import pytest
from pydantic import ValidationError

from planner.utils.allocation import Allocation, coerce_allocation


def test_missing_goal_reads_as_zero():
    a = Allocation.from_dict({"house": "1500"})
    assert a.amount_for("house") == Decimal("1500")
    assert a.amount_for("boat") == Decimal("0")
    assert a["boat"] == Decimal("0")


def test_total_allocated():
    a = Allocation.from_dict({"house": "1500", "retirement": "1000", "vacation": "300.50"})
    assert a.total_allocated == Decimal("2800.50")
    assert Allocation().total_allocated == Decimal("0")


def test_with_amount_returns_new_value():
    a = Allocation.from_dict({"house": "1500"})
    b = a.with_amount("house", "2000")

    assert a.amount_for("house") == Decimal("1500")
    assert b.amount_for("house") == Decimal("2000")


def test_with_amount_clamps_negative_to_zero():
    a = Allocation().with_amount("house", "-50")
    assert a.amount_for("house") == Decimal("0")
    assert "house" in a


def test_without_and_cleared():
    a = Allocation.from_dict({"house": "1500", "car": "200"})
    assert a.without("car").goal_ids == ["house"]
    assert a.cleared() == Allocation()
    assert a.goal_ids == ["house", "car"]


def test_equality_ignores_insertion_order():
    a = Allocation.from_dict({"a": "1", "b": "2"})
    b = Allocation.from_dict({"b": "2", "a": "1"})
    assert a == b


def test_negative_amounts_rejected_on_construction():
    with pytest.raises(ValidationError):
        Allocation.from_dict({"house": "-1"})


def test_counts_and_flags():
    a = Allocation.from_dict({"house": "0", "car": "200"})
    assert a.allocated_goal_count == 1
    assert a.has_allocations
    assert not Allocation.from_dict({"house": "0"}).has_allocations
    assert not Allocation().has_allocations


def test_disposable_helpers():
    a = Allocation.from_dict({"house": "3000"})
    assert a.remaining_disposable(Decimal("3500")) == Decimal("500")
    assert a.remaining_disposable(Decimal("2000")) == Decimal("0")
    assert a.would_over_allocate(Decimal("600"), Decimal("3500"))
    assert not a.would_over_allocate(Decimal("500"), Decimal("3500"))


def test_to_dict_is_a_copy():
    a = Allocation.from_dict({"house": "1"})
    d = a.to_dict()
    d["house"] = Decimal("99")
    assert a.amount_for("house") == Decimal("1")


def test_coerce_allocation_accepts_bare_mapping():
    assert coerce_allocation({"house": "10"}) == {"amounts": {"house": "10"}}
    assert coerce_allocation({"amounts": {"house": "10"}}) == {"amounts": {"house": "10"}}


def test_coerce_allocation_goal_named_amounts():
    assert coerce_allocation({"amounts": "100"}) == {"amounts": {"amounts": "100"}}
    a = Allocation.model_validate(coerce_allocation({"amounts": "100"}))
    assert a.amount_for("amounts") == Decimal("100")


def test_amounts_cannot_be_mutated_in_place():
    a = Allocation.from_dict({"x": "10"})
    with pytest.raises(TypeError):
        a.amounts["x"] = Decimal("-50")
    assert a.amount_for("x") == Decimal("10")
    assert a.total_allocated == Decimal("10")


def test_read_only_amounts_still_dump_as_dict():
    a = Allocation.from_dict({"house": "1500"})
    assert a.model_dump() == {"amounts": {"house": Decimal("1500")}}
    assert a.model_dump(mode="json") == {"amounts": {"house": "1500"}}
    assert a.amounts == {"house": Decimal("1500")}
