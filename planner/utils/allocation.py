from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field, condecimal, field_serializer, field_validator
from pydantic.config import ConfigDict

from planner.utils.money import Number, to_decimal

_ZERO = Decimal(0)


class Allocation(BaseModel):
    """
    One scenario's monthly contribution per goal id.

    Immutable: every "update" returns a new Allocation. Missing goal ids read
    as zero. Equality compares contents, so insertion order does not matter.
    """

    model_config = ConfigDict(frozen=True)

    amounts: Dict[str, condecimal(ge=0)] = Field(default_factory=dict)

    @field_validator("amounts", mode="after")
    @classmethod
    def freeze_amounts(cls, v: Dict[str, Decimal]) -> Mapping[str, Decimal]:
        # frozen only blocks reassignment; the mapping itself must not change either
        return MappingProxyType(dict(v))

    @field_serializer("amounts")
    def dump_amounts(self, v: Mapping[str, Decimal]) -> Dict[str, Decimal]:
        return dict(v)

    @classmethod
    def from_dict(cls, amounts: Mapping[str, Number]) -> "Allocation":
        return cls(amounts={k: to_decimal(v) for k, v in (amounts or {}).items()})

    def amount_for(self, goal_id: str) -> Decimal:
        return self.amounts.get(goal_id, _ZERO)

    def __getitem__(self, goal_id: str) -> Decimal:
        return self.amount_for(goal_id)

    def __contains__(self, goal_id: object) -> bool:
        return goal_id in self.amounts

    @property
    def total_allocated(self) -> Decimal:
        return sum(self.amounts.values(), _ZERO)

    @property
    def goal_ids(self) -> List[str]:
        return list(self.amounts.keys())

    @property
    def allocated_goal_count(self) -> int:
        return sum(1 for v in self.amounts.values() if v > 0)

    @property
    def has_allocations(self) -> bool:
        return bool(self.amounts) and self.total_allocated > 0

    def with_amount(self, goal_id: str, amount: Number) -> "Allocation":
        updated = dict(self.amounts)
        updated[goal_id] = max(to_decimal(amount), _ZERO)
        return Allocation(amounts=updated)

    def without(self, goal_id: str) -> "Allocation":
        return Allocation(amounts={k: v for k, v in self.amounts.items() if k != goal_id})

    def cleared(self) -> "Allocation":
        return Allocation()

    def to_dict(self) -> Dict[str, Decimal]:
        return dict(self.amounts)

    def would_over_allocate(self, adding: Decimal, disposable_income: Decimal) -> bool:
        return self.total_allocated + adding > disposable_income

    def remaining_disposable(self, disposable_income: Decimal) -> Decimal:
        return max(disposable_income - self.total_allocated, _ZERO)


def coerce_allocation(value: Any) -> Any:
    """Accept a bare {goal_id: amount} mapping wherever an Allocation is expected."""
    if not isinstance(value, Mapping):
        return value
    # {"amounts": {...}} is the model payload; {"amounts": "100"} is a goal named "amounts"
    if set(value.keys()) == {"amounts"} and isinstance(value["amounts"], (Mapping, Allocation)):
        return value
    return {"amounts": dict(value)}
