from __future__ import annotations

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from planner.core.constants import CONSERVATIVE_RATE, HYSA_RATE, STOCK_MARKET_REAL_RETURN
from planner.utils.allocation import Allocation, coerce_allocation

_ZERO = Decimal(0)


class FrozenModel(BaseModel):
    """Immutable value type. Accepts snake_case names and camelCase document keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


# -------------------------
# Goals
# -------------------------

class GoalType(str, Enum):
    HOUSE = "house"
    RETIREMENT = "retirement"
    VACATION = "vacation"
    EMERGENCY_FUND = "emergency_fund"
    BABY_FAMILY = "baby_family"
    DEBT = "debt"
    CAR = "car"
    EDUCATION = "education"
    HOBBY = "hobby"
    FITNESS = "fitness"
    GIFT = "gift"
    HOME_IMPROVEMENT = "home_improvement"
    INVESTMENT = "investment"
    CHARITY = "charity"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _GOAL_TYPE_DISPLAY[self]

    @property
    def default_annual_return_rate(self) -> Decimal:
        """
        HYSA for house/emergency, market real return for retirement and
        investment, conservative for short-term spending, 0 for debt payoff.
        """
        return _GOAL_TYPE_RATES[self]

    @property
    def is_long_term_goal(self) -> bool:
        return self in (GoalType.RETIREMENT, GoalType.BABY_FAMILY, GoalType.EDUCATION, GoalType.INVESTMENT)

    @property
    def suggested_vehicle(self) -> str:
        return _GOAL_TYPE_VEHICLES[self]


_GOAL_TYPE_DISPLAY = {
    GoalType.HOUSE: "House",
    GoalType.RETIREMENT: "Retirement",
    GoalType.VACATION: "Vacation",
    GoalType.EMERGENCY_FUND: "Emergency Fund",
    GoalType.BABY_FAMILY: "Baby & Family",
    GoalType.DEBT: "Debt Payoff",
    GoalType.CAR: "Vehicle",
    GoalType.EDUCATION: "Education",
    GoalType.HOBBY: "Hobby & Recreation",
    GoalType.FITNESS: "Health & Fitness",
    GoalType.GIFT: "Gift & Celebration",
    GoalType.HOME_IMPROVEMENT: "Home Improvement",
    GoalType.INVESTMENT: "Investment",
    GoalType.CHARITY: "Charitable Giving",
    GoalType.CUSTOM: "Custom Goal",
}

_GOAL_TYPE_RATES = {
    GoalType.HOUSE: HYSA_RATE,
    GoalType.RETIREMENT: STOCK_MARKET_REAL_RETURN,
    GoalType.VACATION: CONSERVATIVE_RATE,
    GoalType.EMERGENCY_FUND: HYSA_RATE,
    GoalType.BABY_FAMILY: Decimal("0.05"),
    GoalType.DEBT: Decimal("0.0"),
    GoalType.CAR: CONSERVATIVE_RATE,
    GoalType.EDUCATION: Decimal("0.05"),
    GoalType.HOBBY: CONSERVATIVE_RATE,
    GoalType.FITNESS: CONSERVATIVE_RATE,
    GoalType.GIFT: Decimal("0.035"),
    GoalType.HOME_IMPROVEMENT: CONSERVATIVE_RATE,
    GoalType.INVESTMENT: STOCK_MARKET_REAL_RETURN,
    GoalType.CHARITY: Decimal("0.035"),
    GoalType.CUSTOM: Decimal("0.05"),
}

_GOAL_TYPE_VEHICLES = {
    GoalType.HOUSE: "High-Yield Savings Account",
    GoalType.EMERGENCY_FUND: "High-Yield Savings Account",
    GoalType.RETIREMENT: "401(k) / IRA",
    GoalType.VACATION: "Savings Account",
    GoalType.HOBBY: "Savings Account",
    GoalType.FITNESS: "Savings Account",
    GoalType.GIFT: "Savings Account",
    GoalType.CAR: "Savings Account",
    GoalType.BABY_FAMILY: "529 Plan / Savings",
    GoalType.EDUCATION: "529 Plan / Savings",
    GoalType.DEBT: "Extra Payments",
    GoalType.HOME_IMPROVEMENT: "HELOC / Savings",
    GoalType.INVESTMENT: "Brokerage Account",
    GoalType.CHARITY: "Donor-Advised Fund",
    GoalType.CUSTOM: "Varies by timeline",
}


class Goal(FrozenModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: GoalType = GoalType.CUSTOM
    name: str
    target_amount: Decimal
    current_amount: Decimal = _ZERO
    desired_date: Optional[datetime] = None
    custom_return_rate: Optional[Decimal] = None  # None -> goal type default
    priority: int = 0
    is_active: bool = True
    notes: Optional[str] = None

    @computed_field
    @property
    def effective_return_rate(self) -> Decimal:
        if self.custom_return_rate is not None:
            return self.custom_return_rate
        return self.type.default_annual_return_rate

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.target_amount - self.current_amount, _ZERO)

    @property
    def progress_percentage(self) -> Decimal:
        if self.target_amount <= 0:
            return _ZERO
        return min(self.current_amount / self.target_amount, Decimal(1))

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    @property
    def has_progress(self) -> bool:
        return self.current_amount > 0


# -------------------------
# Household profile
# -------------------------

class FinancialProfile(FrozenModel):
    monthly_income: Decimal = _ZERO
    monthly_needs: Decimal = _ZERO
    monthly_wants: Decimal = _ZERO
    current_savings: Decimal = _ZERO
    retirement_balance: Optional[Decimal] = None

    @property
    def monthly_expenses(self) -> Decimal:
        return self.monthly_needs + self.monthly_wants

    @property
    def monthly_disposable(self) -> Decimal:
        # may be negative; the engine reports it as a blocker
        return self.monthly_income - self.monthly_expenses

    @property
    def has_disposable_income(self) -> bool:
        return self.monthly_disposable > 0

    @property
    def is_valid(self) -> bool:
        return (
            self.monthly_income >= 0
            and self.monthly_needs >= 0
            and self.monthly_wants >= 0
            and self.current_savings >= 0
        )


# -------------------------
# Scenarios
# -------------------------

class DecisionStatus(str, Enum):
    DRAFT = "draft"
    UNDER_REVIEW = "under_review"
    DECIDED = "decided"
    ARCHIVED = "archived"


class Scenario(FrozenModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    allocations: Allocation = Field(default_factory=Allocation)
    notes: Optional[str] = None
    is_active: bool = False
    decision_status: DecisionStatus = DecisionStatus.DRAFT
    created_by: str = ""

    coerce_allocations = field_validator("allocations", mode="before")(coerce_allocation)

    @property
    def is_editable(self) -> bool:
        return self.decision_status in (DecisionStatus.DRAFT, DecisionStatus.UNDER_REVIEW)

    @property
    def awaiting_partner_review(self) -> bool:
        return self.decision_status == DecisionStatus.UNDER_REVIEW


# -------------------------
# Engine input / output
# -------------------------

class EngineInput(FrozenModel):
    profile: FinancialProfile
    goals: List[Goal] = Field(default_factory=list)
    allocations: Allocation = Field(default_factory=Allocation)

    coerce_allocations = field_validator("allocations", mode="before")(coerce_allocation)


class GoalProjection(FrozenModel):
    goal_id: str
    months_to_complete: Optional[int] = Field(default=None, ge=0)
    completion_date: Optional[datetime] = None
    projected_final_value: Decimal
    monthly_contribution: Decimal
    is_reachable: bool

    @property
    def time_to_completion_text(self) -> str:
        months = self.months_to_complete
        if months is None:
            return "50+ years"
        if months == 0:
            return "Complete!"

        years, rem = divmod(months, 12)
        if years == 0:
            return f"{rem} month{'' if rem == 1 else 's'}"
        if rem == 0:
            return f"{years} year{'' if years == 1 else 's'}"
        return f"{years}y {rem}m"


class WarningKind(str, Enum):
    OVER_ALLOCATED = "over_allocated"
    GOAL_UNREACHABLE = "goal_unreachable"
    NO_CONTRIBUTION_FOR_GOAL = "no_contribution_for_goal"
    NEGATIVE_DISPOSABLE = "negative_disposable"


_BLOCKERS = (WarningKind.OVER_ALLOCATED, WarningKind.NEGATIVE_DISPOSABLE)


class EngineWarning(FrozenModel):
    """
    Closed set of calculation warnings, discriminated by `kind`.

    Build them with the per-variant constructors; only the fields that
    belong to a variant are populated.
    """

    kind: WarningKind
    excess: Optional[Decimal] = None
    goal_id: Optional[str] = None
    goal_name: Optional[str] = None

    @classmethod
    def over_allocated(cls, excess: Decimal) -> "EngineWarning":
        return cls(kind=WarningKind.OVER_ALLOCATED, excess=excess)

    @classmethod
    def goal_unreachable(cls, goal_id: str, goal_name: str) -> "EngineWarning":
        return cls(kind=WarningKind.GOAL_UNREACHABLE, goal_id=goal_id, goal_name=goal_name)

    @classmethod
    def no_contribution_for_goal(cls, goal_id: str, goal_name: str) -> "EngineWarning":
        return cls(kind=WarningKind.NO_CONTRIBUTION_FOR_GOAL, goal_id=goal_id, goal_name=goal_name)

    @classmethod
    def negative_disposable(cls) -> "EngineWarning":
        return cls(kind=WarningKind.NEGATIVE_DISPOSABLE)

    @computed_field
    @property
    def message(self) -> str:
        if self.kind == WarningKind.OVER_ALLOCATED:
            return f"Over-allocated by ${self.excess}"
        if self.kind == WarningKind.GOAL_UNREACHABLE:
            return f"{self.goal_name} may take over 50 years to reach"
        if self.kind == WarningKind.NO_CONTRIBUTION_FOR_GOAL:
            return f"No monthly contribution set for {self.goal_name}"
        return "Expenses exceed income"

    @computed_field
    @property
    def is_blocker(self) -> bool:
        return self.kind in _BLOCKERS


class EngineOutput(FrozenModel):
    projections: Dict[str, GoalProjection] = Field(default_factory=dict)
    total_allocated: Decimal
    remaining_disposable: Decimal
    warnings: List[EngineWarning] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def blockers(self) -> List[EngineWarning]:
        return [w for w in self.warnings if w.is_blocker]

    def projection_for(self, goal_id: str) -> Optional[GoalProjection]:
        return self.projections.get(goal_id)

    @property
    def projections_by_completion_date(self) -> List[GoalProjection]:
        """Soonest first; unreachable goals keep their relative order at the end."""
        reachable = [p for p in self.projections.values() if p.completion_date is not None]
        unreachable = [p for p in self.projections.values() if p.completion_date is None]
        return sorted(reachable, key=lambda p: p.completion_date) + unreachable


# -------------------------
# Goal tracking
# -------------------------

class TrackingState(str, Enum):
    COMPLETED = "completed"
    NO_TARGET_DATE = "no_target_date"
    NOT_IN_PLAN = "not_in_plan"
    ON_TRACK = "on_track"
    BEHIND = "behind"


_TRACKING_LABELS = {
    TrackingState.COMPLETED: "Complete",
    TrackingState.NO_TARGET_DATE: "No Target Date",
    TrackingState.NOT_IN_PLAN: "Not in Plan",
    TrackingState.ON_TRACK: "On Track",
    TrackingState.BEHIND: "Behind",
}


class TrackingDetails(FrozenModel):
    projected_date: Optional[datetime]  # None when the plan never reaches the goal
    target_date: datetime
    months_difference: int  # positive = early, negative = late
    current_contribution: Decimal


class GoalTrackingStatus(FrozenModel):
    state: TrackingState
    projected_date: Optional[datetime] = None
    target_date: Optional[datetime] = None
    details: Optional[TrackingDetails] = None
    required_contribution: Optional[Decimal] = None

    @property
    def is_actionable(self) -> bool:
        return self.state == TrackingState.BEHIND

    @property
    def is_tracked_by_plan(self) -> bool:
        return self.state in (TrackingState.ON_TRACK, TrackingState.BEHIND)

    @property
    def label(self) -> str:
        return _TRACKING_LABELS[self.state]


# -------------------------
# Errors
# -------------------------

class ErrorEnvelope(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    retriable: bool = False
