from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from planner.core.config import Settings
from planner.core.constants import DEFAULT_INFLATION_RATE, MAX_PROJECTION_MONTHS
from planner.core.schemas import (
    EngineInput,
    EngineOutput,
    EngineWarning,
    FinancialProfile,
    Goal,
    GoalProjection,
    Scenario,
)
from planner.utils import calculations
from planner.utils.allocation import Allocation
from planner.utils.logging import get_logger, scenario_context
from planner.utils.money import Number, to_decimal

logger = get_logger("engine.financial")

_ZERO = Decimal(0)

AllocationSource = Union[Scenario, Allocation]


@dataclass(frozen=True)
class FinancialEngine:
    """
    Turns a household profile, its goals and one allocation scenario into
    per-goal projections plus warnings.

    Stateless: the only fields are immutable configuration, so one instance
    can be shared across threads. Domain outcomes (unreachable goals,
    over-allocation) come back as data, never as exceptions.
    """

    inflation_rate: Decimal = DEFAULT_INFLATION_RATE

    @classmethod
    def from_settings(cls, settings: Settings) -> "FinancialEngine":
        return cls(inflation_rate=settings.inflation_rate)

    def calculate(self, engine_input: EngineInput, *, now: Optional[datetime] = None) -> EngineOutput:
        now = now or datetime.now(UTC)
        projections = {}
        warnings: List[EngineWarning] = []

        profile = engine_input.profile
        total_allocated = engine_input.allocations.total_allocated
        disposable = profile.monthly_disposable

        if profile.monthly_income < profile.monthly_expenses:
            warnings.append(EngineWarning.negative_disposable())

        if total_allocated > disposable:
            warnings.append(EngineWarning.over_allocated(total_allocated - disposable))

        for goal in engine_input.goals:
            if not goal.is_active:
                continue

            contribution = engine_input.allocations.amount_for(goal.id)
            if contribution <= 0:
                warnings.append(EngineWarning.no_contribution_for_goal(goal.id, goal.name))

            projection = self.calculate_goal_projection(goal, contribution, now=now)
            projections[goal.id] = projection

            if not projection.is_reachable:
                warnings.append(EngineWarning.goal_unreachable(goal.id, goal.name))

        logger.debug(
            "calculate goals=%s active=%s total_allocated=%s disposable=%s warnings=%s",
            len(engine_input.goals), len(projections), total_allocated, disposable, len(warnings),
        )

        return EngineOutput(
            projections=projections,
            total_allocated=total_allocated,
            remaining_disposable=max(disposable - total_allocated, _ZERO),
            warnings=warnings,
            calculated_at=now,
        )

    def calculate_goal_projection(
        self,
        goal: Goal,
        monthly_contribution: Decimal,
        *,
        now: Optional[datetime] = None,
    ) -> GoalProjection:
        now = now or datetime.now(UTC)
        rate = goal.effective_return_rate

        if goal.current_amount >= goal.target_amount:
            return GoalProjection(
                goal_id=goal.id,
                months_to_complete=0,
                completion_date=now,
                projected_final_value=goal.current_amount,
                monthly_contribution=monthly_contribution,
                is_reachable=True,
            )

        months = calculations.months_to_reach_target(
            goal.target_amount, goal.current_amount, monthly_contribution, rate
        )

        if months is not None:
            return GoalProjection(
                goal_id=goal.id,
                months_to_complete=months,
                completion_date=calculations.completion_date(months, now),
                projected_final_value=goal.target_amount,
                monthly_contribution=monthly_contribution,
                is_reachable=True,
            )

        # Unreachable: report where the plan ends up at the horizon
        return GoalProjection(
            goal_id=goal.id,
            months_to_complete=None,
            completion_date=None,
            projected_final_value=calculations.future_value(
                goal.current_amount, monthly_contribution, rate, MAX_PROJECTION_MONTHS
            ),
            monthly_contribution=monthly_contribution,
            is_reachable=False,
        )

    def required_monthly_contribution(
        self,
        goal: Goal,
        target_date: date,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Decimal]:
        return calculations.required_monthly_contribution(
            goal.target_amount,
            goal.current_amount,
            target_date,
            goal.effective_return_rate,
            now=now,
        )

    def compare_scenarios(
        self,
        scenario_a: AllocationSource,
        scenario_b: AllocationSource,
        profile: FinancialProfile,
        goals: List[Goal],
        *,
        now: Optional[datetime] = None,
    ) -> Tuple[EngineOutput, EngineOutput]:
        now = now or datetime.now(UTC)
        outputs = []
        for label, scenario in (("a", scenario_a), ("b", scenario_b)):
            if isinstance(scenario, Scenario):
                scenario_id, allocations = scenario.id, scenario.allocations
            else:
                scenario_id, allocations = label, scenario
            with scenario_context(scenario_id):
                outputs.append(
                    self.calculate(EngineInput(profile=profile, goals=goals, allocations=allocations), now=now)
                )
        return outputs[0], outputs[1]

    def simulate_allocation_change(
        self,
        goal_id: str,
        new_amount: Number,
        engine_input: EngineInput,
        *,
        now: Optional[datetime] = None,
    ) -> EngineOutput:
        # with_amount returns a copy; the caller's allocation is untouched
        modified = engine_input.model_copy(update={"allocations": engine_input.allocations.with_amount(goal_id, to_decimal(new_amount))})
        return self.calculate(modified, now=now)

    def todays_dollars(self, projection: GoalProjection) -> Decimal:
        """Projected final value in today's purchasing power (whole years only)."""
        months = projection.months_to_complete
        if months is None:
            months = MAX_PROJECTION_MONTHS
        return calculations.inflation_adjusted(
            projection.projected_final_value, months // 12, self.inflation_rate
        )
