from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from planner.core.schemas import (
    EngineOutput,
    Goal,
    GoalTrackingStatus,
    TrackingDetails,
    TrackingState,
)
from planner.engine.financial_engine import FinancialEngine
from planner.utils.calculations import months_between

# Sentinel months_difference for goals the plan never completes
UNREACHABLE_MONTHS_DIFFERENCE = -999

_ZERO = Decimal(0)


def _year_month(d: datetime) -> int:
    return d.year * 12 + d.month


def tracking_status(
    goal: Goal,
    output: EngineOutput,
    *,
    engine: Optional[FinancialEngine] = None,
    now: Optional[datetime] = None,
) -> GoalTrackingStatus:
    """
    Where a goal stands against its desired date under one calculated plan.

    Checked in order: completed, no desired date, not funded by the plan,
    never reached, then on track / behind at year-month granularity.
    Behind statuses carry the contribution that would hit the desired date.
    """
    engine = engine or FinancialEngine()

    if goal.is_completed:
        return GoalTrackingStatus(state=TrackingState.COMPLETED)

    projection = output.projection_for(goal.id)
    target_date = goal.desired_date
    if target_date is None:
        return GoalTrackingStatus(
            state=TrackingState.NO_TARGET_DATE,
            projected_date=projection.completion_date if projection else None,
        )

    if projection is None or projection.monthly_contribution <= 0:
        return GoalTrackingStatus(state=TrackingState.NOT_IN_PLAN, target_date=target_date)

    projected_date = projection.completion_date
    if projected_date is None:
        required = engine.required_monthly_contribution(goal, target_date, now=now)
        return GoalTrackingStatus(
            state=TrackingState.BEHIND,
            target_date=target_date,
            details=TrackingDetails(
                projected_date=None,
                target_date=target_date,
                months_difference=UNREACHABLE_MONTHS_DIFFERENCE,
                current_contribution=projection.monthly_contribution,
            ),
            required_contribution=required if required is not None else _ZERO,
        )

    details = TrackingDetails(
        projected_date=projected_date,
        target_date=target_date,
        months_difference=months_between(projected_date, target_date),
        current_contribution=projection.monthly_contribution,
    )

    if _year_month(projected_date) <= _year_month(target_date):
        return GoalTrackingStatus(
            state=TrackingState.ON_TRACK,
            projected_date=projected_date,
            target_date=target_date,
            details=details,
        )

    required = engine.required_monthly_contribution(goal, target_date, now=now)
    return GoalTrackingStatus(
        state=TrackingState.BEHIND,
        projected_date=projected_date,
        target_date=target_date,
        details=details,
        required_contribution=required if required is not None else _ZERO,
    )
