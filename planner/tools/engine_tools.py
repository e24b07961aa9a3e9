from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, condecimal, field_validator

from planner.core.config import SETTINGS
from planner.core.schemas import (
    EngineInput,
    ErrorEnvelope,
    FinancialProfile,
    Goal,
    Scenario,
)
from planner.engine.financial_engine import FinancialEngine
from planner.utils.allocation import Allocation, coerce_allocation
from planner.utils.logging import get_logger
from planner.utils.money import quantize_money

logger = get_logger("tools.engine")


class CalculateRequest(BaseModel):
    profile: FinancialProfile
    goals: List[Goal] = Field(default_factory=list)
    allocations: Allocation = Field(default_factory=Allocation)
    now: Optional[datetime] = None

    coerce_allocations = field_validator("allocations", mode="before")(coerce_allocation)


class RequiredContributionRequest(BaseModel):
    goal: Goal
    target_date: datetime
    now: Optional[datetime] = None


class CompareScenariosRequest(BaseModel):
    profile: FinancialProfile
    goals: List[Goal] = Field(default_factory=list)
    scenario_a: Scenario
    scenario_b: Scenario
    now: Optional[datetime] = None


class SimulateChangeRequest(CalculateRequest):
    goal_id: str
    new_amount: condecimal(ge=0)


def _normalize_goal(g: Dict[str, Any]) -> Dict[str, Any]:
    g = dict(g or {})
    # stored goals may carry the already-resolved rate instead of the override
    if "custom_return_rate" not in g and "customReturnRate" not in g:
        for key in ("effective_return_rate", "effectiveReturnRate"):
            if g.get(key) is not None:
                g["custom_return_rate"] = g[key]
                break
    return g


def _normalize(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Map common aliases -> canonical request fields."""
    p = dict(payload or {})

    for alias, canonical in (
        ("allocation", "allocations"),
        ("scenarioA", "scenario_a"),
        ("scenarioB", "scenario_b"),
        ("targetDate", "target_date"),
        ("goalID", "goal_id"),
        ("goalId", "goal_id"),
        ("newAmount", "new_amount"),
    ):
        if canonical not in p and alias in p:
            p[canonical] = p.pop(alias)

    if isinstance(p.get("goals"), list):
        p["goals"] = [_normalize_goal(g) if isinstance(g, dict) else g for g in p["goals"]]
    if isinstance(p.get("goal"), dict):
        p["goal"] = _normalize_goal(p["goal"])
    return p


def _invalid(tool: str, e: ValidationError) -> Dict[str, Any]:
    logger.warning("invalid_payload tool=%s errors=%s", tool, e.error_count())
    env = ErrorEnvelope(
        code="INVALID_PAYLOAD",
        message=f"{tool}: payload failed validation",
        details={"errors": e.errors(include_url=False, include_context=False)},
    )
    return {"error": env.model_dump(mode="json")}


def tool_calculate(payload: Dict[str, Any], engine: Optional[FinancialEngine] = None) -> Dict[str, Any]:
    engine = engine or FinancialEngine()
    try:
        req = CalculateRequest(**_normalize(payload))
    except ValidationError as e:
        return _invalid("calculate", e)

    engine_input = EngineInput(profile=req.profile, goals=req.goals, allocations=req.allocations)
    out = engine.calculate(engine_input, now=req.now)
    return out.model_dump(mode="json")


def tool_required_contribution(payload: Dict[str, Any], engine: Optional[FinancialEngine] = None) -> Dict[str, Any]:
    engine = engine or FinancialEngine()
    try:
        req = RequiredContributionRequest(**_normalize(payload))
    except ValidationError as e:
        return _invalid("required_contribution", e)

    required = engine.required_monthly_contribution(req.goal, req.target_date, now=req.now)
    if required is not None:
        # the search midpoint carries full context precision; report whole cents
        required = quantize_money(required, SETTINGS.rounding_currency_decimals)
    return {
        "goal_id": req.goal.id,
        "required_monthly_contribution": str(required) if required is not None else None,
    }


def tool_compare_scenarios(payload: Dict[str, Any], engine: Optional[FinancialEngine] = None) -> Dict[str, Any]:
    engine = engine or FinancialEngine()
    try:
        req = CompareScenariosRequest(**_normalize(payload))
    except ValidationError as e:
        return _invalid("compare_scenarios", e)

    out_a, out_b = engine.compare_scenarios(req.scenario_a, req.scenario_b, req.profile, req.goals, now=req.now)
    return {
        "output_a": out_a.model_dump(mode="json"),
        "output_b": out_b.model_dump(mode="json"),
    }


def tool_simulate_allocation_change(payload: Dict[str, Any], engine: Optional[FinancialEngine] = None) -> Dict[str, Any]:
    engine = engine or FinancialEngine()
    try:
        req = SimulateChangeRequest(**_normalize(payload))
    except ValidationError as e:
        return _invalid("simulate_allocation_change", e)

    engine_input = EngineInput(profile=req.profile, goals=req.goals, allocations=req.allocations)
    out = engine.simulate_allocation_change(req.goal_id, req.new_amount, engine_input, now=req.now)
    return out.model_dump(mode="json")
