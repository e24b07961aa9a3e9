from __future__ import annotations

from planner.core.config import SETTINGS
from planner.engine.financial_engine import FinancialEngine
from planner.tools.engine_tools import tool_calculate, tool_compare_scenarios, tool_required_contribution
from planner.utils.logging import setup_logging


def main():
    setup_logging(SETTINGS.log_level)
    engine = FinancialEngine.from_settings(SETTINGS)

    profile = {"monthlyIncome": "10000", "monthlyNeeds": "4000", "monthlyWants": "2000"}
    goals = [
        {"id": "house", "type": "house", "name": "Down Payment", "targetAmount": "60000", "currentAmount": "15000"},
        {"id": "retirement", "type": "retirement", "name": "Retirement Fund", "targetAmount": "1000000", "currentAmount": "50000"},
        {"id": "vacation", "type": "vacation", "name": "Hawaii Trip", "targetAmount": "8000", "currentAmount": "2500"},
        {"id": "emergency", "type": "emergency_fund", "name": "Emergency Fund", "targetAmount": "20000", "currentAmount": "12000"},
    ]
    allocations = {"house": "1500", "retirement": "1000", "vacation": "300", "emergency": "500"}

    out = tool_calculate({"profile": profile, "goals": goals, "allocations": allocations}, engine=engine)
    print("Total allocated:", out["total_allocated"])
    print("Remaining disposable:", out["remaining_disposable"])
    for goal_id, p in out["projections"].items():
        print("Goal:", goal_id, "months:", p["months_to_complete"], "reachable:", p["is_reachable"])
    for w in out["warnings"]:
        print("Warning:", w["message"], "(blocker)" if w["is_blocker"] else "")

    cmp = tool_compare_scenarios(
        {
            "profile": profile,
            "goals": goals,
            "scenarioA": {"name": "Current", "allocations": allocations},
            "scenarioB": {"name": "House push", "allocations": {**allocations, "house": "2500"}},
        },
        engine=engine,
    )
    print("House months A/B:", cmp["output_a"]["projections"]["house"]["months_to_complete"],
          cmp["output_b"]["projections"]["house"]["months_to_complete"])

    req = tool_required_contribution({"goal": goals[0], "targetDate": "2030-01-01T00:00:00"}, engine=engine)
    print("Required monthly for house by 2030:", req["required_monthly_contribution"])


if __name__ == "__main__":
    main()
