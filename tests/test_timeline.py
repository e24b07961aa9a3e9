from decimal import Decimal

from planner.utils.calculations import future_value, months_to_reach_target
from planner.utils.timeline import TIMELINE_COLUMNS, projection_timeline


def test_empty_for_non_positive_months():
    df = projection_timeline(Decimal("100"), Decimal("10"), Decimal("0.05"), 0)
    assert df.empty
    assert list(df.columns) == TIMELINE_COLUMNS


def test_zero_rate_balances_are_exact():
    df = projection_timeline(Decimal("0"), Decimal("100"), Decimal("0"), 3)
    assert list(df["month"]) == [1, 2, 3]
    assert list(df["balance"]) == [Decimal("100"), Decimal("200"), Decimal("300")]
    assert df["year"].iloc[-1] == 0.25


def test_final_balance_matches_closed_form():
    df = projection_timeline(Decimal("1000"), Decimal("250"), Decimal("0.07"), 120)
    fv = future_value(Decimal("1000"), Decimal("250"), Decimal("0.07"), 120)
    assert abs(df["balance"].iloc[-1] - fv) < Decimal("0.0001")


def test_crosses_target_at_projected_month():
    target = Decimal("24000")
    df = projection_timeline(Decimal("0"), Decimal("500"), Decimal("0.06"), 60)
    months = months_to_reach_target(target, Decimal("0"), Decimal("500"), Decimal("0.06"))
    first = df.loc[df["balance"] >= target, "month"].iloc[0]
    assert first == months
