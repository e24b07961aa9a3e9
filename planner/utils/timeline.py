from __future__ import annotations

from decimal import Decimal

import pandas as pd

from planner.core.constants import COMPOUNDING_PERIODS_PER_YEAR

TIMELINE_COLUMNS = ["month", "balance", "year"]


def projection_timeline(
    present_value: Decimal,
    monthly_contribution: Decimal,
    annual_rate: Decimal,
    months: int,
) -> pd.DataFrame:
    """
    Month-end balances for charting, stepped the same way as
    months_to_reach_target (interest, then contribution).

    `balance` holds exact Decimals (object dtype); convert at the display edge.
    """
    if months <= 0:
        return pd.DataFrame(columns=TIMELINE_COLUMNS)

    mr = annual_rate / COMPOUNDING_PERIODS_PER_YEAR
    bal = present_value

    rows = []
    for i in range(1, months + 1):
        bal = bal + bal * mr
        bal = bal + monthly_contribution
        rows.append({"month": i, "balance": bal})

    df = pd.DataFrame(rows, columns=["month", "balance"])
    df["year"] = df["month"] / 12.0
    return df[TIMELINE_COLUMNS]
