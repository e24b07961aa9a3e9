from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from planner.core.constants import (
    BINARY_SEARCH_MAX_ITERATIONS,
    BINARY_SEARCH_TOLERANCE,
    COMPOUNDING_PERIODS_PER_YEAR,
    DEFAULT_INFLATION_RATE,
    MAX_PROJECTION_MONTHS,
)
from planner.utils.money import decimal_pow

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)


def _monthly_rate(annual_rate: Decimal) -> Decimal:
    return annual_rate / COMPOUNDING_PERIODS_PER_YEAR


def _as_datetime(d: date) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime(d.year, d.month, d.day)


def _now_like(ref: datetime) -> datetime:
    # naive and aware datetimes cannot be compared
    return datetime.now(UTC) if ref.tzinfo is not None else datetime.now()


def _assume_utc(d: datetime) -> datetime:
    return d.replace(tzinfo=UTC) if d.tzinfo is None else d


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (negative if end is earlier)."""
    start, end = _as_datetime(start), _as_datetime(end)
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = _assume_utc(start), _assume_utc(end)
    rd = relativedelta(end, start)
    return rd.years * 12 + rd.months


def future_value(
    present_value: Decimal,
    monthly_contribution: Decimal,
    annual_rate: Decimal,
    months: int,
) -> Decimal:
    """
    FV = PV * (1 + r)^n + PMT * ((1 + r)^n - 1) / r, r being the monthly rate.

    Zero rate falls back to linear accumulation.
    """
    if months <= 0:
        return present_value

    mr = _monthly_rate(annual_rate)
    if mr == 0:
        return present_value + monthly_contribution * months

    factor = decimal_pow(_ONE + mr, months)
    return present_value * factor + monthly_contribution * ((factor - _ONE) / mr)


def months_to_reach_target(
    target_amount: Decimal,
    present_value: Decimal,
    monthly_contribution: Decimal,
    annual_rate: Decimal,
) -> Optional[int]:
    """
    Month-by-month simulation (interest first, then contribution) capped at
    MAX_PROJECTION_MONTHS. Returns None when the target is not reached.
    """
    if present_value >= target_amount:
        return 0

    if monthly_contribution <= 0 and annual_rate <= 0:
        return None

    mr = _monthly_rate(annual_rate)
    balance = present_value
    months = 0
    while balance < target_amount and months < MAX_PROJECTION_MONTHS:
        balance += balance * mr
        balance += monthly_contribution
        months += 1

    return months if balance >= target_amount else None


def completion_date(months: int, from_date: Optional[datetime] = None) -> datetime:
    start = from_date if from_date is not None else datetime.now(UTC)
    # relativedelta clamps to month end (Jan 31 + 1 month -> Feb 28/29)
    return start + relativedelta(months=months)


def inflation_adjusted(
    amount: Decimal,
    years: int,
    inflation_rate: Decimal = DEFAULT_INFLATION_RATE,
) -> Decimal:
    """Future nominal amount expressed in today's purchasing power."""
    if years <= 0 or inflation_rate <= 0:
        return amount
    return amount / decimal_pow(_ONE + inflation_rate, years)


def required_monthly_contribution(
    target_amount: Decimal,
    present_value: Decimal,
    target_date: date,
    annual_rate: Decimal,
    *,
    now: Optional[datetime] = None,
) -> Optional[Decimal]:
    """
    Monthly contribution that reaches target_amount by target_date.

    Returns 0 if already complete and None when the date leaves no whole
    month. With interest, bisects [0, remaining] until the projected value
    is within BINARY_SEARCH_TOLERANCE of the target.
    """
    if present_value >= target_amount:
        return _ZERO

    target_dt = _as_datetime(target_date)
    start = now if now is not None else _now_like(target_dt)
    months = months_between(start, target_dt)
    if months <= 0:
        return None

    remaining = target_amount - present_value
    if _monthly_rate(annual_rate) == 0:
        return remaining / months

    low = _ZERO
    high = remaining
    for _ in range(BINARY_SEARCH_MAX_ITERATIONS):
        mid = (low + high) / _TWO
        projected = future_value(present_value, mid, annual_rate, months)

        if abs(projected - target_amount) < BINARY_SEARCH_TOLERANCE:
            return mid
        if projected < target_amount:
            low = mid
        else:
            high = mid

    return (low + high) / _TWO
