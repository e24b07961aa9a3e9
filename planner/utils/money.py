from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, str, float]

_ONE = Decimal(1)


def to_decimal(x: Number) -> Decimal:
    """Exact Decimal for money inputs. Floats go through str() so 0.1 stays 0.1."""
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


def decimal_pow(base: Decimal, exponent: int) -> Decimal:
    """
    Integer power by repeated multiplication.

    Decimal's transcendental ** is avoided so month-count exponents stay
    exact to the context precision.
    """
    if exponent == 0:
        return _ONE
    if exponent < 0:
        return _ONE / decimal_pow(base, -exponent)

    result = _ONE
    for _ in range(exponent):
        result *= base
    return result


def quantize_money(x: Decimal, places: int = 2) -> Decimal:
    return to_decimal(x).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
