from decimal import Decimal

from planner.utils.money import decimal_pow, quantize_money, to_decimal


def test_to_decimal_avoids_binary_expansion():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("12.34") == Decimal("12.34")
    assert to_decimal(5) == Decimal(5)


def test_decimal_pow():
    assert decimal_pow(Decimal("1.5"), 0) == Decimal(1)
    assert decimal_pow(Decimal("1.1"), 3) == Decimal("1.331")
    assert decimal_pow(Decimal("2"), -2) == Decimal("0.25")


def test_quantize_money_rounds_half_up():
    assert quantize_money(Decimal("10.005")) == Decimal("10.01")
    assert quantize_money(Decimal("10.004")) == Decimal("10.00")
