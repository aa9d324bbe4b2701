# backend/modules/payroll/tests/test_numeric.py

import logging
import pytest
from decimal import Decimal

from ..utils.numeric import (
    clamp_non_negative,
    currency,
    is_finite_number,
    round_currency,
    round_hours,
    to_decimal,
)


class TestToDecimal:

    @pytest.mark.parametrize("value,expected", [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        (float("nan"), Decimal("0")),
        (float("inf"), Decimal("0")),
        (Decimal("NaN"), Decimal("0")),
        (True, Decimal("0")),
        ("12.5", Decimal("12.5")),
        (7, Decimal("7")),
        (0.1, Decimal("0.1")),
    ])
    def test_coercion(self, value, expected):
        assert to_decimal(value) == expected

    def test_custom_default(self):
        assert to_decimal("x", default=None) is None


def test_is_finite_number():
    assert is_finite_number(Decimal("1"))
    assert is_finite_number(3)
    assert not is_finite_number(float("inf"))
    assert not is_finite_number(None)
    assert not is_finite_number("5")
    assert not is_finite_number(False)


def test_rounding_is_half_up():
    assert round_currency(Decimal("2.5")) == Decimal("3")
    assert round_currency(Decimal("-2.5")) == Decimal("-3")
    assert round_currency(Decimal("1307.69")) == Decimal("1308")
    assert round_hours(Decimal("1.005")) == Decimal("1.01")


def test_clamp_logs_anomaly(caplog):
    with caplog.at_level(logging.WARNING):
        assert clamp_non_negative(Decimal("-5"), "net_salary", "employee 1") == Decimal("0")

    assert "PAYROLL_ARITHMETIC_ANOMALY" in caplog.text
    assert "net_salary" in caplog.text


def test_currency_keeps_positive_amounts(caplog):
    with caplog.at_level(logging.WARNING):
        assert currency(Decimal("99.5")) == Decimal("100")
    assert caplog.text == ""
