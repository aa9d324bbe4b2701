"""
Numeric normalization for payroll calculations.

All component boundaries pass values through these helpers so that
missing, non-numeric, NaN or infinite inputs become ``Decimal('0')``
instead of leaking into a payroll record.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from ..schemas.error_schemas import PayrollErrorCodes

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
RUPEE = Decimal("1")
HUNDREDTH = Decimal("0.01")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Coerce ``value`` to a finite Decimal.

    Args:
        value: Any input (number, numeric string, None, ...)
        default: Returned when the value is missing or not a finite number

    Returns:
        Finite Decimal
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            result = Decimal(text)
        except InvalidOperation:
            return default
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return default

    if not result.is_finite():
        return default
    return result


def is_finite_number(value: Any) -> bool:
    """True when ``value`` is a real, finite number (bools excluded)."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return Decimal(str(value)).is_finite()
    return False


def round_currency(value: Any) -> Decimal:
    """Round to whole rupees, half away from zero."""
    return to_decimal(value).quantize(RUPEE, rounding=ROUND_HALF_UP)


def round_hours(value: Any) -> Decimal:
    """Round hours to two decimals."""
    return to_decimal(value).quantize(HUNDREDTH, rounding=ROUND_HALF_UP)


def clamp_non_negative(value: Any, field: str = "amount", context: str = "") -> Decimal:
    """
    Normalize ``value`` and clamp negatives to zero.

    A negative result is an arithmetic anomaly: it is logged, never raised.
    """
    amount = to_decimal(value)
    if amount < ZERO:
        logger.warning(
            f"{PayrollErrorCodes.ARITHMETIC_ANOMALY}: negative {field} "
            f"{amount} clamped to 0{' (' + context + ')' if context else ''}",
            extra={"error_code": PayrollErrorCodes.ARITHMETIC_ANOMALY, "field": field},
        )
        return ZERO
    return amount


def currency(value: Any, field: str = "amount", context: str = "") -> Decimal:
    """Finite, non-negative, whole-rupee amount."""
    return round_currency(clamp_non_negative(value, field, context))
