"""Payroll utilities."""

from .numeric import (
    to_decimal,
    is_finite_number,
    round_currency,
    round_hours,
    clamp_non_negative,
    currency,
)

__all__ = [
    "to_decimal",
    "is_finite_number",
    "round_currency",
    "round_hours",
    "clamp_non_negative",
    "currency",
]
