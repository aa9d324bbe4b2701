"""
Salary structure derivation.

Splits a monthly budget (or an annual CTC) into the standard Indian salary
components. ``other_allowances`` absorbs every rounding difference so the
components always add back up to the budget.
"""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..exceptions import PayrollValidationError
from ..schemas.error_schemas import ErrorDetail, PayrollErrorCodes
from ..schemas.salary_schemas import SalaryStructure, SALARY_COMPONENTS
from ..utils.numeric import ZERO, is_finite_number, round_currency, to_decimal

logger = logging.getLogger(__name__)

BASIC_RATIO = Decimal("0.50")
HRA_RATIO_OF_BASIC = Decimal("0.40")
DA_RATIO_OF_BASIC = Decimal("0.12")
SPECIAL_RATIO = Decimal("0.15")
MEDICAL_ALLOWANCE = Decimal("1250")
CONVEYANCE_ALLOWANCE = Decimal("1600")
MONTHS_PER_YEAR = Decimal("12")


def _require_amount(value: Any, field: str) -> Decimal:
    if isinstance(value, str):
        value = to_decimal(value, default=None)
    if not is_finite_number(value):
        raise PayrollValidationError(f"{field} must be a finite number", field=field)
    amount = Decimal(str(value))
    if amount < ZERO:
        raise PayrollValidationError(f"{field} must not be negative", field=field)
    return amount


def derive_salary_structure(
    monthly_total: Optional[Any] = None,
    annual_ctc: Optional[Any] = None,
) -> SalaryStructure:
    """
    Derive a salary structure from a monthly total or an annual CTC.

    basic 50% of the budget, HRA 40% and DA 12% of basic, special 15% of
    the budget, then fixed medical (1250) and conveyance (1600)
    allowances; each allowance is limited to what is left of the budget.

    Args:
        monthly_total: Monthly budget; ignored when ``annual_ctc`` is given
        annual_ctc: Annual cost to company

    Returns:
        SalaryStructure whose components sum to the monthly budget

    Raises:
        PayrollValidationError: If neither amount is given or it is invalid
    """
    if annual_ctc is not None:
        ctc = _require_amount(annual_ctc, "annual_ctc")
        budget = round_currency(ctc / MONTHS_PER_YEAR)
    elif monthly_total is not None:
        budget = round_currency(_require_amount(monthly_total, "monthly_total"))
        ctc = budget * MONTHS_PER_YEAR
    else:
        raise PayrollValidationError(
            "Either monthly_total or annual_ctc is required",
            field="monthly_total",
        )

    basic = round_currency(budget * BASIC_RATIO)
    hra = round_currency(basic * HRA_RATIO_OF_BASIC)
    da = round_currency(basic * DA_RATIO_OF_BASIC)
    remaining = max(budget - basic - hra - da, ZERO)

    special = min(round_currency(budget * SPECIAL_RATIO), remaining)
    remaining -= special
    medical = min(MEDICAL_ALLOWANCE, remaining)
    remaining -= medical
    conveyance = min(CONVEYANCE_ALLOWANCE, remaining)
    remaining -= conveyance

    structure = SalaryStructure(
        basic=basic,
        hra=hra,
        da=da,
        special_allowance=special,
        medical_allowance=medical,
        conveyance_allowance=conveyance,
        other_allowances=remaining,
        ctc=ctc,
    )
    logger.debug(f"Derived salary structure for monthly budget {budget}: {structure}")
    return structure


def build_manual_structure(components: Mapping[str, Any]) -> SalaryStructure:
    """
    Accept an explicit monthly breakdown.

    Only non-negativity is checked; missing components are taken as 0 and
    the CTC is recomputed as twelve times the monthly sum.
    """
    details = []
    values = {}
    for name in SALARY_COMPONENTS:
        raw = components.get(name, ZERO)
        try:
            values[name] = _require_amount(raw, name)
        except PayrollValidationError as e:
            details.append(
                ErrorDetail(field=name, message=e.message, code=PayrollErrorCodes.INVALID_AMOUNT)
            )

    if details:
        raise PayrollValidationError(
            "Invalid salary components",
            details=details,
            code=PayrollErrorCodes.INVALID_SALARY_STRUCTURE,
        )

    values["ctc"] = sum(values.values(), ZERO) * MONTHS_PER_YEAR
    return SalaryStructure(**values)


def resolve_salary_structure(
    total: Any,
    auto_calculate: bool,
    components: Optional[Mapping[str, Any]] = None,
) -> SalaryStructure:
    """Pick the derived or the manual structure, as the salary form does."""
    if auto_calculate:
        return derive_salary_structure(monthly_total=total)
    return build_manual_structure(components or {})
