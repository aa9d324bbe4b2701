"""
Indian statutory deduction formulas.

Provident Fund, Employee State Insurance, Professional Tax and TDS on
salary. All functions are pure: inputs are normalized with
``utils.numeric`` and every result is a finite, non-negative,
whole-rupee ``Decimal``. Rates and tables come from ``StatutoryRates``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..schemas.salary_schemas import SalaryStructure
from ..utils.numeric import ZERO, to_decimal, currency
from .config_manager import StatutoryRates, get_payroll_config

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class ESIContribution:
    """Employee and employer ESI shares for one month."""
    employee: Decimal = ZERO
    employer: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.employee + self.employer


def _rates(rates: Optional[StatutoryRates]) -> StatutoryRates:
    return rates if rates is not None else get_payroll_config().statutory


def calculate_gross_salary(structure: SalaryStructure) -> Decimal:
    """Monthly gross: the sum of every salary component."""
    return currency(structure.gross_salary(), "gross_salary")


def calculate_pf(structure: SalaryStructure, rates: Optional[StatutoryRates] = None) -> Decimal:
    """
    Employee provident fund contribution.

    PF wages are basic + DA, capped at the statutory ceiling
    (15000), so the contribution never exceeds 1800 at 12%.
    """
    rates = _rates(rates)
    pf_wages = structure.component("basic") + structure.component("da")
    base = min(pf_wages, rates.pf_wage_ceiling)
    return currency(base * rates.pf_rate, "pf")


def calculate_esi(structure: SalaryStructure, rates: Optional[StatutoryRates] = None) -> ESIContribution:
    """
    Employee state insurance shares.

    Applies only while monthly gross is at or below the wage ceiling;
    above it both shares are zero.
    """
    rates = _rates(rates)
    gross = structure.gross_salary()
    if gross > rates.esi_wage_ceiling:
        return ESIContribution()
    return ESIContribution(
        employee=currency(gross * rates.esi_employee_rate, "esi_employee"),
        employer=currency(gross * rates.esi_employer_rate, "esi_employer"),
    )


def calculate_professional_tax(
    state: Optional[str],
    gross_salary: Any,
    rates: Optional[StatutoryRates] = None,
) -> Decimal:
    """Monthly state professional tax; unknown states use the default rate."""
    rates = _rates(rates)
    gross = to_decimal(gross_salary)
    if gross <= rates.professional_tax_threshold:
        return ZERO
    return currency(rates.professional_tax_for(state), "professional_tax")


def calculate_annual_income_tax(
    annual_ctc: Any,
    investments: Any = None,
    rates: Optional[StatutoryRates] = None,
) -> Decimal:
    """Annual tax including cess, before rounding."""
    rates = _rates(rates)
    taxable_income = max(to_decimal(annual_ctc) - to_decimal(investments), ZERO)

    tax = ZERO
    for slab in rates.tax_slabs:
        tax += slab.taxable_portion(taxable_income) * slab.rate

    return tax * (Decimal("1") + rates.cess_rate)


def calculate_tds(
    annual_ctc: Any,
    investments: Any = None,
    rates: Optional[StatutoryRates] = None,
) -> Decimal:
    """
    Monthly TDS on salary.

    Args:
        annual_ctc: Annual cost to company
        investments: Annual exemptions/deductions claimed (default 0)
        rates: Slab table and cess override

    Returns:
        Annual slab tax plus cess, divided by 12 and rounded to rupees
    """
    annual_tax = calculate_annual_income_tax(annual_ctc, investments, rates)
    return currency(annual_tax / MONTHS_PER_YEAR, "tds")


def calculate_net_salary(structure: SalaryStructure, deductions: Mapping[str, Any]) -> Decimal:
    """Gross salary minus the sum of a deductions mapping."""
    total_deductions = sum((to_decimal(value) for value in deductions.values()), ZERO)
    return currency(structure.gross_salary() - total_deductions, "net_salary")
