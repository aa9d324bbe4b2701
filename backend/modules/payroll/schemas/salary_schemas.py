# backend/modules/payroll/schemas/salary_schemas.py

"""
Salary structure schema.

Monthly component amounts plus the annual CTC. Components are optional and
accept NaN/Infinity so that a malformed structure read from the employee
directory can still be represented; the payroll calculator rejects it
during validation.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from decimal import Decimal

from ..utils.numeric import to_decimal, is_finite_number, ZERO

SALARY_COMPONENTS = (
    "basic",
    "hra",
    "da",
    "special_allowance",
    "medical_allowance",
    "conveyance_allowance",
    "other_allowances",
)


class SalaryStructure(BaseModel):
    """Monthly salary components (rupees) with the annual cost to company."""

    basic: Optional[Decimal] = Field(None, allow_inf_nan=True, description="Basic salary")
    hra: Optional[Decimal] = Field(None, allow_inf_nan=True, description="House rent allowance")
    da: Optional[Decimal] = Field(None, allow_inf_nan=True, description="Dearness allowance")
    special_allowance: Optional[Decimal] = Field(None, allow_inf_nan=True)
    medical_allowance: Optional[Decimal] = Field(None, allow_inf_nan=True)
    conveyance_allowance: Optional[Decimal] = Field(None, allow_inf_nan=True)
    other_allowances: Optional[Decimal] = Field(None, allow_inf_nan=True)
    ctc: Optional[Decimal] = Field(None, allow_inf_nan=True, description="Annual cost to company")

    model_config = ConfigDict(from_attributes=True)

    def component(self, name: str) -> Decimal:
        return to_decimal(getattr(self, name))

    def components(self) -> Dict[str, Decimal]:
        return {name: self.component(name) for name in SALARY_COMPONENTS}

    def gross_salary(self) -> Decimal:
        """Sum of the monthly components; missing values count as 0."""
        return sum(self.components().values(), ZERO)

    def annual_ctc(self) -> Decimal:
        return to_decimal(self.ctc)

    def missing_components(self) -> List[str]:
        """Components that are absent, non-numeric, non-finite or negative."""
        invalid = []
        for name in SALARY_COMPONENTS:
            raw = getattr(self, name)
            if isinstance(raw, str):
                raw = to_decimal(raw, default=None)
            if not is_finite_number(raw) or Decimal(str(raw)) < ZERO:
                invalid.append(name)
        return invalid

    def snapshot(self) -> "SalaryStructure":
        """Normalized copy with every component and the CTC as a Decimal."""
        values = self.components()
        values["ctc"] = self.annual_ctc()
        return SalaryStructure(**values)
