# backend/modules/payroll/schemas/payroll_schemas.py

"""
Pydantic schemas for payroll module API endpoints.

Provides request/response models for:
- Monthly payroll records and their breakdowns
- Batch processing results
- Calculate/process requests
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from ..enums.payroll_enums import PayrollStatus
from .salary_schemas import SalaryStructure

ZERO = Decimal("0")


class LeaveDetails(BaseModel):
    """Leave taken in the payroll month and its pay effect"""

    total_leave_days: Decimal = ZERO
    paid_leave_days: Decimal = ZERO
    unpaid_leave_days: Decimal = ZERO
    leave_deduction: Decimal = ZERO
    leave_encashment: Decimal = ZERO


class PayrollDeductions(BaseModel):
    """Statutory and attendance deductions in whole rupees"""

    pf: Decimal = ZERO
    esi: Decimal = ZERO
    professional_tax: Decimal = ZERO
    tds: Decimal = ZERO
    late_deduction: Decimal = ZERO
    absent_deduction: Decimal = ZERO
    unpaid_leave_deduction: Decimal = ZERO

    def total(self) -> Decimal:
        return (
            self.pf
            + self.esi
            + self.professional_tax
            + self.tds
            + self.late_deduction
            + self.absent_deduction
            + self.unpaid_leave_deduction
        )


class WeeklyOvertimeSummary(BaseModel):
    """Overtime for one week-of-month bucket"""

    week: int = Field(..., ge=1, le=5)
    raw_hours: Decimal = ZERO
    hours: Decimal = ZERO
    pay: Decimal = ZERO


class PayrollRecord(BaseModel):
    """Monthly payroll for one employee"""

    id: Optional[int] = None
    employee_id: int
    employee_name: Optional[str] = None
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900)

    salary_breakdown: SalaryStructure

    overtime_hours: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    night_differential: Decimal = ZERO
    shift_differential: Decimal = ZERO
    weekly_overtime: List[WeeklyOvertimeSummary] = Field(default_factory=list)

    leave_details: LeaveDetails = Field(default_factory=LeaveDetails)
    deductions: PayrollDeductions = Field(default_factory=PayrollDeductions)

    working_days: int = 26
    present_days: int = 0
    late_days: int = 0
    absent_days: Decimal = ZERO

    gross_salary: Decimal = ZERO
    adjusted_gross_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO

    status: PayrollStatus = PayrollStatus.DRAFT
    processed_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PayrollFailure(BaseModel):
    """Employee that could not be processed in a batch"""

    employee_id: int
    code: str
    reason: str


class PayrollProcessResult(BaseModel):
    """Outcome of processing one payroll period"""

    month: int
    year: int
    records: List[PayrollRecord] = Field(default_factory=list)
    failures: List[PayrollFailure] = Field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.records)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class CalculatePayrollRequest(BaseModel):
    """Request model for a single-employee payroll preview"""

    employee_id: int = Field(..., gt=0)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)


class ProcessPayrollRequest(BaseModel):
    """Request model for processing a payroll period"""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)
    force_recalculate: bool = Field(
        False, description="Recalculate even when a record exists for the period"
    )


class PayrollProcessResponse(BaseModel):
    """Response model for a processed payroll period"""

    month: int
    year: int
    processed_count: int
    failed_count: int
    records: List[PayrollRecord]
    failures: List[PayrollFailure]
