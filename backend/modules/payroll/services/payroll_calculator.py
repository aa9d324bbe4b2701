"""
Payroll Calculator - monthly payroll for one employee.

Composes the salary structure, overtime aggregation, shift differentials,
leave adjustment and statutory deductions into a Draft ``PayrollRecord``.
The calculator only reads from the data sources it is given, so repeated
calls with unchanged inputs produce identical records.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional, Set, TypeVar

from ...staff.enums.attendance_enums import AttendanceStatus
from ...staff.enums.scheduling_enums import ShiftType
from ...staff.schemas.attendance_schemas import AttendanceRecord
from ...staff.schemas.leave_schemas import LeaveRequest
from ...staff.schemas.shift_schemas import Shift
from ...staff.schemas.staff_schemas import Employee
from ...staff.services.data_sources import (
    EmployeeDirectory,
    AttendanceStore,
    LeaveStore,
    ShiftStore,
)
from ..enums.payroll_enums import PayrollStatus
from ..exceptions import (
    DataUnavailableError,
    EmployeeNotFoundError,
    InvalidSalaryStructureError,
    PayrollValidationError,
)
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import (
    LeaveDetails,
    PayrollDeductions,
    PayrollRecord,
    WeeklyOvertimeSummary,
)
from ..schemas.salary_schemas import SALARY_COMPONENTS
from ..utils.numeric import ZERO, clamp_non_negative, currency
from .config_manager import PayrollConfig, get_payroll_config
from .leave_adjuster import EncashmentPolicy, adjust_for_leave, clamp_present_days
from .overtime_aggregator import (
    aggregate_monthly_overtime,
    classify_day,
    filter_month_records,
    overtime_multiplier,
)
from .statutory_calculator import (
    calculate_esi,
    calculate_pf,
    calculate_professional_tax,
    calculate_tds,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MONTHS_PER_YEAR = Decimal("12")
PERCENT = Decimal("100")


@dataclass
class ShiftDifferentials:
    """Night and shift differentials accumulated over a month."""
    night_differential: Decimal = ZERO
    shift_differential: Decimal = ZERO


def validate_period(month: int, year: int) -> None:
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise PayrollValidationError(
            f"Month must be between 1 and 12, got {month}",
            field="month",
            code=PayrollErrorCodes.INVALID_PERIOD,
        )
    if not isinstance(year, int) or not 1900 <= year <= 9999:
        raise PayrollValidationError(
            f"Year must be between 1900 and 9999, got {year}",
            field="year",
            code=PayrollErrorCodes.INVALID_PERIOD,
        )


class PayrollCalculator:
    """
    Monthly payroll calculator.

    Data sources are injected so the calculator holds no state of its own
    beyond the read-only configuration.
    """

    def __init__(
        self,
        employees: EmployeeDirectory,
        attendance: AttendanceStore,
        leaves: LeaveStore,
        shifts: ShiftStore,
        config: Optional[PayrollConfig] = None,
        holidays: Optional[Set[date]] = None,
        encashment_policy: Optional[EncashmentPolicy] = None,
    ):
        self.employees = employees
        self.attendance = attendance
        self.leaves = leaves
        self.shifts = shifts
        self.config = config or get_payroll_config()
        self.holidays = frozenset(holidays or ())
        self.encashment_policy = encashment_policy

    def list_employee_ids(self) -> List[int]:
        return [employee.id for employee in self.employees.list_employees()]

    def calculate(self, employee_id: int, month: int, year: int) -> PayrollRecord:
        """
        Calculate the Draft payroll record for one employee and month.

        Args:
            employee_id: Employee to pay
            month: Calendar month (1-12)
            year: Calendar year

        Returns:
            PayrollRecord in Draft status

        Raises:
            PayrollValidationError: If the period is invalid
            EmployeeNotFoundError: If the employee is unknown
            InvalidSalaryStructureError: If the salary structure is missing
                or has missing, non-finite or negative components
        """
        validate_period(month, year)

        # (a) validate employee and salary structure
        employee = self.employees.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        structure = employee.salary_structure
        if structure is None:
            raise InvalidSalaryStructureError(employee_id, SALARY_COMPONENTS)
        invalid_fields = structure.missing_components()
        if invalid_fields:
            raise InvalidSalaryStructureError(employee_id, invalid_fields)

        structure = structure.snapshot()
        working_days = self.config.working_days_per_month
        context = f"employee {employee_id} {month}/{year}"

        # (b) gross and (c) daily/hourly rates
        gross_salary = currency(structure.gross_salary(), "gross_salary", context)
        daily_salary = gross_salary / Decimal(working_days)
        hourly_rate = daily_salary / self.config.working_hours_per_day

        records = filter_month_records(
            self._read(
                "attendance",
                lambda: self.attendance.get_attendance_for_employee_month(employee_id, month, year),
            ),
            employee_id,
            month,
            year,
        )
        present_days = sum(1 for r in records if r.counts_as_present)
        late_days = sum(1 for r in records if r.status == AttendanceStatus.LATE)

        # (d) overtime
        overtime = aggregate_monthly_overtime(
            employee_id,
            month,
            year,
            records,
            hourly_rate,
            rules=self.config.overtime,
            holidays=set(self.holidays),
        )

        # (e) night and shift differentials
        differentials = self._calculate_shift_differentials(employee, records, hourly_rate)

        # (f) leave
        leaves: List[LeaveRequest] = self._read(
            "leave",
            lambda: self.leaves.get_approved_leave_for_month(employee_id, month, year),
        )
        leave = adjust_for_leave(
            employee_id,
            month,
            year,
            leaves,
            gross_salary,
            present_days,
            working_days=working_days,
            encashment_policy=self.encashment_policy,
        )

        # (g) statutory deductions off the unadjusted structure
        rates = self.config.statutory
        annual_ctc = structure.annual_ctc()
        if annual_ctc <= ZERO:
            annual_ctc = gross_salary * MONTHS_PER_YEAR
        esi = calculate_esi(structure, rates)

        # (h) attendance deductions
        deductions = PayrollDeductions(
            pf=calculate_pf(structure, rates),
            esi=esi.employee,
            professional_tax=calculate_professional_tax(employee.state, gross_salary, rates),
            tds=calculate_tds(annual_ctc, rates=rates),
            late_deduction=currency(
                Decimal(late_days) * self.config.late_deduction_rate * daily_salary,
                "late_deduction",
                context,
            ),
            absent_deduction=currency(leave.absent_days * daily_salary, "absent_deduction", context),
            unpaid_leave_deduction=leave.leave_deduction,
        )

        # (i) adjusted gross, (j) total deductions, (k) net
        adjusted_gross = currency(
            gross_salary
            + overtime.total_pay
            + differentials.night_differential
            + differentials.shift_differential
            + leave.leave_encashment,
            "adjusted_gross_salary",
            context,
        )
        total_deductions = currency(deductions.total(), "total_deductions", context)
        net_salary = currency(adjusted_gross - total_deductions, "net_salary", context)

        return PayrollRecord(
            employee_id=employee_id,
            employee_name=employee.name,
            month=month,
            year=year,
            salary_breakdown=structure,
            overtime_hours=overtime.total_hours,
            overtime_pay=overtime.total_pay,
            night_differential=differentials.night_differential,
            shift_differential=differentials.shift_differential,
            weekly_overtime=[
                WeeklyOvertimeSummary(
                    week=week.week, raw_hours=week.raw_hours, hours=week.hours, pay=week.pay
                )
                for week in overtime.weekly
            ],
            leave_details=LeaveDetails(
                total_leave_days=leave.total_leave_days,
                paid_leave_days=leave.paid_leave_days,
                unpaid_leave_days=leave.unpaid_leave_days,
                leave_deduction=leave.leave_deduction,
                leave_encashment=leave.leave_encashment,
            ),
            deductions=deductions,
            working_days=working_days,
            present_days=clamp_present_days(present_days, leave.total_leave_days, working_days),
            late_days=late_days,
            absent_days=leave.absent_days,
            gross_salary=gross_salary,
            adjusted_gross_salary=adjusted_gross,
            total_deductions=total_deductions,
            net_salary=net_salary,
            status=PayrollStatus.DRAFT,
        )

    def _read(self, source: str, fetch: Callable[[], List[T]]) -> List[T]:
        """Read from a data source, treating an unavailable source as empty."""
        try:
            return list(fetch() or [])
        except DataUnavailableError as e:
            logger.warning(
                f"{PayrollErrorCodes.DATA_UNAVAILABLE}: {source} source failed, "
                f"continuing with no {source} data: {e.message}"
            )
            return []

    def _resolve_shift(self, employee: Employee, record: AttendanceRecord) -> Optional[Shift]:
        """Record shift, then the day's assignment, then the employee's default shift."""
        try:
            if record.shift_id is not None:
                return self.shifts.get_shift(record.shift_id)
            shift = self.shifts.get_shift_for_employee_on_date(employee.id, record.date)
            if shift is None and employee.default_shift_id is not None:
                shift = self.shifts.get_shift(employee.default_shift_id)
            return shift
        except DataUnavailableError as e:
            logger.warning(
                f"{PayrollErrorCodes.DATA_UNAVAILABLE}: shift lookup for employee "
                f"{employee.id} on {record.date} failed: {e.message}"
            )
            return None

    def _calculate_shift_differentials(
        self, employee: Employee, records: List[AttendanceRecord], hourly_rate: Decimal
    ) -> ShiftDifferentials:
        rules = self.config.overtime
        night_total = ZERO
        shift_total = ZERO

        for record in records:
            shift = self._resolve_shift(employee, record)
            if shift is None:
                continue

            regular_hours = clamp_non_negative(record.regular_hours, "regular_hours")
            capped_overtime = min(
                clamp_non_negative(record.overtime_hours, "overtime_hours"),
                rules.max_daily_hours,
            )

            if shift.type == ShiftType.NIGHT:
                rate = (
                    shift.night_differential / PERCENT
                    if shift.night_differential is not None
                    else rules.night_differential
                )
                night_total += (regular_hours + capped_overtime) * hourly_rate * rate

            if capped_overtime > ZERO:
                is_holiday = record.is_holiday or record.date in self.holidays
                applied = overtime_multiplier(classify_day(record.date, is_holiday), rules)
                extra = shift.overtime_multiplier - applied
                if extra > ZERO:
                    shift_total += capped_overtime * hourly_rate * extra

        return ShiftDifferentials(
            night_differential=currency(night_total, "night_differential"),
            shift_differential=currency(shift_total, "shift_differential"),
        )
