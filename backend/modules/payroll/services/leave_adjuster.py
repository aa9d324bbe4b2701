"""
Leave-based salary adjustment.

Counts an employee's approved leave in a payroll month, splits it into
paid and unpaid days and prices the unpaid part against the daily rate.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from ...staff.enums.leave_enums import LeaveStatus
from ...staff.schemas.leave_schemas import LeaveRequest
from ..utils.numeric import ZERO, clamp_non_negative, currency, to_decimal
from .config_manager import get_payroll_config

logger = logging.getLogger(__name__)

EncashmentPolicy = Callable[[List[LeaveRequest], Decimal], Decimal]


@dataclass
class LeaveAdjustment:
    total_leave_days: Decimal = ZERO
    paid_leave_days: Decimal = ZERO
    unpaid_leave_days: Decimal = ZERO
    leave_deduction: Decimal = ZERO
    leave_encashment: Decimal = ZERO
    absent_days: Decimal = ZERO


def no_encashment(leaves: List[LeaveRequest], gross_salary: Decimal) -> Decimal:
    return ZERO


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def recorded_leave_days(leave: LeaveRequest) -> Decimal:
    """Recorded days of an approved leave; a negative count is clamped to 0."""
    return clamp_non_negative(leave.days, "leave_days", f"leave {leave.id}")


def approved_leaves_for_month(
    leaves: Iterable[LeaveRequest], employee_id: int, month: int, year: int
) -> List[LeaveRequest]:
    period_start, period_end = month_bounds(month, year)
    return [
        leave for leave in leaves
        if leave.employee_id == employee_id
        and leave.status == LeaveStatus.APPROVED
        and leave.overlaps(period_start, period_end)
    ]


def clamp_present_days(present_days: int, total_leave_days, working_days: int) -> int:
    """Present and leave days may not together exceed the working days."""
    leave_days = min(to_decimal(total_leave_days), Decimal(working_days))
    available = int(Decimal(working_days) - leave_days)
    return max(0, min(int(present_days), available))


def adjust_for_leave(
    employee_id: int,
    month: int,
    year: int,
    leaves: Iterable[LeaveRequest],
    gross_salary,
    present_days: int,
    working_days: Optional[int] = None,
    encashment_policy: Optional[EncashmentPolicy] = None,
) -> LeaveAdjustment:
    """
    Compute leave totals, the unpaid-leave deduction and absent days.

    Args:
        employee_id: Employee being paid
        month: Calendar month (1-12)
        year: Calendar year
        leaves: Leave requests; only approved ones overlapping the month count
        gross_salary: Monthly gross used for the daily rate
        present_days: Days the employee was present or late
        working_days: Working days per month (configured default 26)
        encashment_policy: Callable pricing leave encashment (default none)

    Returns:
        LeaveAdjustment with whole-rupee amounts
    """
    if working_days is None:
        working_days = get_payroll_config().working_days_per_month
    encashment_policy = encashment_policy or no_encashment

    counted = approved_leaves_for_month(leaves, employee_id, month, year)

    total_leave = ZERO
    paid_leave = ZERO
    for leave in counted:
        days = recorded_leave_days(leave)
        total_leave += days
        if leave.is_paid:
            paid_leave += days
    unpaid_leave = total_leave - paid_leave

    gross = clamp_non_negative(gross_salary, "gross_salary")
    divisor = Decimal(working_days)
    leave_deduction = currency(unpaid_leave * gross / divisor, "leave_deduction")
    leave_encashment = currency(encashment_policy(counted, gross), "leave_encashment")

    absent_days = max(ZERO, divisor - Decimal(present_days) - total_leave)

    if counted:
        logger.debug(
            f"Employee {employee_id} {month}/{year}: {total_leave} leave days "
            f"({unpaid_leave} unpaid) from {len(counted)} requests"
        )

    return LeaveAdjustment(
        total_leave_days=total_leave,
        paid_leave_days=paid_leave,
        unpaid_leave_days=unpaid_leave,
        leave_deduction=leave_deduction,
        leave_encashment=leave_encashment,
        absent_days=absent_days,
    )
