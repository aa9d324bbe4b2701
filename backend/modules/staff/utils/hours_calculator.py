"""
Hours calculation utilities for attendance records.

Splits the worked time between check-in and check-out into regular and
overtime hours, the values the payroll engine reads from attendance.
"""

from decimal import Decimal
from datetime import datetime, date, time, timedelta
from dataclasses import dataclass
from typing import Optional

from ..schemas.attendance_schemas import AttendanceRecord
from ...payroll.services.config_manager import get_payroll_config
from ...payroll.utils.numeric import ZERO, clamp_non_negative, round_hours

MINUTES_PER_HOUR = Decimal("60")


@dataclass
class HoursBreakdown:
    """Detailed breakdown of hours worked."""

    regular_hours: Decimal
    overtime_hours: Decimal
    total_hours: Decimal


def calculate_working_hours(
    check_in: time,
    check_out: time,
    break_minutes: Optional[int] = None,
    standard_hours: Optional[Decimal] = None,
) -> HoursBreakdown:
    """
    Calculate regular and overtime hours for one shift.

    A check-out earlier than the check-in is treated as the next day.

    Args:
        check_in: Time of check-in
        check_out: Time of check-out
        break_minutes: Unpaid break deducted from the worked time
            (configured default when omitted)
        standard_hours: Hours counted as regular before overtime starts
            (configured working hours per day when omitted)

    Returns:
        HoursBreakdown rounded to two decimals
    """
    config = get_payroll_config()
    if break_minutes is None:
        break_minutes = config.default_break_minutes
    if standard_hours is None:
        standard_hours = config.working_hours_per_day

    anchor = date(2000, 1, 1)
    start = datetime.combine(anchor, check_in)
    end = datetime.combine(anchor, check_out)
    if end < start:
        end += timedelta(days=1)

    worked_minutes = Decimal(int((end - start).total_seconds() // 60)) - Decimal(break_minutes)
    total_hours = clamp_non_negative(worked_minutes / MINUTES_PER_HOUR, "working_hours")

    regular_hours = min(total_hours, standard_hours)
    overtime_hours = max(ZERO, total_hours - standard_hours)

    return HoursBreakdown(
        regular_hours=round_hours(regular_hours),
        overtime_hours=round_hours(overtime_hours),
        total_hours=round_hours(total_hours),
    )


def apply_check_out(
    record: AttendanceRecord,
    check_out: time,
    break_minutes: Optional[int] = None,
    standard_hours: Optional[Decimal] = None,
) -> AttendanceRecord:
    """
    Return ``record`` completed with its check-out time and hours.

    The break is ``break_minutes``, else the record's own break, else the
    configured default.
    """
    if record.check_in is None:
        raise ValueError(f"Attendance record for {record.date} has no check-in")

    breaks = break_minutes
    if breaks is None:
        breaks = record.break_time or get_payroll_config().default_break_minutes
    hours = calculate_working_hours(record.check_in, check_out, breaks, standard_hours)
    return record.model_copy(
        update={
            "check_out": check_out,
            "break_time": breaks,
            "regular_hours": hours.regular_hours,
            "overtime_hours": hours.overtime_hours,
            "total_working_hours": hours.total_hours,
        }
    )
