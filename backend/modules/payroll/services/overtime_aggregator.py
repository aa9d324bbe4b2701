"""
Monthly overtime aggregation.

Overtime is priced per attendance record (day-type multiplier, daily cap,
optional night differential), bucketed into week-of-month groups and then
limited by the weekly cap, scaling a capped week's pay proportionally.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Set, Dict

from ...staff.enums.scheduling_enums import ShiftType
from ...staff.schemas.attendance_schemas import AttendanceRecord
from ..enums.payroll_enums import OvertimeDayType
from ..utils.numeric import ZERO, clamp_non_negative, currency, round_hours, to_decimal
from .config_manager import OvertimeRules, get_payroll_config

logger = logging.getLogger(__name__)

ShiftTypeResolver = Callable[[AttendanceRecord], Optional[ShiftType]]


@dataclass
class ShiftPay:
    """Pay for one attendance record, each part rounded to rupees."""
    regular_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    night_differential: Decimal = ZERO
    consecutive_bonus: Decimal = ZERO
    total_pay: Decimal = ZERO


@dataclass
class WeeklyOvertime:
    week: int
    raw_hours: Decimal = ZERO
    hours: Decimal = ZERO
    pay: Decimal = ZERO


@dataclass
class MonthlyOvertimeSummary:
    total_hours: Decimal = ZERO
    total_pay: Decimal = ZERO
    weekly: List[WeeklyOvertime] = field(default_factory=list)


def week_of_month(day: date) -> int:
    """Days 1-7 are week 1, 8-14 week 2, ..., 29-31 week 5."""
    return (day.day + 6) // 7


def classify_day(day: date, is_holiday: bool = False) -> OvertimeDayType:
    if is_holiday:
        return OvertimeDayType.HOLIDAY
    if day.weekday() >= 5:
        return OvertimeDayType.WEEKEND
    return OvertimeDayType.WEEKDAY


def overtime_multiplier(day_type: OvertimeDayType, rules: OvertimeRules) -> Decimal:
    if day_type == OvertimeDayType.HOLIDAY:
        return rules.holiday_multiplier
    if day_type == OvertimeDayType.WEEKEND:
        return rules.weekend_multiplier
    return rules.weekday_multiplier


def calculate_shift_pay(
    regular_hours,
    overtime_hours,
    hourly_rate,
    work_date: date,
    shift_type: ShiftType = ShiftType.DAY,
    consecutive_days: int = 0,
    is_holiday: bool = False,
    rules: Optional[OvertimeRules] = None,
    night_differential_rate: Optional[Decimal] = None,
) -> ShiftPay:
    """
    Price a single shift.

    Overtime hours are capped at the daily limit before the day-type
    multiplier applies. Night shifts earn the differential on regular plus
    capped overtime hours. Working at least ``consecutive_day_threshold``
    days in a row adds a bonus on regular plus overtime pay.
    """
    rules = rules or get_payroll_config().overtime
    regular = clamp_non_negative(regular_hours, "regular_hours")
    overtime = clamp_non_negative(overtime_hours, "overtime_hours")
    rate = clamp_non_negative(hourly_rate, "hourly_rate")

    regular_pay = regular * rate
    multiplier = overtime_multiplier(classify_day(work_date, is_holiday), rules)
    capped_overtime = min(overtime, rules.max_daily_hours)
    overtime_pay = capped_overtime * rate * multiplier

    night_differential = ZERO
    if shift_type == ShiftType.NIGHT:
        differential_rate = (
            to_decimal(night_differential_rate)
            if night_differential_rate is not None
            else rules.night_differential
        )
        night_differential = (regular + capped_overtime) * rate * differential_rate

    consecutive_bonus = ZERO
    if consecutive_days >= rules.consecutive_day_threshold:
        consecutive_bonus = (regular_pay + overtime_pay) * rules.consecutive_day_bonus

    total_pay = regular_pay + overtime_pay + night_differential + consecutive_bonus

    return ShiftPay(
        regular_pay=currency(regular_pay),
        overtime_pay=currency(overtime_pay),
        night_differential=currency(night_differential),
        consecutive_bonus=currency(consecutive_bonus),
        total_pay=currency(total_pay),
    )


def filter_month_records(
    attendance: Iterable[AttendanceRecord], employee_id: int, month: int, year: int
) -> List[AttendanceRecord]:
    return [
        record for record in attendance
        if record.employee_id == employee_id
        and record.date.month == month
        and record.date.year == year
    ]


def aggregate_monthly_overtime(
    employee_id: int,
    month: int,
    year: int,
    attendance: Iterable[AttendanceRecord],
    hourly_rate,
    rules: Optional[OvertimeRules] = None,
    holidays: Optional[Set[date]] = None,
    shift_type_resolver: Optional[ShiftTypeResolver] = None,
) -> MonthlyOvertimeSummary:
    """
    Aggregate an employee's overtime for a month.

    Args:
        employee_id: Employee whose records are aggregated
        month: Calendar month (1-12)
        year: Calendar year
        attendance: Attendance records; other employees/months are ignored
        hourly_rate: Base hourly pay
        rules: Overtime rules (configured defaults when omitted)
        holidays: Dates priced at the holiday multiplier
        shift_type_resolver: Maps a record to its shift type (Day when omitted)

    Returns:
        Total hours (2 decimals), total pay (rupees) and the weekly breakdown
    """
    rules = rules or get_payroll_config().overtime
    holidays = holidays or set()

    weeks: Dict[int, List[AttendanceRecord]] = {}
    for record in filter_month_records(attendance, employee_id, month, year):
        weeks.setdefault(week_of_month(record.date), []).append(record)

    total_hours = ZERO
    total_pay = ZERO
    weekly: List[WeeklyOvertime] = []

    for week in sorted(weeks):
        raw_hours = ZERO
        raw_pay = ZERO

        for record in weeks[week]:
            overtime_hours = clamp_non_negative(
                record.overtime_hours, "overtime_hours", f"employee {employee_id} {record.date}"
            )
            if overtime_hours <= ZERO:
                continue

            shift_type = ShiftType.DAY
            if shift_type_resolver is not None:
                shift_type = shift_type_resolver(record) or ShiftType.DAY

            pay = calculate_shift_pay(
                regular_hours=record.regular_hours,
                overtime_hours=overtime_hours,
                hourly_rate=hourly_rate,
                work_date=record.date,
                shift_type=shift_type,
                is_holiday=record.is_holiday or record.date in holidays,
                rules=rules,
            )
            raw_hours += overtime_hours
            raw_pay += pay.overtime_pay + pay.night_differential

        if raw_hours <= ZERO:
            weekly.append(WeeklyOvertime(week=week))
            continue

        capped_hours = min(raw_hours, rules.max_weekly_hours)
        capped_pay = raw_pay * (capped_hours / raw_hours)
        if capped_hours < raw_hours:
            logger.debug(
                f"Employee {employee_id} week {week} of {month}/{year}: "
                f"overtime capped from {raw_hours} to {capped_hours} hours"
            )

        total_hours += capped_hours
        total_pay += capped_pay
        weekly.append(
            WeeklyOvertime(
                week=week,
                raw_hours=round_hours(raw_hours),
                hours=round_hours(capped_hours),
                pay=currency(capped_pay),
            )
        )

    return MonthlyOvertimeSummary(
        total_hours=round_hours(total_hours),
        total_pay=currency(total_pay),
        weekly=weekly,
    )
