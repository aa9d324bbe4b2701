# backend/modules/payroll/tests/test_payroll_calculator.py

"""
Tests for the monthly payroll calculator.
"""

import logging
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

from ...staff.enums.attendance_enums import AttendanceStatus
from ...staff.enums.scheduling_enums import ShiftType
from ...staff.schemas.shift_schemas import ShiftAssignment
from ..enums.payroll_enums import PayrollStatus
from ..exceptions import (
    DataUnavailableError,
    EmployeeNotFoundError,
    InvalidSalaryStructureError,
    PayrollValidationError,
)
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.salary_schemas import SALARY_COMPONENTS
from ..services.payroll_calculator import PayrollCalculator


def _decimals(value):
    """Yield every Decimal inside a dumped record."""
    if isinstance(value, Decimal):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _decimals(item)
    elif isinstance(value, list):
        for item in value:
            yield from _decimals(item)


@pytest.fixture
def full_month(working_month_factory):
    return working_month_factory(1)


class TestStatutoryScenarios:
    """Gross 34000 employee in Maharashtra with CTC 408000."""

    def test_full_attendance(self, calculator_factory, employee_factory, full_month):
        calculator = calculator_factory(employees=[employee_factory()], attendance=full_month)

        record = calculator.calculate(1, 1, 2025)

        assert record.status == PayrollStatus.DRAFT
        assert record.gross_salary == Decimal("34000")
        assert record.present_days == 26
        assert record.absent_days == Decimal("0")
        assert record.deductions.pf == Decimal("1800")
        assert record.deductions.esi == Decimal("0")
        assert record.deductions.professional_tax == Decimal("200")
        assert record.deductions.tds == Decimal("468")
        assert record.deductions.late_deduction == Decimal("0")
        assert record.deductions.absent_deduction == Decimal("0")
        assert record.total_deductions == Decimal("2468")
        assert record.net_salary == Decimal("31532")

    def test_three_unpaid_leave_days(
        self, calculator_factory, employee_factory, full_month, leave_factory
    ):
        leave_dates = {date(2025, 1, 13), date(2025, 1, 14), date(2025, 1, 15)}
        attendance = [r for r in full_month if r.date not in leave_dates]
        leave = leave_factory(1, date(2025, 1, 13), date(2025, 1, 15), is_paid=False)
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=attendance, leaves=[leave]
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.leave_details.unpaid_leave_days == Decimal("3")
        assert record.leave_details.leave_deduction == Decimal("3923")
        assert record.deductions.unpaid_leave_deduction == Decimal("3923")
        assert record.present_days == 23
        assert record.absent_days == Decimal("0")
        assert record.net_salary == Decimal("31532") - Decimal("3923")

    def test_tds_falls_back_to_annualized_gross(
        self, calculator_factory, employee_factory, salary_structure_factory, full_month
    ):
        employee = employee_factory(salary_structure=salary_structure_factory(ctc=None))
        calculator = calculator_factory(employees=[employee], attendance=full_month)
        assert calculator.calculate(1, 1, 2025).deductions.tds == Decimal("468")

    def test_esi_applies_to_low_gross(
        self, calculator_factory, employee_factory, salary_structure_factory, working_month_factory
    ):
        structure = salary_structure_factory(
            basic=Decimal("12000"),
            hra=Decimal("4800"),
            special_allowance=Decimal("0"),
            medical_allowance=Decimal("0"),
            conveyance_allowance=Decimal("0"),
            other_allowances=Decimal("0"),
            ctc=Decimal("201600"),
        )
        calculator = calculator_factory(
            employees=[employee_factory(salary_structure=structure)],
            attendance=working_month_factory(1),
        )
        record = calculator.calculate(1, 1, 2025)
        assert record.deductions.esi == Decimal("126")
        assert record.deductions.pf == Decimal("1440")
        assert record.deductions.professional_tax == Decimal("200")
        assert record.deductions.tds == Decimal("0")


class TestAttendanceDeductions:

    def test_late_days(self, calculator_factory, employee_factory, full_month):
        attendance = [
            r.model_copy(update={"status": AttendanceStatus.LATE}) if i < 2 else r
            for i, r in enumerate(full_month)
        ]
        calculator = calculator_factory(employees=[employee_factory()], attendance=attendance)

        record = calculator.calculate(1, 1, 2025)

        assert record.late_days == 2
        assert record.present_days == 26
        # round(2 x 0.1 x 34000 / 26)
        assert record.deductions.late_deduction == Decimal("262")

    def test_absent_days(self, calculator_factory, employee_factory, working_month_factory):
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=working_month_factory(1, days=20)
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.absent_days == Decimal("6")
        assert record.deductions.absent_deduction == Decimal("7846")

    def test_present_plus_leave_never_exceeds_working_days(
        self, calculator_factory, employee_factory, full_month, leave_factory
    ):
        leave = leave_factory(1, date(2025, 1, 20), date(2025, 1, 24))
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=full_month, leaves=[leave]
        )

        record = calculator.calculate(1, 1, 2025)

        total = record.present_days + record.absent_days + record.leave_details.total_leave_days
        assert total <= record.working_days
        assert record.absent_days >= 0


class TestOvertimeAndDifferentials:

    def test_overtime_added_to_adjusted_gross(
        self, calculator_factory, employee_factory, full_month
    ):
        attendance = [
            r.model_copy(update={"overtime_hours": Decimal("2")}) if r.date == date(2025, 1, 6) else r
            for r in full_month
        ]
        calculator = calculator_factory(employees=[employee_factory()], attendance=attendance)

        record = calculator.calculate(1, 1, 2025)

        # 2h x (34000 / 26 / 8) x 1.5
        assert record.overtime_hours == Decimal("2.00")
        assert record.overtime_pay == Decimal("490")
        assert record.adjusted_gross_salary == Decimal("34490")
        assert record.net_salary == Decimal("34490") - record.total_deductions
        # statutory deductions ignore overtime
        assert record.deductions.pf == Decimal("1800")

    def test_night_shift_differential_from_shift_rate(
        self, calculator_factory, employee_factory, attendance_factory, shift_factory
    ):
        shift = shift_factory(id=7, shift_type=ShiftType.NIGHT, night_differential=Decimal("20"))
        attendance = [attendance_factory(1, date(2025, 1, 6), shift_id=7)]
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=attendance, shifts=[shift]
        )

        record = calculator.calculate(1, 1, 2025)

        # 8h x 163.46 x 20%
        assert record.night_differential == Decimal("262")

    def test_night_shift_uses_default_rate(
        self, calculator_factory, employee_factory, attendance_factory, shift_factory
    ):
        shift = shift_factory(id=7, shift_type=ShiftType.NIGHT)
        assignment = ShiftAssignment(employee_id=1, shift_id=7, date=date(2025, 1, 6))
        attendance = [attendance_factory(1, date(2025, 1, 6))]
        calculator = calculator_factory(
            employees=[employee_factory()],
            attendance=attendance,
            shifts=[shift],
            assignments=[assignment],
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.night_differential == Decimal("196")

    def test_default_shift_used_without_assignment(
        self, calculator_factory, employee_factory, attendance_factory, shift_factory
    ):
        night = shift_factory(id=7, shift_type=ShiftType.NIGHT)
        attendance = [attendance_factory(1, date(2025, 1, 6))]
        calculator = calculator_factory(
            employees=[employee_factory(default_shift_id=7)],
            attendance=attendance,
            shifts=[night],
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.night_differential == Decimal("196")

    def test_assignment_takes_precedence_over_default_shift(
        self, calculator_factory, employee_factory, attendance_factory, shift_factory
    ):
        night = shift_factory(id=7, shift_type=ShiftType.NIGHT)
        day = shift_factory(id=1)
        calculator = calculator_factory(
            employees=[employee_factory(default_shift_id=7)],
            attendance=[attendance_factory(1, date(2025, 1, 6))],
            shifts=[night, day],
            assignments=[ShiftAssignment(employee_id=1, shift_id=1, date=date(2025, 1, 6))],
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.night_differential == Decimal("0")

    def test_shift_differential_above_day_multiplier(
        self, calculator_factory, employee_factory, attendance_factory, shift_factory
    ):
        shift = shift_factory(id=3, overtime_multiplier=Decimal("2.0"))
        attendance = [
            attendance_factory(1, date(2025, 1, 6), overtime_hours=Decimal("2"), shift_id=3),
            # Saturday: weekend multiplier already 2.0
            attendance_factory(1, date(2025, 1, 4), overtime_hours=Decimal("2"), shift_id=3),
        ]
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=attendance, shifts=[shift]
        )

        record = calculator.calculate(1, 1, 2025)

        # 2h x 163.46 x (2.0 - 1.5)
        assert record.shift_differential == Decimal("163")
        assert record.night_differential == Decimal("0")

    def test_records_without_shift_earn_no_differentials(
        self, calculator_factory, employee_factory, full_month
    ):
        calculator = calculator_factory(employees=[employee_factory()], attendance=full_month)
        record = calculator.calculate(1, 1, 2025)
        assert record.night_differential == Decimal("0")
        assert record.shift_differential == Decimal("0")

    def test_leave_encashment_added_to_adjusted_gross(
        self, calculator_factory, employee_factory, full_month
    ):
        calculator = calculator_factory(
            employees=[employee_factory()],
            attendance=full_month,
            encashment_policy=lambda leaves, gross: Decimal("1000"),
        )
        record = calculator.calculate(1, 1, 2025)
        assert record.leave_details.leave_encashment == Decimal("1000")
        assert record.adjusted_gross_salary == Decimal("35000")


class TestValidation:

    def test_unknown_employee(self, calculator_factory):
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            calculator_factory().calculate(99, 1, 2025)
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == PayrollErrorCodes.EMPLOYEE_NOT_FOUND

    def test_missing_structure(self, calculator_factory, employee_factory):
        calculator = calculator_factory(employees=[employee_factory(with_structure=False)])
        with pytest.raises(InvalidSalaryStructureError) as exc_info:
            calculator.calculate(1, 1, 2025)
        assert exc_info.value.employee_id == 1
        assert exc_info.value.fields == list(SALARY_COMPONENTS)

    @pytest.mark.parametrize("field,value", [
        ("basic", None),
        ("hra", Decimal("NaN")),
        ("da", Decimal("Infinity")),
        ("special_allowance", Decimal("-10")),
    ])
    def test_malformed_component(
        self, calculator_factory, employee_factory, salary_structure_factory, field, value
    ):
        employee = employee_factory(salary_structure=salary_structure_factory(**{field: value}))
        calculator = calculator_factory(employees=[employee])
        with pytest.raises(InvalidSalaryStructureError) as exc_info:
            calculator.calculate(1, 1, 2025)
        assert exc_info.value.fields == [field]
        assert exc_info.value.status_code == 422

    @pytest.mark.parametrize("month,year", [(0, 2025), (13, 2025), (1, 1800)])
    def test_invalid_period(self, calculator_factory, employee_factory, month, year):
        calculator = calculator_factory(employees=[employee_factory()])
        with pytest.raises(PayrollValidationError) as exc_info:
            calculator.calculate(1, month, year)
        assert exc_info.value.code == PayrollErrorCodes.INVALID_PERIOD


class TestDegradedInputs:

    def test_unavailable_attendance_is_treated_as_empty(
        self, employee_factory, data_sources, payroll_config, caplog
    ):
        data_sources["employees"].add(employee_factory())
        attendance = Mock()
        attendance.get_attendance_for_employee_month.side_effect = DataUnavailableError("attendance")
        calculator = PayrollCalculator(
            employees=data_sources["employees"],
            attendance=attendance,
            leaves=data_sources["leaves"],
            shifts=data_sources["shifts"],
            config=payroll_config,
        )

        with caplog.at_level(logging.WARNING):
            record = calculator.calculate(1, 1, 2025)

        assert record.present_days == 0
        assert record.absent_days == Decimal("26")
        assert record.deductions.absent_deduction == Decimal("34000")
        assert record.net_salary == Decimal("0")
        assert PayrollErrorCodes.DATA_UNAVAILABLE in caplog.text
        assert PayrollErrorCodes.ARITHMETIC_ANOMALY in caplog.text

    def test_unavailable_leave_is_treated_as_empty(
        self, employee_factory, data_sources, payroll_config, full_month
    ):
        data_sources["employees"].add(employee_factory())
        for record in full_month:
            data_sources["attendance"].add(record)
        leaves = Mock()
        leaves.get_approved_leave_for_month.side_effect = DataUnavailableError("leave")
        calculator = PayrollCalculator(
            employees=data_sources["employees"],
            attendance=data_sources["attendance"],
            leaves=leaves,
            shifts=data_sources["shifts"],
            config=payroll_config,
        )

        record = calculator.calculate(1, 1, 2025)

        assert record.leave_details.total_leave_days == Decimal("0")
        assert record.net_salary == Decimal("31532")

    def test_no_attendance_records(self, calculator_factory, employee_factory):
        record = calculator_factory(employees=[employee_factory()]).calculate(1, 1, 2025)
        assert record.overtime_hours == Decimal("0")
        assert record.weekly_overtime == []

    def test_record_holds_only_finite_numbers(
        self, calculator_factory, employee_factory, attendance_factory
    ):
        attendance = [
            attendance_factory(1, date(2025, 1, 6), overtime_hours=None, regular_hours=None),
            attendance_factory(1, date(2025, 1, 7), overtime_hours=Decimal("-2")),
        ]
        calculator = calculator_factory(employees=[employee_factory()], attendance=attendance)

        record = calculator.calculate(1, 1, 2025)

        values = list(_decimals(record.model_dump()))
        assert values
        assert all(value.is_finite() for value in values)
        assert all(value >= 0 for value in values)


class TestDeterminism:

    def test_repeated_calculation_is_identical(
        self, calculator_factory, employee_factory, full_month, leave_factory
    ):
        leave = leave_factory(1, date(2025, 1, 30), date(2025, 2, 2), is_paid=False)
        attendance = [
            r.model_copy(update={"overtime_hours": Decimal("3")}) if r.date.day % 5 == 0 else r
            for r in full_month
        ]
        calculator = calculator_factory(
            employees=[employee_factory()], attendance=attendance, leaves=[leave]
        )

        first = calculator.calculate(1, 1, 2025)
        second = calculator.calculate(1, 1, 2025)

        assert first.model_dump_json() == second.model_dump_json()
