# backend/modules/payroll/tests/conftest.py

"""
Pytest fixtures and factories for payroll module tests.

Provides reusable test data and in-memory data sources for consistent testing.
"""

import pytest
from datetime import date, datetime, time, timezone
from decimal import Decimal
from unittest.mock import Mock
from typing import Optional

from ...staff.enums.attendance_enums import AttendanceStatus
from ...staff.enums.leave_enums import LeaveStatus, LeaveType
from ...staff.enums.scheduling_enums import ShiftType
from ...staff.schemas.attendance_schemas import AttendanceRecord
from ...staff.schemas.leave_schemas import LeaveRequest
from ...staff.schemas.shift_schemas import Shift
from ...staff.schemas.staff_schemas import Employee
from ...staff.services.data_sources import (
    InMemoryAttendanceStore,
    InMemoryEmployeeDirectory,
    InMemoryLeaveStore,
    InMemoryShiftStore,
)
from ..schemas.salary_schemas import SalaryStructure
from ..services.config_manager import PayrollConfig
from ..services.payroll_calculator import PayrollCalculator
from ..services.payroll_processor import PayrollProcessor
from ..services.payroll_store import InMemoryPayrollStore


FIXED_NOW = datetime(2025, 2, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def payroll_config():
    """Default payroll configuration, independent of the environment."""
    return PayrollConfig()


# Salary structure factories
@pytest.fixture
def salary_structure_factory():
    """Factory for salary structures; defaults to the 34000 gross structure."""
    def create_structure(**overrides) -> SalaryStructure:
        values = {
            "basic": Decimal("20000"),
            "hra": Decimal("8000"),
            "da": Decimal("0"),
            "special_allowance": Decimal("3000"),
            "medical_allowance": Decimal("1250"),
            "conveyance_allowance": Decimal("1600"),
            "other_allowances": Decimal("150"),
            "ctc": Decimal("408000"),
        }
        values.update(overrides)
        return SalaryStructure(**values)

    return create_structure


# Employee factories
@pytest.fixture
def employee_factory(salary_structure_factory):
    """Factory for creating test employees."""
    def create_employee(
        id: int = 1,
        name: Optional[str] = None,
        state: Optional[str] = "Maharashtra",
        salary_structure: Optional[SalaryStructure] = None,
        with_structure: bool = True,
        **kwargs
    ) -> Employee:
        if salary_structure is None and with_structure:
            salary_structure = salary_structure_factory()
        return Employee(
            id=id,
            name=name or f"Test Employee {id}",
            state=state,
            salary_structure=salary_structure,
            **kwargs
        )

    return create_employee


# Attendance factories
@pytest.fixture
def attendance_factory():
    """Factory for creating attendance records."""
    def create_attendance(
        employee_id: int,
        work_date: date,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        regular_hours: Decimal = Decimal("8"),
        overtime_hours: Decimal = Decimal("0"),
        **kwargs
    ) -> AttendanceRecord:
        return AttendanceRecord(
            employee_id=employee_id,
            date=work_date,
            check_in=kwargs.pop("check_in", time(9, 0)),
            check_out=kwargs.pop("check_out", time(18, 0)),
            status=status,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            total_working_hours=(regular_hours or Decimal("0")) + (overtime_hours or Decimal("0")),
            break_time=kwargs.pop("break_time", 60),
            **kwargs
        )

    return create_attendance


@pytest.fixture
def working_month_factory(attendance_factory):
    """Attendance for the first ``days`` Monday-Saturday dates of a month."""
    def create_month(
        employee_id: int,
        month: int = 1,
        year: int = 2025,
        days: int = 26,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
    ):
        records = []
        day = 1
        while len(records) < days:
            current = date(year, month, day)
            if current.weekday() != 6:
                records.append(attendance_factory(employee_id, current, status=status))
            day += 1
        return records

    return create_month


# Leave factories
@pytest.fixture
def leave_factory():
    """Factory for creating leave requests."""
    counter = {"id": 0}

    def create_leave(
        employee_id: int,
        start_date: date,
        end_date: date,
        days: Optional[Decimal] = None,
        is_paid: bool = True,
        status: LeaveStatus = LeaveStatus.APPROVED,
        leave_type: LeaveType = LeaveType.CASUAL,
    ) -> LeaveRequest:
        counter["id"] += 1
        if days is None:
            days = Decimal((end_date - start_date).days + 1)
        return LeaveRequest(
            id=counter["id"],
            employee_id=employee_id,
            type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            is_paid=is_paid,
            status=status,
        )

    return create_leave


# Shift factories
@pytest.fixture
def shift_factory():
    """Factory for creating shifts."""
    def create_shift(
        id: int = 1,
        shift_type: ShiftType = ShiftType.DAY,
        overtime_multiplier: Decimal = Decimal("1.5"),
        night_differential: Optional[Decimal] = None,
    ) -> Shift:
        night = shift_type == ShiftType.NIGHT
        return Shift(
            id=id,
            name=f"{shift_type.value} Shift",
            type=shift_type,
            start_time=time(22, 0) if night else time(9, 0),
            end_time=time(6, 0) if night else time(17, 0),
            overtime_multiplier=overtime_multiplier,
            night_differential=night_differential,
        )

    return create_shift


@pytest.fixture
def data_sources():
    """Empty in-memory collaborator sources."""
    return {
        "employees": InMemoryEmployeeDirectory(),
        "attendance": InMemoryAttendanceStore(),
        "leaves": InMemoryLeaveStore(),
        "shifts": InMemoryShiftStore(),
    }


@pytest.fixture
def calculator_factory(data_sources, payroll_config):
    """Build a calculator over the in-memory sources."""
    def create_calculator(
        employees=(),
        attendance=(),
        leaves=(),
        shifts=(),
        assignments=(),
        **kwargs
    ) -> PayrollCalculator:
        for employee in employees:
            data_sources["employees"].add(employee)
        for record in attendance:
            data_sources["attendance"].add(record)
        for leave in leaves:
            data_sources["leaves"].add(leave)
        if shifts or assignments:
            data_sources["shifts"] = InMemoryShiftStore(shifts, assignments)
        return PayrollCalculator(
            employees=data_sources["employees"],
            attendance=data_sources["attendance"],
            leaves=data_sources["leaves"],
            shifts=data_sources["shifts"],
            config=kwargs.pop("config", payroll_config),
            **kwargs
        )

    return create_calculator


@pytest.fixture
def audit_sink():
    sink = Mock()
    sink.record_change = Mock()
    return sink


@pytest.fixture
def processor_factory(audit_sink):
    """Build a processor with an in-memory store and a fixed clock."""
    def create_processor(calculator: PayrollCalculator, store=None) -> PayrollProcessor:
        return PayrollProcessor(
            calculator=calculator,
            store=store or InMemoryPayrollStore(),
            audit_sink=audit_sink,
            clock=lambda: FIXED_NOW,
        )

    return create_processor


@pytest.fixture
def fixed_now():
    return FIXED_NOW
