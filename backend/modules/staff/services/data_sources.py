"""
Read-only collaborator data sources consumed by the payroll engine.

Each source is a ``typing.Protocol`` so that callers can plug in database
repositories or HTTP clients; the in-memory implementations back tests and
the default application wiring. Any source may raise
``DataUnavailableError`` when its backing store cannot be read.
"""

import calendar
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ..enums.leave_enums import LeaveStatus
from ..schemas.attendance_schemas import AttendanceRecord
from ..schemas.leave_schemas import LeaveRequest
from ..schemas.shift_schemas import Shift, ShiftAssignment
from ..schemas.staff_schemas import Employee
from ...payroll.schemas.payroll_schemas import PayrollRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class EmployeeDirectory(Protocol):
    def get_employee(self, employee_id: int) -> Optional[Employee]:
        ...

    def list_employees(self) -> List[Employee]:
        ...


@runtime_checkable
class AttendanceStore(Protocol):
    def get_attendance_for_employee_month(
        self, employee_id: int, month: int, year: int
    ) -> List[AttendanceRecord]:
        ...


@runtime_checkable
class LeaveStore(Protocol):
    def get_approved_leave_for_month(
        self, employee_id: int, month: int, year: int
    ) -> List[LeaveRequest]:
        ...


@runtime_checkable
class ShiftStore(Protocol):
    def get_shift(self, shift_id: int) -> Optional[Shift]:
        ...

    def get_shift_for_employee_on_date(self, employee_id: int, on_date: date) -> Optional[Shift]:
        ...


@runtime_checkable
class PayrollStore(Protocol):
    """Write side for committed payroll records."""

    def replace_period_records(self, month: int, year: int, records: List[PayrollRecord]) -> None:
        ...

    def get_records_for_period(self, month: int, year: int) -> List[PayrollRecord]:
        ...


@runtime_checkable
class AuditSink(Protocol):
    def record_change(
        self, action: str, entity_type: str, entity_id: Any, changes: Dict[str, Any]
    ) -> None:
        ...


class InMemoryEmployeeDirectory:
    def __init__(self, employees: Iterable[Employee] = ()):
        self._employees: Dict[int, Employee] = {e.id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._employees[employee.id] = employee

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self._employees.get(employee_id)

    def list_employees(self) -> List[Employee]:
        return [self._employees[key] for key in sorted(self._employees)]


class InMemoryAttendanceStore:
    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self._records: List[AttendanceRecord] = list(records)

    def add(self, record: AttendanceRecord) -> None:
        self._records.append(record)

    def get_attendance_for_employee_month(
        self, employee_id: int, month: int, year: int
    ) -> List[AttendanceRecord]:
        return sorted(
            (
                r for r in self._records
                if r.employee_id == employee_id
                and r.date.month == month
                and r.date.year == year
            ),
            key=lambda r: r.date,
        )


class InMemoryLeaveStore:
    def __init__(self, leaves: Iterable[LeaveRequest] = ()):
        self._leaves: List[LeaveRequest] = list(leaves)

    def add(self, leave: LeaveRequest) -> None:
        self._leaves.append(leave)

    def get_approved_leave_for_month(
        self, employee_id: int, month: int, year: int
    ) -> List[LeaveRequest]:
        month_start = date(year, month, 1)
        month_end = date(year, month, calendar.monthrange(year, month)[1])
        return [
            leave for leave in self._leaves
            if leave.employee_id == employee_id
            and leave.status == LeaveStatus.APPROVED
            and leave.overlaps(month_start, month_end)
        ]


class InMemoryShiftStore:
    def __init__(
        self,
        shifts: Iterable[Shift] = (),
        assignments: Iterable[ShiftAssignment] = (),
    ):
        self._shifts: Dict[int, Shift] = {s.id: s for s in shifts}
        self._assignments: Dict[tuple, int] = {
            (a.employee_id, a.date): a.shift_id for a in assignments
        }

    def assign(self, assignment: ShiftAssignment) -> None:
        self._assignments[(assignment.employee_id, assignment.date)] = assignment.shift_id

    def get_shift(self, shift_id: int) -> Optional[Shift]:
        return self._shifts.get(shift_id)

    def get_shift_for_employee_on_date(self, employee_id: int, on_date: date) -> Optional[Shift]:
        shift_id = self._assignments.get((employee_id, on_date))
        if shift_id is None:
            return None
        return self._shifts.get(shift_id)


@dataclass
class AuditEntry:
    action: str
    entity_type: str
    entity_id: Any
    changes: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class LoggingAuditSink:
    """Audit sink that logs each change and keeps it in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self.entries: List[AuditEntry] = []

    def record_change(
        self, action: str, entity_type: str, entity_id: Any, changes: Dict[str, Any]
    ) -> None:
        entry = AuditEntry(action, entity_type, entity_id, changes)
        with self._lock:
            self.entries.append(entry)
        logger.info(f"Audit: {action} on {entity_type} {entity_id}: {changes}")
