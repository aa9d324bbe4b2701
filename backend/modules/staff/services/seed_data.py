"""
Seed data for the in-memory collaborator sources.

The application reads employees, attendance, leave and shifts from a JSON
document (``PAYROLL_SEED_FILE``) shaped like ``StaffSeedData``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, ValidationError

from ..schemas.attendance_schemas import AttendanceRecord
from ..schemas.leave_schemas import LeaveRequest
from ..schemas.shift_schemas import Shift, ShiftAssignment
from ..schemas.staff_schemas import Employee
from .data_sources import (
    InMemoryAttendanceStore,
    InMemoryEmployeeDirectory,
    InMemoryLeaveStore,
    InMemoryShiftStore,
)

logger = logging.getLogger(__name__)


class StaffSeedData(BaseModel):
    employees: List[Employee] = Field(default_factory=list)
    attendance: List[AttendanceRecord] = Field(default_factory=list)
    leaves: List[LeaveRequest] = Field(default_factory=list)
    shifts: List[Shift] = Field(default_factory=list)
    shift_assignments: List[ShiftAssignment] = Field(default_factory=list)


@dataclass
class StaffDataSources:
    employees: InMemoryEmployeeDirectory
    attendance: InMemoryAttendanceStore
    leaves: InMemoryLeaveStore
    shifts: InMemoryShiftStore


def build_sources(seed: StaffSeedData) -> StaffDataSources:
    return StaffDataSources(
        employees=InMemoryEmployeeDirectory(seed.employees),
        attendance=InMemoryAttendanceStore(seed.attendance),
        leaves=InMemoryLeaveStore(seed.leaves),
        shifts=InMemoryShiftStore(seed.shifts, seed.shift_assignments),
    )


def load_seed_file(path: str) -> StaffSeedData:
    """
    Parse a seed document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document does not match ``StaffSeedData``
    """
    seed_path = Path(path)
    if not seed_path.is_file():
        raise FileNotFoundError(f"Seed file not found: {path}")

    try:
        seed = StaffSeedData.model_validate_json(seed_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid seed file {path}: {e}") from e

    logger.info(
        f"Loaded seed data from {path}: {len(seed.employees)} employees, "
        f"{len(seed.attendance)} attendance records, {len(seed.leaves)} leave requests"
    )
    return seed
