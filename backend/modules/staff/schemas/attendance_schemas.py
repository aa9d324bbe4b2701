from pydantic import BaseModel, ConfigDict, Field
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..enums.attendance_enums import AttendanceStatus


class AttendanceRecord(BaseModel):
    """One employee's attendance for one calendar date."""

    id: Optional[int] = None
    employee_id: int
    date: date
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    location: Optional[str] = None
    notes: Optional[str] = None

    # Hours are filled in on check-out; None is tolerated for incomplete rows
    regular_hours: Optional[Decimal] = Decimal("0")
    overtime_hours: Optional[Decimal] = Decimal("0")
    break_time: int = Field(0, ge=0, description="Break duration in minutes")
    total_working_hours: Optional[Decimal] = Decimal("0")

    shift_id: Optional[int] = None
    is_holiday: bool = False

    model_config = ConfigDict(from_attributes=True)

    @property
    def counts_as_present(self) -> bool:
        return self.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
