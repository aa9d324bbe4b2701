from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from decimal import Decimal
from typing import Optional

from ..enums.leave_enums import LeaveType, LeaveStatus


class LeaveRequest(BaseModel):
    """Leave application; ``days`` counts both endpoints."""

    id: Optional[int] = None
    employee_id: int
    type: LeaveType
    start_date: date
    end_date: date
    days: Decimal = Field(..., ge=0)
    is_paid: bool = True
    status: LeaveStatus = LeaveStatus.PENDING
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v, info):
        if "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must not be before start_date")
        return v

    def overlaps(self, period_start: date, period_end: date) -> bool:
        """True when [start_date, end_date] intersects the given period."""
        return self.start_date <= period_end and self.end_date >= period_start
