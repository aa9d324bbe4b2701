from pydantic import BaseModel, ConfigDict, Field
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..enums.scheduling_enums import ShiftType, ShiftAssignmentStatus


class Shift(BaseModel):
    id: int
    name: str
    type: ShiftType = ShiftType.DAY
    start_time: time
    end_time: time
    standard_hours: Decimal = Decimal("8")
    overtime_multiplier: Decimal = Decimal("1.5")
    # Additional pay percentage for night shifts, e.g. 15 for 15%
    night_differential: Optional[Decimal] = Field(None, ge=0)

    model_config = ConfigDict(from_attributes=True)


class ShiftAssignment(BaseModel):
    id: Optional[int] = None
    employee_id: int
    shift_id: int
    date: date
    status: ShiftAssignmentStatus = ShiftAssignmentStatus.SCHEDULED

    model_config = ConfigDict(from_attributes=True)
