from enum import Enum


class ShiftType(str, Enum):
    DAY = "Day"
    NIGHT = "Night"
    WEEKEND = "Weekend"


class ShiftAssignmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    MISSED = "Missed"
