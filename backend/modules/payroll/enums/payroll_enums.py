from enum import Enum


class PayrollStatus(str, Enum):
    DRAFT = "Draft"
    PROCESSED = "Processed"
    PAID = "Paid"


class OvertimeDayType(str, Enum):
    """Day classification that selects the overtime multiplier."""
    WEEKDAY = "weekday"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"


class AuditAction(str, Enum):
    PAYROLL_PROCESSED = "Payroll Processed"
    PAYROLL_PAID = "Payroll Paid"
