from .payroll_models import PayrollRecordModel

__all__ = [
    "PayrollRecordModel",
]
