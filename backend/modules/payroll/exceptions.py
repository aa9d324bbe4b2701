# backend/modules/payroll/exceptions.py

"""
Custom exceptions for payroll module.
"""

from typing import Optional, List, Any, Iterable
from .schemas.error_schemas import ErrorDetail, PayrollErrorCodes


class PayrollException(Exception):
    """Base exception for payroll module"""
    def __init__(
        self,
        message: str,
        code: str = PayrollErrorCodes.CALCULATION_FAILED,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class PayrollValidationError(PayrollException):
    """Validation error for payroll operations"""
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[List[ErrorDetail]] = None,
        code: str = PayrollErrorCodes.INVALID_AMOUNT,
    ):
        if field and not details:
            details = [ErrorDetail(field=field, message=message)]
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=422
        )


class EmployeeNotFoundError(PayrollException):
    """The employee directory has no entry for the requested id"""
    def __init__(self, employee_id: Any):
        super().__init__(
            message=f"Employee {employee_id} not found",
            code=PayrollErrorCodes.EMPLOYEE_NOT_FOUND,
            status_code=404
        )
        self.employee_id = employee_id


class InvalidSalaryStructureError(PayrollException):
    """Salary structure is missing or has non-numeric/negative components"""
    def __init__(self, employee_id: Any, fields: Iterable[str]):
        self.employee_id = employee_id
        self.fields = list(fields)
        details = [
            ErrorDetail(
                field=name,
                message="Missing, non-numeric or negative value",
                code=PayrollErrorCodes.INVALID_AMOUNT,
            )
            for name in self.fields
        ]
        super().__init__(
            message=f"Salary structure for employee {employee_id} is invalid",
            code=PayrollErrorCodes.INVALID_SALARY_STRUCTURE,
            details=details,
            status_code=422
        )


class DataUnavailableError(PayrollException):
    """A collaborator data source could not be read"""
    def __init__(self, source: str, reason: str = "unavailable"):
        super().__init__(
            message=f"{source} data unavailable: {reason}",
            code=PayrollErrorCodes.DATA_UNAVAILABLE,
            status_code=503
        )
        self.source = source


class PayrollConfigurationError(PayrollException):
    """Configuration-related errors"""
    def __init__(self, message: str, config_key: Optional[str] = None):
        details = []
        if config_key:
            details.append(ErrorDetail(field=config_key, message=message))
        super().__init__(
            message=message,
            code=PayrollErrorCodes.INVALID_CONFIG_VALUE,
            details=details,
            status_code=500
        )


class PayrollNotFoundError(PayrollException):
    """Resource not found error"""
    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            code=PayrollErrorCodes.RECORD_NOT_FOUND,
            status_code=404
        )


class PayrollBusinessRuleError(PayrollException):
    """Business rule violation errors"""
    def __init__(self, message: str, rule: str, details: Optional[List[ErrorDetail]] = None):
        super().__init__(
            message=message,
            code=f"PAYROLL_RULE_{rule.upper()}",
            details=details,
            status_code=400
        )
