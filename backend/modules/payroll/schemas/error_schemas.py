# backend/modules/payroll/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, timezone


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "InvalidSalaryStructureError",
                "message": "Salary structure for employee 7 is invalid",
                "code": "PAYROLL_INVALID_SALARY_STRUCTURE",
                "details": [
                    {
                        "field": "basic",
                        "message": "Missing or non-numeric value",
                        "code": "PAYROLL_INVALID_AMOUNT",
                    }
                ],
                "timestamp": "2025-01-30T12:00:00Z",
            }
        }
    )


class PayrollErrorCodes:
    """Centralized error codes for payroll module"""

    # Validation errors
    INVALID_AMOUNT = "PAYROLL_INVALID_AMOUNT"
    INVALID_PERIOD = "PAYROLL_INVALID_PERIOD"
    INVALID_SALARY_STRUCTURE = "PAYROLL_INVALID_SALARY_STRUCTURE"
    INVALID_CONFIG_VALUE = "PAYROLL_INVALID_CONFIG_VALUE"

    # Lookup errors
    EMPLOYEE_NOT_FOUND = "PAYROLL_EMPLOYEE_NOT_FOUND"
    RECORD_NOT_FOUND = "PAYROLL_RECORD_NOT_FOUND"

    # Degraded inputs (logged, never raised to callers of calculate)
    DATA_UNAVAILABLE = "PAYROLL_DATA_UNAVAILABLE"
    ARITHMETIC_ANOMALY = "PAYROLL_ARITHMETIC_ANOMALY"

    # Persistence errors
    DATABASE_ERROR = "PAYROLL_DATABASE_ERROR"

    # Generic errors
    CALCULATION_FAILED = "PAYROLL_CALCULATION_FAILED"
