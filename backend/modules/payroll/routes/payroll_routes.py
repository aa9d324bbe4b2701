# backend/modules/payroll/routes/payroll_routes.py

"""
Payroll API endpoints.

- Single-employee payroll calculation (Draft preview)
- Period processing and record retrieval
- Marking processed payroll as paid
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from datetime import datetime, timezone

from ..exceptions import PayrollException
from ..schemas.error_schemas import ErrorResponse
from ..schemas.payroll_schemas import (
    CalculatePayrollRequest,
    PayrollProcessResponse,
    PayrollRecord,
    ProcessPayrollRequest,
)
from ..services.payroll_processor import PayrollProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payroll", tags=["Payroll"])

_processor: Optional[PayrollProcessor] = None


def configure_payroll_processor(processor: Optional[PayrollProcessor]) -> None:
    """Install the processor served by this router."""
    global _processor
    _processor = processor


def get_payroll_processor() -> PayrollProcessor:
    if _processor is None:
        raise HTTPException(status_code=503, detail="Payroll processor is not configured")
    return _processor


def _http_error(e: PayrollException) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail=ErrorResponse(
            error=type(e).__name__,
            message=e.message,
            code=e.code,
            details=e.details or None,
        ).model_dump(mode="json"),
    )


@router.post("/calculate", response_model=PayrollRecord)
def calculate_payroll(
    request: CalculatePayrollRequest,
    processor: PayrollProcessor = Depends(get_payroll_processor),
):
    """
    Calculate one employee's payroll without committing it.

    ## Error Responses
    - **404**: Employee not found
    - **422**: Invalid salary structure or period
    """
    try:
        return processor.calculator.calculate(request.employee_id, request.month, request.year)
    except PayrollException as e:
        raise _http_error(e)


@router.post("/process", response_model=PayrollProcessResponse)
def process_payroll(
    request: ProcessPayrollRequest,
    processor: PayrollProcessor = Depends(get_payroll_processor),
):
    """
    Process payroll for every employee in a period.

    Employees that fail are listed in ``failures``; the rest are committed.
    """
    try:
        result = processor.process(
            request.month, request.year, force_recalculate=request.force_recalculate
        )
    except PayrollException as e:
        raise _http_error(e)

    return PayrollProcessResponse(
        month=result.month,
        year=result.year,
        processed_count=result.processed_count,
        failed_count=result.failed_count,
        records=result.records,
        failures=result.failures,
    )


@router.get("/records", response_model=List[PayrollRecord])
def list_payroll_records(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=9999),
    processor: PayrollProcessor = Depends(get_payroll_processor),
):
    """List committed payroll records for a period."""
    try:
        return processor.get_records(month, year)
    except PayrollException as e:
        raise _http_error(e)


@router.post("/records/{employee_id}/pay", response_model=PayrollRecord)
def mark_payroll_paid(
    employee_id: int,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=9999),
    processor: PayrollProcessor = Depends(get_payroll_processor),
):
    """
    Mark a processed payroll record as paid.

    ## Error Responses
    - **404**: No record for the employee in the period
    - **400**: Record is not in Processed status
    """
    try:
        return processor.mark_paid(employee_id, month, year)
    except PayrollException as e:
        raise _http_error(e)


@router.get("/health")
async def payroll_health_check():
    """
    Health check endpoint for payroll module.

    Returns:
        dict: Health status of payroll module
    """
    return {
        "status": "healthy",
        "module": "payroll",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
