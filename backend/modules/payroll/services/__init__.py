"""Payroll services module."""

from .payroll_calculator import PayrollCalculator
from .payroll_processor import PayrollProcessor
from .payroll_store import InMemoryPayrollStore, SQLAlchemyPayrollStore

__all__ = [
    'PayrollCalculator',
    'PayrollProcessor',
    'InMemoryPayrollStore',
    'SQLAlchemyPayrollStore',
]
