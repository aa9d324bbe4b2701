# backend/modules/payroll/__init__.py

"""
Payroll Module - monthly Indian payroll engine.

- Salary structure derivation
- Statutory deductions (PF, ESI, Professional Tax, TDS)
- Overtime, night and shift differentials
- Leave-based proration
- Period processing with Draft -> Processed -> Paid lifecycle
"""

__version__ = "1.0.0"
