from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, JSON, UniqueConstraint, Index
from core.database import Base
from core.mixins import TimestampMixin
from ..enums.payroll_enums import PayrollStatus


class PayrollRecordModel(Base, TimestampMixin):
    __tablename__ = "payroll_records"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, nullable=False, index=True)
    employee_name = Column(String(200), nullable=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(Enum(PayrollStatus), default=PayrollStatus.DRAFT, nullable=False)

    # Earnings
    gross_salary = Column(Numeric(12, 2), nullable=False)
    adjusted_gross_salary = Column(Numeric(12, 2), nullable=False)
    overtime_hours = Column(Numeric(8, 2), default=0, nullable=False)
    overtime_pay = Column(Numeric(12, 2), default=0, nullable=False)
    night_differential = Column(Numeric(12, 2), default=0, nullable=False)
    shift_differential = Column(Numeric(12, 2), default=0, nullable=False)

    # Totals
    total_deductions = Column(Numeric(12, 2), nullable=False)
    net_salary = Column(Numeric(12, 2), nullable=False)

    # Attendance
    working_days = Column(Integer, default=26, nullable=False)
    present_days = Column(Integer, default=0, nullable=False)
    late_days = Column(Integer, default=0, nullable=False)
    absent_days = Column(Numeric(5, 2), default=0, nullable=False)

    # Snapshots
    salary_breakdown = Column(JSON, nullable=False)
    deductions = Column(JSON, nullable=False)
    leave_details = Column(JSON, nullable=False)
    weekly_overtime = Column(JSON, nullable=False, default=list)

    processed_date = Column(DateTime, nullable=True)
    paid_date = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint('employee_id', 'month', 'year', name='uq_payroll_records_employee_period'),
        Index('ix_payroll_records_period', 'year', 'month'),
    )
