# backend/modules/payroll/services/payroll_store.py

"""
Payroll record stores.

Both stores replace a period's record set as one unit: the in-memory
store swaps it under a lock, the SQLAlchemy store inside a single
transaction.
"""

import logging
import threading
from typing import Callable, Dict, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import PayrollException
from ..models.payroll_models import PayrollRecordModel
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import PayrollRecord

logger = logging.getLogger(__name__)

JSON_FIELDS = ("salary_breakdown", "deductions", "leave_details", "weekly_overtime")


class InMemoryPayrollStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._periods: Dict[Tuple[int, int], List[PayrollRecord]] = {}
        self._next_id = 1

    def replace_period_records(self, month: int, year: int, records: List[PayrollRecord]) -> None:
        with self._lock:
            stored = []
            for record in records:
                if record.id is None:
                    record = record.model_copy(update={"id": self._next_id})
                    self._next_id += 1
                stored.append(record)
            self._periods[(month, year)] = sorted(stored, key=lambda r: r.employee_id)

    def get_records_for_period(self, month: int, year: int) -> List[PayrollRecord]:
        with self._lock:
            return list(self._periods.get((month, year), []))


def record_to_model(record: PayrollRecord) -> PayrollRecordModel:
    data = record.model_dump(mode="json", include=set(JSON_FIELDS))
    return PayrollRecordModel(
        id=record.id,
        employee_id=record.employee_id,
        employee_name=record.employee_name,
        month=record.month,
        year=record.year,
        status=record.status,
        gross_salary=record.gross_salary,
        adjusted_gross_salary=record.adjusted_gross_salary,
        overtime_hours=record.overtime_hours,
        overtime_pay=record.overtime_pay,
        night_differential=record.night_differential,
        shift_differential=record.shift_differential,
        total_deductions=record.total_deductions,
        net_salary=record.net_salary,
        working_days=record.working_days,
        present_days=record.present_days,
        late_days=record.late_days,
        absent_days=record.absent_days,
        processed_date=record.processed_date,
        paid_date=record.paid_date,
        **data,
    )


def model_to_record(model: PayrollRecordModel) -> PayrollRecord:
    return PayrollRecord.model_validate(model)


class SQLAlchemyPayrollStore:
    """Payroll store backed by the ``payroll_records`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def replace_period_records(self, month: int, year: int, records: List[PayrollRecord]) -> None:
        session = self.session_factory()
        try:
            session.query(PayrollRecordModel).filter(
                PayrollRecordModel.month == month,
                PayrollRecordModel.year == year,
            ).delete(synchronize_session=False)
            session.add_all([record_to_model(record) for record in records])
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to store payroll for {month}/{year}: {str(e)}")
            raise PayrollException(
                message=f"Failed to store payroll for {month}/{year}",
                code=PayrollErrorCodes.DATABASE_ERROR,
                status_code=500,
            ) from e
        finally:
            session.close()

    def get_records_for_period(self, month: int, year: int) -> List[PayrollRecord]:
        session = self.session_factory()
        try:
            models = (
                session.query(PayrollRecordModel)
                .filter(PayrollRecordModel.month == month, PayrollRecordModel.year == year)
                .order_by(PayrollRecordModel.employee_id)
                .all()
            )
            return [model_to_record(model) for model in models]
        finally:
            session.close()
