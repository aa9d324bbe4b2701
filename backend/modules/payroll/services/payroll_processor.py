# backend/modules/payroll/services/payroll_processor.py

"""
Payroll period processing.

Runs the payroll calculator for every employee in a period and commits the
resulting record set, with per-employee error isolation.
"""

import logging
import threading
import weakref
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ...staff.services.data_sources import AuditSink, PayrollStore
from ..enums.payroll_enums import AuditAction, PayrollStatus
from ..exceptions import (
    PayrollBusinessRuleError,
    PayrollException,
    PayrollNotFoundError,
)
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import (
    PayrollFailure,
    PayrollProcessResult,
    PayrollRecord,
)
from .payroll_calculator import PayrollCalculator, validate_period

logger = logging.getLogger(__name__)

REUSABLE_STATUSES = (PayrollStatus.DRAFT, PayrollStatus.PROCESSED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayrollProcessor:
    """Service for processing and paying monthly payroll."""

    def __init__(
        self,
        calculator: PayrollCalculator,
        store: PayrollStore,
        audit_sink: Optional[AuditSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize payroll processor.

        Args:
            calculator: Calculator used for fresh records
            store: Store receiving the committed period
            audit_sink: Optional sink for status changes
            clock: Source of processed/paid timestamps
        """
        self.calculator = calculator
        self.store = store
        self.audit_sink = audit_sink
        self.clock = clock or _utcnow
        # Entries disappear once no caller holds the period's lock
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _period_lock(self, month: int, year: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault((month, year), threading.Lock())

    def process(self, month: int, year: int, force_recalculate: bool = False) -> PayrollProcessResult:
        """Process payroll for every known employee.

        Existing Draft/Processed records are re-stamped as Processed unless
        ``force_recalculate`` is set; Paid records are kept as they are. The
        period's record set is then replaced in one step.

        Args:
            month: Calendar month (1-12)
            year: Calendar year
            force_recalculate: Recalculate even when a record exists

        Returns:
            Committed records and per-employee failures
        """
        validate_period(month, year)

        with self._period_lock(month, year):
            processed_at = self.clock()
            existing = {
                record.employee_id: record
                for record in self.store.get_records_for_period(month, year)
            }

            records: List[PayrollRecord] = []
            failures: List[PayrollFailure] = []
            seen = set()

            for employee_id in self.calculator.list_employee_ids():
                seen.add(employee_id)
                previous = existing.get(employee_id)

                if previous is not None and previous.status == PayrollStatus.PAID:
                    records.append(previous)
                    continue

                if previous is not None and not force_recalculate:
                    record = previous
                else:
                    try:
                        record = self.calculator.calculate(employee_id, month, year)
                    except PayrollException as e:
                        logger.error(
                            f"Error processing payroll for employee {employee_id}: {e.message}"
                        )
                        failures.append(
                            PayrollFailure(employee_id=employee_id, code=e.code, reason=e.message)
                        )
                        continue
                    except Exception as e:
                        logger.error(
                            f"Error processing payroll for employee {employee_id}: {str(e)}"
                        )
                        failures.append(
                            PayrollFailure(
                                employee_id=employee_id,
                                code=PayrollErrorCodes.CALCULATION_FAILED,
                                reason=str(e),
                            )
                        )
                        continue

                old_status = previous.status if previous is not None else PayrollStatus.DRAFT
                record = record.model_copy(
                    update={
                        "id": previous.id if previous is not None else record.id,
                        "status": PayrollStatus.PROCESSED,
                        "processed_date": processed_at,
                    }
                )
                records.append(record)
                self._audit(
                    AuditAction.PAYROLL_PROCESSED,
                    record,
                    old_status,
                    PayrollStatus.PROCESSED,
                )

            # Paid records outlive directory changes
            for employee_id, previous in existing.items():
                if employee_id not in seen and previous.status == PayrollStatus.PAID:
                    records.append(previous)

            self.store.replace_period_records(month, year, records)

        logger.info(
            f"Processed payroll for {month}/{year}: "
            f"{len(records)} records, {len(failures)} failures"
        )
        return PayrollProcessResult(month=month, year=year, records=records, failures=failures)

    def preview(self, month: int, year: int) -> PayrollProcessResult:
        """Calculate every employee's Draft record without committing."""
        validate_period(month, year)
        records: List[PayrollRecord] = []
        failures: List[PayrollFailure] = []

        for employee_id in self.calculator.list_employee_ids():
            try:
                records.append(self.calculator.calculate(employee_id, month, year))
            except PayrollException as e:
                failures.append(
                    PayrollFailure(employee_id=employee_id, code=e.code, reason=e.message)
                )
            except Exception as e:
                logger.error(
                    f"Error previewing payroll for employee {employee_id}: {str(e)}"
                )
                failures.append(
                    PayrollFailure(
                        employee_id=employee_id,
                        code=PayrollErrorCodes.CALCULATION_FAILED,
                        reason=str(e),
                    )
                )

        return PayrollProcessResult(month=month, year=year, records=records, failures=failures)

    def mark_paid(self, employee_id: int, month: int, year: int) -> PayrollRecord:
        """Move a Processed record to Paid.

        Raises:
            PayrollNotFoundError: If the period has no record for the employee
            PayrollBusinessRuleError: If the record is not Processed
        """
        validate_period(month, year)

        with self._period_lock(month, year):
            records = self.store.get_records_for_period(month, year)
            target = next((r for r in records if r.employee_id == employee_id), None)
            if target is None:
                raise PayrollNotFoundError("Payroll record", f"{employee_id}/{month}/{year}")
            if target.status != PayrollStatus.PROCESSED:
                raise PayrollBusinessRuleError(
                    f"Payroll for employee {employee_id} is {target.status.value}, "
                    f"only Processed payroll can be paid",
                    rule="payment_not_processed",
                )

            paid = target.model_copy(
                update={"status": PayrollStatus.PAID, "paid_date": self.clock()}
            )
            self.store.replace_period_records(
                month,
                year,
                [paid if r.employee_id == employee_id else r for r in records],
            )

        self._audit(AuditAction.PAYROLL_PAID, paid, PayrollStatus.PROCESSED, PayrollStatus.PAID)
        logger.info(f"Marked payroll paid for employee {employee_id} {month}/{year}")
        return paid

    def get_records(self, month: int, year: int) -> List[PayrollRecord]:
        validate_period(month, year)
        return self.store.get_records_for_period(month, year)

    def _audit(
        self,
        action: AuditAction,
        record: PayrollRecord,
        old_status: PayrollStatus,
        new_status: PayrollStatus,
    ) -> None:
        if self.audit_sink is None:
            return
        self.audit_sink.record_change(
            action.value,
            "payroll",
            f"{record.employee_id}/{record.month}/{record.year}",
            {"old": {"status": old_status.value}, "new": {"status": new_status.value}},
        )
