# backend/app/main.py

import logging
from typing import Optional

from fastapi import FastAPI

from core.config import settings
from core.database import Base, SessionLocal, engine
from modules.payroll.routes.payroll_routes import (
    configure_payroll_processor,
    router as payroll_router,
)
from modules.payroll.services.payroll_calculator import PayrollCalculator
from modules.payroll.services.payroll_processor import PayrollProcessor
from modules.payroll.services.payroll_store import SQLAlchemyPayrollStore
from modules.staff.services.data_sources import LoggingAuditSink
from modules.staff.services.seed_data import (
    StaffDataSources,
    StaffSeedData,
    build_sources,
    load_seed_file,
)
from .startup import configure_startup_logging, run_startup_checks

logger = logging.getLogger(__name__)


def load_staff_sources(seed_file: Optional[str] = None) -> StaffDataSources:
    """
    Collaborator sources from the configured seed file.

    Without a seed file the directory is empty, so every calculation
    reports the employee as not found; startup checks flag this.
    """
    seed_file = seed_file or settings.payroll_seed_file
    if not seed_file:
        logger.warning("PAYROLL_SEED_FILE is not set; payroll sources are empty")
        return build_sources(StaffSeedData())
    return build_sources(load_seed_file(seed_file))


def build_default_processor(sources: Optional[StaffDataSources] = None) -> PayrollProcessor:
    """Wire the processor to the staff sources and the database store."""
    sources = sources or load_staff_sources()
    calculator = PayrollCalculator(
        employees=sources.employees,
        attendance=sources.attendance,
        leaves=sources.leaves,
        shifts=sources.shifts,
    )
    return PayrollProcessor(
        calculator=calculator,
        store=SQLAlchemyPayrollStore(SessionLocal),
        audit_sink=LoggingAuditSink(),
    )


def create_app(
    processor: Optional[PayrollProcessor] = None,
    sources: Optional[StaffDataSources] = None,
) -> FastAPI:
    configure_startup_logging()

    if processor is None:
        Base.metadata.create_all(bind=engine)
        run_startup_checks(require_seed_data=sources is None)
        processor = build_default_processor(sources)

    configure_payroll_processor(processor)

    app = FastAPI(
        title="Payroll Engine",
        description="Monthly payroll with Indian statutory deductions",
        version="1.0.0",
        debug=settings.debug,
    )
    app.include_router(payroll_router)

    @app.get("/")
    def read_root():
        return {"message": "Payroll Engine backend is running"}

    logger.info("Payroll application created")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
