"""
Application startup validation and initialization.

This module performs startup checks so that a misconfigured payroll
deployment fails before it serves requests.
"""

import logging
import sys
from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy import text

from core.config import settings
from core.database import engine
from modules.payroll.exceptions import PayrollConfigurationError
from modules.payroll.services.config_manager import ConfigManager
from modules.staff.services.seed_data import load_seed_file

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(
        self,
        config_manager: ConfigManager = None,
        seed_file: Optional[str] = None,
        require_seed_data: bool = True,
    ):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.config_manager = config_manager or ConfigManager()
        self.seed_file = seed_file or settings.payroll_seed_file
        self.require_seed_data = require_seed_data

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_payroll_configuration(self) -> bool:
        """Validate payroll business constants"""
        try:
            self.config_manager.get_config()
            return True
        except PayrollConfigurationError as e:
            self.errors.append(f"Payroll configuration invalid: {e.message}")
            return False

    def check_required_tables(self) -> bool:
        """Check if required database tables exist"""
        try:
            existing_tables = sa.inspect(engine).get_table_names()
            if "payroll_records" not in existing_tables:
                self.warnings.append("Missing database table: payroll_records")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
            return True

    def check_seed_data(self) -> bool:
        """Check that the staff seed file is configured and readable"""
        if not self.require_seed_data:
            return True
        if not self.seed_file:
            self.errors.append("PAYROLL_SEED_FILE is not set; no employees can be paid")
            return False
        try:
            seed = load_seed_file(self.seed_file)
        except (FileNotFoundError, ValueError) as e:
            self.errors.append(f"Seed data unusable: {str(e)}")
            return False
        if not seed.employees:
            self.warnings.append(f"Seed file {self.seed_file} has no employees")
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Payroll Configuration", self.check_payroll_configuration),
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
            ("Seed Data", self.check_seed_data),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks(require_seed_data: bool = True) -> Tuple[bool, List[str]]:
    """Run all startup validation checks"""
    logger.info(f"Starting payroll backend, environment: {settings.environment}")

    validator = StartupValidator(require_seed_data=require_seed_data)
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
