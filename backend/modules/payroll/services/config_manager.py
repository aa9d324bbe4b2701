"""
Configuration management service for payroll calculations.

Turns ``PayrollSettings`` into immutable rule objects so that the
calculators never carry hardcoded business constants.
"""

import logging
from decimal import Decimal
from typing import Dict, Optional, Any, List, Tuple
from dataclasses import dataclass, field, asdict

from ..config.payroll_config import (
    DEFAULT_PROFESSIONAL_TAX_RATES,
    DEFAULT_TAX_SLABS,
    PayrollSettings,
    get_payroll_settings,
)
from ..exceptions import PayrollConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeRules:
    """Overtime multipliers, differentials and caps."""
    weekday_multiplier: Decimal = Decimal('1.5')
    weekend_multiplier: Decimal = Decimal('2.0')
    holiday_multiplier: Decimal = Decimal('2.5')
    night_differential: Decimal = Decimal('0.15')
    consecutive_day_bonus: Decimal = Decimal('0.1')
    consecutive_day_threshold: int = 6
    max_daily_hours: Decimal = Decimal('4')
    max_weekly_hours: Decimal = Decimal('20')


@dataclass(frozen=True)
class TaxSlab:
    """Progressive income tax band; ``upper`` is None for the top band."""
    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal

    def taxable_portion(self, income: Decimal) -> Decimal:
        if income <= self.lower:
            return Decimal('0')
        ceiling = income if self.upper is None else min(income, self.upper)
        return ceiling - self.lower


@dataclass(frozen=True)
class StatutoryRates:
    """PF, ESI, professional tax and TDS parameters."""
    pf_rate: Decimal = Decimal('0.12')
    pf_wage_ceiling: Decimal = Decimal('15000')
    esi_wage_ceiling: Decimal = Decimal('21000')
    esi_employee_rate: Decimal = Decimal('0.0075')
    esi_employer_rate: Decimal = Decimal('0.0325')
    professional_tax_threshold: Decimal = Decimal('15000')
    professional_tax_rates: Tuple[Tuple[str, Decimal], ...] = tuple(
        sorted(DEFAULT_PROFESSIONAL_TAX_RATES.items())
    )
    tax_slabs: Tuple[TaxSlab, ...] = tuple(
        TaxSlab(lower, upper, rate) for lower, upper, rate in DEFAULT_TAX_SLABS
    )
    cess_rate: Decimal = Decimal('0.04')

    def professional_tax_for(self, state: Optional[str]) -> Decimal:
        rates = dict(self.professional_tax_rates)
        if state and state in rates:
            return rates[state]
        return rates.get('Default', Decimal('0'))


@dataclass(frozen=True)
class PayrollConfig:
    """Centralized payroll configuration."""
    working_days_per_month: int = 26
    working_hours_per_day: Decimal = Decimal('8')
    default_break_minutes: int = 60
    late_deduction_rate: Decimal = Decimal('0.1')
    overtime: OvertimeRules = field(default_factory=OvertimeRules)
    statutory: StatutoryRates = field(default_factory=StatutoryRates)


class ConfigManager:
    """Builds ``PayrollConfig`` from settings and environment variables."""

    def __init__(self, settings: Optional[PayrollSettings] = None):
        self.settings = settings
        self._config_cache: Optional[PayrollConfig] = None

    def get_config(self) -> PayrollConfig:
        """
        Get payroll configuration with caching.

        Returns:
            PayrollConfig with current settings

        Raises:
            PayrollConfigurationError: If the overtime rules are not sane
        """
        if self._config_cache is None:
            self._config_cache = self._load_configuration()
        return self._config_cache

    def reload(self) -> PayrollConfig:
        self._config_cache = None
        return self.get_config()

    def _load_configuration(self) -> PayrollConfig:
        settings = self.settings or get_payroll_settings()

        overtime = OvertimeRules(
            weekday_multiplier=settings.weekday_multiplier,
            weekend_multiplier=settings.weekend_multiplier,
            holiday_multiplier=settings.holiday_multiplier,
            night_differential=settings.night_differential_rate,
            consecutive_day_bonus=settings.consecutive_day_bonus,
            consecutive_day_threshold=settings.consecutive_day_threshold,
            max_daily_hours=settings.max_daily_overtime_hours,
            max_weekly_hours=settings.max_weekly_overtime_hours,
        )

        errors = self.validate_overtime_rules(asdict(overtime))
        if errors:
            logger.error(f"Invalid overtime configuration: {errors}")
            raise PayrollConfigurationError("; ".join(errors), config_key="overtime")

        statutory = StatutoryRates(
            pf_rate=settings.pf_rate,
            pf_wage_ceiling=settings.pf_wage_ceiling,
            esi_wage_ceiling=settings.esi_wage_ceiling,
            esi_employee_rate=settings.esi_employee_rate,
            esi_employer_rate=settings.esi_employer_rate,
            professional_tax_threshold=settings.professional_tax_threshold,
            professional_tax_rates=tuple(sorted(settings.professional_tax_rates.items())),
            tax_slabs=tuple(
                TaxSlab(lower=lower, upper=upper, rate=rate)
                for lower, upper, rate in settings.tax_slabs
            ),
            cess_rate=settings.cess_rate,
        )

        config = PayrollConfig(
            working_days_per_month=settings.working_days_per_month,
            working_hours_per_day=settings.working_hours_per_day,
            default_break_minutes=settings.default_break_minutes,
            late_deduction_rate=settings.late_deduction_rate,
            overtime=overtime,
            statutory=statutory,
        )
        logger.debug(f"Loaded payroll configuration: {config}")
        return config

    def validate_overtime_rules(self, rules: Dict[str, Any]) -> List[str]:
        """
        Validate overtime rules for compliance and reasonableness.

        Args:
            rules: Dictionary containing overtime rule values

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        multipliers = {
            'weekday_multiplier': "Weekday",
            'weekend_multiplier': "Weekend",
            'holiday_multiplier': "Holiday",
        }
        for key, label in multipliers.items():
            value = rules.get(key, Decimal('1.5'))
            if not isinstance(value, (int, float, Decimal)):
                errors.append(f"{label} overtime multiplier must be a numeric value")
            elif value < Decimal('1.0') or value > Decimal('3.0'):
                errors.append(f"{label} overtime multiplier should be between 1.0 and 3.0")

        max_daily = rules.get('max_daily_hours', Decimal('4'))
        if not isinstance(max_daily, (int, float, Decimal)):
            errors.append("Daily overtime cap must be a numeric value")
        elif max_daily <= 0 or max_daily > Decimal('12'):
            errors.append("Daily overtime cap should be between 0 and 12 hours")

        max_weekly = rules.get('max_weekly_hours', Decimal('20'))
        if not isinstance(max_weekly, (int, float, Decimal)):
            errors.append("Weekly overtime cap must be a numeric value")
        elif max_weekly <= 0:
            errors.append("Weekly overtime cap must be positive")
        elif isinstance(max_daily, (int, float, Decimal)) and max_weekly < max_daily:
            errors.append("Weekly overtime cap must not be below the daily cap")

        for key in ('night_differential', 'consecutive_day_bonus'):
            value = rules.get(key, Decimal('0'))
            if not isinstance(value, (int, float, Decimal)):
                errors.append(f"{key} must be a numeric value")
            elif value < 0 or value > 1:
                errors.append(f"{key} should be a fraction between 0 and 1")

        return errors


_default_manager = ConfigManager()


def get_payroll_config() -> PayrollConfig:
    """Process-wide configuration built from the environment."""
    return _default_manager.get_config()
