# backend/modules/payroll/config/payroll_config.py

from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Tuple, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PROFESSIONAL_TAX_RATES: Dict[str, Decimal] = {
    "Maharashtra": Decimal("200"),
    "Karnataka": Decimal("200"),
    "West Bengal": Decimal("110"),
    "Tamil Nadu": Decimal("100"),
    "Andhra Pradesh": Decimal("150"),
    "Telangana": Decimal("150"),
    "Gujarat": Decimal("150"),
    "Madhya Pradesh": Decimal("60"),
    "Default": Decimal("200"),
}

# (lower bound, upper bound or None for the top slab, rate)
DEFAULT_TAX_SLABS: List[Tuple[Decimal, Optional[Decimal], Decimal]] = [
    (Decimal("0"), Decimal("300000"), Decimal("0")),
    (Decimal("300000"), Decimal("600000"), Decimal("0.05")),
    (Decimal("600000"), Decimal("900000"), Decimal("0.10")),
    (Decimal("900000"), Decimal("1200000"), Decimal("0.15")),
    (Decimal("1200000"), Decimal("1500000"), Decimal("0.20")),
    (Decimal("1500000"), None, Decimal("0.30")),
]


class PayrollSettings(BaseSettings):
    """Payroll business constants, overridable with PAYROLL_* variables"""

    model_config = SettingsConfigDict(
        env_prefix="PAYROLL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Calendar
    working_days_per_month: int = Field(default=26, description="Divisor for the daily rate")
    working_hours_per_day: Decimal = Field(default=Decimal("8"), description="Standard shift length")
    default_break_minutes: int = Field(default=60, description="Break deducted from attendance")

    # Overtime rules
    weekday_multiplier: Decimal = Field(default=Decimal("1.5"))
    weekend_multiplier: Decimal = Field(default=Decimal("2.0"))
    holiday_multiplier: Decimal = Field(default=Decimal("2.5"))
    night_differential_rate: Decimal = Field(default=Decimal("0.15"), description="Fraction of hourly pay")
    consecutive_day_bonus: Decimal = Field(default=Decimal("0.1"))
    consecutive_day_threshold: int = Field(default=6)
    max_daily_overtime_hours: Decimal = Field(default=Decimal("4"))
    max_weekly_overtime_hours: Decimal = Field(default=Decimal("20"))

    # Attendance deductions
    late_deduction_rate: Decimal = Field(default=Decimal("0.1"), description="Fraction of daily pay per late day")

    # Provident fund
    pf_rate: Decimal = Field(default=Decimal("0.12"))
    pf_wage_ceiling: Decimal = Field(default=Decimal("15000"))

    # Employee state insurance
    esi_wage_ceiling: Decimal = Field(default=Decimal("21000"))
    esi_employee_rate: Decimal = Field(default=Decimal("0.0075"))
    esi_employer_rate: Decimal = Field(default=Decimal("0.0325"))

    # Professional tax
    professional_tax_threshold: Decimal = Field(default=Decimal("15000"))
    professional_tax_rates: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_PROFESSIONAL_TAX_RATES)
    )

    # Income tax
    tax_slabs: List[Tuple[Decimal, Optional[Decimal], Decimal]] = Field(
        default_factory=lambda: list(DEFAULT_TAX_SLABS)
    )
    cess_rate: Decimal = Field(default=Decimal("0.04"))

    @field_validator("working_days_per_month")
    @classmethod
    def validate_working_days(cls, v: int) -> int:
        if not 1 <= v <= 31:
            raise ValueError("working_days_per_month must be between 1 and 31")
        return v

    @field_validator("professional_tax_rates")
    @classmethod
    def validate_pt_rates(cls, v: Dict[str, Decimal]) -> Dict[str, Decimal]:
        if "Default" not in v:
            raise ValueError("professional_tax_rates must include a 'Default' entry")
        return v

    @model_validator(mode="after")
    def validate_tax_slabs(self):
        """Slabs must be contiguous from 0 with only the last one open-ended"""
        expected_lower = Decimal("0")
        for index, (lower, upper, rate) in enumerate(self.tax_slabs):
            if lower != expected_lower:
                raise ValueError(f"Tax slab {index} must start at {expected_lower}")
            if rate < 0:
                raise ValueError(f"Tax slab {index} has a negative rate")
            if upper is None:
                if index != len(self.tax_slabs) - 1:
                    raise ValueError("Only the last tax slab may be open-ended")
                break
            if upper <= lower:
                raise ValueError(f"Tax slab {index} upper bound must exceed lower bound")
            expected_lower = upper
        return self


@lru_cache()
def get_payroll_settings() -> PayrollSettings:
    """Get payroll settings (cached)."""
    return PayrollSettings()
