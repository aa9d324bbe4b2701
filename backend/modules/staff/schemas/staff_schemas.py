from pydantic import BaseModel, ConfigDict
from typing import Optional

from ..enums.staff_enums import StaffStatus
from ...payroll.schemas.salary_schemas import SalaryStructure


class Employee(BaseModel):
    """Subset of the employee directory entry the payroll engine reads."""

    id: int
    name: str
    state: Optional[str] = None  # Used for Professional Tax
    status: StaffStatus = StaffStatus.ACTIVE
    department: Optional[str] = None
    location: Optional[str] = None
    salary_structure: Optional[SalaryStructure] = None
    default_shift_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
