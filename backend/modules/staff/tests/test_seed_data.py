# backend/modules/staff/tests/test_seed_data.py

"""
Tests for loading staff seed data into the in-memory sources.
"""

import json
import pytest
from datetime import date, timedelta
from decimal import Decimal

from ...payroll.services.config_manager import PayrollConfig
from ...payroll.services.payroll_calculator import PayrollCalculator
from ..services.seed_data import StaffSeedData, build_sources, load_seed_file


def _working_days(year: int, month: int, count: int):
    day = date(year, month, 1)
    while count:
        if day.weekday() != 6:
            yield day
            count -= 1
        day += timedelta(days=1)


@pytest.fixture
def seed_file(tmp_path):
    document = {
        "employees": [
            {
                "id": 1,
                "name": "Asha Rao",
                "state": "Maharashtra",
                "salary_structure": {
                    "basic": "20000",
                    "hra": "8000",
                    "da": "0",
                    "special_allowance": "3000",
                    "medical_allowance": "1250",
                    "conveyance_allowance": "1600",
                    "other_allowances": "150",
                    "ctc": "408000",
                },
                "default_shift_id": 2,
            }
        ],
        "attendance": [
            {"employee_id": 1, "date": d.isoformat(), "status": "Present", "regular_hours": "8"}
            for d in _working_days(2025, 1, 26)
        ],
        "leaves": [
            {
                "id": 1,
                "employee_id": 1,
                "type": "Casual",
                "start_date": "2025-01-31",
                "end_date": "2025-01-31",
                "days": "1",
                "is_paid": True,
                "status": "Approved",
            }
        ],
        "shifts": [
            {"id": 2, "name": "Day", "type": "Day", "start_time": "09:00", "end_time": "17:00"}
        ],
    }
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestLoadSeedFile:

    def test_loads_every_collection(self, seed_file):
        seed = load_seed_file(str(seed_file))

        assert [e.id for e in seed.employees] == [1]
        assert len(seed.attendance) == 26
        assert seed.leaves[0].days == Decimal("1")
        assert seed.shifts[0].id == 2
        assert seed.shift_assignments == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_seed_file(str(tmp_path / "absent.json"))

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"employees": [{"id": "x"}]}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_seed_file(str(path))


def test_seeded_sources_drive_calculation(seed_file):
    sources = build_sources(load_seed_file(str(seed_file)))
    calculator = PayrollCalculator(
        employees=sources.employees,
        attendance=sources.attendance,
        leaves=sources.leaves,
        shifts=sources.shifts,
        config=PayrollConfig(),
    )

    record = calculator.calculate(1, 1, 2025)

    assert record.employee_name == "Asha Rao"
    assert record.net_salary == Decimal("31532")
    assert record.leave_details.paid_leave_days == Decimal("1")


def test_empty_seed_builds_empty_sources():
    sources = build_sources(StaffSeedData())
    assert sources.employees.list_employees() == []
