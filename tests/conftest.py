"""
conftest.py — Shared pytest fixtures for the orghealth test suite.

Every fixture builds plain in-memory frames; no files, network or clock
reads are involved. All calculators are called with the pinned ``now``
fixture so results do not drift with the calendar.
"""

import pandas as pd
import pytest

from orghealth.domains.workforce.transform import to_cost_frame, to_employee_frame
from orghealth.utils.types import DatasetMetadata


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

@pytest.fixture
def now():
    """Evaluation instant used throughout the suite: 2025-06-15."""
    return pd.Timestamp("2025-06-15")


# ---------------------------------------------------------------------------
# Employee frames
# ---------------------------------------------------------------------------

@pytest.fixture
def make_employees():
    """
    Factory turning a list of partial records into a canonical employee frame.

    Only ``id`` and ``department`` are filled in when missing; every other
    column keeps the defaults applied by ``to_employee_frame``.
    """
    def _make(records):
        rows = []
        for index, record in enumerate(records):
            row = {"id": f"e{index + 1}", "department": "Engineering"}
            row.update(record)
            rows.append(row)
        return to_employee_frame(rows)

    return _make


@pytest.fixture
def sample_records():
    """
    A seven-person company, one of whom left before ``now``.

    Active headcount 6, active FTE 5.5, active cost 970,000:
      e1 CEO (Executive)          300k   reports: e2, e5 (and departed e7)
      e2 Engineering Manager      200k   reports: e3, e4
      e3 Software Engineer        150k
      e4 Software Engineer        140k
      e5 Account Executive        120k   reports: e6
      e6 SDR (0.5 FTE)             60k
      e7 Controller (Finance)     110k   ended 2025-03-31
    """
    return [
        {
            "id": "e1", "employee_id": "EMP-001", "employee_name": "Ada Chen",
            "department": "Executive", "role": "CEO", "level": "C_LEVEL",
            "total_compensation": 300_000, "annual_salary": 250_000,
            "gender": "MALE", "location": "United States", "start_date": "2020-01-10",
        },
        {
            "id": "e2", "employee_id": "EMP-002", "employee_name": "Bo Park",
            "department": "Engineering", "role": "Engineering Manager", "level": "MANAGER",
            "total_compensation": 200_000, "annual_salary": 170_000,
            "gender": "FEMALE", "location": "USA", "start_date": "2021-03-01", "manager_id": "e1",
        },
        {
            "id": "e3", "employee_id": "EMP-003", "employee_name": "Cy Ortiz",
            "department": "Engineering", "role": "Software Engineer", "level": "IC",
            "total_compensation": 150_000, "annual_salary": 140_000,
            "gender": "MALE", "location": "Poland", "start_date": "2023-06-01", "manager_id": "e2",
        },
        {
            "id": "e4", "employee_id": "EMP-004", "employee_name": "Di Novak",
            "department": "Engineering", "role": "Software Engineer", "level": "IC",
            "total_compensation": 140_000, "annual_salary": 130_000,
            "gender": "FEMALE", "location": "Germany", "start_date": "2025-01-15", "manager_id": "e2",
        },
        {
            "id": "e5", "employee_id": "EMP-005", "employee_name": "Ed Mills",
            "department": "Sales", "role": "Account Executive", "level": "IC",
            "total_compensation": 120_000, "annual_salary": 90_000,
            "gender": "MALE", "location": "United Kingdom", "start_date": "2024-09-01", "manager_id": "e1",
        },
        {
            "id": "e6", "employee_id": "EMP-006", "employee_name": "Fi Shah",
            "department": "Sales", "role": "SDR", "level": "IC", "fte_factor": 0.5,
            "total_compensation": 60_000, "annual_salary": 50_000,
            "gender": "FEMALE", "location": "India", "start_date": "2025-04-01", "manager_id": "e5",
        },
        {
            "id": "e7", "employee_id": "EMP-007", "employee_name": "Gus Lee",
            "department": "Finance", "role": "Controller", "level": "IC",
            "total_compensation": 110_000, "annual_salary": 100_000,
            "gender": "MALE", "location": "Canada", "start_date": "2019-05-01",
            "end_date": "2025-03-31", "manager_id": "e1",
        },
    ]


@pytest.fixture
def sample_employees(sample_records):
    return to_employee_frame(sample_records)


@pytest.fixture
def sample_metadata():
    """Revenue 5M, cash 2M."""
    return DatasetMetadata(total_revenue=5_000_000, currency="USD", current_cash_balance=2_000_000)


# ---------------------------------------------------------------------------
# Cost series
# ---------------------------------------------------------------------------

@pytest.fixture
def employer_costs():
    """Three monthly company-level records, newest cost 90k at ratio 1.30."""
    return to_cost_frame([
        {"period": "2025-03-01", "total_cost": 80_000, "employee_count": 6,
         "avg_cost_per_employee": 13_333.33, "avg_cost_ratio": 1.28},
        {"period": "2025-04-01", "total_cost": 85_000, "employee_count": 6,
         "avg_cost_per_employee": 14_166.67, "avg_cost_ratio": 1.29},
        {"period": "2025-05-01", "total_cost": 90_000, "employee_count": 6,
         "avg_cost_per_employee": 15_000.00, "avg_cost_ratio": 1.30},
    ])


@pytest.fixture
def planned_costs():
    """Plan for April and May; May is planned at 100k."""
    return to_cost_frame([
        {"period": "2025-04-01", "total_cost": 80_000},
        {"period": "2025-05-01", "total_cost": 100_000},
    ])
