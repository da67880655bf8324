"""Pandera schemas for employee and employer-cost frames."""

import pandas as pd
import pandera as pa
from pandera import Check, Column

from orghealth.utils.types import EmployeeLevel, EmploymentType, Gender


def _end_after_start(df: pd.DataFrame) -> pd.Series:
    both = df["start_date"].notna() & df["end_date"].notna()
    return ~both | (df["end_date"] >= df["start_date"])


employee_schema = pa.DataFrameSchema(
    {
        "id": Column(nullable=False),
        "employee_id": Column(nullable=True),
        "employee_name": Column(nullable=True),
        "department": Column(checks=Check.str_length(min_value=1), nullable=False),
        "role": Column(nullable=True),
        "level": Column(checks=Check.isin([level.value for level in EmployeeLevel]), nullable=True),
        "employment_type": Column(
            checks=Check.isin([t.value for t in EmploymentType]),
            nullable=True,
        ),
        "fte_factor": Column(float, Check.in_range(0.0, 1.0)),
        "total_compensation": Column(float, Check.greater_than_or_equal_to(0)),
        "annual_salary": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "bonus": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "equity_value": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "location": Column(nullable=True),
        "gender": Column(checks=Check.isin([g.value for g in Gender]), nullable=True),
        "start_date": Column(pa.DateTime, nullable=True),
        "end_date": Column(pa.DateTime, nullable=True),
        "manager_id": Column(nullable=True),
    },
    checks=Check(_end_after_start, name="end_date_not_before_start_date"),
    strict=False,
    name="employee_schema",
)


employer_cost_schema = pa.DataFrameSchema(
    {
        "period": Column(pa.DateTime, nullable=False),
        "total_cost": Column(float, Check.greater_than_or_equal_to(0)),
        "employee_count": Column(float, Check.greater_than_or_equal_to(0), nullable=True),
        "avg_cost_per_employee": Column(float, nullable=True),
        "avg_cost_ratio": Column(float, Check.greater_than(0), nullable=True),
    },
    strict=False,
    name="employer_cost_schema",
)
