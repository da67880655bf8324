"""Normalize raw employee and employer-cost records into typed frames."""

import logging
import re
from collections.abc import Iterable
from typing import Any

import pandas as pd

from orghealth.utils.aggregations import optional_value
from orghealth.utils.normalizations import infer_level, normalize_employment_type
from orghealth.utils.types import EmployeeInput, EmployeeLevel, EmploymentType, Gender, Record

logger = logging.getLogger(__name__)

EMPLOYEE_COLUMNS = (
    "id",
    "employee_id",
    "employee_name",
    "department",
    "role",
    "level",
    "employment_type",
    "fte_factor",
    "total_compensation",
    "annual_salary",
    "bonus",
    "equity_value",
    "location",
    "gender",
    "start_date",
    "end_date",
    "manager_id",
)
STRING_COLUMNS = (
    "id", "employee_id", "employee_name", "department", "role",
    "level", "employment_type", "location", "gender", "manager_id",
)
NUMERIC_COLUMNS = ("fte_factor", "total_compensation", "annual_salary", "bonus", "equity_value")
DATE_COLUMNS = ("start_date", "end_date")

COST_COLUMNS = (
    "period",
    "employee_id",
    "total_cost",
    "employee_count",
    "avg_cost_per_employee",
    "avg_cost_ratio",
)

_LEVELS = {level.value for level in EmployeeLevel}
_EMPLOYMENT_TYPES = {t.value for t in EmploymentType}
_GENDERS = {g.value for g in Gender}


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _clean_string(value: Any) -> str | None:
    value = optional_value(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _canonical(value: str | None, allowed: set[str]) -> str | None:
    """Upper-case and underscore an enum-like string; unknown values become null."""
    if value is None:
        return None
    key = value.upper().replace("-", "_").replace(" ", "_")
    return key if key in allowed else None


def _parse_dates(series: pd.Series) -> pd.Series:
    parsed = pd.to_datetime(series, errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_localize(None).astype("datetime64[ns]")


def _frame_from(records: EmployeeInput | Iterable[Record]) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        df = records.copy()
    else:
        df = pd.DataFrame.from_records(list(records))
    return df.rename(columns={col: _to_snake(str(col)) for col in df.columns})


def to_employee_frame(records: EmployeeInput, infer_levels: bool = False) -> pd.DataFrame:
    """Build the canonical employee frame from records or an existing frame.

    Missing optional columns are added as nulls, money columns are coerced to
    float, dates to naive timestamps, and ``fte_factor`` defaults to 1.0.
    With ``infer_levels`` a null level is inferred from the role title and
    manager reference.
    """
    df = _frame_from(records)

    for col in EMPLOYEE_COLUMNS:
        if col not in df.columns:
            df[col] = None

    for col in STRING_COLUMNS:
        df[col] = pd.Series([_clean_string(v) for v in df[col]], index=df.index, dtype=object)

    # Fall back to the external id, then the row position
    missing_id = df["id"].isna()
    if missing_id.any():
        fallback = pd.Series([f"emp_{i}" for i in range(len(df))], index=df.index, dtype=object)
        df.loc[missing_id, "id"] = df.loc[missing_id, "employee_id"].where(
            df.loc[missing_id, "employee_id"].notna(), fallback[missing_id]
        )

    df["level"] = pd.Series(
        [_canonical(v, _LEVELS) for v in df["level"]], index=df.index, dtype=object
    )
    df["employment_type"] = pd.Series(
        [
            _canonical(v, _EMPLOYMENT_TYPES) or normalize_employment_type(v).value
            for v in df["employment_type"]
        ],
        index=df.index,
        dtype=object,
    )
    df["gender"] = pd.Series(
        [_canonical(v, _GENDERS) for v in df["gender"]], index=df.index, dtype=object
    )

    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    df["fte_factor"] = df["fte_factor"].fillna(1.0)
    df["total_compensation"] = df["total_compensation"].fillna(0.0)

    for col in DATE_COLUMNS:
        df[col] = _parse_dates(df[col])

    if infer_levels:
        inferred = [
            level if level is not None else infer_level(role, manager is not None).value
            for level, role, manager in zip(df["level"], df["role"], df["manager_id"])
        ]
        df["level"] = pd.Series(inferred, index=df.index, dtype=object)

    logger.debug("Normalized %d employee records", len(df))
    return df[list(EMPLOYEE_COLUMNS) + [c for c in df.columns if c not in EMPLOYEE_COLUMNS]]


def to_cost_frame(records: Iterable[Record] | pd.DataFrame) -> pd.DataFrame:
    """Build a frame of employer-cost (or planned-cost) records keyed by ``period``."""
    df = _frame_from(records)
    for col in COST_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df["period"] = _parse_dates(df["period"])
    df["employee_id"] = pd.Series(
        [_clean_string(v) for v in df["employee_id"]], index=df.index, dtype=object
    )
    for col in ("total_cost", "employee_count", "avg_cost_per_employee", "avg_cost_ratio"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df
