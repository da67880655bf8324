"""Common aggregation helpers over employee frames."""

import logging
from typing import Any

import pandas as pd

from orghealth.utils.types import Instant

logger = logging.getLogger(__name__)


def resolve_now(now: Instant = None) -> pd.Timestamp:
    """Return the evaluation instant as a naive timestamp (UTC when tz-aware)."""
    ts = pd.Timestamp.now() if now is None else pd.Timestamp(now)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def active_mask(employees: pd.DataFrame, now: Instant = None) -> pd.Series:
    """Boolean mask of employees without an end date or ending strictly after ``now``."""
    now = resolve_now(now)
    return employees["end_date"].isna() | (employees["end_date"] > now)


def filter_active(employees: pd.DataFrame, now: Instant = None) -> pd.DataFrame:
    """Filter to employees who are still active at ``now``."""
    active = employees[active_mask(employees, now)]
    logger.debug("Active employees: %d of %d", len(active), len(employees))
    return active


def sum_compensation(employees: pd.DataFrame) -> float:
    return float(employees["total_compensation"].fillna(0.0).sum())


def sum_fte(employees: pd.DataFrame) -> float:
    return float(employees["fte_factor"].fillna(0.0).sum())


def group_by(employees: pd.DataFrame, key: str) -> dict[Any, pd.DataFrame]:
    """Split the frame into ``{key value: rows}``; null keys are dropped."""
    return {value: group for value, group in employees.groupby(key, sort=True)}


def optional_value(value: Any) -> Any | None:
    """Map pandas missing markers (NaN, NaT, NA) to ``None``."""
    if value is None:
        return None
    try:
        return None if pd.isna(value) else value
    except (TypeError, ValueError):
        return value


def safe_divide(numerator: float | None, denominator: float | None) -> float | None:
    """Divide, returning ``None`` when either side is missing or the denominator is zero."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator
