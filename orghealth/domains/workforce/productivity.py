"""Revenue productivity metrics."""

import pandas as pd

from orghealth.utils.aggregations import filter_active
from orghealth.utils.types import Instant


def calculate_revenue_per_fte(total_revenue: float | None, total_fte: float) -> float | None:
    """Revenue per FTE, or ``None`` when revenue is absent/zero or there is no FTE."""
    if not total_revenue or not total_fte:
        return None
    return total_revenue / total_fte


def _text(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.lower()


def _engineer_mask(employees: pd.DataFrame) -> pd.Series:
    return _text(employees["department"]).str.contains("eng", regex=False) | _text(
        employees["role"]
    ).str.contains("engineer", regex=False)


def _product_manager_mask(employees: pd.DataFrame) -> pd.Series:
    role = _text(employees["role"])
    return (
        _text(employees["department"]).str.contains("product", regex=False)
        | role.str.contains("product manager", regex=False)
        | role.str.contains("pm", regex=False)
    )


def calculate_engineers_per_pm(employees: pd.DataFrame, now: Instant = None) -> float:
    """Engineers per product manager by headcount; 0 without product managers."""
    active = filter_active(employees, now)
    pms = int(_product_manager_mask(active).sum())
    if pms == 0:
        return 0.0
    return int(_engineer_mask(active).sum()) / pms


def calculate_engineers_per_million(
    employees: pd.DataFrame,
    total_revenue: float | None,
    now: Instant = None,
) -> float | None:
    """Engineering headcount per million of revenue."""
    if not total_revenue:
        return None
    active = filter_active(employees, now)
    return int(_engineer_mask(active).sum()) / (total_revenue / 1_000_000)
