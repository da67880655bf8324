"""Headline cost and FTE totals over the active workforce."""

import logging

import pandas as pd

from orghealth.utils.aggregations import filter_active, sum_compensation, sum_fte
from orghealth.utils.types import Instant

logger = logging.getLogger(__name__)


def calculate_total_cost(employees: pd.DataFrame, now: Instant = None) -> float:
    """Sum of total compensation across active employees."""
    return sum_compensation(filter_active(employees, now))


def calculate_total_fte(employees: pd.DataFrame, now: Instant = None) -> float:
    """Sum of FTE factors across active employees."""
    return sum_fte(filter_active(employees, now))


def calculate_cost_per_fte(total_cost: float, total_fte: float) -> float:
    if total_fte == 0:
        return 0.0
    return total_cost / total_fte


def calculate_department_cost(
    employees: pd.DataFrame,
    department: str,
    now: Instant = None,
) -> float:
    """Cost of one raw department name (exact match, not normalized)."""
    active = filter_active(employees, now)
    return sum_compensation(active[active["department"] == department])


def calculate_department_fte(
    employees: pd.DataFrame,
    department: str,
    now: Instant = None,
) -> float:
    active = filter_active(employees, now)
    return sum_fte(active[active["department"] == department])
