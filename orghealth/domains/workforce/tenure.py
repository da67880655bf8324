"""Tenure distribution and retention-risk buckets."""

from typing import TypeAlias
import logging
import math
from dataclasses import dataclass, field

import pandas as pd

from orghealth.utils.aggregations import filter_active, resolve_now
from orghealth.utils.statistics import mean, median
from orghealth.utils.types import Instant

logger = logging.getLogger(__name__)

TenureGroup: TypeAlias = dict[str, float | int]

TENURE_BUCKETS: list[tuple[str, float, float]] = [
    ("0-6months", -math.inf, 6),
    ("6-12months", 6, 12),
    ("1-2years", 12, 24),
    ("2-5years", 24, 60),
    ("5plus", 60, math.inf),
]


@dataclass(frozen=True)
class TenureMetrics:
    avg_tenure_months: float
    avg_tenure_years: float
    median_tenure_months: float
    tenure_distribution: dict[str, int]
    by_department: dict[str, TenureGroup]
    by_level: dict[str, TenureGroup]
    retention_risk: dict[str, list[str]] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "avgTenureMonths": self.avg_tenure_months,
            "avgTenureYears": self.avg_tenure_years,
            "medianTenureMonths": self.median_tenure_months,
            "tenureDistribution": dict(self.tenure_distribution),
            "tenureByDepartment": {k: dict(v) for k, v in self.by_department.items()},
            "tenureByLevel": {k: dict(v) for k, v in self.by_level.items()},
            "retentionRisk": {k: list(v) for k, v in self.retention_risk.items()},
        }


def tenure_months(start_dates: pd.Series, now: Instant = None) -> pd.Series:
    """Calendar-month difference between ``now`` and each start date (day of month ignored)."""
    now = resolve_now(now)
    return (now.year - start_dates.dt.year) * 12 + (now.month - start_dates.dt.month)


def _group_averages(months: pd.Series, keys: pd.Series) -> dict[str, TenureGroup]:
    grouped = months.groupby(keys, sort=True)
    return {
        str(key): {
            "avgMonths": float(group.mean()),
            "avgYears": float(group.mean()) / 12,
            "employeeCount": int(group.size),
        }
        for key, group in grouped
    }


def calculate_tenure_metrics(employees: pd.DataFrame, now: Instant = None) -> TenureMetrics | None:
    """Tenure statistics over active employees with a known start date.

    Returns ``None`` when no active employee has a start date.
    """
    active = filter_active(employees, now)
    with_start = active[active["start_date"].notna()]
    if with_start.empty:
        return None

    months = tenure_months(with_start["start_date"], now).astype(int)

    distribution = {
        label: int(((months >= low) & (months < high)).sum())
        for label, low, high in TENURE_BUCKETS
    }

    ids = with_start["id"]
    retention_risk = {
        "high": ids[months < 6].tolist(),
        "medium": ids[(months >= 6) & (months < 12)].tolist(),
        "low": ids[months >= 12].tolist(),
    }

    avg_months = mean(months)
    metrics = TenureMetrics(
        avg_tenure_months=avg_months,
        avg_tenure_years=avg_months / 12,
        median_tenure_months=median(months),
        tenure_distribution=distribution,
        by_department=_group_averages(months, with_start["department"]),
        by_level=_group_averages(months, with_start["level"].fillna("Unknown")),
        retention_risk=retention_risk,
    )
    logger.debug("Average tenure %.1f months over %d employees", avg_months, len(months))
    return metrics


def format_tenure(months: float) -> str:
    if months < 1:
        return "Less than 1 month"
    if months == 1:
        return "1 month"
    if months < 12:
        return f"{math.floor(months)} months"

    years = math.floor(months / 12)
    remaining = math.floor(months % 12)
    if remaining == 0:
        return "1 year" if years == 1 else f"{years} years"
    return f"{years}y {remaining}m"
