"""Compensation outliers and under-utilized managers."""

import logging
from dataclasses import dataclass

import pandas as pd

from orghealth.utils.aggregations import filter_active, optional_value
from orghealth.utils.statistics import mean, std_dev, z_score
from orghealth.utils.types import Instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierEmployee:
    employee_id: str
    department: str
    role: str | None
    total_compensation: float
    z_score: float
    delta_from_mean: float

    def as_dict(self) -> dict[str, str | float | None]:
        return {
            "employeeId": self.employee_id,
            "department": self.department,
            "role": self.role,
            "totalCompensation": self.total_compensation,
            "zScore": self.z_score,
            "deltaFromMean": self.delta_from_mean,
        }


@dataclass(frozen=True)
class OutlierManager:
    manager_id: str
    manager_name: str | None
    department: str
    direct_reports_count: int
    expected_min: int

    def as_dict(self) -> dict[str, str | int | None]:
        return {
            "managerId": self.manager_id,
            "managerName": self.manager_name,
            "department": self.department,
            "directReportsCount": self.direct_reports_count,
            "expectedMin": self.expected_min,
        }


def detect_high_cost_outliers(
    employees: pd.DataFrame,
    threshold: float = 2.5,
    now: Instant = None,
) -> list[OutlierEmployee]:
    """Active employees whose compensation z-score exceeds ``threshold``, highest first."""
    active = filter_active(employees, now)
    comp = active["total_compensation"]
    comp_mean = mean(comp)
    comp_std = std_dev(comp)

    outliers = []
    for _, row in active.iterrows():
        value = float(row["total_compensation"])
        z = z_score(value, comp_mean, comp_std)
        if z > threshold:
            outliers.append(OutlierEmployee(
                employee_id=optional_value(row["employee_id"]) or row["id"],
                department=row["department"],
                role=optional_value(row["role"]),
                total_compensation=value,
                z_score=z,
                delta_from_mean=value - comp_mean,
            ))

    outliers.sort(key=lambda o: o.z_score, reverse=True)
    logger.debug("Found %d high-cost outliers above z=%.2f", len(outliers), threshold)
    return outliers


def detect_low_span_managers(
    employees: pd.DataFrame,
    min_span: int = 3,
    now: Instant = None,
) -> list[OutlierManager]:
    """Active managers with fewer than ``min_span`` active direct reports."""
    active = filter_active(employees, now)
    report_counts = active.groupby("manager_id", sort=True).size()
    by_id = active.drop_duplicates("id").set_index("id")

    outliers = []
    for manager_id, count in report_counts.items():
        if count >= min_span or manager_id not in by_id.index:
            continue
        manager = by_id.loc[manager_id]
        outliers.append(OutlierManager(
            manager_id=str(manager_id),
            manager_name=optional_value(manager["employee_name"]),
            department=manager["department"],
            direct_reports_count=int(count),
            expected_min=min_span,
        ))
    return outliers
