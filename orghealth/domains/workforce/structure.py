"""Department mix, management ratios and span of control."""

from typing import TypeAlias
import logging
from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd

from orghealth.utils.aggregations import filter_active, sum_compensation, sum_fte
from orghealth.utils.normalizations import normalize_department
from orghealth.utils.types import (
    MANAGEMENT_LEVELS,
    DepartmentCategory,
    EmployeeLevel,
    Instant,
    SpanMap,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepartmentMetrics:
    fte: float
    cost: float
    avg_compensation: float
    percentage: float
    employee_count: int

    def as_dict(self) -> dict[str, float | int]:
        return {
            "fte": self.fte,
            "cost": self.cost,
            "avgCompensation": self.avg_compensation,
            "percentage": self.percentage,
            "employeeCount": self.employee_count,
        }


@dataclass(frozen=True)
class RatioMetrics:
    rd_to_gtm: float
    manager_to_ic: float
    avg_span_of_control: float

    def as_dict(self) -> dict[str, float]:
        return {
            "rdToGTM": self.rd_to_gtm,
            "managerToIC": self.manager_to_ic,
            "avgSpanOfControl": self.avg_span_of_control,
        }


DepartmentBreakdown: TypeAlias = dict[str, DepartmentMetrics]


def department_category(
    department: str | None,
    custom_categories: Mapping[str, str] | None = None,
) -> str:
    """Category for a raw department name; a custom mapping wins over pattern matching."""
    if custom_categories and department in custom_categories:
        return custom_categories[department]
    return normalize_department(department).value


def calculate_department_breakdown(
    employees: pd.DataFrame,
    now: Instant = None,
    custom_categories: Mapping[str, str] | None = None,
) -> DepartmentBreakdown:
    """Group active employees by department category with cost, FTE and share of cost."""
    active = filter_active(employees, now)
    total_cost = sum_compensation(active)

    categories = active["department"].map(lambda d: department_category(d, custom_categories))
    breakdown: DepartmentBreakdown = {}
    for category, group in active.groupby(categories, sort=True):
        cost = sum_compensation(group)
        fte = sum_fte(group)
        breakdown[str(category)] = DepartmentMetrics(
            fte=fte,
            cost=cost,
            avg_compensation=cost / fte if fte > 0 else 0.0,
            percentage=cost / total_cost * 100 if total_cost > 0 else 0.0,
            employee_count=len(group),
        )

    logger.debug("Department breakdown: %s", {k: v.employee_count for k, v in breakdown.items()})
    return breakdown


def calculate_rd_to_gtm_ratio(breakdown: DepartmentBreakdown) -> float:
    """R&D FTE over GTM FTE; 0 when there is no GTM headcount."""
    rd = breakdown.get(DepartmentCategory.RD.value)
    gtm = breakdown.get(DepartmentCategory.GTM.value)
    rd_fte = rd.fte if rd else 0.0
    gtm_fte = gtm.fte if gtm else 0.0
    if gtm_fte == 0:
        return 0.0
    return rd_fte / gtm_fte


def count_managers_and_ics(employees: pd.DataFrame) -> tuple[int, int]:
    """Managers are any management level; a null level counts as IC."""
    levels = employees["level"]
    managers = int(levels.isin(MANAGEMENT_LEVELS).sum())
    ics = int((levels.isna() | (levels == EmployeeLevel.IC.value)).sum())
    return managers, ics


def calculate_manager_to_ic_ratio(employees: pd.DataFrame, now: Instant = None) -> float:
    managers, ics = count_managers_and_ics(filter_active(employees, now))
    if ics == 0:
        return 0.0
    return managers / ics


def calculate_span_of_control(employees: pd.DataFrame, now: Instant = None) -> SpanMap:
    """Map each referenced manager id to its number of active direct reports."""
    active = filter_active(employees, now)
    counts = active.groupby("manager_id", sort=True).size()
    return {str(manager_id): int(count) for manager_id, count in counts.items()}


def calculate_avg_span_of_control(employees: pd.DataFrame, now: Instant = None) -> float:
    spans = calculate_span_of_control(employees, now)
    if not spans:
        return 0.0
    return sum(spans.values()) / len(spans)


def calculate_ratios(
    employees: pd.DataFrame,
    breakdown: DepartmentBreakdown,
    now: Instant = None,
) -> RatioMetrics:
    return RatioMetrics(
        rd_to_gtm=calculate_rd_to_gtm_ratio(breakdown),
        manager_to_ic=calculate_manager_to_ic_ratio(employees, now),
        avg_span_of_control=calculate_avg_span_of_control(employees, now),
    )
