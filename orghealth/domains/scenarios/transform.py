"""What-if transforms over the employee frame.

Each transform returns a new frame of the scenario workforce and leaves its
input untouched.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from orghealth.config import EngineConfig
from orghealth.domains.workforce.cost import calculate_total_cost
from orghealth.domains.workforce.structure import (
    calculate_department_breakdown,
    calculate_rd_to_gtm_ratio,
    department_category,
)
from orghealth.domains.workforce.transform import to_employee_frame
from orghealth.utils.aggregations import filter_active
from orghealth.utils.normalizations import normalize_department
from orghealth.utils.types import DepartmentCategory, EmploymentType, Instant

logger = logging.getLogger(__name__)

DEFAULT_GROWTH_COMPENSATION = EngineConfig.default_growth_compensation


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def apply_hiring_freeze(
    employees: pd.DataFrame,
    open_roles: Iterable[Any] | None = None,
) -> tuple[pd.DataFrame, list[Any]]:
    """Keep every employee and drop all open roles."""
    dropped = len(list(open_roles)) if open_roles is not None else 0
    logger.debug("Hiring freeze drops %d open roles", dropped)
    return employees.copy(), []


def apply_cost_reduction(
    employees: pd.DataFrame,
    reduction_pct: float,
    target_departments: Iterable[str] | None = None,
    now: Instant = None,
) -> pd.DataFrame:
    """Remove the highest-paid active employees until the cut reaches ``reduction_pct``.

    The target is a share of total active cost. Removal is greedy and stops as
    soon as the removed compensation meets the target, so it may overshoot.
    ``target_departments`` names department categories (R&D, GTM, ...) to cut from.
    """
    active = filter_active(employees, now)
    target = calculate_total_cost(active, now) * (reduction_pct / 100)

    candidates = active
    if target_departments is not None:
        wanted = set(target_departments)
        candidates = active[active["department"].map(lambda d: normalize_department(d).value in wanted)]
    candidates = candidates.sort_values("total_compensation", ascending=False, kind="stable")

    removed_cost = 0.0
    removed_ids = set()
    for emp_id, compensation in zip(candidates["id"], candidates["total_compensation"]):
        if removed_cost >= target:
            break
        removed_ids.add(emp_id)
        removed_cost += float(compensation)

    logger.info(
        "Cost reduction of %.1f%% removes %d employees (%.0f of %.0f target)",
        reduction_pct, len(removed_ids), removed_cost, target,
    )
    return active[~active["id"].isin(removed_ids)].copy()


def _new_hire_records(department: str, count: int, compensation: float) -> list[dict[str, Any]]:
    return [
        {
            "id": f"new_{department}_{i}",
            "employee_id": f"NEW_{department}_{i}",
            "employee_name": f"New Hire {i + 1}",
            "department": department,
            "employment_type": EmploymentType.FTE.value,
            "fte_factor": 1.0,
            "annual_salary": compensation,
            "total_compensation": compensation,
        }
        for i in range(count)
    ]


def apply_growth(
    employees: pd.DataFrame,
    additional_fte: float,
    distribution: Mapping[str, float],
    now: Instant = None,
    default_compensation: float = DEFAULT_GROWTH_COMPENSATION,
) -> pd.DataFrame:
    """Add placeholder hires split across departments by ``distribution`` (fractions of 1.0).

    Each hire is paid its department category's current average compensation,
    or ``default_compensation`` when the category has no one yet.
    """
    active = filter_active(employees, now)
    breakdown = calculate_department_breakdown(active, now)

    records = []
    for department, share in distribution.items():
        existing = breakdown.get(department_category(department))
        compensation = existing.avg_compensation if existing and existing.avg_compensation else default_compensation
        records.extend(_new_hire_records(department, round_half_up(additional_fte * share), compensation))

    if not records:
        return active.copy()

    hires = to_employee_frame(records)
    logger.info("Growth scenario adds %d hires", len(hires))
    return pd.concat([active, hires], ignore_index=True)


def apply_target_ratio(
    employees: pd.DataFrame,
    target_ratio: float,
    now: Instant = None,
    default_compensation: float = DEFAULT_GROWTH_COMPENSATION,
) -> pd.DataFrame:
    """Hire into R&D or GTM until the R&D:GTM FTE ratio reaches ``target_ratio``.

    Without a usable current ratio (no GTM, no R&D) the active workforce is
    returned unchanged.
    """
    active = filter_active(employees, now)
    breakdown = calculate_department_breakdown(active, now)
    current = calculate_rd_to_gtm_ratio(breakdown)

    if current == 0 or not math.isfinite(current):
        logger.debug("No R&D:GTM ratio to adjust")
        return active.copy()
    if target_ratio <= 0:
        logger.warning("Target R&D:GTM ratio must be positive, got %s", target_ratio)
        return active.copy()

    rd = breakdown.get(DepartmentCategory.RD.value)
    gtm = breakdown.get(DepartmentCategory.GTM.value)
    rd_fte = rd.fte if rd else 0.0
    gtm_fte = gtm.fte if gtm else 0.0

    if current > target_ratio:
        needed = math.ceil(rd_fte / target_ratio - gtm_fte)
        category = DepartmentCategory.GTM.value
    else:
        needed = math.ceil(gtm_fte * target_ratio - rd_fte)
        category = DepartmentCategory.RD.value

    return apply_growth(active, max(0, needed), {category: 1.0}, now, default_compensation)
