"""Employer cost (gross pay plus employer-side charges) calculations."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from orghealth.utils.statistics import mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployerCostRecord:
    gross_salary: float
    gross_bonus: float | None = None
    gross_equity: float | None = None
    employer_taxes: float | None = None
    social_contributions: float | None = None
    health_insurance: float | None = None
    benefits: float | None = None
    other_employer_costs: float | None = None


EMPLOYER_SIDE_FIELDS = (
    "employer_taxes",
    "social_contributions",
    "health_insurance",
    "benefits",
    "other_employer_costs",
)


def calculate_gross_total(record: EmployerCostRecord) -> float:
    """What the employee receives: salary, bonus and equity."""
    return record.gross_salary + (record.gross_bonus or 0.0) + (record.gross_equity or 0.0)


def calculate_total_employer_cost(record: EmployerCostRecord) -> float:
    return calculate_gross_total(record) + sum(
        getattr(record, name) or 0.0 for name in EMPLOYER_SIDE_FIELDS
    )


def calculate_cost_ratio(record: EmployerCostRecord) -> float:
    """Total employer cost over gross pay, e.g. 1.35 for a 35% overhead."""
    gross = calculate_gross_total(record)
    if gross == 0:
        return 0.0
    return calculate_total_employer_cost(record) / gross


def calculate_overhead_pct(record: EmployerCostRecord) -> float:
    return (calculate_cost_ratio(record) - 1) * 100


def calculate_avg_cost_per_employee(records: list[EmployerCostRecord]) -> float:
    if not records:
        return 0.0
    return sum(calculate_total_employer_cost(r) for r in records) / len(records)


def calculate_mom_growth(current_cost: float, previous_cost: float) -> float:
    """Month-over-month growth in percent; 0 when there is no previous cost."""
    if previous_cost == 0:
        return 0.0
    return (current_cost - previous_cost) / previous_cost * 100


def calculate_avg_monthly_growth(first_cost: float, last_cost: float, months_elapsed: int) -> float:
    if first_cost == 0 or months_elapsed == 0:
        return 0.0
    return (last_cost - first_cost) / first_cost / months_elapsed * 100


def project_annual_cost(monthly_cost: float) -> float:
    return monthly_cost * 12


def aggregate_employer_costs(records: Iterable[EmployerCostRecord]) -> dict[str, float]:
    """Sum every cost category across records."""
    totals = {
        "total_gross_salary": 0.0,
        "total_gross_bonus": 0.0,
        "total_gross_equity": 0.0,
        "total_employer_taxes": 0.0,
        "total_social_contributions": 0.0,
        "total_health_insurance": 0.0,
        "total_benefits": 0.0,
        "total_other_costs": 0.0,
    }
    for record in records:
        totals["total_gross_salary"] += record.gross_salary
        totals["total_gross_bonus"] += record.gross_bonus or 0.0
        totals["total_gross_equity"] += record.gross_equity or 0.0
        totals["total_employer_taxes"] += record.employer_taxes or 0.0
        totals["total_social_contributions"] += record.social_contributions or 0.0
        totals["total_health_insurance"] += record.health_insurance or 0.0
        totals["total_benefits"] += record.benefits or 0.0
        totals["total_other_costs"] += record.other_employer_costs or 0.0

    totals["total_gross_compensation"] = (
        totals["total_gross_salary"] + totals["total_gross_bonus"] + totals["total_gross_equity"]
    )
    totals["total_employer_cost"] = totals["total_gross_compensation"] + sum(
        totals[key]
        for key in (
            "total_employer_taxes",
            "total_social_contributions",
            "total_health_insurance",
            "total_benefits",
            "total_other_costs",
        )
    )
    return totals


def summarize_monthly_costs(costs: pd.DataFrame) -> pd.DataFrame:
    """Fold per-employee monthly cost rows into one row per period.

    Expects ``period``, ``employee_id``, ``total_cost`` and optionally
    ``cost_ratio``. Output columns: ``period``, ``total_cost``,
    ``employee_count``, ``avg_cost_per_employee``, ``avg_cost_ratio``
    (null when no row of the period carries a ratio), sorted by period.
    """
    columns = ["period", "total_cost", "employee_count", "avg_cost_per_employee", "avg_cost_ratio"]
    if costs.empty:
        return pd.DataFrame(columns=columns)

    frame = costs.copy()
    if "cost_ratio" not in frame.columns:
        frame["cost_ratio"] = None
    frame["cost_ratio"] = pd.to_numeric(frame["cost_ratio"], errors="coerce")

    monthly = frame.groupby("period", sort=True).agg(
        total_cost=("total_cost", "sum"),
        employee_count=("employee_id", "count"),
        avg_cost_ratio=("cost_ratio", lambda r: mean(r) if r.notna().any() else None),
    ).reset_index()
    monthly["avg_cost_per_employee"] = [
        total / count if count > 0 else 0.0
        for total, count in zip(monthly["total_cost"], monthly["employee_count"])
    ]
    monthly["employee_count"] = monthly["employee_count"].astype(float)

    logger.debug("Summarized %d cost rows into %d periods", len(frame), len(monthly))
    return monthly[columns]
