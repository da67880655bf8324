"""Baseline vs scenario comparison and the list of employees a scenario touches."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from enum import StrEnum

import pandas as pd

from orghealth.domains.workforce.cost import (
    calculate_cost_per_fte,
    calculate_total_cost,
    calculate_total_fte,
)
from orghealth.domains.workforce.productivity import calculate_revenue_per_fte
from orghealth.domains.workforce.structure import (
    calculate_department_breakdown,
    calculate_rd_to_gtm_ratio,
)
from orghealth.utils.aggregations import filter_active, optional_value, resolve_now
from orghealth.utils.types import DatasetMetadata, Instant, RecordID

logger = logging.getLogger(__name__)


class EmployeeAction(StrEnum):
    REMOVE = "remove"
    ADD = "add"


@dataclass(frozen=True)
class SummaryMetrics:
    total_fte: float
    total_cost: float
    cost_per_fte: float
    revenue_per_fte: float | None
    employee_count: int

    def as_dict(self) -> dict:
        return {
            "totalFTE": self.total_fte,
            "totalCost": self.total_cost,
            "costPerFTE": self.cost_per_fte,
            "revenuePerFTE": self.revenue_per_fte,
            "employeeCount": self.employee_count,
        }


@dataclass(frozen=True)
class ScenarioDelta:
    fte_change: float
    cost_savings: float
    cost_savings_pct: float
    ratio_change: float

    def as_dict(self) -> dict[str, float]:
        return {
            "fteChange": self.fte_change,
            "costSavings": self.cost_savings,
            "costSavingsPct": self.cost_savings_pct,
            "ratioChange": self.ratio_change,
        }


@dataclass(frozen=True)
class AffectedEmployee:
    id: RecordID
    employee_id: str | None
    employee_name: str | None
    department: str | None
    role: str | None
    total_compensation: float
    action: EmployeeAction
    effective_date: date | None = None
    is_new: bool = False

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "department": self.department,
            "role": self.role,
            "totalCompensation": self.total_compensation,
            "action": self.action.value,
            "effectiveDate": self.effective_date.isoformat() if self.effective_date else None,
            "isNew": self.is_new,
        }


@dataclass(frozen=True)
class ScenarioResult:
    baseline: SummaryMetrics
    scenario: SummaryMetrics
    delta: ScenarioDelta
    affected_employees: tuple[AffectedEmployee, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        return {
            "baseline": self.baseline.as_dict(),
            "scenario": self.scenario.as_dict(),
            "delta": self.delta.as_dict(),
            "affectedEmployees": [e.as_dict() for e in self.affected_employees],
        }


def summarize_workforce(
    employees: pd.DataFrame,
    total_revenue: float | None = None,
    now: Instant = None,
) -> SummaryMetrics:
    total_cost = calculate_total_cost(employees, now)
    total_fte = calculate_total_fte(employees, now)
    return SummaryMetrics(
        total_fte=total_fte,
        total_cost=total_cost,
        cost_per_fte=calculate_cost_per_fte(total_cost, total_fte),
        revenue_per_fte=calculate_revenue_per_fte(total_revenue, total_fte),
        employee_count=len(filter_active(employees, now)),
    )


def calculate_scenario_metrics(
    baseline: pd.DataFrame,
    scenario: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    now: Instant = None,
    affected_employees: Sequence[AffectedEmployee] = (),
) -> ScenarioResult:
    """Compare the scenario workforce against the baseline."""
    revenue = metadata.total_revenue if metadata else None
    base = summarize_workforce(baseline, revenue, now)
    scen = summarize_workforce(scenario, revenue, now)

    base_ratio = calculate_rd_to_gtm_ratio(calculate_department_breakdown(baseline, now))
    scen_ratio = calculate_rd_to_gtm_ratio(calculate_department_breakdown(scenario, now))

    savings = base.total_cost - scen.total_cost
    delta = ScenarioDelta(
        fte_change=scen.total_fte - base.total_fte,
        cost_savings=savings,
        cost_savings_pct=savings / base.total_cost * 100 if base.total_cost > 0 else 0.0,
        ratio_change=scen_ratio - base_ratio,
    )
    logger.debug("Scenario delta: %s", delta)
    return ScenarioResult(base, scen, delta, tuple(affected_employees))


def _affected(row: pd.Series, action: EmployeeAction, effective: date | None) -> AffectedEmployee:
    return AffectedEmployee(
        id=row["id"],
        employee_id=optional_value(row["employee_id"]),
        employee_name=optional_value(row["employee_name"]),
        department=optional_value(row["department"]),
        role=optional_value(row["role"]),
        total_compensation=float(optional_value(row["total_compensation"]) or 0.0),
        action=action,
        effective_date=effective,
        is_new=action == EmployeeAction.ADD,
    )


def identify_affected_employees(
    baseline: pd.DataFrame,
    scenario: pd.DataFrame,
    effective_dates: Mapping[RecordID, date] | None = None,
    now: Instant = None,
) -> list[AffectedEmployee]:
    """Active baseline employees the scenario removes, followed by the ones it adds."""
    effective_dates = effective_dates or {}
    baseline = filter_active(baseline, now)
    removed = baseline[~baseline["id"].isin(scenario["id"])]
    added = scenario[~scenario["id"].isin(baseline["id"])]
    return [
        _affected(row, EmployeeAction.REMOVE, effective_dates.get(row["id"]))
        for _, row in removed.iterrows()
    ] + [
        _affected(row, EmployeeAction.ADD, effective_dates.get(row["id"]))
        for _, row in added.iterrows()
    ]


def generate_default_effective_dates(
    affected: Sequence[AffectedEmployee],
    start_date: Instant = None,
) -> list[AffectedEmployee]:
    """Fill missing effective dates: removals from 30 days out, additions from 60, monthly apart.

    Each generated date is moved to the last day of its month.
    """
    start = resolve_now(start_date).normalize()
    dated = []
    for index, emp in enumerate(affected):
        if emp.effective_date is not None:
            dated.append(emp)
            continue
        offset = (30 if emp.action == EmployeeAction.REMOVE else 60) + index * 30
        effective = start + pd.Timedelta(days=offset) + pd.offsets.MonthEnd(0)
        dated.append(replace(emp, effective_date=effective.date()))
    return dated
