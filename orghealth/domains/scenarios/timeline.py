"""Month-by-month cost timeline, runway and year-end projection for a scenario."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

from orghealth.domains.scenarios.metrics import AffectedEmployee, EmployeeAction
from orghealth.utils.aggregations import resolve_now, sum_compensation
from orghealth.utils.statistics import mean
from orghealth.utils.types import Instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyBurnRate:
    month: str
    baseline_cost: float
    scenario_cost: float
    savings: float
    effective_employee_count: int

    def as_dict(self) -> dict:
        return {
            "month": self.month,
            "baselineCost": self.baseline_cost,
            "scenarioCost": self.scenario_cost,
            "savings": self.savings,
            "effectiveEmployeeCount": self.effective_employee_count,
        }


@dataclass(frozen=True)
class RunwayAnalysis:
    current_cash: float | None
    baseline_runway_months: float | None = None
    scenario_runway_months: float | None = None
    runway_extension_months: float | None = None
    baseline_runout_date: date | None = None
    scenario_runout_date: date | None = None

    def as_dict(self) -> dict:
        return {
            "currentCash": self.current_cash,
            "baselineRunwayMonths": self.baseline_runway_months,
            "scenarioRunwayMonths": self.scenario_runway_months,
            "runwayExtensionMonths": self.runway_extension_months,
            "baselineRunoutDate": self.baseline_runout_date.isoformat() if self.baseline_runout_date else None,
            "scenarioRunoutDate": self.scenario_runout_date.isoformat() if self.scenario_runout_date else None,
        }


@dataclass(frozen=True)
class YearEndProjection:
    year: int
    baseline_total: float
    scenario_total: float
    total_savings: float
    avg_monthly_burn: float

    def as_dict(self) -> dict:
        return {
            "year": self.year,
            "baselineTotal": self.baseline_total,
            "scenarioTotal": self.scenario_total,
            "totalSavings": self.total_savings,
            "avgMonthlyBurn": self.avg_monthly_burn,
        }


def calculate_monthly_burn_rate(
    baseline: pd.DataFrame,
    affected: Sequence[AffectedEmployee],
    start_month: Instant,
    end_month: Instant,
) -> list[MonthlyBurnRate]:
    """Monthly baseline vs scenario cost between two months, inclusive.

    A change counts from the month of its effective date onwards; changes
    without an effective date are ignored.
    """
    baseline_monthly = sum_compensation(baseline) / 12
    months = pd.period_range(resolve_now(start_month), resolve_now(end_month), freq="M")

    dated = [
        (pd.Timestamp(emp.effective_date).to_period("M"), emp)
        for emp in affected
        if emp.effective_date is not None
    ]

    timeline = []
    for month in months:
        cost = baseline_monthly
        count = len(baseline)
        for effective, emp in dated:
            if effective > month:
                continue
            if emp.action == EmployeeAction.REMOVE:
                cost -= emp.total_compensation / 12
                count -= 1
            else:
                cost += emp.total_compensation / 12
                count += 1
        timeline.append(MonthlyBurnRate(
            month=month.strftime("%Y-%m"),
            baseline_cost=baseline_monthly,
            scenario_cost=cost,
            savings=baseline_monthly - cost,
            effective_employee_count=count,
        ))

    logger.debug("Built %d-month burn timeline", len(timeline))
    return timeline


def _runout(today: pd.Timestamp, months: float | None) -> date | None:
    if not months:
        return None
    return (today.to_period("M") + int(months)).to_timestamp().date()


def calculate_runway_analysis(
    current_cash: float | None,
    burn: Sequence[MonthlyBurnRate],
    now: Instant = None,
) -> RunwayAnalysis:
    """Runway in months at the average baseline and scenario burn."""
    if not current_cash or current_cash <= 0 or not burn:
        return RunwayAnalysis(current_cash=current_cash)

    avg_baseline = mean(m.baseline_cost for m in burn)
    avg_scenario = mean(m.scenario_cost for m in burn)
    baseline_months = current_cash / avg_baseline if avg_baseline > 0 else None
    scenario_months = current_cash / avg_scenario if avg_scenario > 0 else None

    today = resolve_now(now)
    return RunwayAnalysis(
        current_cash=current_cash,
        baseline_runway_months=baseline_months,
        scenario_runway_months=scenario_months,
        runway_extension_months=(
            scenario_months - baseline_months if baseline_months and scenario_months else None
        ),
        baseline_runout_date=_runout(today, baseline_months),
        scenario_runout_date=_runout(today, scenario_months),
    )


def calculate_year_end_projection(burn: Sequence[MonthlyBurnRate], now: Instant = None) -> YearEndProjection:
    """Totals over the timeline months falling in the current calendar year."""
    year = resolve_now(now).year
    this_year = [m for m in burn if m.month.startswith(str(year))]
    baseline_total = sum(m.baseline_cost for m in this_year)
    scenario_total = sum(m.scenario_cost for m in this_year)
    return YearEndProjection(
        year=year,
        baseline_total=baseline_total,
        scenario_total=scenario_total,
        total_savings=baseline_total - scenario_total,
        avg_monthly_burn=scenario_total / len(this_year) if this_year else 0.0,
    )
