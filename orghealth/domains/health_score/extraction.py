"""Build the flat metric-id -> value map the health score is computed from.

Values come from the KPI calculator where the registry covers a metric and are
computed directly otherwise. A metric whose inputs are missing resolves to
``None``; a genuinely measured zero stays ``0.0``.
"""

import logging
import math
from collections.abc import Mapping

import pandas as pd

from orghealth.domains.kpis.calculator import calculate_kpi_values, is_high_cost_location
from orghealth.domains.workforce.employer_costs import summarize_monthly_costs
from orghealth.domains.workforce.structure import (
    calculate_department_breakdown,
    calculate_span_of_control,
    count_managers_and_ics,
)
from orghealth.utils.aggregations import filter_active, optional_value, safe_divide
from orghealth.utils.statistics import mean, median
from orghealth.utils.types import (
    MANAGEMENT_LEVELS,
    DatasetMetadata,
    DepartmentCategory,
    Gender,
    Instant,
    MetricMap,
)

logger = logging.getLogger(__name__)

# Health metric id -> KPI id it is read from
KPI_BACKED_METRICS: dict[str, str] = {
    "revenue_per_employee": "revenue_per_employee",
    "personnel_cost_pct_revenue": "personnel_cost_pct_revenue",
    "salary_cost_pct_revenue": "salary_cost_pct_revenue",
    "eng_revenue_per_fte": "revenue_per_eng",
    "sales_revenue_per_fte": "revenue_per_sales",
    "span_of_control": "span_of_control",
    "eng_pct_employees": "eng_pct_employees",
    "employee_tenure": "employee_tenure",
    "turnover_pct": "turnover_pct",
    "new_hires_pct": "new_hires_pct",
}

# No data source exists for these yet
UNMEASURED_METRICS = ("department_balance", "benchmark_alignment", "dept_revenue_efficiency")


def _pay_gap(male: float, female: float) -> float | None:
    if male <= 0:
        return None
    return abs((male - female) / male * 100)


def calculate_gender_pay_gap(active: pd.DataFrame) -> tuple[float | None, float | None]:
    """Median and mean gap as % of the male figure; ``None`` unless both groups exist."""
    male = active.loc[active["gender"] == Gender.MALE.value, "total_compensation"].dropna()
    female = active.loc[active["gender"] == Gender.FEMALE.value, "total_compensation"].dropna()
    if male.empty or female.empty:
        return None, None
    return _pay_gap(median(male), median(female)), _pay_gap(mean(male), mean(female))


def calculate_internal_pay_equity(active: pd.DataFrame) -> float | None:
    """p90 / p10 compensation ratio using floor-indexed percentiles."""
    comps = sorted(active["total_compensation"].dropna().astype(float))
    if not comps:
        return None
    p10 = comps[math.floor(len(comps) * 0.1)]
    p90 = comps[math.floor(len(comps) * 0.9)]
    return safe_divide(p90, p10)


def calculate_span_distribution(
    employees: pd.DataFrame,
    now: Instant = None,
    low_span_limit: int = 5,
    high_span_limit: int = 10,
) -> tuple[float | None, float | None]:
    """Share (%) of managers below ``low_span_limit`` and above ``high_span_limit`` reports."""
    spans = list(calculate_span_of_control(employees, now).values())
    if not spans:
        return None, None
    low = sum(1 for count in spans if count < low_span_limit)
    high = sum(1 for count in spans if count > high_span_limit)
    return low / len(spans) * 100, high / len(spans) * 100


def monthly_cost_series(costs: pd.DataFrame | None) -> pd.DataFrame | None:
    """Monthly cost records sorted newest first.

    Per-employee rows (several rows sharing a period) are folded into one row
    per period first.
    """
    if costs is None or costs.empty:
        return None
    series = costs.dropna(subset=["period"])
    if series.empty:
        return None
    if series["period"].duplicated().any():
        # Per-row cost_ratio wins, avg_cost_ratio fills its gaps
        ratios = pd.to_numeric(series["avg_cost_ratio"], errors="coerce")
        if "cost_ratio" in series.columns:
            ratios = pd.to_numeric(series["cost_ratio"], errors="coerce").combine_first(ratios)
        series = summarize_monthly_costs(series.drop(columns="avg_cost_ratio").assign(cost_ratio=ratios))
    return series.sort_values("period", ascending=False).reset_index(drop=True)


def _growth_pct(recent: float | None, previous: float | None) -> float | None:
    if recent is None or not previous:
        return None
    return (recent - previous) / previous * 100


def calculate_cost_metrics(
    employer_costs: pd.DataFrame | None,
    metadata: DatasetMetadata,
) -> MetricMap:
    """Employer cost ratio, month-over-month growth and runway from the cost series."""
    metrics: MetricMap = {
        "employer_cost_ratio": None,
        "monthly_cost_growth": None,
        "cost_per_employee_trend": None,
        "runway_months": None,
    }
    series = monthly_cost_series(employer_costs)
    if series is None:
        return metrics

    recent = series.iloc[0]
    ratio = optional_value(recent["avg_cost_ratio"])
    metrics["employer_cost_ratio"] = float(ratio) if ratio else None

    if len(series) > 1:
        previous = series.iloc[1]
        metrics["monthly_cost_growth"] = _growth_pct(
            optional_value(recent["total_cost"]), optional_value(previous["total_cost"])
        )
        metrics["cost_per_employee_trend"] = _growth_pct(
            optional_value(recent["avg_cost_per_employee"]),
            optional_value(previous["avg_cost_per_employee"]),
        )

    burn = optional_value(recent["total_cost"]) or 0.0
    if metadata.current_cash_balance and burn > 0:
        metrics["runway_months"] = metadata.current_cash_balance / burn
    return metrics


def calculate_budget_variance(
    employer_costs: pd.DataFrame | None,
    planned_costs: pd.DataFrame | None,
) -> float | None:
    """|actual - planned| / planned (%) for the latest period present in both series."""
    actual = monthly_cost_series(employer_costs)
    planned = monthly_cost_series(planned_costs)
    if actual is None or planned is None:
        return None

    merged = actual[["period", "total_cost"]].merge(
        planned[["period", "total_cost"]], on="period", suffixes=("_actual", "_planned")
    )
    if merged.empty:
        return None
    latest = merged.sort_values("period").iloc[-1]
    planned_total = optional_value(latest["total_cost_planned"])
    actual_total = optional_value(latest["total_cost_actual"])
    if not planned_total or actual_total is None:
        return None
    return abs(actual_total - planned_total) / planned_total * 100


def extract_metric_values(
    employees: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    employer_costs: pd.DataFrame | None = None,
    planned_costs: pd.DataFrame | None = None,
    now: Instant = None,
    custom_categories: Mapping[str, str] | None = None,
    low_span_limit: int = 5,
    high_span_limit: int = 10,
) -> MetricMap:
    metadata = metadata or DatasetMetadata()
    kpis = calculate_kpi_values(employees, metadata, KPI_BACKED_METRICS.values(), now)
    values: MetricMap = {metric: kpis.get(kpi) for metric, kpi in KPI_BACKED_METRICS.items()}

    active = filter_active(employees, now)
    total_active = len(active)

    breakdown = calculate_department_breakdown(employees, now, custom_categories)
    rd = breakdown.get(DepartmentCategory.RD.value)
    gtm = breakdown.get(DepartmentCategory.GTM.value)
    values["rd_to_gtm_ratio"] = safe_divide(rd.fte if rd else 0.0, gtm.fte if gtm else 0.0)

    managers, ics = count_managers_and_ics(active)
    values["manager_to_ic_ratio"] = safe_divide(float(managers), float(ics))

    in_high_cost = int(active["location"].map(is_high_cost_location).sum())
    values["location_distribution"] = in_high_cost / total_active if total_active else None

    values["gender_pay_gap_median"], values["gender_pay_gap_mean"] = calculate_gender_pay_gap(active)
    values["internal_pay_equity"] = calculate_internal_pay_equity(active)

    values["low_span_managers"], values["high_span_managers"] = calculate_span_distribution(
        employees, now, low_span_limit, high_span_limit
    )
    management = int(active["level"].isin(MANAGEMENT_LEVELS).sum())
    values["management_overhead"] = management / total_active * 100 if total_active else None

    values.update(calculate_cost_metrics(employer_costs, metadata))
    values["budget_variance"] = calculate_budget_variance(employer_costs, planned_costs)

    for metric in UNMEASURED_METRICS:
        values[metric] = None

    measured = sum(1 for v in values.values() if v is not None)
    logger.debug("Extracted %d of %d health metrics", measured, len(values))
    return values
