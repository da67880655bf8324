"""Calculate registry KPIs from the employee frame and dataset metadata."""

from typing import TypeAlias
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial

import pandas as pd

from orghealth.domains.kpis.definitions import (
    DEPARTMENT_KPI_TEMPLATES,
    KPI_REGISTRY,
    KPICategory,
    KPIDefinition,
)
from orghealth.utils.aggregations import active_mask, resolve_now
from orghealth.utils.types import (
    MANAGEMENT_LEVELS,
    DatasetMetadata,
    EmployeeLevel,
    Instant,
    MetricUnit,
    MetricValue,
)

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

# Checked in order; first category with a matching keyword wins
DEPARTMENT_KEYWORDS: list[tuple[KPICategory, list[str]]] = [
    (KPICategory.CUSTOMER_SUCCESS, ["customer success", "support", "customer support", "cs", "customer service"]),
    (
        KPICategory.ENGINEERING,
        ["engineering", "technology", "dev", "development", "it", "infrastructure", "qa", "quality assurance"],
    ),
    (KPICategory.FINANCE, ["finance", "accounting", "treasury", "fp&a"]),
    (KPICategory.HR, ["hr", "human resources", "people", "people ops", "talent"]),
    (KPICategory.LEGAL, ["legal", "compliance", "regulatory"]),
    (KPICategory.MARKETING, ["marketing", "growth", "brand", "communications", "pr", "public relations"]),
    (KPICategory.OPERATIONS, ["operations", "ops", "bizops", "business operations"]),
    (KPICategory.PRODUCT, ["product", "product management", "pm"]),
    (KPICategory.PROFESSIONAL_SERVICES, ["professional services", "consulting", "implementation", "services"]),
    (KPICategory.SALES, ["sales", "business development", "bd", "revenue", "account management"]),
]

HIGH_COST_COUNTRIES = [
    "united states", "usa", "us",
    "switzerland", "norway", "denmark", "sweden",
    "united kingdom", "uk", "britain",
    "germany", "france", "netherlands", "belgium",
    "australia", "canada", "singapore",
]


def kpi_department_category(department: str | None) -> KPICategory | None:
    """Classify a department into a KPI category by substring keyword match."""
    if not department:
        return None
    text = department.strip().lower()
    for category, keywords in DEPARTMENT_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return None


def is_high_cost_location(location: str | None, countries: Iterable[str] = HIGH_COST_COUNTRIES) -> bool:
    if not location:
        return False
    text = location.strip().lower()
    return any(country in text for country in countries)


@dataclass(frozen=True)
class DepartmentTotals:
    count: int
    salaries: float
    compensation: float


@dataclass(frozen=True)
class KPIAggregates:
    """Totals every KPI calculator reads from."""

    total_employees: int
    total_fte: float
    total_salaries: float
    total_compensation: float
    total_revenue: float
    managers: int
    ics: int
    high_cost_count: int
    avg_tenure_years: float | None
    new_hires: int | None
    departures: int
    headcount_year_ago: int
    departments: dict[KPICategory, DepartmentTotals] = field(default_factory=dict)


def build_aggregates(
    employees: pd.DataFrame,
    metadata: DatasetMetadata,
    now: Instant = None,
) -> KPIAggregates:
    now = resolve_now(now)
    year_ago = now - pd.DateOffset(years=1)
    active = employees[active_mask(employees, now)]
    salaries = active["annual_salary"].fillna(0.0)
    compensation = active["total_compensation"].fillna(0.0)

    categories = active["department"].map(kpi_department_category)
    departments = {}
    for category in categories.dropna().unique():
        in_category = categories == category
        departments[KPICategory(category)] = DepartmentTotals(
            count=int(in_category.sum()),
            salaries=float(salaries[in_category].sum()),
            compensation=float(compensation[in_category].sum()),
        )

    started = active["start_date"].dropna()
    avg_tenure = (
        float(((now - started).dt.total_seconds() / SECONDS_PER_YEAR).mean())
        if not started.empty
        else None
    )
    new_hires = int(((started > year_ago) & (started <= now)).sum()) if not started.empty else None

    ended = employees["end_date"]
    departures = int(((ended > year_ago) & (ended <= now)).sum())

    present_year_ago = (employees["start_date"].isna() | (employees["start_date"] <= year_ago)) & (
        ended.isna() | (ended > year_ago)
    )

    levels = active["level"]
    return KPIAggregates(
        total_employees=len(active),
        total_fte=float(active["fte_factor"].fillna(0.0).sum()),
        total_salaries=float(salaries.sum()),
        total_compensation=float(compensation.sum()),
        total_revenue=metadata.total_revenue or 0.0,
        managers=int(levels.isin(MANAGEMENT_LEVELS).sum()),
        ics=int((levels == EmployeeLevel.IC.value).sum()),
        high_cost_count=int(active["location"].map(is_high_cost_location).sum()),
        avg_tenure_years=avg_tenure,
        new_hires=new_hires,
        departures=departures,
        headcount_year_ago=int(present_year_ago.sum()),
        departments=departments,
    )


def _pct(part: float, whole: float) -> MetricValue:
    return part / whole * 100 if whole > 0 else None


def _revenue_per_employee(agg: KPIAggregates) -> MetricValue:
    if not agg.total_revenue or agg.total_employees == 0:
        return None
    return agg.total_revenue / agg.total_employees


def _span_of_control(agg: KPIAggregates) -> MetricValue:
    if agg.ics == 0 or agg.managers == 0:
        return None
    return agg.ics / agg.managers


def _headcount_change(agg: KPIAggregates) -> MetricValue:
    if agg.headcount_year_ago == 0:
        return None
    return (agg.total_employees - agg.headcount_year_ago) / agg.headcount_year_ago * 100


def _dept_ratio(category: KPICategory, agg: KPIAggregates) -> MetricValue:
    dept = agg.departments.get(category)
    if dept is None or agg.total_employees == 0:
        return None
    return dept.count / agg.total_employees


def _dept_pct_employees(category: KPICategory, agg: KPIAggregates) -> MetricValue:
    dept = agg.departments.get(category)
    return _pct(dept.count, agg.total_employees) if dept is not None else None


def _dept_revenue_per(category: KPICategory, agg: KPIAggregates) -> MetricValue:
    dept = agg.departments.get(category)
    if dept is None or dept.count == 0 or not agg.total_revenue:
        return None
    return agg.total_revenue / dept.count


def _dept_salary_pct(category: KPICategory, agg: KPIAggregates) -> MetricValue:
    dept = agg.departments.get(category)
    return _pct(dept.salaries, agg.total_revenue) if dept is not None else None


def _dept_personnel_pct(category: KPICategory, agg: KPIAggregates) -> MetricValue:
    dept = agg.departments.get(category)
    return _pct(dept.compensation, agg.total_revenue) if dept is not None else None


KPICalculator: TypeAlias = Callable[[KPIAggregates], MetricValue]

KPI_CALCULATORS: dict[str, KPICalculator] = {
    "revenue_per_employee": _revenue_per_employee,
    "span_of_control": _span_of_control,
    "salary_cost_pct_revenue": lambda a: _pct(a.total_salaries, a.total_revenue),
    "personnel_cost_pct_revenue": lambda a: _pct(a.total_compensation, a.total_revenue),
    "employees_high_cost_countries": lambda a: _pct(a.high_cost_count, a.total_employees),
    "employees_low_cost_countries": lambda a: _pct(a.total_employees - a.high_cost_count, a.total_employees),
    "annual_headcount_change": _headcount_change,
    "new_hires_pct": lambda a: _pct(a.new_hires, a.total_employees) if a.new_hires is not None else None,
    "turnover_pct": lambda a: _pct(a.departures, a.total_employees),
    "employee_tenure": lambda a: a.avg_tenure_years,
}

for _template in DEPARTMENT_KPI_TEMPLATES:
    KPI_CALCULATORS[f"{_template.prefix}_employee_ratio"] = partial(_dept_ratio, _template.category)
    KPI_CALCULATORS[f"{_template.prefix}_pct_employees"] = partial(_dept_pct_employees, _template.category)
    KPI_CALCULATORS[f"revenue_per_{_template.prefix}"] = partial(_dept_revenue_per, _template.category)
    KPI_CALCULATORS[f"{_template.prefix}_salary_pct_revenue"] = partial(_dept_salary_pct, _template.category)
    KPI_CALCULATORS[f"{_template.prefix}_personnel_pct_revenue"] = partial(_dept_personnel_pct, _template.category)


@dataclass(frozen=True)
class KPIResult:
    kpi_id: str
    value: MetricValue
    formatted_value: str
    status: str | None = None
    benchmark_range: dict[str, float] | None = None

    def as_dict(self) -> dict:
        return {
            "kpiId": self.kpi_id,
            "value": self.value,
            "formattedValue": self.formatted_value,
            "status": self.status,
            "benchmarkComparison": self.benchmark_range,
        }


def format_kpi_value(value: MetricValue, definition: KPIDefinition) -> str:
    if value is None:
        return "N/A"
    match definition.unit:
        case MetricUnit.PERCENTAGE:
            return f"{value:.1f}%"
        case MetricUnit.CURRENCY:
            return f"${value / 1_000_000:.2f}M"
        case MetricUnit.RATIO:
            return f"{value:.2f}:1"
        case MetricUnit.YEARS:
            return f"{value:.1f} years"
        case MetricUnit.COUNT:
            return str(math.floor(value + 0.5))
        case _:
            return f"{value:.2f}"


def kpi_status(value: float, definition: KPIDefinition) -> str | None:
    """good / warning / bad against the KPI's benchmark range."""
    bench = definition.benchmark_range
    if bench is None:
        return None
    if "pct_revenue" in definition.id or "cost" in definition.id:
        if value <= bench.median:
            return "good"
        return "warning" if value <= bench.high else "bad"
    if value >= bench.median:
        return "good"
    return "warning" if value >= bench.low else "bad"


def calculate_kpis(
    employees: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    kpi_ids: Iterable[str] | None = None,
    now: Instant = None,
) -> list[KPIResult]:
    """Evaluate the requested KPIs (all registered KPIs by default)."""
    metadata = metadata or DatasetMetadata()
    agg = build_aggregates(employees, metadata, now)
    ids = list(kpi_ids) if kpi_ids is not None else list(KPI_REGISTRY)

    results = []
    for kpi_id in ids:
        definition = KPI_REGISTRY.get(kpi_id)
        if definition is None:
            logger.warning("Unknown KPI requested: %s", kpi_id)
            results.append(KPIResult(kpi_id=kpi_id, value=None, formatted_value="Unknown KPI"))
            continue

        calculator = KPI_CALCULATORS.get(kpi_id)
        value = calculator(agg) if calculator else None
        results.append(KPIResult(
            kpi_id=kpi_id,
            value=value,
            formatted_value=format_kpi_value(value, definition),
            status=kpi_status(value, definition) if value is not None else None,
            benchmark_range=definition.benchmark_range.as_dict() if definition.benchmark_range else None,
        ))

    logger.debug("Calculated %d KPIs over %d active employees", len(results), agg.total_employees)
    return results


def calculate_kpi_values(
    employees: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    kpi_ids: Iterable[str] | None = None,
    now: Instant = None,
) -> dict[str, MetricValue]:
    """Flat ``{kpi_id: value}`` view of ``calculate_kpis``."""
    return {r.kpi_id: r.value for r in calculate_kpis(employees, metadata, kpi_ids, now)}
