"""KPI registry for SaaS / software companies.

Ten organization-wide KPIs plus five per department category. Each entry
carries display text, its unit and a ``{low, median, high}`` benchmark range
for typical SaaS companies.
"""

from typing import TypeAlias
from dataclasses import dataclass
from enum import StrEnum

from orghealth.utils.types import BenchmarkRange, MetricUnit

Range: TypeAlias = tuple[float, float, float]


class KPICategory(StrEnum):
    OVERALL = "overall"
    CUSTOMER_SUCCESS = "customer_success"
    ENGINEERING = "engineering"
    FINANCE = "finance"
    HR = "hr"
    LEGAL = "legal"
    MARKETING = "marketing"
    OPERATIONS = "operations"
    PRODUCT = "product"
    PROFESSIONAL_SERVICES = "professional_services"
    SALES = "sales"


CATEGORY_NAMES: dict[KPICategory, str] = {
    KPICategory.OVERALL: "Overall",
    KPICategory.CUSTOMER_SUCCESS: "Customer Success & Support",
    KPICategory.ENGINEERING: "Engineering & Technology",
    KPICategory.FINANCE: "Finance",
    KPICategory.HR: "Human Resources",
    KPICategory.LEGAL: "Legal",
    KPICategory.MARKETING: "Marketing",
    KPICategory.OPERATIONS: "Operations",
    KPICategory.PRODUCT: "Product",
    KPICategory.PROFESSIONAL_SERVICES: "Professional Services",
    KPICategory.SALES: "Sales",
}


@dataclass(frozen=True)
class KPIDefinition:
    id: str
    name: str
    description: str
    category: KPICategory
    unit: MetricUnit
    formula: str
    benchmark_range: BenchmarkRange | None = None
    is_default: bool = False


def _overall(
    kpi_id: str,
    name: str,
    description: str,
    unit: MetricUnit,
    formula: str,
    bench: Range,
    is_default: bool = False,
) -> KPIDefinition:
    return KPIDefinition(
        id=kpi_id,
        name=name,
        description=description,
        category=KPICategory.OVERALL,
        unit=unit,
        formula=formula,
        benchmark_range=BenchmarkRange(*bench),
        is_default=is_default,
    )


OVERALL_KPIS: list[KPIDefinition] = [
    _overall(
        "revenue_per_employee", "Revenue per Employee",
        "Total revenue divided by total headcount",
        MetricUnit.CURRENCY, "Total Revenue / Total Employees",
        (150_000, 250_000, 400_000), is_default=True,
    ),
    _overall(
        "span_of_control", "Span of Control",
        "Ratio of individual contributors to managers",
        MetricUnit.RATIO, "Total ICs / Total Managers",
        (4, 6, 8), is_default=True,
    ),
    _overall(
        "salary_cost_pct_revenue", "Salary Cost as % of Revenue",
        "Total salary costs as percentage of revenue",
        MetricUnit.PERCENTAGE, "(Total Salaries / Total Revenue) × 100",
        (30, 45, 60), is_default=True,
    ),
    _overall(
        "personnel_cost_pct_revenue", "Personnel Cost as % of Revenue",
        "Total personnel costs (salaries + benefits + taxes) as percentage of revenue",
        MetricUnit.PERCENTAGE, "(Total Personnel Costs / Total Revenue) × 100",
        (40, 55, 70), is_default=True,
    ),
    _overall(
        "employees_high_cost_countries", "Employees in High Cost Countries (%)",
        "Percentage of employees in high-cost labor markets (US, Western Europe, etc.)",
        MetricUnit.PERCENTAGE, "(Employees in High Cost Countries / Total Employees) × 100",
        (30, 50, 80),
    ),
    _overall(
        "employees_low_cost_countries", "Employees in Low Cost Countries (%)",
        "Percentage of employees in low-cost labor markets (Eastern Europe, Asia, etc.)",
        MetricUnit.PERCENTAGE, "(Employees in Low Cost Countries / Total Employees) × 100",
        (20, 50, 70),
    ),
    _overall(
        "annual_headcount_change", "Annual Headcount Change (%)",
        "Year-over-year change in total headcount",
        MetricUnit.PERCENTAGE,
        "((Current Headcount - Last Year Headcount) / Last Year Headcount) × 100",
        (-5, 20, 50),
    ),
    _overall(
        "new_hires_pct", "New Hires as % of Employees",
        "New hires in the period as percentage of total employees",
        MetricUnit.PERCENTAGE, "(New Hires / Total Employees) × 100",
        (5, 15, 30),
    ),
    _overall(
        "turnover_pct", "Turnover as % of Employees",
        "Employee departures as percentage of total employees",
        MetricUnit.PERCENTAGE, "(Departures / Total Employees) × 100",
        (5, 12, 20),
    ),
    _overall(
        "employee_tenure", "Employee Tenure",
        "Average years of service for current employees",
        MetricUnit.YEARS, "Average(Current Date - Start Date)",
        (1.5, 2.5, 4),
    ),
]


@dataclass(frozen=True)
class DepartmentKPITemplate:
    """Benchmarks for the five KPIs every department category gets."""

    category: KPICategory
    prefix: str
    label: str
    long_name: str
    employee_ratio: Range
    pct_employees: Range
    revenue_per: Range
    salary_pct_revenue: Range
    personnel_pct_revenue: Range
    pct_is_default: bool = False


DEPARTMENT_KPI_TEMPLATES: list[DepartmentKPITemplate] = [
    DepartmentKPITemplate(
        KPICategory.CUSTOMER_SUCCESS, "css", "CS&S", "CS&S",
        (0.08, 0.12, 0.18), (8, 12, 18), (800_000, 1_200_000, 2_000_000),
        (5, 8, 12), (6, 10, 15), pct_is_default=True,
    ),
    DepartmentKPITemplate(
        KPICategory.ENGINEERING, "eng", "E&T", "Engineering & Technology",
        (0.25, 0.35, 0.50), (25, 35, 50), (400_000, 650_000, 1_000_000),
        (15, 22, 30), (18, 28, 38), pct_is_default=True,
    ),
    DepartmentKPITemplate(
        KPICategory.FINANCE, "finance", "Finance", "Finance",
        (0.01, 0.03, 0.05), (1, 3, 5), (3_000_000, 6_000_000, 12_000_000),
        (0.5, 1.5, 3), (0.6, 2, 4),
    ),
    DepartmentKPITemplate(
        KPICategory.HR, "hr", "HR", "HR",
        (0.01, 0.02, 0.04), (1, 2, 4), (4_000_000, 8_000_000, 15_000_000),
        (0.4, 1, 2), (0.5, 1.3, 2.5),
    ),
    DepartmentKPITemplate(
        KPICategory.LEGAL, "legal", "Legal", "Legal",
        (0.005, 0.01, 0.02), (0.5, 1, 2), (8_000_000, 15_000_000, 30_000_000),
        (0.2, 0.5, 1.2), (0.3, 0.7, 1.5),
    ),
    DepartmentKPITemplate(
        KPICategory.MARKETING, "marketing", "Marketing", "Marketing",
        (0.05, 0.10, 0.15), (5, 10, 15), (1_000_000, 2_000_000, 4_000_000),
        (3, 6, 10), (4, 8, 13), pct_is_default=True,
    ),
    DepartmentKPITemplate(
        KPICategory.OPERATIONS, "ops", "Operations", "Operations",
        (0.03, 0.06, 0.10), (3, 6, 10), (1_500_000, 3_000_000, 6_000_000),
        (1.5, 3, 6), (2, 4, 8),
    ),
    DepartmentKPITemplate(
        KPICategory.PRODUCT, "product", "Product", "Product",
        (0.05, 0.08, 0.12), (5, 8, 12), (1_200_000, 2_500_000, 5_000_000),
        (2, 5, 8), (3, 6, 10), pct_is_default=True,
    ),
    DepartmentKPITemplate(
        KPICategory.PROFESSIONAL_SERVICES, "ps", "PS", "Professional Services",
        (0.03, 0.08, 0.15), (3, 8, 15), (800_000, 1_500_000, 3_000_000),
        (2, 5, 10), (3, 6, 13),
    ),
    DepartmentKPITemplate(
        KPICategory.SALES, "sales", "Sales", "Sales",
        (0.10, 0.15, 0.25), (10, 15, 25), (800_000, 1_500_000, 2_500_000),
        (8, 12, 18), (10, 15, 22), pct_is_default=True,
    ),
]


def _department_kpis(template: DepartmentKPITemplate) -> list[KPIDefinition]:
    label, long_name, category = template.label, template.long_name, template.category
    return [
        KPIDefinition(
            id=f"{template.prefix}_employee_ratio",
            name=f"{label} to Employee Ratio",
            description=f"{long_name} headcount as ratio to total headcount",
            category=category,
            unit=MetricUnit.RATIO,
            formula=f"{label} Employees / Total Employees",
            benchmark_range=BenchmarkRange(*template.employee_ratio),
        ),
        KPIDefinition(
            id=f"{template.prefix}_pct_employees",
            name=f"{label} as % of Employees",
            description=f"{long_name} headcount as percentage of total employees",
            category=category,
            unit=MetricUnit.PERCENTAGE,
            formula=f"({label} Employees / Total Employees) × 100",
            benchmark_range=BenchmarkRange(*template.pct_employees),
            is_default=template.pct_is_default,
        ),
        KPIDefinition(
            id=f"revenue_per_{template.prefix}",
            name=f"Revenue per {label} Employee",
            description=f"Revenue divided by {long_name} headcount",
            category=category,
            unit=MetricUnit.CURRENCY,
            formula=f"Total Revenue / {label} Employees",
            benchmark_range=BenchmarkRange(*template.revenue_per),
        ),
        KPIDefinition(
            id=f"{template.prefix}_salary_pct_revenue",
            name=f"{label} Salary Cost as % of Revenue",
            description=f"{long_name} salary costs as percentage of revenue",
            category=category,
            unit=MetricUnit.PERCENTAGE,
            formula=f"({label} Salaries / Total Revenue) × 100",
            benchmark_range=BenchmarkRange(*template.salary_pct_revenue),
        ),
        KPIDefinition(
            id=f"{template.prefix}_personnel_pct_revenue",
            name=f"{label} Personnel Cost as % of Revenue",
            description=f"{long_name} total personnel costs as percentage of revenue",
            category=category,
            unit=MetricUnit.PERCENTAGE,
            formula=f"({label} Personnel Costs / Total Revenue) × 100",
            benchmark_range=BenchmarkRange(*template.personnel_pct_revenue),
        ),
    ]


KPI_REGISTRY: dict[str, KPIDefinition] = {
    kpi.id: kpi
    for kpi in OVERALL_KPIS + [k for template in DEPARTMENT_KPI_TEMPLATES for k in _department_kpis(template)]
}


def get_kpi_definition(kpi_id: str) -> KPIDefinition | None:
    return KPI_REGISTRY.get(kpi_id)


def get_kpis_by_category(category: KPICategory | str) -> list[KPIDefinition]:
    return [kpi for kpi in KPI_REGISTRY.values() if kpi.category == category]


def get_default_kpis() -> list[KPIDefinition]:
    """KPIs shown by default on a dashboard."""
    return [kpi for kpi in KPI_REGISTRY.values() if kpi.is_default]


def get_all_categories() -> list[dict[str, str]]:
    return [{"id": category.value, "name": name} for category, name in CATEGORY_NAMES.items()]
