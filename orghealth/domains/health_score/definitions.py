"""Static dimension and scoring-rule configuration for the health score.

Six dimensions, weighted to 1.0 overall, each holding four or five scoring
rules with intra-dimension weights.
"""

from orghealth.domains.health_score.models import (
    Band,
    DimensionDefinition,
    HealthDimension,
    ScoringRule,
    ScoringType,
    Thresholds,
)
from orghealth.utils.types import MetricUnit

D = HealthDimension


def _thresholds(excellent: tuple, good: tuple, warning: tuple, critical: tuple) -> Thresholds:
    return Thresholds(
        excellent=Band(*excellent),
        good=Band(*good),
        warning=Band(*warning),
        critical=Band(*critical),
    )


FINANCIAL_EFFICIENCY_METRICS = (
    ScoringRule(
        metric_id="revenue_per_employee",
        name="Revenue per Employee",
        description="Total revenue divided by total headcount",
        dimension=D.FINANCIAL_EFFICIENCY,
        weight=0.30,
        unit=MetricUnit.CURRENCY,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="revenue_per_employee",
    ),
    ScoringRule(
        metric_id="personnel_cost_pct_revenue",
        name="Personnel Cost as % of Revenue",
        description="Total personnel costs as percentage of revenue",
        dimension=D.FINANCIAL_EFFICIENCY,
        weight=0.25,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="personnel_cost_pct_revenue",
        invert_score=True,
    ),
    ScoringRule(
        metric_id="salary_cost_pct_revenue",
        name="Salary Cost as % of Revenue",
        description="Total salary costs as percentage of revenue",
        dimension=D.FINANCIAL_EFFICIENCY,
        weight=0.20,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="salary_cost_pct_revenue",
        invert_score=True,
    ),
    ScoringRule(
        metric_id="eng_revenue_per_fte",
        name="Engineering Revenue Efficiency",
        description="Revenue per engineering FTE",
        dimension=D.FINANCIAL_EFFICIENCY,
        weight=0.15,
        unit=MetricUnit.CURRENCY,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="revenue_per_eng",
    ),
    ScoringRule(
        metric_id="sales_revenue_per_fte",
        name="Sales Revenue Efficiency",
        description="Revenue per sales FTE",
        dimension=D.FINANCIAL_EFFICIENCY,
        weight=0.10,
        unit=MetricUnit.CURRENCY,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="revenue_per_sales",
    ),
)

ORGANIZATIONAL_STRUCTURE_METRICS = (
    ScoringRule(
        metric_id="rd_to_gtm_ratio",
        name="R&D to GTM Ratio",
        description="Ratio of R&D to Go-to-Market headcount",
        dimension=D.ORGANIZATIONAL_STRUCTURE,
        weight=0.30,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="rd_to_gtm_ratio",
    ),
    ScoringRule(
        metric_id="span_of_control",
        name="Span of Control",
        description="Average number of direct reports per manager",
        dimension=D.ORGANIZATIONAL_STRUCTURE,
        weight=0.25,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((5, 8), (4, 10), (3, 12), (0, 15)),
    ),
    ScoringRule(
        metric_id="manager_to_ic_ratio",
        name="Manager to IC Ratio",
        description="Ratio of managers to individual contributors",
        dimension=D.ORGANIZATIONAL_STRUCTURE,
        weight=0.20,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((0.10, 0.20), (0.08, 0.25), (0.05, 0.30), (0, 0.40)),
    ),
    ScoringRule(
        metric_id="eng_pct_employees",
        name="Engineering as % of Employees",
        description="Engineering headcount as percentage of total employees",
        dimension=D.ORGANIZATIONAL_STRUCTURE,
        weight=0.15,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="eng_pct_employees",
    ),
    ScoringRule(
        metric_id="department_balance",
        name="Department Balance",
        description="Balance across key departments",
        dimension=D.ORGANIZATIONAL_STRUCTURE,
        weight=0.10,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.CUSTOM,
        custom_scorer="department_balance",
    ),
)

TALENT_RETENTION_METRICS = (
    ScoringRule(
        metric_id="employee_tenure",
        name="Average Employee Tenure",
        description="Average years of service for current employees",
        dimension=D.TALENT_RETENTION,
        weight=0.30,
        unit=MetricUnit.YEARS,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="employee_tenure",
    ),
    ScoringRule(
        metric_id="turnover_pct",
        name="Turnover Rate",
        description="Employee departures as percentage of total employees",
        dimension=D.TALENT_RETENTION,
        weight=0.30,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="turnover_pct",
        invert_score=True,
    ),
    ScoringRule(
        metric_id="new_hires_pct",
        name="New Hire Rate",
        description="New hires as percentage of total employees",
        dimension=D.TALENT_RETENTION,
        weight=0.20,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.BENCHMARK,
        benchmark_key="new_hires_pct",
    ),
    ScoringRule(
        metric_id="location_distribution",
        name="Geographic Distribution",
        description="Balance between high and low cost countries",
        dimension=D.TALENT_RETENTION,
        weight=0.20,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((0.3, 0.7), (0.2, 0.8), (0.1, 0.9), (0, 1)),
    ),
)

_PAY_GAP_BANDS = _thresholds((0, 3), (0, 7), (0, 12), (0, 100))

PAY_EQUITY_METRICS = (
    ScoringRule(
        metric_id="gender_pay_gap_median",
        name="Gender Pay Gap (Median)",
        description="Median pay gap between male and female employees",
        dimension=D.PAY_EQUITY,
        weight=0.30,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_PAY_GAP_BANDS,
    ),
    ScoringRule(
        metric_id="gender_pay_gap_mean",
        name="Gender Pay Gap (Mean)",
        description="Mean pay gap between male and female employees",
        dimension=D.PAY_EQUITY,
        weight=0.20,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_PAY_GAP_BANDS,
    ),
    ScoringRule(
        metric_id="internal_pay_equity",
        name="Internal Pay Equity",
        description="Ratio of 90th to 10th percentile compensation",
        dimension=D.PAY_EQUITY,
        weight=0.25,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((1, 3), (1, 4), (1, 6), (1, 10)),
    ),
    ScoringRule(
        metric_id="benchmark_alignment",
        name="Market Benchmark Alignment",
        description="Percentage of roles within benchmark range",
        dimension=D.PAY_EQUITY,
        weight=0.25,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((80, 100), (60, 79), (40, 59), (0, 39)),
    ),
)

TEAM_EFFECTIVENESS_METRICS = (
    ScoringRule(
        metric_id="low_span_managers",
        name="Low Span Managers",
        description="Percentage of managers with <5 direct reports",
        dimension=D.TEAM_EFFECTIVENESS,
        weight=0.30,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((0, 10), (0, 20), (0, 35), (0, 100)),
    ),
    ScoringRule(
        metric_id="high_span_managers",
        name="High Span Managers",
        description="Percentage of managers with >10 direct reports",
        dimension=D.TEAM_EFFECTIVENESS,
        weight=0.30,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((0, 5), (0, 15), (0, 25), (0, 100)),
    ),
    ScoringRule(
        metric_id="dept_revenue_efficiency",
        name="Department Revenue Efficiency",
        description="Average department revenue per FTE performance",
        dimension=D.TEAM_EFFECTIVENESS,
        weight=0.25,
        unit=MetricUnit.RATIO,
        scoring_type=ScoringType.CUSTOM,
        custom_scorer="dept_revenue_efficiency",
    ),
    ScoringRule(
        metric_id="management_overhead",
        name="Management Overhead",
        description="Management as % of total employees",
        dimension=D.TEAM_EFFECTIVENESS,
        weight=0.15,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((10, 20), (8, 25), (5, 30), (0, 40)),
    ),
)

COST_MANAGEMENT_METRICS = (
    ScoringRule(
        metric_id="employer_cost_ratio",
        name="Employer Cost Ratio",
        description="Total employer costs relative to gross compensation",
        dimension=D.COST_MANAGEMENT,
        weight=0.25,
        unit=MetricUnit.FACTOR,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((1.0, 1.25), (1.0, 1.35), (1.0, 1.45), (1.0, 2.0)),
    ),
    ScoringRule(
        metric_id="monthly_cost_growth",
        name="Monthly Cost Growth Rate",
        description="Average monthly cost increase",
        dimension=D.COST_MANAGEMENT,
        weight=0.25,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((-5, 5), (-10, 10), (-15, 15), (-50, 30)),
    ),
    ScoringRule(
        metric_id="cost_per_employee_trend",
        name="Cost per Employee Trend",
        description="Trend in average cost per employee",
        dimension=D.COST_MANAGEMENT,
        weight=0.20,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((-3, 3), (-5, 7), (-10, 12), (-20, 20)),
    ),
    ScoringRule(
        metric_id="budget_variance",
        name="Budget Variance",
        description="Actual vs planned compensation variance",
        dimension=D.COST_MANAGEMENT,
        weight=0.15,
        unit=MetricUnit.PERCENTAGE,
        scoring_type=ScoringType.THRESHOLD,
        invert_score=True,
        thresholds=_thresholds((0, 5), (0, 10), (0, 15), (0, 100)),
    ),
    ScoringRule(
        metric_id="runway_months",
        name="Cash Runway",
        description="Months of cash runway at current burn rate",
        dimension=D.COST_MANAGEMENT,
        weight=0.15,
        unit=MetricUnit.COUNT,
        scoring_type=ScoringType.THRESHOLD,
        thresholds=_thresholds((18, 100), (12, 17), (6, 11), (0, 5)),
    ),
)


DIMENSION_DEFINITIONS: tuple[DimensionDefinition, ...] = (
    DimensionDefinition(
        id=D.FINANCIAL_EFFICIENCY,
        name="Financial Efficiency",
        description="Revenue generation efficiency and cost-to-revenue ratios",
        weight=0.20,
        metrics=FINANCIAL_EFFICIENCY_METRICS,
    ),
    DimensionDefinition(
        id=D.ORGANIZATIONAL_STRUCTURE,
        name="Organizational Structure",
        description="Team composition balance and reporting structure health",
        weight=0.20,
        metrics=ORGANIZATIONAL_STRUCTURE_METRICS,
    ),
    DimensionDefinition(
        id=D.TALENT_RETENTION,
        name="Talent & Retention",
        description="Employee stability and tenure metrics",
        weight=0.15,
        metrics=TALENT_RETENTION_METRICS,
    ),
    DimensionDefinition(
        id=D.PAY_EQUITY,
        name="Pay Equity & Fairness",
        description="Compensation fairness and market alignment",
        weight=0.15,
        metrics=PAY_EQUITY_METRICS,
    ),
    DimensionDefinition(
        id=D.TEAM_EFFECTIVENESS,
        name="Team Effectiveness",
        description="Management effectiveness and team productivity",
        weight=0.15,
        metrics=TEAM_EFFECTIVENESS_METRICS,
    ),
    DimensionDefinition(
        id=D.COST_MANAGEMENT,
        name="Cost Management",
        description="Cost control and financial planning effectiveness",
        weight=0.15,
        metrics=COST_MANAGEMENT_METRICS,
    ),
)


def get_dimension_definition(dimension: HealthDimension | str) -> DimensionDefinition | None:
    return next((d for d in DIMENSION_DEFINITIONS if d.id == dimension), None)


def get_all_metric_definitions() -> list[ScoringRule]:
    return [rule for dimension in DIMENSION_DEFINITIONS for rule in dimension.metrics]


def get_metric_definition(metric_id: str) -> ScoringRule | None:
    return next((r for r in get_all_metric_definitions() if r.metric_id == metric_id), None)
