"""
test_health_extraction.py — Unit tests for building the health metric map.

Tests cover:
  - KPI-backed metrics read through from the KPI calculator
  - structure metrics: R&D:GTM, manager:IC, location mix, management overhead
  - pay equity: gender pay gaps, p90/p10 ratio
  - span distribution with configurable limits
  - cost metrics from company-level and per-employee monthly series
  - budget variance against a planned series
  - missing inputs resolve to None while a measured zero stays 0.0
"""

import pytest

from orghealth.domains.health_score.extraction import (
    UNMEASURED_METRICS,
    calculate_budget_variance,
    calculate_cost_metrics,
    calculate_gender_pay_gap,
    calculate_internal_pay_equity,
    calculate_span_distribution,
    extract_metric_values,
    monthly_cost_series,
)
from orghealth.domains.health_score import calculate_health_score, get_all_metric_definitions
from orghealth.domains.workforce.transform import to_cost_frame
from orghealth.utils.aggregations import filter_active
from orghealth.utils.types import DatasetMetadata


@pytest.fixture
def values(sample_employees, sample_metadata, employer_costs, planned_costs, now):
    return extract_metric_values(
        sample_employees,
        sample_metadata,
        employer_costs=employer_costs,
        planned_costs=planned_costs,
        now=now,
    )


class TestExtractMetricValues:
    """Tests for extract_metric_values on the sample company."""

    def test_covers_every_scoring_rule(self, values):
        assert {r.metric_id for r in get_all_metric_definitions()} <= set(values)

    def test_kpi_backed_metrics(self, values):
        assert values["revenue_per_employee"] == pytest.approx(5_000_000 / 6)
        assert values["eng_revenue_per_fte"] == pytest.approx(5_000_000 / 3)
        assert values["sales_revenue_per_fte"] == pytest.approx(2_500_000)
        assert values["span_of_control"] == pytest.approx(2.0)
        assert values["eng_pct_employees"] == pytest.approx(50.0)

    def test_structure_metrics(self, values):
        assert values["rd_to_gtm_ratio"] == pytest.approx(2.0)
        assert values["manager_to_ic_ratio"] == pytest.approx(0.5)
        assert values["location_distribution"] == pytest.approx(4 / 6)
        assert values["management_overhead"] == pytest.approx(100 / 3)

    def test_pay_equity_metrics(self, values):
        assert values["gender_pay_gap_median"] == pytest.approx(100 / 15)
        assert values["gender_pay_gap_mean"] == pytest.approx((190_000 - 400_000 / 3) / 190_000 * 100)
        assert values["internal_pay_equity"] == pytest.approx(5.0)

    def test_span_metrics_keep_real_zero(self, values):
        assert values["low_span_managers"] == pytest.approx(100.0)
        assert values["high_span_managers"] == 0.0

    def test_cost_metrics(self, values):
        assert values["employer_cost_ratio"] == pytest.approx(1.30)
        assert values["monthly_cost_growth"] == pytest.approx(5 / 85 * 100)
        assert values["cost_per_employee_trend"] == pytest.approx((15_000 - 14_166.67) / 14_166.67 * 100)
        assert values["runway_months"] == pytest.approx(2_000_000 / 90_000)
        assert values["budget_variance"] == pytest.approx(10.0)

    def test_unmeasured_metrics_are_none(self, values):
        for metric in UNMEASURED_METRICS:
            assert values[metric] is None

    def test_without_revenue_or_costs(self, sample_employees, now):
        values = extract_metric_values(sample_employees, now=now)
        assert values["revenue_per_employee"] is None
        assert values["personnel_cost_pct_revenue"] is None
        assert values["employer_cost_ratio"] is None
        assert values["runway_months"] is None
        assert values["budget_variance"] is None
        assert values["rd_to_gtm_ratio"] == pytest.approx(2.0)

    def test_rd_to_gtm_without_gtm_is_none(self, make_employees, now):
        values = extract_metric_values(make_employees([{"department": "Engineering"}]), now=now)
        assert values["rd_to_gtm_ratio"] is None

    def test_empty_workforce(self, make_employees, now):
        values = extract_metric_values(make_employees([]), now=now)
        assert values["location_distribution"] is None
        assert values["management_overhead"] is None
        assert values["internal_pay_equity"] is None
        assert values["low_span_managers"] is None

    def test_custom_categories(self, sample_employees, now):
        values = extract_metric_values(sample_employees, now=now, custom_categories={"Sales": "R&D"})
        assert values["rd_to_gtm_ratio"] is None


class TestPayEquity:
    """Tests for the pay equity helpers."""

    def test_gap_needs_both_groups(self, make_employees):
        employees = make_employees([
            {"gender": "MALE", "total_compensation": 100_000},
            {"gender": "NON_BINARY", "total_compensation": 90_000},
        ])
        assert calculate_gender_pay_gap(employees) == (None, None)

    @pytest.mark.parametrize("male, female, expected_gap", [
        ([100_000], [110_000], 10.0),
        ([100_000, 120_000], [90_000, 95_000], 17_500 / 110_000 * 100),
    ])
    def test_gap_is_absolute(self, make_employees, male, female, expected_gap):
        employees = make_employees(
            [{"gender": "MALE", "total_compensation": c} for c in male]
            + [{"gender": "FEMALE", "total_compensation": c} for c in female]
        )
        median_gap, mean_gap = calculate_gender_pay_gap(employees)
        assert median_gap == pytest.approx(expected_gap)
        assert mean_gap == pytest.approx(expected_gap)

    def test_internal_pay_equity_zero_floor(self, make_employees):
        employees = make_employees([{"total_compensation": 0}, {"total_compensation": 100_000}])
        assert calculate_internal_pay_equity(employees) is None

    def test_sample_gap(self, sample_employees, now):
        median_gap, _ = calculate_gender_pay_gap(filter_active(sample_employees, now))
        assert median_gap == pytest.approx(6.6667, abs=1e-4)


class TestSpanDistribution:
    """Tests for calculate_span_distribution."""

    def test_custom_limits(self, sample_employees, now):
        low, high = calculate_span_distribution(sample_employees, now, low_span_limit=2, high_span_limit=1)
        assert low == pytest.approx(100 / 3)
        assert high == pytest.approx(200 / 3)

    def test_no_managers(self, make_employees, now):
        assert calculate_span_distribution(make_employees([{}]), now) == (None, None)


class TestCostSeries:
    """Tests for the monthly cost helpers."""

    def test_series_sorted_newest_first(self, employer_costs):
        series = monthly_cost_series(employer_costs)
        assert list(series["total_cost"]) == [90_000.0, 85_000.0, 80_000.0]

    def test_per_employee_rows_are_folded(self):
        costs = to_cost_frame([
            {"period": "2025-04-01", "employeeId": "a", "totalCost": 10_000, "avgCostRatio": 1.2},
            {"period": "2025-04-01", "employeeId": "b", "totalCost": 10_000, "avgCostRatio": 1.4},
            {"period": "2025-05-01", "employeeId": "a", "totalCost": 11_000, "avgCostRatio": 1.3},
            {"period": "2025-05-01", "employeeId": "b", "totalCost": 11_000, "avgCostRatio": 1.3},
        ])
        metrics = calculate_cost_metrics(costs, DatasetMetadata(current_cash_balance=220_000))
        assert metrics["employer_cost_ratio"] == pytest.approx(1.3)
        assert metrics["monthly_cost_growth"] == pytest.approx(10.0)
        assert metrics["cost_per_employee_trend"] == pytest.approx(10.0)
        assert metrics["runway_months"] == pytest.approx(10.0)

    def test_per_employee_cost_ratio_rows(self):
        costs = to_cost_frame([
            {"period": "2025-04-01", "employeeId": "a", "totalCost": 10_000, "costRatio": 1.2},
            {"period": "2025-04-01", "employeeId": "b", "totalCost": 10_000, "costRatio": 1.4},
            {"period": "2025-05-01", "employeeId": "a", "totalCost": 12_000, "costRatio": 1.25},
            {"period": "2025-05-01", "employeeId": "b", "totalCost": 12_000, "costRatio": 1.35},
        ])
        series = monthly_cost_series(costs)
        assert list(series["total_cost"]) == [24_000.0, 20_000.0]
        assert series["avg_cost_ratio"].iloc[0] == pytest.approx(1.3)

        metrics = calculate_cost_metrics(costs, DatasetMetadata(current_cash_balance=240_000))
        assert metrics["employer_cost_ratio"] == pytest.approx(1.3)
        assert metrics["monthly_cost_growth"] == pytest.approx(20.0)
        assert metrics["runway_months"] == pytest.approx(10.0)

    def test_per_employee_rows_reach_the_health_score(self, sample_employees, sample_metadata, now):
        costs = to_cost_frame([
            {"period": "2025-04-01", "employeeId": "e1", "totalCost": 25_000, "costRatio": 1.2},
            {"period": "2025-04-01", "employeeId": "e2", "totalCost": 15_000, "costRatio": 1.3},
        ])
        score = calculate_health_score(sample_employees, sample_metadata, employer_costs=costs, now=now)
        cost_dimension = score.dimension("cost_management")
        ratio = next(m for m in cost_dimension.metrics if m.metric_id == "employer_cost_ratio")
        assert ratio.value == pytest.approx(1.25)

    def test_single_record_gives_ratio_only(self):
        costs = to_cost_frame([{"period": "2025-05-01", "totalCost": 50_000, "avgCostRatio": 1.25}])
        metrics = calculate_cost_metrics(costs, DatasetMetadata())
        assert metrics["employer_cost_ratio"] == pytest.approx(1.25)
        assert metrics["monthly_cost_growth"] is None
        assert metrics["runway_months"] is None

    def test_no_series(self):
        assert monthly_cost_series(None) is None
        assert all(v is None for v in calculate_cost_metrics(None, DatasetMetadata()).values())

    def test_budget_variance_without_overlap(self, employer_costs):
        planned = to_cost_frame([{"period": "2024-01-01", "totalCost": 1_000}])
        assert calculate_budget_variance(employer_costs, planned) is None

    def test_budget_variance_uses_latest_common_period(self, employer_costs, planned_costs):
        assert calculate_budget_variance(employer_costs, planned_costs) == pytest.approx(10.0)
        assert calculate_budget_variance(employer_costs, None) is None
