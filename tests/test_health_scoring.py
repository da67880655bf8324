"""
test_health_scoring.py — Unit tests for health-score rules and per-metric scoring.

Tests cover:
  - definitions: six dimensions, weights summing to 1.0, lookups
  - score_benchmark: the 70-point bend at the median, inverted curves, degenerate ranges
  - score_threshold: band interpolation, zero-width bands, values outside every band
  - score_metric: missing values, benchmark positions, custom and trend scoring
  - weighted mean excluding unmeasured metrics, grades, statuses, trend
  - format_metric_value per unit
"""

import pytest

from orghealth.domains.health_score import (
    DIMENSION_DEFINITIONS,
    HealthDimension,
    HealthStatus,
    MetricScore,
    ScoringRule,
    ScoringType,
    TrendDirection,
    calculate_trend,
    calculate_weighted_score,
    format_metric_value,
    get_all_metric_definitions,
    get_dimension_definition,
    get_metric_definition,
    score_benchmark,
    score_metric,
    score_threshold,
    score_to_grade,
    score_to_status,
)
from orghealth.domains.health_score.models import Band, Thresholds, UserPosition
from orghealth.domains.health_score.scoring import CUSTOM_SCORERS
from orghealth.utils.types import BenchmarkRange, MetricUnit

BENCH = BenchmarkRange(low=100.0, median=200.0, high=400.0)


def _rule(scoring_type, **kwargs):
    defaults = dict(
        metric_id="m",
        name="Metric",
        description="",
        dimension=HealthDimension.FINANCIAL_EFFICIENCY,
        weight=1.0,
        unit=MetricUnit.RATIO,
        scoring_type=scoring_type,
    )
    defaults.update(kwargs)
    return ScoringRule(**defaults)


def _metric(score, weight, value=1.0):
    return MetricScore(
        metric_id="m",
        name="Metric",
        value=value,
        score=score,
        weight=weight,
        status=score_to_status(score),
        formatted_value="",
        unit=MetricUnit.RATIO,
    )


# ===========================================================================
# Definitions
# ===========================================================================

class TestDefinitions:
    """Tests for the static dimension configuration."""

    def test_six_dimensions_weighted_to_one(self):
        assert len(DIMENSION_DEFINITIONS) == 6
        assert sum(d.weight for d in DIMENSION_DEFINITIONS) == pytest.approx(1.0)

    def test_metric_weights_sum_to_one_per_dimension(self):
        for definition in DIMENSION_DEFINITIONS:
            assert sum(r.weight for r in definition.metrics) == pytest.approx(1.0), definition.id

    def test_metric_ids_are_unique(self):
        ids = [r.metric_id for r in get_all_metric_definitions()]
        assert len(ids) == 27
        assert len(set(ids)) == len(ids)

    def test_every_rule_has_its_inputs(self):
        for rule in get_all_metric_definitions():
            match rule.scoring_type:
                case ScoringType.BENCHMARK:
                    assert rule.benchmark_key, rule.metric_id
                case ScoringType.THRESHOLD:
                    assert rule.thresholds is not None, rule.metric_id
                case ScoringType.CUSTOM:
                    assert rule.custom_scorer in CUSTOM_SCORERS, rule.metric_id

    def test_lookups(self):
        assert get_dimension_definition("pay_equity").name == "Pay Equity & Fairness"
        assert get_dimension_definition(HealthDimension.COST_MANAGEMENT).weight == 0.15
        assert get_metric_definition("runway_months").unit == MetricUnit.COUNT
        assert get_metric_definition("personnel_cost_pct_revenue").invert_score is True
        assert get_metric_definition("missing") is None


# ===========================================================================
# Benchmark curve
# ===========================================================================

class TestScoreBenchmark:
    """Tests for score_benchmark."""

    def test_median_scores_70_in_both_directions(self):
        assert score_benchmark(200.0, BENCH) == pytest.approx(70.0)
        assert score_benchmark(200.0, BENCH, invert=True) == pytest.approx(70.0)

    @pytest.mark.parametrize("value, expected", [
        (50.0, 0.0),
        (100.0, 0.0),
        (150.0, 35.0),
        (300.0, 85.0),
        (400.0, 100.0),
        (1_000.0, 100.0),
    ])
    def test_higher_is_better(self, value, expected):
        assert score_benchmark(value, BENCH) == pytest.approx(expected)

    @pytest.mark.parametrize("value, expected", [
        (50.0, 100.0),
        (100.0, 100.0),
        (150.0, 85.0),
        (300.0, 35.0),
        (400.0, 0.0),
    ])
    def test_inverted(self, value, expected):
        assert score_benchmark(value, BENCH, invert=True) == pytest.approx(expected)

    def test_missing_or_flat_benchmark_is_neutral(self):
        assert score_benchmark(10.0, None) == 50.0
        assert score_benchmark(10.0, BenchmarkRange(5.0, 5.0, 5.0)) == 50.0


# ===========================================================================
# Threshold bands
# ===========================================================================

class TestScoreThreshold:
    """Tests for score_threshold."""

    SPAN = get_metric_definition("span_of_control").thresholds

    def test_excellent_band(self):
        # (5, 8) maps onto 85..100
        assert score_threshold(6.5, self.SPAN) == pytest.approx(92.5)

    def test_good_band(self):
        # (4, 10) maps onto 70..84
        assert score_threshold(9.0, self.SPAN) == pytest.approx(70 + 5 / 6 * 14)

    def test_critical_band(self):
        # (0, 15) maps onto 0..49
        assert score_threshold(2.0, self.SPAN) == pytest.approx(2 / 15 * 49)

    def test_first_matching_band_wins(self):
        assert score_threshold(5.0, self.SPAN) == pytest.approx(85.0)

    def test_outside_every_band_scores_zero(self):
        assert score_threshold(20.0, self.SPAN) == 0.0

    def test_zero_width_band_scores_its_midpoint(self):
        thresholds = Thresholds(excellent=Band(5, 5), good=Band(0, 10))
        assert score_threshold(5.0, thresholds) == pytest.approx(92.5)

    def test_missing_bands_are_skipped(self):
        thresholds = Thresholds(warning=Band(0, 10))
        assert score_threshold(5.0, thresholds) == pytest.approx(59.5)


# ===========================================================================
# score_metric
# ===========================================================================

class TestScoreMetric:
    """Tests for score_metric."""

    def test_missing_value(self):
        result = score_metric(get_metric_definition("revenue_per_employee"), None, {})
        assert result.value is None
        assert result.score == 0.0
        assert result.status == HealthStatus.CRITICAL
        assert result.formatted_value == "N/A"

    def test_benchmark_rule_reports_position(self):
        rule = _rule(ScoringType.BENCHMARK, benchmark_key="k")
        result = score_metric(rule, 50.0, {"k": BENCH})
        assert result.score == 0.0
        assert result.benchmark.user_position == UserPosition.BELOW

        inverted = score_metric(_rule(ScoringType.BENCHMARK, benchmark_key="k", invert_score=True), 50.0, {"k": BENCH})
        assert inverted.score == 100.0
        assert inverted.benchmark.user_position == UserPosition.ABOVE

    def test_benchmark_rule_without_benchmark_is_neutral(self):
        result = score_metric(_rule(ScoringType.BENCHMARK, benchmark_key="k"), 50.0, {})
        assert result.score == 50.0
        assert result.status == HealthStatus.WARNING
        assert result.benchmark is None

    def test_real_zero_is_scored(self):
        result = score_metric(get_metric_definition("high_span_managers"), 0.0, {})
        # (0, 5) excellent band
        assert result.value == 0.0
        assert result.score == pytest.approx(85.0)

    def test_custom_scorer(self):
        result = score_metric(get_metric_definition("department_balance"), 0.2, {})
        assert result.score == 80.0
        assert result.status == HealthStatus.GOOD

    def test_unknown_custom_scorer_is_neutral(self):
        result = score_metric(_rule(ScoringType.CUSTOM, custom_scorer="nope"), 1.0, {})
        assert result.score == 50.0

    def test_trend_rule_is_neutral(self):
        assert score_metric(_rule(ScoringType.TREND), 3.0, {}).score == 50.0

    def test_score_is_clamped(self):
        result = score_metric(get_metric_definition("dept_revenue_efficiency"), 250.0, {})
        assert result.score == 100.0


# ===========================================================================
# Aggregation helpers
# ===========================================================================

class TestWeightedScore:
    """Tests for calculate_weighted_score."""

    def test_unmeasured_metrics_are_excluded(self):
        metrics = [_metric(80.0, 0.5), _metric(0.0, 0.5, value=None)]
        assert calculate_weighted_score(metrics) == pytest.approx(80.0)

    def test_weighted_mean(self):
        assert calculate_weighted_score([_metric(100.0, 0.75), _metric(60.0, 0.25)]) == pytest.approx(90.0)

    def test_nothing_measured(self):
        assert calculate_weighted_score([_metric(0.0, 1.0, value=None)]) == 0.0
        assert calculate_weighted_score([]) == 0.0


class TestGradesAndStatus:
    """Tests for score_to_grade and score_to_status boundaries."""

    @pytest.mark.parametrize("score, grade", [
        (100, "A+"), (95, "A+"), (94.999, "A"), (85, "A"), (84.999, "B"), (70, "B"),
        (69.999, "C"), (50, "C"), (49.999, "D"), (30, "D"), (29.999, "F"), (0, "F"),
    ])
    def test_grades(self, score, grade):
        assert score_to_grade(score) == grade

    @pytest.mark.parametrize("score, status", [
        (85, HealthStatus.EXCELLENT),
        (84.999, HealthStatus.GOOD),
        (70, HealthStatus.GOOD),
        (69.999, HealthStatus.WARNING),
        (50, HealthStatus.WARNING),
        (49.999, HealthStatus.CRITICAL),
    ])
    def test_statuses(self, score, status):
        assert score_to_status(score) == status


class TestTrend:
    """Tests for calculate_trend."""

    def test_no_previous_score(self):
        trend = calculate_trend(80.0, None)
        assert trend.direction == TrendDirection.UNKNOWN
        assert trend.change is None

    def test_stable_band(self):
        trend = calculate_trend(80.0, 79.0)
        assert trend.direction == TrendDirection.STABLE
        assert trend.change == pytest.approx(1.0)

    def test_band_edge_counts_as_movement(self):
        assert calculate_trend(82.0, 80.0).direction == TrendDirection.IMPROVING

    def test_declining(self):
        trend = calculate_trend(70.0, 75.0)
        assert trend.direction == TrendDirection.DECLINING
        assert trend.change == pytest.approx(-5.0)

    def test_custom_band(self):
        assert calculate_trend(80.0, 76.0, stable_band=5.0).direction == TrendDirection.STABLE


class TestFormatMetricValue:
    """Tests for format_metric_value."""

    @pytest.mark.parametrize("value, unit, text", [
        (None, MetricUnit.RATIO, "N/A"),
        (12.345, MetricUnit.PERCENTAGE, "12.3%"),
        (1_500_000, MetricUnit.CURRENCY, "1.50M"),
        (25_000, MetricUnit.CURRENCY, "25k"),
        (500, MetricUnit.CURRENCY, "500"),
        (1.234, MetricUnit.RATIO, "1.23"),
        (2.26, MetricUnit.YEARS, "2.3 yrs"),
        (2.5, MetricUnit.COUNT, "3"),
        (1.3, MetricUnit.FACTOR, "1.30x"),
    ])
    def test_units(self, value, unit, text):
        assert format_metric_value(value, unit) == text
