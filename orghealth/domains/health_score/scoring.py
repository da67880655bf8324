"""Per-metric scoring strategies and score-to-grade helpers.

Scores live on a 0-100 scale. Benchmark scoring bends at the median (70
points) so that reaching the median is rewarded steeply and the last 30
points are spread over the better-than-median half.
"""

from typing import TypeAlias
import logging
import math
from collections.abc import Callable

from orghealth.domains.health_score.models import (
    Band,
    BenchmarkComparison,
    HealthStatus,
    MetricScore,
    ScoringRule,
    ScoringType,
    Thresholds,
    TrendDirection,
    TrendResult,
    UserPosition,
)
from orghealth.utils.types import BenchmarkMap, BenchmarkRange, MetricUnit, MetricValue

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0

# (band name, floor, span) of the score sub-range each threshold band maps onto
BAND_SCORE_RANGES: tuple[tuple[str, float, float], ...] = (
    ("excellent", 85.0, 15.0),
    ("good", 70.0, 14.0),
    ("warning", 50.0, 19.0),
    ("critical", 0.0, 49.0),
)

GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (95, "A+"),
    (85, "A"),
    (70, "B"),
    (50, "C"),
    (30, "D"),
)


def clamp(score: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, score))


def score_to_status(score: float) -> HealthStatus:
    if score >= 85:
        return HealthStatus.EXCELLENT
    if score >= 70:
        return HealthStatus.GOOD
    if score >= 50:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def score_to_grade(score: float) -> str:
    for floor, grade in GRADE_THRESHOLDS:
        if score >= floor:
            return grade
    return "F"


def score_benchmark(value: float, benchmark: BenchmarkRange | None, invert: bool = False) -> float:
    """Score ``value`` against a ``low/median/high`` curve.

    Higher is better unless ``invert`` is set, in which case the curve is
    mirrored so that values at or below ``low`` earn 100.
    """
    if benchmark is None:
        return NEUTRAL_SCORE

    low, median, high = benchmark.low, benchmark.median, benchmark.high
    if high - low == 0:
        return NEUTRAL_SCORE

    if invert:
        if value <= low:
            return 100.0
        if value >= high:
            return 0.0
        if value <= median:
            return 100 - (value - low) / (median - low) * 30
        return 70 - (value - median) / (high - median) * 70

    if value >= high:
        return 100.0
    if value <= low:
        return 0.0
    if value >= median:
        return 70 + (value - median) / (high - median) * 30
    return (value - low) / (median - low) * 70


def _score_in_band(value: float, band: Band, floor: float, span: float) -> float:
    if band.width == 0:
        return floor + span / 2
    return floor + (value - band.min) / band.width * span


def score_threshold(value: float, thresholds: Thresholds) -> float:
    """Score by the first band (excellent, good, warning, critical) containing ``value``.

    Returns 0 when no band contains the value.
    """
    for name, floor, span in BAND_SCORE_RANGES:
        band: Band | None = getattr(thresholds, name)
        if band is not None and band.contains(value):
            return _score_in_band(value, band, floor, span)
    return 0.0


def _score_department_balance(value: float, benchmarks: BenchmarkMap) -> float:
    # Lower variance across departments is better
    if value < 0.15:
        return 100.0
    if value < 0.25:
        return 80.0
    if value < 0.35:
        return 60.0
    if value < 0.50:
        return 40.0
    return 20.0


def _score_dept_revenue_efficiency(value: float, benchmarks: BenchmarkMap) -> float:
    return clamp(value)


CustomScorer: TypeAlias = Callable[[float, BenchmarkMap], float]

CUSTOM_SCORERS: dict[str, CustomScorer] = {
    "department_balance": _score_department_balance,
    "dept_revenue_efficiency": _score_dept_revenue_efficiency,
}


def format_metric_value(value: MetricValue, unit: MetricUnit) -> str:
    if value is None:
        return "N/A"
    match unit:
        case MetricUnit.PERCENTAGE:
            return f"{value:.1f}%"
        case MetricUnit.CURRENCY if value >= 1_000_000:
            return f"{value / 1_000_000:.2f}M"
        case MetricUnit.CURRENCY if value >= 1_000:
            return f"{value / 1_000:.0f}k"
        case MetricUnit.CURRENCY:
            return f"{value:.0f}"
        case MetricUnit.RATIO:
            return f"{value:.2f}"
        case MetricUnit.YEARS:
            return f"{value:.1f} yrs"
        case MetricUnit.COUNT:
            return str(math.floor(value + 0.5))
        case MetricUnit.FACTOR:
            return f"{value:.2f}x"
        case _:
            return f"{value:.2f}"


def _user_position(value: float, benchmark: BenchmarkRange, invert: bool) -> UserPosition:
    if value < benchmark.low:
        return UserPosition.ABOVE if invert else UserPosition.BELOW
    if value > benchmark.high:
        return UserPosition.BELOW if invert else UserPosition.ABOVE
    return UserPosition.WITHIN


def score_metric(
    rule: ScoringRule,
    value: MetricValue,
    benchmarks: BenchmarkMap | None = None,
) -> MetricScore:
    """Score one metric value under its rule.

    A missing value scores 0 with status critical. That score is for display
    only: ``calculate_weighted_score`` leaves such metrics out of the mean.
    """
    if value is None:
        return MetricScore(
            metric_id=rule.metric_id,
            name=rule.name,
            value=None,
            score=0.0,
            weight=rule.weight,
            status=HealthStatus.CRITICAL,
            formatted_value="N/A",
            unit=rule.unit,
        )

    benchmarks = benchmarks or {}
    comparison = None

    match rule.scoring_type:
        case ScoringType.BENCHMARK:
            bench = benchmarks.get(rule.benchmark_key) if rule.benchmark_key else None
            score = score_benchmark(value, bench, rule.invert_score)
            if bench is not None:
                comparison = BenchmarkComparison(
                    low=bench.low,
                    median=bench.median,
                    high=bench.high,
                    user_position=_user_position(value, bench, rule.invert_score),
                )
        case ScoringType.THRESHOLD if rule.thresholds is not None:
            score = score_threshold(value, rule.thresholds)
        case ScoringType.CUSTOM if rule.custom_scorer in CUSTOM_SCORERS:
            score = CUSTOM_SCORERS[rule.custom_scorer](value, benchmarks)
        case ScoringType.TREND:
            # No per-metric history is available yet
            score = NEUTRAL_SCORE
        case _:
            logger.debug("No scorer configured for %s, using neutral score", rule.metric_id)
            score = NEUTRAL_SCORE

    score = clamp(score)
    return MetricScore(
        metric_id=rule.metric_id,
        name=rule.name,
        value=value,
        score=score,
        weight=rule.weight,
        status=score_to_status(score),
        formatted_value=format_metric_value(value, rule.unit),
        unit=rule.unit,
        benchmark=comparison,
    )


def calculate_weighted_score(metrics: tuple[MetricScore, ...] | list[MetricScore]) -> float:
    """Weighted mean score over metrics that have a measured value."""
    measured = [m for m in metrics if m.value is not None]
    total_weight = sum(m.weight for m in measured)
    if not measured or total_weight == 0:
        return 0.0
    return sum(m.score * m.weight for m in measured) / total_weight


def calculate_trend(current: float, previous: float | None, stable_band: float = 2.0) -> TrendResult:
    if previous is None:
        return TrendResult(TrendDirection.UNKNOWN)
    change = current - previous
    if abs(change) < stable_band:
        return TrendResult(TrendDirection.STABLE, change)
    direction = TrendDirection.IMPROVING if change > 0 else TrendDirection.DECLINING
    return TrendResult(direction, change)
