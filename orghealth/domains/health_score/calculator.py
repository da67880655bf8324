"""Compute the organizational health score.

Each dimension is the weighted mean of its measured metrics. The overall
score is the weighted mean of the dimensions whose data completeness reaches
``min_completeness``; dimensions short of that are left out, not zeroed.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

import pandas as pd

from orghealth.domains.health_score.definitions import DIMENSION_DEFINITIONS
from orghealth.domains.health_score.extraction import extract_metric_values
from orghealth.domains.health_score.insights import (
    generate_recommendations,
    identify_improvements,
    identify_strengths,
    summarize_dimensions,
)
from orghealth.domains.health_score.models import DimensionDefinition, DimensionScore, HealthScore
from orghealth.domains.health_score.scoring import (
    calculate_trend,
    calculate_weighted_score,
    score_metric,
    score_to_grade,
    score_to_status,
)
from orghealth.utils.aggregations import resolve_now
from orghealth.utils.types import (
    BenchmarkMap,
    BenchmarkRange,
    DatasetMetadata,
    Instant,
    MetricMap,
    Record,
    coerce_benchmark_map,
)

logger = logging.getLogger(__name__)


def score_dimension(
    definition: DimensionDefinition,
    values: MetricMap,
    benchmarks: BenchmarkMap | None = None,
) -> DimensionScore:
    metrics = tuple(score_metric(rule, values.get(rule.metric_id), benchmarks) for rule in definition.metrics)
    score = calculate_weighted_score(metrics)
    available = sum(1 for m in metrics if m.value is not None)
    total = len(definition.metrics)
    return DimensionScore(
        dimension=definition.id,
        name=definition.name,
        description=definition.description,
        score=score,
        weight=definition.weight,
        status=score_to_status(score),
        metrics=metrics,
        metrics_available=available,
        metrics_total=total,
        data_completeness=available / total * 100 if total else 0.0,
    )


def calculate_overall_score(dimensions: Iterable[DimensionScore], min_completeness: float = 40.0) -> float:
    eligible = [d for d in dimensions if d.data_completeness >= min_completeness]
    total_weight = sum(d.weight for d in eligible)
    if total_weight == 0:
        return 0.0
    return sum(d.score * d.weight for d in eligible) / total_weight


def score_metric_values(
    values: MetricMap,
    benchmarks: Mapping[str, BenchmarkRange | Record] | None = None,
    previous_score: float | None = None,
    min_completeness: float = 40.0,
    stable_band: float = 2.0,
    calculated_at: datetime | None = None,
) -> HealthScore:
    """Score an already extracted metric map against the dimension definitions."""
    bench = coerce_benchmark_map(benchmarks)
    dimensions = tuple(score_dimension(d, values, bench) for d in DIMENSION_DEFINITIONS)

    overall = calculate_overall_score(dimensions, min_completeness)
    metrics_total = sum(d.metrics_total for d in dimensions)
    metrics_available = sum(d.metrics_available for d in dimensions)
    trend = calculate_trend(overall, previous_score, stable_band)

    return HealthScore(
        overall_score=overall,
        grade=score_to_grade(overall),
        status=score_to_status(overall),
        trend=trend.direction,
        trend_change=trend.change,
        dimensions=dimensions,
        data_completeness=metrics_available / metrics_total * 100 if metrics_total else 0.0,
        calculated_at=calculated_at or datetime.now(),
        strengths=tuple(identify_strengths(dimensions)),
        improvements=tuple(identify_improvements(dimensions)),
        recommendations=tuple(generate_recommendations(dimensions)),
        summary=summarize_dimensions(dimensions),
    )


def calculate_health_score(
    employees: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    benchmarks: Mapping[str, BenchmarkRange | Record] | None = None,
    previous_score: float | None = None,
    employer_costs: pd.DataFrame | None = None,
    planned_costs: pd.DataFrame | None = None,
    now: Instant = None,
    custom_categories: Mapping[str, str] | None = None,
    min_completeness: float = 40.0,
    low_span_limit: int = 5,
    high_span_limit: int = 10,
    stable_band: float = 2.0,
) -> HealthScore:
    """Score the organization across all six dimensions."""
    now = resolve_now(now)
    values = extract_metric_values(
        employees,
        metadata,
        employer_costs=employer_costs,
        planned_costs=planned_costs,
        now=now,
        custom_categories=custom_categories,
        low_span_limit=low_span_limit,
        high_span_limit=high_span_limit,
    )
    result = score_metric_values(
        values,
        benchmarks,
        previous_score=previous_score,
        min_completeness=min_completeness,
        stable_band=stable_band,
        calculated_at=now.to_pydatetime(),
    )
    logger.info(
        "Health score %.1f (%s), data completeness %.0f%%",
        result.overall_score,
        result.grade,
        result.data_completeness,
    )
    return result
