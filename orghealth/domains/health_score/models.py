"""Data structures for organizational health scoring.

Rules and dimensions are static, inspectable configuration. Scored results are
created fresh per calculation and serialize to plain JSON-compatible dicts via
``as_dict``.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from orghealth.utils.types import MetricUnit, MetricValue


class HealthDimension(StrEnum):
    FINANCIAL_EFFICIENCY = "financial_efficiency"
    ORGANIZATIONAL_STRUCTURE = "organizational_structure"
    TALENT_RETENTION = "talent_retention"
    PAY_EQUITY = "pay_equity"
    TEAM_EFFECTIVENESS = "team_effectiveness"
    COST_MANAGEMENT = "cost_management"


class HealthStatus(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class ScoringType(StrEnum):
    BENCHMARK = "benchmark"
    THRESHOLD = "threshold"
    CUSTOM = "custom"
    TREND = "trend"


class TrendDirection(StrEnum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"
    UNKNOWN = "unknown"


class UserPosition(StrEnum):
    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"


@dataclass(frozen=True)
class Band:
    """Closed interval; an omitted bound is open-ended."""

    min: float = -math.inf
    max: float = math.inf

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def width(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class Thresholds:
    excellent: Band | None = None
    good: Band | None = None
    warning: Band | None = None
    critical: Band | None = None


@dataclass(frozen=True)
class ScoringRule:
    metric_id: str
    name: str
    description: str
    dimension: HealthDimension
    weight: float
    unit: MetricUnit
    scoring_type: ScoringType
    benchmark_key: str | None = None
    invert_score: bool = False
    thresholds: Thresholds | None = None
    # Name of a function in ``scoring.CUSTOM_SCORERS``
    custom_scorer: str | None = None


@dataclass(frozen=True)
class DimensionDefinition:
    id: HealthDimension
    name: str
    description: str
    weight: float
    metrics: tuple[ScoringRule, ...]


@dataclass(frozen=True)
class BenchmarkComparison:
    low: float
    median: float
    high: float
    user_position: UserPosition

    def as_dict(self) -> dict[str, float | str]:
        return {
            "low": self.low,
            "median": self.median,
            "high": self.high,
            "userPosition": self.user_position.value,
        }


@dataclass(frozen=True)
class MetricScore:
    metric_id: str
    name: str
    value: MetricValue
    score: float
    weight: float
    status: HealthStatus
    formatted_value: str
    unit: MetricUnit
    benchmark: BenchmarkComparison | None = None

    def as_dict(self) -> dict:
        return {
            "metricId": self.metric_id,
            "name": self.name,
            "value": self.value,
            "score": self.score,
            "weight": self.weight,
            "status": self.status.value,
            "formattedValue": self.formatted_value,
            "unit": self.unit.value,
            "benchmark": self.benchmark.as_dict() if self.benchmark else None,
        }


@dataclass(frozen=True)
class DimensionScore:
    dimension: HealthDimension
    name: str
    description: str
    score: float
    weight: float
    status: HealthStatus
    metrics: tuple[MetricScore, ...]
    metrics_available: int
    metrics_total: int
    data_completeness: float

    def as_dict(self) -> dict:
        return {
            "dimension": self.dimension.value,
            "name": self.name,
            "description": self.description,
            "score": self.score,
            "weight": self.weight,
            "status": self.status.value,
            "metrics": [m.as_dict() for m in self.metrics],
            "metricsAvailable": self.metrics_available,
            "metricsTotal": self.metrics_total,
            "dataCompleteness": self.data_completeness,
        }


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    change: float | None = None


@dataclass(frozen=True)
class HealthSummary:
    excellent_dimensions: int
    good_dimensions: int
    warning_dimensions: int
    critical_dimensions: int

    def as_dict(self) -> dict[str, int]:
        return {
            "excellentDimensions": self.excellent_dimensions,
            "goodDimensions": self.good_dimensions,
            "warningDimensions": self.warning_dimensions,
            "criticalDimensions": self.critical_dimensions,
        }


@dataclass(frozen=True)
class HealthScore:
    overall_score: float
    grade: str
    status: HealthStatus
    trend: TrendDirection
    trend_change: float | None
    dimensions: tuple[DimensionScore, ...]
    data_completeness: float
    calculated_at: datetime
    strengths: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    summary: HealthSummary = field(default_factory=lambda: HealthSummary(0, 0, 0, 0))

    def dimension(self, dimension: HealthDimension | str) -> DimensionScore | None:
        return next((d for d in self.dimensions if d.dimension == dimension), None)

    def as_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "grade": self.grade,
            "status": self.status.value,
            "trend": self.trend.value,
            "trendChange": self.trend_change,
            "dimensions": [d.as_dict() for d in self.dimensions],
            "dataCompleteness": self.data_completeness,
            "calculatedAt": self.calculated_at.isoformat(),
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "recommendations": list(self.recommendations),
            "summary": self.summary.as_dict(),
        }
