"""Organizational health score: six weighted dimensions of scored metrics.

Rules live as static data in ``definitions``; ``scoring`` dispatches on the
rule's scoring type and ``calculator`` aggregates dimensions into the overall
score, grade, trend and narrative.
"""

from orghealth.domains.health_score.models import (
    DimensionScore,
    HealthDimension,
    HealthScore,
    HealthStatus,
    MetricScore,
    ScoringRule,
    ScoringType,
    TrendDirection,
)
from orghealth.domains.health_score.definitions import (
    DIMENSION_DEFINITIONS,
    get_all_metric_definitions,
    get_dimension_definition,
    get_metric_definition,
)
from orghealth.domains.health_score.scoring import (
    calculate_trend,
    calculate_weighted_score,
    format_metric_value,
    score_benchmark,
    score_metric,
    score_threshold,
    score_to_grade,
    score_to_status,
)
from orghealth.domains.health_score.extraction import extract_metric_values
from orghealth.domains.health_score.calculator import (
    calculate_health_score,
    calculate_overall_score,
    score_dimension,
    score_metric_values,
)
