"""Narrative text generated from scored dimensions."""

from collections.abc import Sequence

from orghealth.domains.health_score.models import (
    DimensionScore,
    HealthDimension,
    HealthStatus,
    HealthSummary,
)

FALLBACK_RECOMMENDATION = "Continue monitoring key metrics and maintain current practices"

STRENGTH_THRESHOLD = 70
PAY_GAP_LIMIT = 7
HIGH_SPAN_LIMIT = 15


def _ranked(dimensions: Sequence[DimensionScore]) -> list[DimensionScore]:
    return sorted(dimensions, key=lambda d: d.score, reverse=True)


def identify_strengths(dimensions: Sequence[DimensionScore], limit: int = 3) -> list[str]:
    """Top dimensions scoring at least 70."""
    strengths = []
    for dim in _ranked(dimensions)[:limit]:
        if dim.score < STRENGTH_THRESHOLD:
            continue
        label = "Excellent" if dim.status == HealthStatus.EXCELLENT else "Performing well"
        strengths.append(f"{dim.name} ({dim.score:.0f}/100) - {label}")
    return strengths


def identify_improvements(dimensions: Sequence[DimensionScore], limit: int = 3) -> list[str]:
    """Bottom dimensions scoring below 70, worst first, with their weakest metrics."""
    improvements = []
    for dim in reversed(_ranked(dimensions)[-limit:]):
        if dim.score >= STRENGTH_THRESHOLD:
            continue
        issues = sorted(
            (m for m in dim.metrics if m.status in (HealthStatus.CRITICAL, HealthStatus.WARNING)),
            key=lambda m: m.score,
        )[:2]
        if issues:
            names = ", ".join(m.name for m in issues)
            improvements.append(f"{dim.name} ({dim.score:.0f}/100) - {names} need attention")
        else:
            improvements.append(f"{dim.name} ({dim.score:.0f}/100) - Needs improvement")
    return improvements


def _find(dimensions: Sequence[DimensionScore], dimension: HealthDimension) -> DimensionScore | None:
    return next((d for d in dimensions if d.dimension == dimension), None)


def generate_recommendations(dimensions: Sequence[DimensionScore]) -> list[str]:
    """Rule-based recommendations; never empty."""
    recommendations = []

    pay_equity = _find(dimensions, HealthDimension.PAY_EQUITY)
    if pay_equity is not None and pay_equity.score < STRENGTH_THRESHOLD:
        gap = next((m for m in pay_equity.metrics if m.metric_id == "gender_pay_gap_median"), None)
        if gap is not None and gap.value and gap.value > PAY_GAP_LIMIT:
            recommendations.append(
                f"Address gender pay gap ({gap.formatted_value}) through compensation review"
            )

    team = _find(dimensions, HealthDimension.TEAM_EFFECTIVENESS)
    if team is not None:
        high_span = next((m for m in team.metrics if m.metric_id == "high_span_managers"), None)
        if high_span is not None and high_span.value and high_span.value > HIGH_SPAN_LIMIT:
            recommendations.append(
                "Consider adding managers to reduce span of control "
                f"({high_span.formatted_value} have >10 reports)"
            )

    financial = _find(dimensions, HealthDimension.FINANCIAL_EFFICIENCY)
    if financial is not None and financial.score < STRENGTH_THRESHOLD:
        recommendations.append("Review department efficiency and revenue generation metrics")

    return recommendations or [FALLBACK_RECOMMENDATION]


def summarize_dimensions(dimensions: Sequence[DimensionScore]) -> HealthSummary:
    def count(status: HealthStatus) -> int:
        return sum(1 for d in dimensions if d.status == status)

    return HealthSummary(
        excellent_dimensions=count(HealthStatus.EXCELLENT),
        good_dimensions=count(HealthStatus.GOOD),
        warning_dimensions=count(HealthStatus.WARNING),
        critical_dimensions=count(HealthStatus.CRITICAL),
    )
