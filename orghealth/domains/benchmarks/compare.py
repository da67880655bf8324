"""Position a single value against a p25 / median / p75 benchmark."""

from dataclasses import dataclass

from orghealth.domains.benchmarks.data import BenchmarkMetric


@dataclass(frozen=True)
class ComparisonResult:
    value: float
    benchmark: BenchmarkMetric
    percentile: int
    status: str
    delta_pct: float | None
    severity: str | None

    def as_dict(self) -> dict:
        return {
            "value": self.value,
            "percentile": self.percentile,
            "status": self.status,
            "deltaPct": self.delta_pct,
            "severity": self.severity,
        }


def _estimate_percentile(value: float, benchmark: BenchmarkMetric) -> int:
    if benchmark.p25 and value <= benchmark.p25:
        return 25
    if value <= benchmark.median:
        return 50
    if benchmark.p75 and value <= benchmark.p75:
        return 75
    return 90


def _severity(delta_pct: float | None) -> str | None:
    if delta_pct is None:
        return None
    magnitude = abs(delta_pct)
    if magnitude < 15:
        return "low"
    if magnitude < 30:
        return "medium"
    return "high"


def compare_to_benchmark(value: float, benchmark: BenchmarkMetric) -> ComparisonResult:
    if benchmark.p25 and value < benchmark.p25:
        status = "below"
    elif benchmark.p75 and value > benchmark.p75:
        status = "above"
    else:
        status = "within"

    delta_pct = (value - benchmark.median) / benchmark.median * 100 if benchmark.median else None
    return ComparisonResult(
        value=value,
        benchmark=benchmark,
        percentile=_estimate_percentile(value, benchmark),
        status=status,
        delta_pct=delta_pct,
        severity=_severity(delta_pct),
    )
