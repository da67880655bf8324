"""Static segment benchmarks and the default health-score benchmark map."""

import logging
from dataclasses import dataclass, field

from orghealth.domains.kpis.definitions import KPI_REGISTRY
from orghealth.utils.types import BenchmarkMap, BenchmarkRange

logger = logging.getLogger(__name__)

DEFAULT_INDUSTRY = "saas_b2b"
DEFAULT_COMPANY_SIZE = "100-250"


@dataclass(frozen=True)
class BenchmarkMetric:
    p25: float | None
    median: float
    p75: float | None
    min: float | None = None
    max: float | None = None

    def as_range(self) -> BenchmarkRange:
        low = self.p25 if self.p25 is not None else self.median
        high = self.p75 if self.p75 is not None else self.median
        return BenchmarkRange(low, self.median, high)


@dataclass(frozen=True)
class BenchmarkData:
    industry: str
    company_size: str
    source: str
    sample_size: int
    metrics: dict[str, BenchmarkMetric] = field(default_factory=dict)


def _segment(company_size: str, sample_size: int, metrics: dict[str, tuple[float, ...]]) -> BenchmarkData:
    return BenchmarkData(
        industry=DEFAULT_INDUSTRY,
        company_size=company_size,
        source="openview_2024",
        sample_size=sample_size,
        metrics={name: BenchmarkMetric(*values) for name, values in metrics.items()},
    )


# (p25, median, p75, min, max)
DEFAULT_BENCHMARKS: list[BenchmarkData] = [
    _segment("50-100", 127, {
        "rd_to_gtm_ratio": (0.8, 1.0, 1.3, 0.5, 2.0),
        "revenue_per_fte": (150_000, 200_000, 280_000, 100_000, 400_000),
        "span_of_control": (4, 6, 8, 2, 12),
        "cost_per_fte": (80_000, 110_000, 145_000, 60_000, 200_000),
        "manager_to_ic": (0.10, 0.15, 0.20, 0.05, 0.30),
    }),
    _segment("100-250", 89, {
        "rd_to_gtm_ratio": (0.9, 1.1, 1.4, 0.6, 2.2),
        "revenue_per_fte": (175_000, 220_000, 300_000, 120_000, 450_000),
        "span_of_control": (5, 7, 9, 3, 15),
        "cost_per_fte": (90_000, 120_000, 155_000, 70_000, 220_000),
        "manager_to_ic": (0.12, 0.16, 0.22, 0.08, 0.35),
    }),
    _segment("250-500", 54, {
        "rd_to_gtm_ratio": (1.0, 1.2, 1.5, 0.7, 2.5),
        "revenue_per_fte": (200_000, 250_000, 350_000, 150_000, 500_000),
        "span_of_control": (6, 8, 10, 4, 18),
        "cost_per_fte": (100_000, 130_000, 165_000, 80_000, 240_000),
        "manager_to_ic": (0.14, 0.18, 0.24, 0.10, 0.40),
    }),
]


def get_benchmark_for_segment(
    industry: str,
    company_size: str,
    benchmarks: list[BenchmarkData] | None = None,
) -> BenchmarkData | None:
    """Exact segment, else first of the industry, else the generic SaaS 100-250 segment."""
    benchmarks = DEFAULT_BENCHMARKS if benchmarks is None else benchmarks
    for match in (
        lambda b: b.industry == industry and b.company_size == company_size,
        lambda b: b.industry == industry,
        lambda b: b.industry == DEFAULT_INDUSTRY and b.company_size == DEFAULT_COMPANY_SIZE,
    ):
        found = next((b for b in benchmarks if match(b)), None)
        if found is not None:
            return found
    return None


def default_benchmark_map(
    industry: str = DEFAULT_INDUSTRY,
    company_size: str = DEFAULT_COMPANY_SIZE,
) -> BenchmarkMap:
    """Benchmark lookup built from the KPI registry ranges plus the segment's R&D:GTM range."""
    benchmarks: BenchmarkMap = {
        kpi_id: kpi.benchmark_range
        for kpi_id, kpi in KPI_REGISTRY.items()
        if kpi.benchmark_range is not None
    }
    segment = get_benchmark_for_segment(industry, company_size)
    if segment is not None and "rd_to_gtm_ratio" in segment.metrics:
        benchmarks["rd_to_gtm_ratio"] = segment.metrics["rd_to_gtm_ratio"].as_range()
    logger.debug("Default benchmark map with %d entries for %s/%s", len(benchmarks), industry, company_size)
    return benchmarks
