"""Benchmark data, segment lookup and value-vs-benchmark comparison."""

from orghealth.domains.benchmarks.data import (
    DEFAULT_BENCHMARKS,
    BenchmarkData,
    BenchmarkMetric,
    default_benchmark_map,
    get_benchmark_for_segment,
)
from orghealth.domains.benchmarks.compare import ComparisonResult, compare_to_benchmark
from orghealth.domains.benchmarks.headcount import (
    DepartmentHeadcount,
    calculate_from_headcount,
    validate_department_headcount,
)
