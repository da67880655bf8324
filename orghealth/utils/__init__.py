"""Shared utilities for the engine."""

from orghealth.utils.aggregations import filter_active, group_by, resolve_now, safe_divide
from orghealth.utils.normalizations import infer_level, normalize_department, normalize_employment_type
from orghealth.utils.statistics import mean, median, percentile, std_dev, z_score
from orghealth.utils.types import BenchmarkRange, DatasetMetadata, MetricValue
from orghealth.utils.validators import validate_dataframe
