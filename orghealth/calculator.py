"""Top-level orchestrator for the core workforce metrics."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from orghealth.config import EngineConfig
from orghealth.domains.scenarios.metrics import SummaryMetrics, summarize_workforce
from orghealth.domains.workforce.outliers import (
    OutlierEmployee,
    OutlierManager,
    detect_high_cost_outliers,
    detect_low_span_managers,
)
from orghealth.domains.workforce.structure import (
    DepartmentMetrics,
    RatioMetrics,
    calculate_department_breakdown,
    calculate_ratios,
)
from orghealth.domains.workforce.tenure import TenureMetrics, calculate_tenure_metrics
from orghealth.utils.aggregations import filter_active, resolve_now
from orghealth.utils.types import DatasetMetadata, Instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierAnalysis:
    high_cost_employees: list[OutlierEmployee] = field(default_factory=list)
    low_span_managers: list[OutlierManager] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "highCostEmployees": [o.as_dict() for o in self.high_cost_employees],
            "lowSpanManagers": [o.as_dict() for o in self.low_span_managers],
        }


@dataclass(frozen=True)
class CalculationResult:
    summary: SummaryMetrics
    departments: dict[str, DepartmentMetrics]
    ratios: RatioMetrics
    outliers: OutlierAnalysis
    tenure: TenureMetrics | None
    calculated_at: datetime

    def as_dict(self) -> dict:
        return {
            "calculatedAt": self.calculated_at.isoformat(),
            "summary": self.summary.as_dict(),
            "departments": {k: v.as_dict() for k, v in self.departments.items()},
            "ratios": self.ratios.as_dict(),
            "outliers": self.outliers.as_dict(),
            "tenure": self.tenure.as_dict() if self.tenure else None,
        }


def calculate_all_metrics(
    employees: pd.DataFrame,
    metadata: DatasetMetadata | None = None,
    custom_categories: Mapping[str, str] | None = None,
    now: Instant = None,
    config: EngineConfig | None = None,
) -> CalculationResult:
    """Summary, department breakdown, ratios, outliers and tenure in one pass."""
    config = config or EngineConfig()
    now = resolve_now(now)
    active = filter_active(employees, now)
    revenue = metadata.total_revenue if metadata else None

    departments = calculate_department_breakdown(active, now, custom_categories)
    result = CalculationResult(
        summary=summarize_workforce(active, revenue, now),
        departments=departments,
        ratios=calculate_ratios(active, departments, now),
        outliers=OutlierAnalysis(
            high_cost_employees=detect_high_cost_outliers(active, config.outlier_z_threshold, now),
            low_span_managers=detect_low_span_managers(active, config.min_manager_span, now),
        ),
        tenure=calculate_tenure_metrics(active, now),
        calculated_at=now.to_pydatetime(),
    )
    logger.info(
        "Calculated metrics for %d active employees (%.1f FTE)",
        result.summary.employee_count,
        result.summary.total_fte,
    )
    return result
