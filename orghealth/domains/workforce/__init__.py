"""Workforce domain: core cost, structure, productivity, outlier and tenure metrics.

Operates on the canonical employee frame built by ``to_employee_frame``.
"""

from orghealth.domains.workforce.transform import to_cost_frame, to_employee_frame
from orghealth.domains.workforce.cost import (
    calculate_cost_per_fte,
    calculate_department_cost,
    calculate_department_fte,
    calculate_total_cost,
    calculate_total_fte,
)
from orghealth.domains.workforce.structure import (
    calculate_avg_span_of_control,
    calculate_department_breakdown,
    calculate_manager_to_ic_ratio,
    calculate_ratios,
    calculate_rd_to_gtm_ratio,
    calculate_span_of_control,
)
from orghealth.domains.workforce.productivity import (
    calculate_engineers_per_million,
    calculate_engineers_per_pm,
    calculate_revenue_per_fte,
)
from orghealth.domains.workforce.outliers import detect_high_cost_outliers, detect_low_span_managers
from orghealth.domains.workforce.tenure import calculate_tenure_metrics, format_tenure
from orghealth.domains.workforce.employer_costs import summarize_monthly_costs
from orghealth.domains.workforce.models import employee_schema, employer_cost_schema
from orghealth.utils.validators import (
    merge_results,
    validate_dataframe,
    validate_manager_references,
    validate_unique,
)


def validate(employees, employer_costs=None) -> dict:
    """Validate the employee frame (and optional cost series) before calculating."""
    results = [
        validate_dataframe(employees, employee_schema),
        validate_unique(employees, ["id"]),
        validate_manager_references(employees),
    ]
    if employer_costs is not None:
        results.append(validate_dataframe(employer_costs, employer_cost_schema))
    return merge_results(*results)
