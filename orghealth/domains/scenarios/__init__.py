"""Scenario modelling: hiring freeze, cost reduction, growth and target ratio."""

from orghealth.domains.scenarios.transform import (
    apply_cost_reduction,
    apply_growth,
    apply_hiring_freeze,
    apply_target_ratio,
)
from orghealth.domains.scenarios.metrics import (
    AffectedEmployee,
    EmployeeAction,
    ScenarioResult,
    SummaryMetrics,
    calculate_scenario_metrics,
    generate_default_effective_dates,
    identify_affected_employees,
)
from orghealth.domains.scenarios.timeline import (
    calculate_monthly_burn_rate,
    calculate_runway_analysis,
    calculate_year_end_projection,
)
