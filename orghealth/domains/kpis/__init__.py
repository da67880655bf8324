"""Department KPI registry and calculator.

KPIs are defined as data in ``definitions`` and evaluated by the calculator
registry in ``calculator`` from a single pass of precomputed aggregates.
"""

from orghealth.domains.kpis.definitions import (
    KPI_REGISTRY,
    KPICategory,
    KPIDefinition,
    get_all_categories,
    get_default_kpis,
    get_kpi_definition,
    get_kpis_by_category,
)
from orghealth.domains.kpis.calculator import (
    KPIResult,
    calculate_kpi_values,
    calculate_kpis,
    kpi_department_category,
)
