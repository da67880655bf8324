"""Organizational health-score engine.

Workforce cost/structure metrics, a department KPI registry, a multi-dimension
health score with narrative insights, what-if scenario transforms and
benchmark comparison, all computed from in-memory employee records.
"""

from orghealth.calculator import calculate_all_metrics
from orghealth.domains.health_score import calculate_health_score

__version__ = "0.1.0"
