"""Derive structure metrics from benchmark department headcounts.

Keeps benchmark figures and workforce figures on the same definitions.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HEADCOUNT_TOLERANCE = 0.01


@dataclass(frozen=True)
class DepartmentHeadcount:
    rd: float
    gtm: float
    ga: float
    operations: float
    other: float
    total: float

    @property
    def department_sum(self) -> float:
        return self.rd + self.gtm + self.ga + self.operations + self.other


def _pct(part: float, total: float) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


def calculate_from_headcount(headcount: DepartmentHeadcount) -> dict[str, float]:
    """Ratios and per-bucket percentages for one percentile's headcount."""
    hc = headcount
    if abs(hc.department_sum - hc.total) > HEADCOUNT_TOLERANCE:
        logger.warning("Headcount mismatch: sum=%s, total=%s", hc.department_sum, hc.total)

    return {
        "rd_to_gtm_ratio": round(hc.rd / hc.gtm, 2) if hc.gtm > 0 else 0.0,
        "gtm_to_rd_ratio": round(hc.gtm / hc.rd, 2) if hc.rd > 0 else 0.0,
        "rd_percentage": _pct(hc.rd, hc.total),
        "gtm_percentage": _pct(hc.gtm, hc.total),
        "ga_percentage": _pct(hc.ga, hc.total),
        "operations_percentage": _pct(hc.operations, hc.total),
        "other_percentage": _pct(hc.other, hc.total),
        "total_headcount": hc.total,
        "rd_headcount": hc.rd,
        "gtm_headcount": hc.gtm,
        "ga_headcount": hc.ga,
        "operations_headcount": hc.operations,
        "other_headcount": hc.other,
    }


def validate_department_headcount(headcount: DepartmentHeadcount) -> list[str]:
    errors = []
    for name, label in (
        ("rd", "R&D"),
        ("gtm", "GTM"),
        ("ga", "G&A"),
        ("operations", "Operations"),
        ("other", "Other"),
        ("total", "Total"),
    ):
        if getattr(headcount, name) < 0:
            errors.append(f"{label} headcount cannot be negative")

    if abs(headcount.department_sum - headcount.total) > HEADCOUNT_TOLERANCE:
        errors.append(
            f"Total ({headcount.total}) does not match sum of departments ({headcount.department_sum})"
        )
    if headcount.total == 0:
        errors.append("Total headcount cannot be zero")
    return errors
