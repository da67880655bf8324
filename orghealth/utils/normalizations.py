"""Map free-text department, role and employment-type strings onto closed sets."""

import re

from orghealth.utils.types import DepartmentCategory, EmployeeLevel, EmploymentType


# First match wins, so order matters.
DEPARTMENT_PATTERNS: list[tuple[DepartmentCategory, re.Pattern[str]]] = [
    (DepartmentCategory.RD, re.compile(r"(eng|product|design|data|qa|r&d|tech|develop)")),
    (
        DepartmentCategory.GTM,
        re.compile(r"(sales|market|customer|cs|gtm|sdr|partner|revenue|account|commercial)"),
    ),
    (
        DepartmentCategory.GA,
        re.compile(r"(finance|hr|legal|it|admin|recruit|people|talent|executive|c-level)"),
    ),
    (
        DepartmentCategory.OPERATIONS,
        re.compile(r"(ops|operation|logistic|supply|manufactur|facility|production)"),
    ),
]

LEVEL_PATTERNS: list[tuple[EmployeeLevel, re.Pattern[str]]] = [
    (EmployeeLevel.C_LEVEL, re.compile(r"\b(ceo|cfo|cto|coo|cpo|chief)\b")),
    (EmployeeLevel.VP, re.compile(r"\bvp\b|\bvice president\b")),
    (EmployeeLevel.DIRECTOR, re.compile(r"\bdirector\b")),
    (EmployeeLevel.MANAGER, re.compile(r"\bmanager\b|\blead\b|\bhead of\b")),
]


def normalize_department(department: str | None) -> DepartmentCategory:
    """Classify a department name into R&D / GTM / G&A / Operations / Other."""
    if not department:
        return DepartmentCategory.OTHER
    text = department.strip().lower()
    for category, pattern in DEPARTMENT_PATTERNS:
        if pattern.search(text):
            return category
    return DepartmentCategory.OTHER


def infer_level(role: str | None, has_manager: bool) -> EmployeeLevel:
    """Infer seniority from a job title; without a title, the top of a reporting line is a manager."""
    if not role:
        return EmployeeLevel.IC if has_manager else EmployeeLevel.MANAGER
    text = role.strip().lower()
    for level, pattern in LEVEL_PATTERNS:
        if pattern.search(text):
            return level
    return EmployeeLevel.IC


def normalize_employment_type(raw_type: str | None) -> EmploymentType:
    if not raw_type:
        return EmploymentType.FTE
    text = raw_type.strip().lower()
    match text:
        case t if any(word in t for word in ("contract", "consultant", "freelance")):
            return EmploymentType.CONTRACTOR
        case t if any(word in t for word in ("part", "0.5", "half")):
            return EmploymentType.PART_TIME
        case t if "intern" in t or "trainee" in t:
            return EmploymentType.INTERN
        case _:
            return EmploymentType.FTE
