"""Input validation helpers built on pandera."""

from typing import TypeAlias
import logging

import pandas as pd
import pandera as pa
from pandera import DataFrameSchema

logger = logging.getLogger(__name__)

ValidationResult: TypeAlias = dict[str, str | bool | list[str]]


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationResult:
    """Validate a frame lazily, collecting every failure instead of raising."""
    try:
        schema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as exc:
        errors = []
        for _, row in exc.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val} if col is not None:
                    errors.append(f"Column '{col}' failed check '{check}': {val}")
                case {"check": check, "failure_case": val}:
                    errors.append(f"Check '{check}' failed: {val}")
                case failure:
                    errors.append(f"Validation failure: {failure}")
        logger.warning("Schema %s failed with %d error(s)", schema.name, len(errors))
        return {"valid": False, "status": "failed", "errors": errors}
    except pa.errors.SchemaError as exc:
        return {"valid": False, "status": "error", "errors": [str(exc)]}
    return {"valid": True, "status": "passed", "errors": []}


def validate_unique(df: pd.DataFrame, columns: list[str]) -> ValidationResult:
    """Check that the given columns form a unique key."""
    dup_count = int(df.duplicated(subset=columns, keep=False).sum())

    match dup_count:
        case 0:
            return {"valid": True, "status": "passed", "errors": []}
        case n:
            return {
                "valid": False,
                "status": "failed",
                "errors": [f"Found {n} duplicate rows on columns {columns}"],
            }


def validate_manager_references(employees: pd.DataFrame) -> ValidationResult:
    """Check that every ``manager_id`` points at a known employee ``id``."""
    known = set(employees["id"].dropna())
    orphans = sorted(set(employees["manager_id"].dropna()) - known)

    match len(orphans):
        case 0:
            return {"valid": True, "status": "passed", "errors": []}
        case n:
            return {
                "valid": False,
                "status": "failed",
                "errors": [f"Found {n} unknown manager ids. Sample: {orphans[:5]}"],
            }


def merge_results(*results: ValidationResult) -> ValidationResult:
    errors = [err for result in results for err in result["errors"]]
    if any(result["status"] == "error" for result in results):
        return {"valid": False, "status": "error", "errors": errors}
    valid = all(result["valid"] for result in results)
    return {"valid": valid, "status": "passed" if valid else "failed", "errors": errors}
