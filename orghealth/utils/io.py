"""Read input bundles and write results for the command line."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

import pandas as pd

from orghealth.domains.workforce.transform import to_cost_frame, to_employee_frame
from orghealth.utils.types import BenchmarkMap, DatasetMetadata, coerce_benchmark_map

logger = logging.getLogger(__name__)

FilePath: TypeAlias = str | Path


@dataclass(frozen=True)
class InputBundle:
    employees: pd.DataFrame
    metadata: DatasetMetadata
    benchmarks: BenchmarkMap = field(default_factory=dict)
    employer_costs: pd.DataFrame | None = None
    planned_costs: pd.DataFrame | None = None
    previous_score: float | None = None


def load_input_bundle(path: FilePath) -> InputBundle:
    """Load a JSON bundle of employees, metadata, benchmarks and cost series."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = json.load(f)

    match data:
        case {"employees": list(records)}:
            employees = to_employee_frame(records)
        case _:
            raise ValueError(f"{path} does not contain an 'employees' list")

    employer_costs = data.get("employer_costs") or data.get("employerCosts")
    planned_costs = data.get("planned_costs") or data.get("plannedCosts")
    previous = data.get("previous_score", data.get("previousScore"))

    bundle = InputBundle(
        employees=employees,
        metadata=DatasetMetadata.from_mapping(data.get("metadata")),
        benchmarks=coerce_benchmark_map(data.get("benchmarks")),
        employer_costs=to_cost_frame(employer_costs) if employer_costs else None,
        planned_costs=to_cost_frame(planned_costs) if planned_costs else None,
        previous_score=float(previous) if previous is not None else None,
    )
    logger.info("Loaded %d employee records from %s", len(employees), path)
    return bundle


def write_json(payload: dict[str, Any], path: FilePath) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2, default=str)
    logger.info("Wrote results to %s", path)
