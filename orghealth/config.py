"""Engine configuration: tunable thresholds and benchmark segment."""

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, TypeAlias

import yaml

ConfigDict: TypeAlias = dict[str, str | int | float | bool]

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


@dataclass(frozen=True)
class EngineConfig:
    outlier_z_threshold: float = 2.5
    min_manager_span: int = 3
    low_span_limit: int = 5
    high_span_limit: int = 10
    min_dimension_completeness: float = 40.0
    stable_trend_band: float = 2.0
    default_growth_compensation: float = 100_000.0
    default_currency: str = "USD"
    benchmark_industry: str = "saas_b2b"
    benchmark_company_size: str = "100-250"


_FIELD_TYPES = {f.name: f.type for f in fields(EngineConfig)}


def get_env_config(pyproject: Path = PYPROJECT) -> ConfigDict:
    """Read the ``[tool.orghealth]`` table from pyproject.toml; empty when absent."""
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("orghealth", {})


def _read_yaml(path: Path) -> ConfigDict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    match data:
        case {"orghealth": dict(section)}:
            return section
        case dict():
            return data
        case other:
            raise ValueError(f"{path} must contain a mapping, got {type(other).__name__}")


def _coerce(name: str, value: Any) -> Any:
    return _FIELD_TYPES[name](value)


def load_engine_config(
    overrides: ConfigDict | None = None,
    path: str | Path | None = None,
    pyproject: Path = PYPROJECT,
) -> EngineConfig:
    """Defaults, then pyproject ``[tool.orghealth]``, then a YAML file, then ``overrides``."""
    merged: dict[str, Any] = {}
    merged.update(get_env_config(pyproject))
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        merged.update(_read_yaml(path))
    merged.update(overrides or {})

    unknown = sorted(set(merged) - set(_FIELD_TYPES))
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    return replace(EngineConfig(), **{k: _coerce(k, v) for k, v in merged.items()})
