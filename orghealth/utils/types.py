"""Shared type definitions for the engine."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeAlias

import pandas as pd


MetricValue: TypeAlias = float | None
MetricMap: TypeAlias = dict[str, MetricValue]
RecordID: TypeAlias = str
Record: TypeAlias = Mapping[str, Any]
EmployeeInput: TypeAlias = pd.DataFrame | Iterable[Record]
Instant: TypeAlias = datetime | pd.Timestamp | str | None
SpanMap: TypeAlias = dict[str, int]


class DepartmentCategory(StrEnum):
    RD = "R&D"
    GTM = "GTM"
    GA = "G&A"
    OPERATIONS = "Operations"
    OTHER = "Other"


class EmployeeLevel(StrEnum):
    IC = "IC"
    MANAGER = "MANAGER"
    DIRECTOR = "DIRECTOR"
    VP = "VP"
    C_LEVEL = "C_LEVEL"


MANAGEMENT_LEVELS: frozenset[str] = frozenset({
    EmployeeLevel.MANAGER.value,
    EmployeeLevel.DIRECTOR.value,
    EmployeeLevel.VP.value,
    EmployeeLevel.C_LEVEL.value,
})


class EmploymentType(StrEnum):
    FTE = "FTE"
    CONTRACTOR = "CONTRACTOR"
    PART_TIME = "PART_TIME"
    INTERN = "INTERN"


class MetricUnit(StrEnum):
    PERCENTAGE = "percentage"
    CURRENCY = "currency"
    RATIO = "ratio"
    YEARS = "years"
    COUNT = "count"
    FACTOR = "factor"


class Gender(StrEnum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


@dataclass(frozen=True)
class BenchmarkRange:
    """A three-point benchmark curve (p25 / p50 / p75)."""

    low: float
    median: float
    high: float

    @classmethod
    def coerce(cls, value: "BenchmarkRange | Record") -> "BenchmarkRange":
        if isinstance(value, BenchmarkRange):
            return value
        match dict(value):
            case {"low": low, "median": median, "high": high}:
                return cls(float(low), float(median), float(high))
            case {"p25": low, "median": median, "p75": high} | {"p25": low, "p50": median, "p75": high}:
                return cls(float(low), float(median), float(high))
            case other:
                raise ValueError(f"Cannot read a benchmark range from keys {sorted(other)}")

    def as_dict(self) -> dict[str, float]:
        return {"low": self.low, "median": self.median, "high": self.high}


BenchmarkMap: TypeAlias = dict[str, BenchmarkRange]


def coerce_benchmark_map(raw: Mapping[str, BenchmarkRange | Record] | None) -> BenchmarkMap:
    """Normalize a caller-supplied benchmark lookup into ``BenchmarkRange`` values."""
    if not raw:
        return {}
    return {key: BenchmarkRange.coerce(value) for key, value in raw.items()}


_METADATA_KEYS = {
    "totalRevenue": "total_revenue",
    "currentCashBalance": "current_cash_balance",
}


@dataclass(frozen=True)
class DatasetMetadata:
    total_revenue: float | None = None
    currency: str = "USD"
    current_cash_balance: float | None = None

    def __post_init__(self) -> None:
        if self.total_revenue is not None and self.total_revenue < 0:
            raise ValueError(f"total_revenue must be non-negative, got {self.total_revenue}")
        if self.current_cash_balance is not None and self.current_cash_balance < 0:
            raise ValueError(
                f"current_cash_balance must be non-negative, got {self.current_cash_balance}"
            )

    @classmethod
    def from_mapping(cls, data: Record | None) -> "DatasetMetadata":
        """Build metadata from a snake_case or camelCase mapping."""
        if not data:
            return cls()
        values = {_METADATA_KEYS.get(key, key): value for key, value in data.items()}
        revenue = values.get("total_revenue")
        cash = values.get("current_cash_balance")
        return cls(
            total_revenue=float(revenue) if revenue is not None else None,
            currency=str(values.get("currency") or "USD"),
            current_cash_balance=float(cash) if cash is not None else None,
        )
