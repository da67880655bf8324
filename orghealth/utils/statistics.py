"""Descriptive statistics used by the calculators.

All helpers ignore missing values and return 0 for an empty input, so callers
never have to guard against NaN.
"""

from typing import TypeAlias
import math
from collections.abc import Iterable

import numpy as np
import pandas as pd

Numbers: TypeAlias = Iterable[float] | pd.Series | np.ndarray


def _as_array(values: Numbers) -> np.ndarray:
    if not isinstance(values, (pd.Series, np.ndarray)):
        values = list(values)
    arr = np.asarray(values, dtype=float)
    return arr[~np.isnan(arr)]


def total(values: Numbers) -> float:
    return float(_as_array(values).sum())


def mean(values: Numbers) -> float:
    arr = _as_array(values)
    return float(arr.mean()) if arr.size else 0.0


def median(values: Numbers) -> float:
    arr = _as_array(values)
    return float(np.median(arr)) if arr.size else 0.0


def std_dev(values: Numbers) -> float:
    """Population standard deviation (divides by N)."""
    arr = _as_array(values)
    return float(arr.std(ddof=0)) if arr.size else 0.0


def percentile(values: Numbers, p: float) -> float:
    """Nearest-rank percentile: ``sorted[max(0, ceil(p/100 * n) - 1)]``."""
    arr = np.sort(_as_array(values))
    if not arr.size:
        return 0.0
    index = max(0, math.ceil(p / 100 * arr.size) - 1)
    return float(arr[min(index, arr.size - 1)])


def z_score(value: float, mean_value: float, std: float) -> float:
    if std == 0:
        return 0.0
    return (value - mean_value) / std
