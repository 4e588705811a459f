"""
Numeric primitives shared by every detector.

All functions are pure. Empty input is a documented edge case that returns
0 (or an empty array), never an error.
"""

from typing import Sequence

import numpy as np
import pandas as pd


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Empty input -> 0.0."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (N denominator). Empty input -> 0.0."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(np.std(arr, ddof=0))


def percentile(data: Sequence[float], p: float) -> float:
    """
    Percentile using linear interpolation between closest ranks.

    The fractional rank is p/100 * (n - 1). p <= 0 returns the minimum and
    p >= 100 the maximum. Empty input -> 0.0.
    """
    arr = np.asarray(data, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    if p <= 0:
        return float(arr.min())
    if p >= 100:
        return float(arr.max())
    return float(np.percentile(arr, p, method="linear"))


def moving_average(data: Sequence[float], window_size: int) -> np.ndarray:
    """
    Centred moving average whose window shrinks at both edges.

    The window spans window_size // 2 samples on each side, so an even
    window_size behaves like the next odd size. Near the borders the mean
    is taken over the neighbours that exist; no padding values are invented.
    window_size <= 1 returns an unchanged copy.
    """
    arr = np.asarray(data, dtype=np.float64)
    if window_size <= 1:
        return arr.copy()

    half = window_size // 2
    return (
        pd.Series(arr)
        .rolling(2 * half + 1, center=True, min_periods=1)
        .mean()
        .to_numpy()
    )
