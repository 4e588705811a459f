"""
Time-domain heart-rate variability from RR intervals (milliseconds).

Filtering is deliberately basic, suited to smartwatch-derived intervals.
"""

from typing import List, Sequence

import numpy as np

from circada.schema import TimeDomainHRV

RR_MIN_MS = 300.0
RR_MAX_MS = 2000.0
MAX_MEDIAN_DEVIATION = 0.3  # fraction of the median
NN50_MS = 50.0


def clean_rr_intervals(rr: Sequence[float]) -> List[float]:
    """
    Remove physiologically implausible values and artifacts.

    Drops intervals outside [300, 2000] ms and intervals deviating more
    than 30% from the median of the raw input.
    """
    arr = np.asarray(rr, dtype=np.float64)
    if arr.size == 0:
        return []

    median = float(np.median(arr))
    in_range = (arr >= RR_MIN_MS) & (arr <= RR_MAX_MS)
    if median == 0.0:
        return arr[in_range].tolist()

    close_to_median = np.abs(arr - median) / median <= MAX_MEDIAN_DEVIATION
    return arr[in_range & close_to_median].tolist()


def compute_time_domain_metrics(rr: Sequence[float]) -> TimeDomainHRV:
    """RMSSD, pNN50 (%) and SDNN (population). Fewer than 2 intervals -> zeros."""
    arr = np.asarray(rr, dtype=np.float64)
    if arr.size < 2:
        return TimeDomainHRV(rmssd=0.0, pnn50=0.0, sdnn=0.0)

    diffs = np.diff(arr)
    rmssd = float(np.sqrt(np.mean(diffs ** 2)))
    pnn50 = float(np.count_nonzero(np.abs(diffs) > NN50_MS) / diffs.size * 100)
    sdnn = float(np.std(arr, ddof=0))
    return TimeDomainHRV(rmssd=rmssd, pnn50=pnn50, sdnn=sdnn)
