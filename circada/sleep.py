"""
Sleep-window isolation and dynamic sleep threshold.

The sleep window is an assumed fixed span (22:00-07:00 local by default),
not a detected one. The threshold is set just above the highest activity
seen inside that window so every in-window sample counts as asleep.
"""

from typing import List

import numpy as np

from circada.config import CircadaConfig
from circada.schema import TimeSeries
from circada.timeutil import local_hours


def sleep_window_mask(timestamps: List[int], cfg: CircadaConfig) -> np.ndarray:
    """Boolean mask of samples whose local hour is >= start_hour or < end_hour."""
    sw = cfg.sleep_window
    hours = local_hours(timestamps, cfg.timezone)
    return (hours >= sw.start_hour) | (hours < sw.end_hour)


def isolate_sleep_activity(activity: TimeSeries, cfg: CircadaConfig) -> List[float]:
    """Activity values that fall inside the assumed sleep window, in time order."""
    mask = sleep_window_mask(activity.timestamps, cfg)
    return np.asarray(activity.values, dtype=np.float64)[mask].tolist()


def derive_sleep_threshold(
    activity: TimeSeries,
    sleep_activity: List[float],
    cfg: CircadaConfig,
) -> float:
    """
    max(sleep-window activity) + margin, or the nearest-rank percentile of
    the whole day when the window is empty (no interpolation).
    """
    sw = cfg.sleep_window
    if sleep_activity:
        return float(max(sleep_activity)) + sw.threshold_margin
    values = np.sort(np.asarray(activity.values, dtype=np.float64))
    if values.size == 0:
        return 0.0
    return float(values[int(values.size * sw.fallback_percentile / 100)])
