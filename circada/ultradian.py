"""
Ultradian (~90 minute) rest-activity cycle detection.

Steps:
    1. Smooth the activity series with a 5-sample centred moving average.
    2. Find local maxima. A flat run of equal values counts as one peak at
       its midpoint, provided it is entered from below and left downward.
    3. Keep peaks with enough amplitude that fall inside waking hours.
    4. Pair consecutive kept peaks into a cycle only when their gap lies in
       [min_peak_distance, max_peak_distance] samples. Other gaps are
       skipped, never split into synthetic cycles.
"""

import logging
from typing import List

import numpy as np
from scipy.signal import find_peaks

from circada.config import CircadaConfig, UltradianParams
from circada.schema import TimeSeries, UltradianAnalysis, UltradianCycle
from circada.stats import moving_average
from circada.timeutil import MS_PER_MINUTE, local_hours

logger = logging.getLogger(__name__)


def find_candidate_peaks(smooth: np.ndarray) -> np.ndarray:
    """Plateau-aware local maxima (plateau midpoints, rounded down)."""
    peaks, _ = find_peaks(smooth)
    return peaks


def filter_peaks(
    peaks: np.ndarray,
    smooth: np.ndarray,
    hours: np.ndarray,
    params: UltradianParams,
) -> np.ndarray:
    """Drop low-amplitude peaks and peaks outside [waking_start, waking_end)."""
    if peaks.size == 0:
        return peaks
    strong = smooth[peaks] >= params.amplitude_threshold
    peak_hours = hours[peaks]
    awake = (peak_hours >= params.waking_start_hour) & (peak_hours < params.waking_end_hour)
    return peaks[strong & awake]


def pair_cycles(
    peaks: np.ndarray,
    smooth: np.ndarray,
    timestamps: List[int],
    params: UltradianParams,
) -> List[UltradianCycle]:
    """Turn consecutive peaks with a plausible gap into cycles."""
    cycles: List[UltradianCycle] = []
    if peaks.size < 2:
        return cycles

    last = int(peaks[0])
    for current in peaks[1:]:
        current = int(current)
        gap = current - last
        if params.min_peak_distance <= gap <= params.max_peak_distance:
            cycles.append(
                UltradianCycle(
                    start=timestamps[last],
                    end=timestamps[current],
                    peak_time=timestamps[last],
                    amplitude=float(smooth[last]),
                )
            )
        # The current peak always anchors the next candidate cycle
        last = current

    return cycles


def detect_ultradian_cycles(
    activity: TimeSeries,
    cfg: CircadaConfig | None = None,
) -> UltradianAnalysis:
    """Detect ultradian cycles over an activity series."""
    if cfg is None:
        cfg = CircadaConfig()
    u = cfg.ultradian

    if len(activity.values) < u.min_samples:
        logger.debug(
            "Ultradian detection skipped: %d samples < %d",
            len(activity.values), u.min_samples,
        )
        return UltradianAnalysis(cycles=[], avg_duration_minutes=0.0, cycle_count=0)

    smooth = moving_average(activity.values, u.smoothing_window)
    hours = local_hours(activity.timestamps, cfg.timezone)

    candidates = find_candidate_peaks(smooth)
    kept = filter_peaks(candidates, smooth, hours, u)
    cycles = pair_cycles(kept, smooth, activity.timestamps, u)

    durations = [(c.end - c.start) / MS_PER_MINUTE for c in cycles]
    avg_duration = float(np.mean(durations)) if durations else 0.0

    logger.debug(
        "Ultradian: %d candidate peaks, %d kept, %d cycles (avg %.1f min)",
        candidates.size, kept.size, len(cycles), avg_duration,
    )

    return UltradianAnalysis(
        cycles=cycles,
        avg_duration_minutes=avg_duration,
        cycle_count=len(cycles),
    )
