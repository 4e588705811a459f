"""
Awakening detection: morning activity onset, temperature rise, phase delay.

The onset is the first sustained run of high activity inside a plausible
morning search window. Phase delay is measured against a target wake time
(07:00 local on the day of the onset unless one is supplied).
"""

import logging
from typing import Optional, Sequence

import numpy as np

from circada.config import CircadaConfig, PhaseParams
from circada.errors import EmptyInputError
from circada.schema import AwakeningResult, TimeSeries
from circada.timeutil import MS_PER_HOUR, at_local_hour, local_hours

logger = logging.getLogger(__name__)


def find_sustained_onset(
    values: Sequence[float],
    hours: Sequence[int],
    params: PhaseParams,
) -> Optional[int]:
    """
    Index of the first sample that opens a sustained high-activity run.

    Candidate i must have a local hour within the search window, and every
    value in values[i : i + sustained_samples] must reach the threshold.
    Candidates run over range(n - sustained_samples). Returns None when no
    candidate qualifies.
    """
    arr = np.asarray(values, dtype=np.float64)
    hrs = np.asarray(hours, dtype=np.int64)
    n = arr.size
    s = params.sustained_samples
    if n <= s:
        return None

    above = (arr >= params.activity_threshold).astype(np.int64)
    # run_len[i] = number of qualifying samples in arr[i : i + s]
    run_len = np.convolve(above, np.ones(s, dtype=np.int64), mode="valid")[: n - s]

    in_window = (hrs[: n - s] >= params.search_start_hour) & (hrs[: n - s] <= params.search_end_hour)
    hits = np.flatnonzero(in_window & (run_len == s))
    return int(hits[0]) if hits.size else None


def temperature_rise_slope(values: Sequence[float], idx: int, window: int) -> float:
    """
    Per-sample temperature change from idx to idx + window (bounded by the end).

    Falls back to the first sample when the series is shorter than idx.
    Returns 0.0 when there is no later sample to compare against.
    """
    n = len(values)
    if n == 0:
        return 0.0

    start = values[idx] if idx < n else values[0]
    end_idx = min(idx + window, n - 1)
    gap = end_idx - idx
    if gap <= 0:
        return 0.0
    return float((values[end_idx] - start) / gap)


def awakening_quality(slope: float, phase_delay: float, params: PhaseParams) -> float:
    """
    Quality in [0, 100].

    Baseline plus a capped reward for temperature rise, minus a penalty per
    hour of lateness. Waking early earns nothing beyond the baseline.
    """
    temp_score = min(params.quality_slope_cap, slope * params.quality_slope_scale)
    delay_penalty = max(0.0, phase_delay) * params.quality_delay_penalty
    raw = params.quality_base + temp_score - delay_penalty
    return float(np.clip(raw, 0.0, 100.0))


def detect_awakening_pattern(
    activity: TimeSeries,
    temperature: TimeSeries,
    target_wake_time: Optional[int] = None,
    cfg: CircadaConfig | None = None,
) -> AwakeningResult:
    """Detect the morning onset and score it against the target wake time."""
    if cfg is None:
        cfg = CircadaConfig()
    p = cfg.phase

    n = len(activity.values)
    if n == 0:
        raise EmptyInputError("Activity series empty - cannot detect awakening")

    hours = local_hours(activity.timestamps, cfg.timezone)
    idx = find_sustained_onset(activity.values, hours, p)

    if idx is None:
        idx = n // 4
        logger.warning(
            "No sustained activity onset between %02d:00 and %02d:59; "
            "falling back to sample %d of %d",
            p.search_start_hour, p.search_end_hour, idx, n,
        )

    awakening_time = activity.timestamps[idx]

    slope = temperature_rise_slope(temperature.values, idx, p.temperature_window)
    cortisol_proxy = max(0.0, slope) * p.cortisol_scale

    if target_wake_time is None:
        target_wake_time = at_local_hour(awakening_time, p.target_wake_hour, cfg.timezone)
    phase_delay = (awakening_time - target_wake_time) / MS_PER_HOUR

    quality = awakening_quality(slope, phase_delay, p)

    logger.debug(
        "Awakening at index %d: slope=%.5f delay=%.2fh quality=%.1f",
        idx, slope, phase_delay, quality,
    )

    return AwakeningResult(
        awakening_quality=quality,
        phase_delay=phase_delay,
        cortisol_proxy=cortisol_proxy,
        awakening_time=awakening_time,
    )
