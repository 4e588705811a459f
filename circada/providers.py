"""
Data providers: where the pipeline's input streams come from.

The engine only sees the DataProvider interface. Implementations decide
time range and sampling rate; downstream algorithms are source-agnostic.

    MockDataProvider         — smooth synthetic day (sine-shaped activity)
    SharpTransitionProvider  — step-shaped synthetic day with 90-min waves
    StaticDataProvider       — returns a fixed CircadianInputData
    HealthExportProvider     — resamples parsed health-export records
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from circada.config import CircadaConfig
from circada.schema import STREAM_NAMES, CircadianInputData, TimeSeries
from circada.timeutil import local_clock_hours

logger = logging.getLogger(__name__)


class DataProvider(ABC):
    """Any data source the engine can analyze."""

    @abstractmethod
    async def get_data(self) -> CircadianInputData:
        """Return the latest window of sensor data."""
        ...


class StaticDataProvider(DataProvider):
    """Wraps an already-built CircadianInputData."""

    def __init__(self, data: CircadianInputData):
        self._data = data

    async def get_data(self) -> CircadianInputData:
        return self._data


# ---------------------------------------------------------------------------
# Synthetic providers
# ---------------------------------------------------------------------------

class _SyntheticProvider(DataProvider):
    """
    One day of evenly spaced samples ending at `now`.

    Noise is drawn from a generator seeded with `now`, so two providers
    built with the same `now` produce identical data.
    """

    def __init__(self, now: Optional[int] = None, cfg: CircadaConfig | None = None):
        self.now = int(time.time() * 1000) if now is None else int(now)
        self.cfg = cfg if cfg is not None else CircadaConfig()

    def _timestamps(self) -> list:
        s = self.cfg.synthetic
        step = s.interval_seconds * 1000
        start = self.now - s.samples * step
        return [start + i * step for i in range(s.samples)]

    def _temperature(self, hours: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """Minimum around 04:00, maximum around 16:00."""
        s = self.cfg.synthetic
        phase = (hours - 16) / 24 * 2 * np.pi
        base = s.temperature_mean + s.temperature_amplitude * np.cos(phase)
        noise = rng.uniform(-s.temperature_noise / 2, s.temperature_noise / 2, size=hours.size)
        return base + noise

    @abstractmethod
    def _activity(self, hours: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        ...

    async def get_data(self) -> CircadianInputData:
        timestamps = self._timestamps()
        hours = local_clock_hours(timestamps, self.cfg.timezone)
        rng = np.random.default_rng(self.now)

        activity = self._activity(hours, rng)
        temperature = self._temperature(hours, rng)

        return CircadianInputData(
            activity=TimeSeries(timestamps=timestamps, values=activity.tolist()),
            temperature=TimeSeries(timestamps=timestamps, values=temperature.tolist()),
        )


class MockDataProvider(_SyntheticProvider):
    """Low at night, peaking midday: clipped sine wave plus uniform noise."""

    def _activity(self, hours: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        s = self.cfg.synthetic
        base = np.maximum(0.0, np.sin((hours - 6) / 24 * 2 * np.pi))
        return base * s.activity_amplitude + rng.uniform(0, s.activity_noise, size=hours.size)


class SharpTransitionProvider(_SyntheticProvider):
    """
    Step-shaped day: quiet night, active day with ~90-minute waves.

    Night samples are uniform in [night_low, night_high]. Day samples
    (wake_hour <= hour < bed_hour) follow a triangular wave that starts at
    a trough at wake time and stays within [day_low, day_high] after noise.
    """

    def __init__(
        self,
        now: Optional[int] = None,
        wake_hour: int = 7,
        bed_hour: int = 22,
        cfg: CircadaConfig | None = None,
    ):
        super().__init__(now=now, cfg=cfg)
        self.wake_hour = wake_hour
        self.bed_hour = bed_hour

    def _activity(self, hours: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        s = self.cfg.synthetic
        night = rng.uniform(s.night_low, s.night_high, size=hours.size)
        jitter = rng.uniform(-s.day_noise, s.day_noise, size=hours.size)

        minutes_awake = (hours - self.wake_hour) * 60
        cycle_pos = np.mod(minutes_awake, s.ultradian_period_minutes) / s.ultradian_period_minutes
        triangle = 1.0 - np.abs(1.0 - 2.0 * cycle_pos)  # 0 at trough, 1 at crest

        span = s.day_high - s.day_low - 2 * s.day_noise
        day = s.day_low + s.day_noise + span * triangle + jitter

        awake = (hours >= self.wake_hour) & (hours < self.bed_hour)
        return np.where(awake, day, night)


# ---------------------------------------------------------------------------
# Health export adapter
# ---------------------------------------------------------------------------

# stream -> (resample aggregation, gap fill)
STREAM_POLICY = {
    "activity": ("sum", "zero"),
    "temperature": ("mean", "interpolate"),
    "hrv": ("mean", "interpolate"),
    "heart_rate": ("mean", "interpolate"),
    "sleep_stages": ("last", "ffill"),
    "light_exposure": ("mean", "interpolate"),
}


def _records_to_series(records: Iterable) -> pd.Series:
    """(timestamp, value) pairs -> sorted float Series on a UTC DatetimeIndex."""
    frame = pd.DataFrame(list(records), columns=["timestamp", "value"])
    if frame.empty:
        return pd.Series(dtype="float64", index=pd.DatetimeIndex([], tz="UTC"))

    stamps = frame["timestamp"]
    if pd.api.types.is_numeric_dtype(stamps):
        index = pd.to_datetime(stamps, unit="ms", utc=True)
    else:
        index = pd.to_datetime(stamps, utc=True)

    values = pd.to_numeric(frame["value"], errors="coerce")
    series = pd.Series(values.to_numpy(dtype="float64"), index=pd.DatetimeIndex(index))

    dropped = int(series.isna().sum())
    if dropped:
        logger.warning("Skipped %d export record(s) with non-numeric values", dropped)

    return series.dropna().sort_index()


def resample_stream(series: pd.Series, stream: str, freq: str = "1min") -> pd.Series:
    """Resample one stream onto a regular grid using its aggregation/fill policy."""
    how, fill = STREAM_POLICY[stream]
    resampled = getattr(series.resample(freq), how)()

    if fill == "zero":
        return resampled.fillna(0.0)
    if fill == "ffill":
        return resampled.ffill().bfill()
    return resampled.interpolate(method="linear", limit_direction="both")


class HealthExportProvider(DataProvider):
    """
    Maps already-parsed health-export records into regular TimeSeries.

    `records` maps stream names (see STREAM_NAMES) to iterables of
    (timestamp, value) pairs. Timestamps may be epoch ms, datetimes or ISO
    8601 strings; naive values are read as UTC. `start`/`end` (epoch ms)
    clip the window to [start, end).
    """

    def __init__(
        self,
        records: Mapping[str, Iterable],
        start: Optional[int] = None,
        end: Optional[int] = None,
        freq: str = "1min",
    ):
        unknown = set(records) - set(STREAM_NAMES)
        if unknown:
            raise ValueError(f"Unknown stream(s): {sorted(unknown)}")
        self.records = {name: list(pairs) for name, pairs in records.items()}
        self.start = start
        self.end = end
        self.freq = freq

    def _clip(self, series: pd.Series) -> pd.Series:
        if self.start is not None:
            series = series[series.index >= pd.to_datetime(self.start, unit="ms", utc=True)]
        if self.end is not None:
            series = series[series.index < pd.to_datetime(self.end, unit="ms", utc=True)]
        return series

    async def get_data(self) -> CircadianInputData:
        streams = {}
        for name, pairs in self.records.items():
            series = self._clip(_records_to_series(pairs))
            if series.empty:
                logger.info("Stream '%s' has no records in window; leaving it unset", name)
                continue
            streams[name] = TimeSeries.from_series(resample_stream(series, name, self.freq))
            logger.debug("Stream '%s': %d records -> %d samples", name, len(pairs), len(streams[name]))

        return CircadianInputData(**streams)
