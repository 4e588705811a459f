"""
Data model shared by every stage of the pipeline.

Timestamps are epoch milliseconds throughout. Input streams are optional
on CircadianInputData; the orchestrator validates the ones it needs once,
up front, so no algorithm null-checks its inputs.
"""

from dataclasses import dataclass, field, asdict
from typing import Generic, Optional, TypeVar

import numpy as np
import pandas as pd

from circada.errors import InvalidSeriesError, MissingStreamError

EpochMs = int

T = TypeVar("T")

STREAM_NAMES = (
    "activity",
    "temperature",
    "hrv",
    "heart_rate",
    "sleep_stages",
    "light_exposure",
)

_EPOCH = pd.Timestamp(0, tz="UTC")


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeSeries:
    """Parallel arrays of epoch-ms timestamps and sampled values."""

    timestamps: list = field(default_factory=list)
    values: list = field(default_factory=list)

    def __post_init__(self):
        timestamps = [int(t) for t in self.timestamps]
        values = [float(v) for v in self.values]

        if len(timestamps) != len(values):
            raise InvalidSeriesError(
                f"timestamps ({len(timestamps)}) and values ({len(values)}) differ in length"
            )
        if len(timestamps) > 1 and np.any(np.diff(timestamps) < 0):
            raise InvalidSeriesError("timestamps must be non-decreasing")

        object.__setattr__(self, "timestamps", timestamps)
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return len(self.values)

    def to_series(self) -> pd.Series:
        """Values as a pandas Series indexed by UTC datetimes."""
        index = pd.to_datetime(self.timestamps, unit="ms", utc=True)
        return pd.Series(self.values, index=index, dtype="float64")

    @classmethod
    def from_series(cls, series: pd.Series) -> "TimeSeries":
        """Build from a Series with a DatetimeIndex (naive indexes are taken as UTC)."""
        index = pd.DatetimeIndex(series.index)
        if index.tz is None:
            index = index.tz_localize("UTC")
        millis = (index - _EPOCH) // pd.Timedelta(milliseconds=1)
        return cls(timestamps=list(millis), values=series.to_numpy(dtype="float64").tolist())


@dataclass(frozen=True)
class CircadianInputData:
    """Bundle of optional sensor streams supplied by a DataProvider."""

    activity: Optional[TimeSeries] = None
    temperature: Optional[TimeSeries] = None
    hrv: Optional[TimeSeries] = None
    heart_rate: Optional[TimeSeries] = None
    sleep_stages: Optional[TimeSeries] = None
    light_exposure: Optional[TimeSeries] = None

    def require(self, *names: str) -> tuple:
        """Return the named streams, or raise MissingStreamError listing every absent one."""
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise MissingStreamError(missing)
        return tuple(getattr(self, name) for name in names)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DerivedMetric(Generic[T]):
    """Envelope so every computed value carries an optional trust score."""

    value: T
    confidence: Optional[float] = None  # 0-1
    source: Optional[str] = None  # producing algorithm or backend


@dataclass(frozen=True)
class AwakeningResult:
    awakening_quality: float  # 0-100
    phase_delay: float  # hours, negative when waking before target
    cortisol_proxy: float  # arbitrary units, from temperature slope
    awakening_time: EpochMs


@dataclass(frozen=True)
class UltradianCycle:
    start: EpochMs
    end: EpochMs
    peak_time: EpochMs
    amplitude: float


@dataclass(frozen=True)
class UltradianAnalysis:
    cycles: list = field(default_factory=list)
    avg_duration_minutes: float = 0.0
    cycle_count: int = 0


@dataclass(frozen=True)
class SleepEfficiencyResult:
    sleep_efficiency: float  # 0-1
    total_sleep_minutes: float
    time_in_bed_minutes: float


@dataclass(frozen=True)
class TimeDomainHRV:
    rmssd: float
    pnn50: float  # percent
    sdnn: float


@dataclass(frozen=True)
class CircadianAnalysis:
    """Aggregate output of one pipeline run."""

    intradaily_variability: Optional[DerivedMetric] = None
    sleep_efficiency: Optional[DerivedMetric] = None
    temperature_phase_delay: Optional[DerivedMetric] = None  # hours
    adhd_pattern_score: Optional[DerivedMetric] = None  # 0-1
    ultradian: Optional[DerivedMetric] = None
    awakening: Optional[DerivedMetric] = None

    def to_dict(self) -> dict:
        """Plain nested dict, safe to JSON-serialize."""
        return asdict(self)
