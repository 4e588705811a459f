"""
Centralized configuration for all thresholds, windows, and confidences.

Every tunable constant lives here. Algorithms receive a CircadaConfig
explicitly; nothing reads module-level state at call time.
"""

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Phase detection (awakening onset)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhaseParams:
    """Parameters for morning awakening detection and quality scoring."""

    # Activity must stay at or above this level for the whole sustained window.
    # Synthetic daytime sits at 80-100 and nighttime at 1-5.
    activity_threshold: float = 60.0
    sustained_samples: int = 15

    # Candidate onsets are only considered for local hours in [start, end]
    search_start_hour: int = 4
    search_end_hour: int = 10

    # Temperature rise is measured over this many samples after onset
    temperature_window: int = 120

    # Default target wake time (local hour on the day of awakening)
    target_wake_hour: int = 7

    # Quality = base + min(cap, slope * scale) - max(0, delay) * penalty
    quality_base: float = 80.0
    quality_slope_scale: float = 5000.0
    quality_slope_cap: float = 100.0
    quality_delay_penalty: float = 20.0
    cortisol_scale: float = 100.0

    def __post_init__(self):
        if self.sustained_samples < 1:
            raise ValueError(f"sustained_samples must be >= 1, got {self.sustained_samples}")
        if not 0 <= self.search_start_hour <= self.search_end_hour <= 23:
            raise ValueError(
                "Search window must satisfy 0 <= start <= end <= 23, got "
                f"[{self.search_start_hour}, {self.search_end_hour}]"
            )


# ---------------------------------------------------------------------------
# Ultradian cycles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UltradianParams:
    """Peak filtering and pairing constraints for ~90-minute cycles."""

    min_samples: int = 180
    smoothing_window: int = 5
    amplitude_threshold: float = 30.0

    # Peaks are kept only for local hours in [waking_start, waking_end)
    waking_start_hour: int = 7
    waking_end_hour: int = 22

    # Peak-to-peak gap, in samples, that counts as one cycle (inclusive)
    min_peak_distance: int = 60
    max_peak_distance: int = 120

    def __post_init__(self):
        if self.min_peak_distance > self.max_peak_distance:
            raise ValueError(
                f"min_peak_distance ({self.min_peak_distance}) exceeds "
                f"max_peak_distance ({self.max_peak_distance})"
            )


# ---------------------------------------------------------------------------
# Sleep window
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SleepWindowParams:
    """Assumed sleep window and threshold derivation for sleep efficiency."""

    # Sleep window wraps midnight: hour >= start OR hour < end
    start_hour: int = 22
    end_hour: int = 7

    # Threshold = max(sleep-window activity) + margin
    threshold_margin: float = 0.1

    # Nearest-rank percentile of the whole day, used when the sleep window
    # holds no samples at all
    fallback_percentile: float = 15.0

    def __post_init__(self):
        if not 0 <= self.fallback_percentile < 100:
            raise ValueError(
                f"fallback_percentile must be in [0, 100), got {self.fallback_percentile}"
            )


# ---------------------------------------------------------------------------
# Composite behavioral-pattern score
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatternThresholds:
    """Each check contributes 1/3 to the composite pattern score."""

    morning_phase_delay: float = 1.0   # hours; score when delay is above
    intradaily_variability: float = 0.8  # score when IV is above
    sleep_efficiency: float = 0.80     # fraction; score when efficiency is below


# ---------------------------------------------------------------------------
# Envelope confidences
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricConfidence:
    """Fixed confidences attached to each DerivedMetric."""

    direct: float = 1.0
    ultradian: float = 0.8
    pattern_score: float = 0.5

    def __post_init__(self):
        for name in ("direct", "ultradian", "pattern_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Confidence '{name}' must be within [0, 1], got {value}")


# ---------------------------------------------------------------------------
# Synthetic data generation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SyntheticParams:
    """Shape of the synthetic one-day series produced by the mock providers."""

    samples: int = 24 * 60
    interval_seconds: int = 60

    # Smooth provider
    activity_amplitude: float = 100.0
    activity_noise: float = 10.0
    temperature_mean: float = 36.5
    temperature_amplitude: float = 0.5
    temperature_noise: float = 0.05

    # Sharp-transition provider
    night_low: float = 1.0
    night_high: float = 5.0
    day_low: float = 80.0
    day_high: float = 100.0
    ultradian_period_minutes: int = 90
    day_noise: float = 0.2


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CircadaConfig:
    """Complete engine configuration. Pass to the engine to override defaults."""

    phase: PhaseParams = field(default_factory=PhaseParams)
    ultradian: UltradianParams = field(default_factory=UltradianParams)
    sleep_window: SleepWindowParams = field(default_factory=SleepWindowParams)
    pattern: PatternThresholds = field(default_factory=PatternThresholds)
    confidence: MetricConfidence = field(default_factory=MetricConfidence)
    synthetic: SyntheticParams = field(default_factory=SyntheticParams)

    # IANA zone used for hour-of-day decisions; None means system local time
    timezone: str | None = None

    # Numeric backend used when neither the caller nor CIRCADA_BACKEND picks one
    backend: str = "numpy"
