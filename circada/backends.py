"""
Numeric backends for intradaily variability and sleep efficiency.

Both implementations use the same formulas and are interchangeable; the
engine picks one at construction and never branches per call.

    IV = n * sum((x[i+1] - x[i])^2) / ((n - 1) * sum((x[i] - mean)^2))

Sleep efficiency counts samples at or below the threshold as asleep and
assumes 1-minute sampling, so time in bed equals the sample count.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from circada.errors import UnknownBackendError
from circada.schema import SleepEfficiencyResult

logger = logging.getLogger(__name__)

BACKEND_ENV = "CIRCADA_BACKEND"


class NumericBackend(ABC):
    """Contract for the variability / efficiency computation boundary."""

    name: str = "base"

    @abstractmethod
    async def intradaily_variability(self, values: Sequence[float]) -> float:
        """IV over the full activity array (higher = more fragmented)."""
        ...

    @abstractmethod
    async def sleep_efficiency(
        self,
        values: Sequence[float],
        threshold: float,
    ) -> SleepEfficiencyResult:
        """Fraction of in-bed samples at or below the sleep threshold."""
        ...


# ---------------------------------------------------------------------------
# Vectorized implementation
# ---------------------------------------------------------------------------

def _iv_numpy(values: Sequence[float]) -> float:
    x = np.asarray(values, dtype=np.float64)
    n = x.size
    if n < 2:
        return 0.0
    denom = float(np.sum((x - x.mean()) ** 2))
    if denom == 0.0:
        return 0.0
    num = float(np.sum(np.diff(x) ** 2))
    return (n * num) / ((n - 1) * denom)


def _sleep_efficiency_numpy(values: Sequence[float], threshold: float) -> SleepEfficiencyResult:
    x = np.asarray(values, dtype=np.float64)
    n = x.size
    if n == 0:
        return SleepEfficiencyResult(0.0, 0.0, 0.0)
    asleep = int(np.count_nonzero(x <= threshold))
    return SleepEfficiencyResult(
        sleep_efficiency=asleep / n,
        total_sleep_minutes=float(asleep),
        time_in_bed_minutes=float(n),
    )


class NumpyBackend(NumericBackend):
    """Vectorized numpy backend, executed off the event loop."""

    name = "numpy"

    async def intradaily_variability(self, values: Sequence[float]) -> float:
        return await asyncio.to_thread(_iv_numpy, values)

    async def sleep_efficiency(self, values: Sequence[float], threshold: float) -> SleepEfficiencyResult:
        return await asyncio.to_thread(_sleep_efficiency_numpy, values, threshold)


# ---------------------------------------------------------------------------
# Plain-Python implementation
# ---------------------------------------------------------------------------

class PythonBackend(NumericBackend):
    """Loop-based backend with no array dependency; same results as NumpyBackend."""

    name = "python"

    async def intradaily_variability(self, values: Sequence[float]) -> float:
        n = len(values)
        if n < 2:
            return 0.0
        avg = sum(values) / n
        num = 0.0
        denom = 0.0
        for i in range(n):
            deviation = values[i] - avg
            denom += deviation * deviation
            if i < n - 1:
                diff = values[i + 1] - values[i]
                num += diff * diff
        if denom == 0.0:
            return 0.0
        return (n * num) / ((n - 1) * denom)

    async def sleep_efficiency(self, values: Sequence[float], threshold: float) -> SleepEfficiencyResult:
        n = len(values)
        if n == 0:
            return SleepEfficiencyResult(0.0, 0.0, 0.0)
        asleep = sum(1 for v in values if v <= threshold)
        return SleepEfficiencyResult(
            sleep_efficiency=asleep / n,
            total_sleep_minutes=float(asleep),
            time_in_bed_minutes=float(n),
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

BACKENDS = {
    NumpyBackend.name: NumpyBackend,
    PythonBackend.name: PythonBackend,
}


def get_backend(name: Optional[str] = None, default: str = "numpy") -> NumericBackend:
    """
    Resolve a backend instance.

    Priority: explicit name, then the CIRCADA_BACKEND env var, then `default`.
    Raises UnknownBackendError for unregistered names.
    """
    if name is None:
        name = os.environ.get(BACKEND_ENV, "").strip().lower() or default

    if name not in BACKENDS:
        raise UnknownBackendError(
            f"Unknown numeric backend: {name!r} (available: {', '.join(sorted(BACKENDS))})"
        )

    logger.debug("Using %s numeric backend", name)
    return BACKENDS[name]()
