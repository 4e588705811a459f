"""
Epoch-millisecond to local wall-clock helpers.

Every hour-of-day decision in the pipeline goes through here, so the whole
run is parameterized by a single timezone (CircadaConfig.timezone). A zone
of None means the system's local time.
"""

from datetime import datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000


def local_datetime(ts: int, tz: Optional[str] = None) -> datetime:
    """Wall-clock datetime for an epoch-ms timestamp (naive when tz is None)."""
    zone = ZoneInfo(tz) if tz else None
    return datetime.fromtimestamp(ts / 1000, tz=zone)


def local_hours(timestamps: Sequence[int], tz: Optional[str] = None) -> np.ndarray:
    """Integer local hour (0-23) for each timestamp."""
    if len(timestamps) == 0:
        return np.array([], dtype=np.int64)

    if tz:
        index = pd.to_datetime(np.asarray(timestamps, dtype=np.int64), unit="ms", utc=True)
        return index.tz_convert(tz).hour.to_numpy(dtype=np.int64)

    return np.array(
        [datetime.fromtimestamp(t / 1000).hour for t in timestamps],
        dtype=np.int64,
    )


def local_clock_hours(timestamps: Sequence[int], tz: Optional[str] = None) -> np.ndarray:
    """Fractional local hour (hour + minute / 60) for each timestamp."""
    if len(timestamps) == 0:
        return np.array([], dtype=np.float64)

    if tz:
        index = pd.to_datetime(np.asarray(timestamps, dtype=np.int64), unit="ms", utc=True)
        local = index.tz_convert(tz)
        return local.hour.to_numpy(dtype=np.float64) + local.minute.to_numpy(dtype=np.float64) / 60

    clocks = [datetime.fromtimestamp(t / 1000) for t in timestamps]
    return np.array([c.hour + c.minute / 60 for c in clocks], dtype=np.float64)


def at_local_hour(ts: int, hour: int, tz: Optional[str] = None) -> int:
    """Epoch ms of `hour`:00 local time on the same local date as `ts`."""
    dt = local_datetime(ts, tz).replace(hour=hour, minute=0, second=0, microsecond=0)
    return int(round(dt.timestamp() * 1000))
