"""
Static circadian phase table and phase-aware recommendations.

Phases are fixed local-hour spans covering the whole day. Lookups take a
datetime already expressed in the user's wall-clock time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Tuple


@dataclass(frozen=True)
class CircadianPhase:
    name: str
    start: int  # local hour, inclusive
    end: int  # local hour, exclusive
    recommendation: str


PHASES: Tuple[CircadianPhase, ...] = (
    CircadianPhase("Deep Sleep", 0, 5, "Protect sleep: dark, cool, no screens."),
    CircadianPhase("Light Sleep", 5, 6, "Let the body surface naturally; avoid alarms mid-cycle."),
    CircadianPhase("Wake Up", 6, 8, "Get bright light early and hydrate."),
    CircadianPhase("Morning Alert", 8, 12, "Schedule deep, demanding work."),
    CircadianPhase("Afternoon Dip", 12, 16, "Take a short walk or rest; keep tasks light."),
    CircadianPhase("Evening Wind-Down", 16, 22, "Exercise early, then dim lights and slow down."),
    CircadianPhase("Sleep Onset", 22, 24, "Go to bed when sleepy; keep the room dark."),
)


def get_circadian_info(dt: datetime) -> Dict[str, object]:
    """
    Current fractional hour, day progress (%) and the phase containing it.

    Falls back to the last phase if no span matches.
    """
    current_hour = dt.hour + dt.minute / 60
    day_progress = current_hour / 24 * 100

    current = next(
        (p for p in PHASES if p.start <= current_hour < p.end),
        PHASES[-1],
    )

    return {
        "current_hour": current_hour,
        "day_progress": day_progress,
        "current_phase": current,
    }


def time_until_next_phase(dt: datetime) -> Dict[str, object]:
    """Whole seconds until the next phase begins (rolling over midnight)."""
    current = get_circadian_info(dt)["current_phase"]

    upcoming = next((p for p in PHASES if p.start > current.start), PHASES[0])

    boundary = dt.replace(hour=upcoming.start, minute=0, second=0, microsecond=0)
    if upcoming.start <= current.start:
        boundary += timedelta(days=1)

    seconds = max(0, int((boundary - dt).total_seconds()))
    return {"seconds": seconds, "next_phase": upcoming}


def format_duration(seconds: int) -> str:
    """'1h 5m 3s' style; hours and minutes are omitted while zero and leading."""
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    parts = []
    if h > 0:
        parts.append(f"{h}h")
    if m > 0 or h > 0:
        parts.append(f"{m}m")
    parts.append(f"{s}s")
    return " ".join(parts)
