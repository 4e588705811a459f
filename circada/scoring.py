"""
Composite behavioral-pattern score.

Three independent threshold checks, each contributing 1/3:
    - morning phase delay above threshold (hours late)
    - intradaily variability above threshold (fragmented rhythm)
    - sleep efficiency below threshold (fraction of in-bed time asleep)

The score is a screening heuristic, not a diagnosis; the engine attaches
a reduced confidence to it.
"""

from circada.config import CircadaConfig

PATTERN_CHECKS = 3


def compute_pattern_score(
    phase_delay: float,
    intradaily_variability: float,
    sleep_efficiency: float,
    cfg: CircadaConfig,
) -> float:
    """Fraction of pattern checks that fire, in [0, 1]."""
    t = cfg.pattern
    hits = (
        int(phase_delay > t.morning_phase_delay)
        + int(intradaily_variability > t.intradaily_variability)
        + int(sleep_efficiency < t.sleep_efficiency)
    )
    return hits / PATTERN_CHECKS
