"""
Pipeline orchestration: provide → validate → detect → measure → score → report.

The engine pulls one snapshot from its provider, validates it once, and
hands plain sequences to the detectors and the numeric backend. Past the
validation gate nothing raises; degenerate data degrades to zero/empty
results.

Entry points:
    CircadianAnalysisEngine(provider).run()   async, for services and UIs
    analyze_data(data)                        sync, for scripts and tests
    generate_report(analysis)                 formatted text report
"""

import asyncio
import logging
from typing import Optional

from circada.backends import NumericBackend, get_backend
from circada.config import CircadaConfig
from circada.phase import detect_awakening_pattern
from circada.providers import DataProvider, StaticDataProvider
from circada.schema import CircadianAnalysis, CircadianInputData, DerivedMetric
from circada.scoring import compute_pattern_score
from circada.sleep import derive_sleep_threshold, isolate_sleep_activity
from circada.ultradian import detect_ultradian_cycles

logger = logging.getLogger(__name__)

REQUIRED_STREAMS = ("activity", "temperature")


class CircadianAnalysisEngine:
    """
    Stateless orchestrator over a DataProvider.

    The numeric backend is resolved once here and reused for every run.
    Callers decide how and where to persist results.
    """

    def __init__(
        self,
        provider: DataProvider,
        cfg: CircadaConfig | None = None,
        backend: NumericBackend | str | None = None,
    ):
        self.provider = provider
        self.cfg = cfg if cfg is not None else CircadaConfig()
        if isinstance(backend, NumericBackend):
            self.backend = backend
        else:
            self.backend = get_backend(backend, default=self.cfg.backend)

    async def run(self) -> CircadianAnalysis:
        """Run end-to-end analysis over the provider's latest data."""
        cfg = self.cfg
        conf = cfg.confidence

        data = await self.provider.get_data()

        # Stage 0: the single validation gate
        activity, temperature = data.require(*REQUIRED_STREAMS)
        logger.info("Analyzing %d activity samples", len(activity))

        # Stage 1: Morning awakening
        awakening = detect_awakening_pattern(activity, temperature, cfg=cfg)

        # Stage 2: Sleep efficiency & intradaily variability
        sleep_activity = isolate_sleep_activity(activity, cfg)
        sleep_threshold = derive_sleep_threshold(activity, sleep_activity, cfg)

        iv = await self.backend.intradaily_variability(activity.values)
        sleep_eff = await self.backend.sleep_efficiency(sleep_activity, sleep_threshold)

        logger.debug(
            "Sleep window: %d samples, threshold=%.2f, efficiency=%.3f, IV=%.3f",
            len(sleep_activity), sleep_threshold, sleep_eff.sleep_efficiency, iv,
        )

        # Stage 3: Ultradian cycles
        ultradian = detect_ultradian_cycles(activity, cfg)

        # Stage 4: Composite pattern score
        pattern_score = compute_pattern_score(
            phase_delay=awakening.phase_delay,
            intradaily_variability=iv,
            sleep_efficiency=sleep_eff.sleep_efficiency,
            cfg=cfg,
        )

        backend_name = self.backend.name
        analysis = CircadianAnalysis(
            intradaily_variability=DerivedMetric(iv, conf.direct, backend_name),
            sleep_efficiency=DerivedMetric(sleep_eff.sleep_efficiency, conf.direct, backend_name),
            temperature_phase_delay=DerivedMetric(awakening.phase_delay, conf.direct, "awakening"),
            adhd_pattern_score=DerivedMetric(pattern_score, conf.pattern_score, "pattern-heuristic"),
            ultradian=DerivedMetric(ultradian, conf.ultradian, "ultradian"),
            awakening=DerivedMetric(awakening, conf.direct, "awakening"),
        )

        logger.info(
            "Analysis complete: %d ultradian cycles, pattern score %.2f",
            ultradian.cycle_count, pattern_score,
        )
        return analysis


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def analyze_data(
    data: CircadianInputData,
    cfg: CircadaConfig | None = None,
    backend: NumericBackend | str | None = None,
) -> CircadianAnalysis:
    """
    Synchronous entry point over an in-memory snapshot.

    Must not be called from inside a running event loop; use the engine
    directly there.
    """
    engine = CircadianAnalysisEngine(StaticDataProvider(data), cfg=cfg, backend=backend)
    return asyncio.run(engine.run())


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _fmt(metric: Optional[DerivedMetric], spec: str) -> str:
    if metric is None:
        return "n/a"
    return format(metric.value, spec)


def generate_report(analysis: CircadianAnalysis) -> str:
    """Format the analysis result as a human-readable text report."""
    lines = [
        "CIRCADA RHYTHM REPORT",
        "=" * 58,
        "",
        f"  Phase Delay         : {_fmt(analysis.temperature_phase_delay, '+.2f')} h",
        f"  Sleep Efficiency    : {_fmt(analysis.sleep_efficiency, '.1%')}",
        f"  Intradaily Var.     : {_fmt(analysis.intradaily_variability, '.3f')}",
        f"  Pattern Score       : {_fmt(analysis.adhd_pattern_score, '.2f')}"
        f" (confidence {analysis.adhd_pattern_score.confidence if analysis.adhd_pattern_score else 'n/a'})",
    ]

    if analysis.awakening is not None:
        a = analysis.awakening.value
        lines.append(f"  Awakening Quality   : {a.awakening_quality:.0f} / 100")
        lines.append(f"  Cortisol Proxy      : {a.cortisol_proxy:.3f}")

    if analysis.ultradian is not None:
        u = analysis.ultradian.value
        lines.append("")
        lines.append(
            f"  Ultradian Cycles    : {u.cycle_count} (avg {u.avg_duration_minutes:.1f} min)"
        )

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
