"""
CIRCADA — Circadian & Ultradian Signal-Analysis Engine

A deterministic engine that turns raw time-stamped activity and temperature
samples into circadian phase estimates, ultradian cycle boundaries, sleep
metrics, and a composite behavioral-pattern score.

Architecture:
    config      — All thresholds, windows, and confidences (single source of truth)
    schema      — Time series, input bundle, result dataclasses
    stats       — Mean, standard deviation, percentile, moving average
    phase       — Morning awakening onset and phase delay
    ultradian   — ~90-minute rest-activity cycle detection
    backends    — Interchangeable intradaily-variability / sleep-efficiency backends
    sleep       — Sleep-window isolation and dynamic threshold
    scoring     — Composite pattern score
    providers   — Data sources (synthetic, static, health export)
    hrv         — Time-domain HRV from RR intervals
    phases      — Static circadian phase table
    pipeline    — Orchestration: provide → detect → measure → score → report

Public API:
    CircadianAnalysisEngine(provider).run()  → async analysis
    analyze_data(data)                       → sync analysis
    generate_report(analysis)                → formatted report
"""

from circada.pipeline import CircadianAnalysisEngine, analyze_data, generate_report

__version__ = "1.0.0"

__all__ = ["CircadianAnalysisEngine", "analyze_data", "generate_report"]
