"""
Data models and structures for the analyzer.

Configuration Models:
- Analyzer settings loaded from `config.toml`

Workload Models:
- Timestamped samples, workloads with three load channels, and the
  collection of workloads gathered from the input files

Result Models:
- Collection-wide timestamp reduction and peak usage
- Volatility figures, interval changes and contribution rankings
- Grand totals, deviation statistics and the complete analysis report
"""

from .config import AnalyzerConfig, AppConfig, TIER_METRICS
from .workload import CHANNELS, TimedValue, Workload, WorkloadCollection
from .results import (
    AggregatedTimePoint,
    AggregateVolatilityPoint,
    AnalysisReport,
    DeviationStats,
    GrandTotals,
    IntervalChange,
    PeakUsage,
    VolatilityResult,
    VolatilityTiers,
    WorkloadContribution,
)

__all__ = [
    # Configuration
    "AnalyzerConfig",
    "AppConfig",
    "TIER_METRICS",
    # Workloads
    "CHANNELS",
    "TimedValue",
    "Workload",
    "WorkloadCollection",
    # Results
    "AggregatedTimePoint",
    "AggregateVolatilityPoint",
    "AnalysisReport",
    "DeviationStats",
    "GrandTotals",
    "IntervalChange",
    "PeakUsage",
    "VolatilityResult",
    "VolatilityTiers",
    "WorkloadContribution",
]
