"""
Statistics engine for the workload_analyzer package.

This module provides channel normalization, aggregation, the volatility
estimators, peak usage detection and the report assembler that runs them
over a workload collection.
"""

from .aggregator import (
    TimestampAccumulator,
    aggregate_workloads,
    apply_relative_contributions,
    compute_deviation_stats,
    compute_grand_totals,
    compute_workload_totals,
    merge_accumulators,
    reduce_by_timestamp,
    relative_share,
)
from .normalizer import normalize_channels, normalize_workload, pad_channel, validate_synchronization
from .peak_usage import find_peak_usage, load_at_timestamp, rank_contributions, top_contributors
from .report import ReportAssembler, build_tiers, tier_score
from .volatility import (
    aggregate_volatility,
    interval_changes,
    interval_volatility,
    merged_series,
    range_volatility,
    window_averages,
    windowed_std,
    workload_range_volatility,
    workload_windowed_volatility,
)

__all__ = [
    # Normalizer
    "normalize_channels",
    "normalize_workload",
    "pad_channel",
    "validate_synchronization",
    # Aggregator
    "TimestampAccumulator",
    "aggregate_workloads",
    "apply_relative_contributions",
    "compute_deviation_stats",
    "compute_grand_totals",
    "compute_workload_totals",
    "merge_accumulators",
    "reduce_by_timestamp",
    "relative_share",
    # Volatility
    "aggregate_volatility",
    "interval_changes",
    "interval_volatility",
    "merged_series",
    "range_volatility",
    "window_averages",
    "windowed_std",
    "workload_range_volatility",
    "workload_windowed_volatility",
    # Peak usage
    "find_peak_usage",
    "load_at_timestamp",
    "rank_contributions",
    "top_contributors",
    # Report
    "ReportAssembler",
    "build_tiers",
    "tier_score",
]
