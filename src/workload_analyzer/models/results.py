"""
Analysis result data models.

This module defines the structures produced by the statistics engine and
consumed by the exporters and the plotter:

- Collection-wide timestamp reduction points and the peak usage instant
- Per-workload volatility figures and contribution rankings
- Grand totals and the asymmetric deviation statistics of the collection
- The complete analysis report handed to the exporters
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .workload import Workload


@dataclass
class AggregatedTimePoint:
    """Channel totals summed across all workloads at one timestamp."""

    timestamp: datetime
    total_a: float = 0.0
    total_b: float = 0.0
    total_c: float = 0.0

    @property
    def total(self) -> float:
        return self.total_a + self.total_b + self.total_c


@dataclass(frozen=True)
class PeakUsage:
    """The instant with the highest combined load across the collection."""

    timestamp: datetime
    total_usage: float


@dataclass(frozen=True)
class VolatilityResult:
    """One volatility figure per load channel of a workload."""

    channel_a: float
    channel_b: float
    channel_c: float

    @property
    def average(self) -> float:
        return (self.channel_a + self.channel_b + self.channel_c) / 3

    @property
    def maximum(self) -> float:
        return max(self.channel_a, self.channel_b, self.channel_c)


@dataclass(frozen=True)
class WorkloadContribution:
    """A workload's combined load at the peak usage instant."""

    name: str
    load_at_peak: float


@dataclass(frozen=True)
class IntervalChange:
    """Difference between a window's summed load and the previous window's."""

    timestamp: Optional[datetime]
    name: str
    change: float


@dataclass(frozen=True)
class AggregateVolatilityPoint:
    """Per-channel dispersion of the aggregated series over one index window."""

    timestamp: datetime
    channel_a: float
    channel_b: float
    channel_c: float


@dataclass(frozen=True)
class GrandTotals:
    """Collection-wide sums used as denominators for relative figures."""

    total_a: float
    total_b: float
    total_c: float
    total_cost: float
    value_generated: float
    workload_count: int


@dataclass(frozen=True)
class DeviationStats:
    """
    Asymmetric dispersion of workload total loads around the collection average.

    Workloads above the average contribute to the upward side, all others to
    the downward side. Both standard deviations divide by the full workload
    count.
    """

    average_total_load: float
    upward_sum: float
    downward_sum: float
    upward_std: float
    downward_std: float
    workload_count: int


@dataclass
class VolatilityTiers:
    """Workload names split into thirds by descending volatility score."""

    metric: str
    high: List[str] = field(default_factory=list)
    medium: List[str] = field(default_factory=list)
    low: List[str] = field(default_factory=list)


@dataclass
class AnalysisReport:
    """
    Everything produced by one analysis run.

    ``has_data`` is False when the input collection was empty; all other
    fields are then left at their empty defaults.
    """

    workloads: List[Workload] = field(default_factory=list)
    grand_totals: Optional[GrandTotals] = None
    deviation: Optional[DeviationStats] = None
    aggregated: List[AggregatedTimePoint] = field(default_factory=list)
    aggregate_volatility: List[AggregateVolatilityPoint] = field(default_factory=list)
    interval_changes: List[IntervalChange] = field(default_factory=list)
    peak_usage: Optional[PeakUsage] = None
    contributions: List[WorkloadContribution] = field(default_factory=list)
    top_contributors: List[WorkloadContribution] = field(default_factory=list)
    tiers: Optional[VolatilityTiers] = None
    # workload name -> list of estimator failure messages
    failures: Dict[str, List[str]] = field(default_factory=dict)
    has_data: bool = True

    @classmethod
    def empty(cls) -> "AnalysisReport":
        return cls(has_data=False)
