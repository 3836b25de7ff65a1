"""
Workload data models.

This module defines the input-side structures of an analysis run: the atomic
timestamped sample, the workload with its three load channels, and the
collection of workloads gathered from all input files.

A Workload starts out holding only what was parsed from disk. The statistics
engine fills in the derived fields (totals, relative shares, volatility
figures) during a run; volatility fields stay ``None`` until an estimator
has produced a defined value for them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

# Channel identifiers in the order they are stored on a Workload.
CHANNELS: Tuple[str, str, str] = ("a", "b", "c")


@dataclass(frozen=True)
class TimedValue:
    """
    A single sample of a load channel.

    A ``timestamp`` of ``None`` marks a padded sample that was appended during
    normalization and therefore has no meaningful instant.
    """

    timestamp: Optional[datetime]
    value: float


@dataclass
class Workload:
    """
    A named unit of resource consumption tracked over three load channels.
    """

    name: str
    load_a: List[TimedValue] = field(default_factory=list)
    load_b: List[TimedValue] = field(default_factory=list)
    load_c: List[TimedValue] = field(default_factory=list)
    value_generated: float = 0.0

    # --- Derived by the aggregator ---
    total_a: float = 0.0
    total_b: float = 0.0
    total_c: float = 0.0
    total_cost: float = 0.0
    relative_load_a: float = 0.0
    relative_load_b: float = 0.0
    relative_load_c: float = 0.0
    relative_cost: float = 0.0
    relative_value_generated: float = 0.0

    # --- Derived by the volatility analyzer (None = undefined) ---
    windowed_volatility_a: Optional[float] = None
    windowed_volatility_b: Optional[float] = None
    windowed_volatility_c: Optional[float] = None
    range_volatility_a: Optional[float] = None
    range_volatility_b: Optional[float] = None
    range_volatility_c: Optional[float] = None
    interval_volatility: Optional[float] = None

    def channel(self, channel: str) -> List[TimedValue]:
        """Return the samples of channel ``'a'``, ``'b'`` or ``'c'``."""
        if channel not in CHANNELS:
            raise KeyError(f"Unknown channel: {channel}")
        return getattr(self, f"load_{channel}")

    def channels(self) -> Tuple[List[TimedValue], List[TimedValue], List[TimedValue]]:
        return self.load_a, self.load_b, self.load_c

    def channel_lengths(self) -> Tuple[int, int, int]:
        return len(self.load_a), len(self.load_b), len(self.load_c)

    @property
    def total_load(self) -> float:
        return self.total_a + self.total_b + self.total_c


@dataclass
class WorkloadCollection:
    """
    Ordered collection of workloads gathered from one or more sources.

    Workloads sharing a name are kept side by side; merging records from
    several files simply concatenates them.
    """

    workloads: List[Workload] = field(default_factory=list)

    def extend(self, workloads: List[Workload]) -> None:
        self.workloads.extend(workloads)

    def names(self) -> List[str]:
        return [w.name for w in self.workloads]

    def by_name(self) -> Dict[str, List[Workload]]:
        """Group workloads by name, preserving collection order within a group."""
        grouped: Dict[str, List[Workload]] = {}
        for workload in self.workloads:
            grouped.setdefault(workload.name, []).append(workload)
        return grouped

    def is_empty(self) -> bool:
        return not self.workloads

    def __len__(self) -> int:
        return len(self.workloads)

    def __iter__(self) -> Iterator[Workload]:
        return iter(self.workloads)

    def __getitem__(self, index: int) -> Workload:
        return self.workloads[index]
