"""
Peak usage detection and contribution ranking.

The peak usage instant is the timestamp at which the combined load of all
workloads across all three channels is highest. Each workload's share of
that peak is then looked up and ranked.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from ..models.results import AggregatedTimePoint, PeakUsage, WorkloadContribution
from ..models.workload import TimedValue, Workload

logger = logging.getLogger(__name__)

DEFAULT_TOP_DIVISOR = 10


def find_peak_usage(points: Sequence[AggregatedTimePoint]) -> Optional[PeakUsage]:
    """
    Find the instant with the highest combined load.

    Points are scanned in ascending timestamp order and ties keep the earliest
    instant. Returns None when there are no points.
    """
    peak: Optional[PeakUsage] = None
    for point in sorted(points, key=lambda p: p.timestamp):
        total = point.total
        if peak is None or total > peak.total_usage:
            peak = PeakUsage(timestamp=point.timestamp, total_usage=total)
    return peak


def load_at_timestamp(samples: Sequence[TimedValue], timestamp: datetime) -> float:
    """Value of the first sample stamped exactly ``timestamp``, or 0.0 if none is."""
    for sample in samples:
        if sample.timestamp == timestamp:
            return sample.value
    return 0.0


def workload_load_at(workload: Workload, timestamp: datetime) -> float:
    return (
        load_at_timestamp(workload.load_a, timestamp)
        + load_at_timestamp(workload.load_b, timestamp)
        + load_at_timestamp(workload.load_c, timestamp)
    )


def rank_contributions(workloads: Sequence[Workload], timestamp: datetime) -> List[WorkloadContribution]:
    """
    Each workload's combined load at ``timestamp``, sorted descending.

    Workloads with equal loads keep their collection order.
    """
    contributions = [
        WorkloadContribution(name=w.name, load_at_peak=workload_load_at(w, timestamp))
        for w in workloads
    ]
    contributions.sort(key=lambda c: c.load_at_peak, reverse=True)
    return contributions


def top_contributors(
    ranked: Sequence[WorkloadContribution], divisor: int = DEFAULT_TOP_DIVISOR
) -> List[WorkloadContribution]:
    """
    The leading ``len(ranked) // divisor`` entries of an already ranked list.

    With the default divisor this is the top 10%, rounded down, so fewer than
    ten workloads yield no top contributors.
    """
    if divisor < 1:
        raise ValueError(f"top divisor must be >= 1, got {divisor}")
    count = len(ranked) // divisor
    logger.debug(f"Selecting top {count} of {len(ranked)} contributors")
    return list(ranked[:count])
