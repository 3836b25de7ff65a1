"""
Per-workload totals, collection grand totals and relative contributions.

The aggregator works in three steps, each a pure function of its inputs:

1. ``compute_workload_totals`` sums every channel of one workload.
2. ``compute_grand_totals`` sums those totals over the whole collection.
3. ``apply_relative_contributions`` expresses each workload as a percentage
   of the grand totals, and ``compute_deviation_stats`` measures how workload
   total loads spread above and below the collection average.

It also owns the collection-wide timestamp reduction, implemented by the
``TimestampAccumulator`` reducer so that partial reductions built on worker
threads can be merged by a single writer.
"""

import logging
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.results import AggregatedTimePoint, DeviationStats, GrandTotals
from ..models.workload import TimedValue, Workload
from ..validation import NoDataError

logger = logging.getLogger(__name__)


def channel_total(samples: Sequence[TimedValue]) -> float:
    return sum(s.value for s in samples)


def relative_share(part: float, whole: float) -> float:
    """``100 * part / whole``, or 0.0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def compute_workload_totals(workload: Workload) -> Workload:
    """
    Set the channel totals and total cost of ``workload`` and return it.

    Totals are recomputed from the samples on every call, never accumulated.
    """
    workload.total_a = channel_total(workload.load_a)
    workload.total_b = channel_total(workload.load_b)
    workload.total_c = channel_total(workload.load_c)
    workload.total_cost = workload.total_a + workload.total_b + workload.total_c
    return workload


def compute_grand_totals(workloads: Sequence[Workload]) -> GrandTotals:
    """Sum channel totals, costs and value generated across ``workloads``."""
    total_a = sum(w.total_a for w in workloads)
    total_b = sum(w.total_b for w in workloads)
    total_c = sum(w.total_c for w in workloads)
    return GrandTotals(
        total_a=total_a,
        total_b=total_b,
        total_c=total_c,
        total_cost=sum(w.total_cost for w in workloads),
        value_generated=sum(w.value_generated for w in workloads),
        workload_count=len(workloads),
    )


def apply_relative_contributions(workload: Workload, grand: GrandTotals) -> Workload:
    """Set the percentage shares of ``workload`` against ``grand``."""
    workload.relative_load_a = relative_share(workload.total_a, grand.total_a)
    workload.relative_load_b = relative_share(workload.total_b, grand.total_b)
    workload.relative_load_c = relative_share(workload.total_c, grand.total_c)
    workload.relative_cost = relative_share(workload.total_cost, grand.total_cost)
    workload.relative_value_generated = relative_share(
        workload.value_generated, grand.value_generated
    )
    return workload


def compute_deviation_stats(workloads: Sequence[Workload], grand: GrandTotals) -> DeviationStats:
    """
    Compute the upward and downward standard deviations of workload total loads.

    A workload whose total load exceeds the collection average adds its squared
    deviation to the upward sum, every other workload to the downward sum.
    Each side is divided by the total workload count.

    Raises:
        NoDataError: If ``workloads`` is empty
    """
    count = len(workloads)
    if count == 0:
        raise NoDataError("cannot compute deviation statistics of an empty collection")

    average = grand.total_cost / count
    upward_sum = 0.0
    downward_sum = 0.0
    for workload in workloads:
        deviation = workload.total_load - average
        if deviation > 0:
            upward_sum += deviation * deviation
        else:
            downward_sum += deviation * deviation

    return DeviationStats(
        average_total_load=average,
        upward_sum=upward_sum,
        downward_sum=downward_sum,
        upward_std=math.sqrt(upward_sum / count),
        downward_std=math.sqrt(downward_sum / count),
        workload_count=count,
    )


def aggregate_workloads(workloads: Sequence[Workload]) -> Tuple[GrandTotals, DeviationStats]:
    """
    Run the full aggregation over already normalized ``workloads``.

    Returns:
        Tuple of (GrandTotals, DeviationStats)

    Raises:
        NoDataError: If ``workloads`` is empty
    """
    if not workloads:
        raise NoDataError("no workloads to aggregate")

    for workload in workloads:
        compute_workload_totals(workload)
    grand = compute_grand_totals(workloads)
    for workload in workloads:
        apply_relative_contributions(workload, grand)
    deviation = compute_deviation_stats(workloads, grand)

    logger.info(
        f"Aggregated {grand.workload_count} workloads: total cost {grand.total_cost:.2f}, "
        f"average load {deviation.average_total_load:.2f}"
    )
    return grand, deviation


class TimestampAccumulator:
    """
    Reducer summing channel values of many workloads by timestamp.

    Samples without a timestamp (normalization padding) do not belong to any
    instant and are skipped.
    """

    def __init__(self):
        self._points: Dict[datetime, AggregatedTimePoint] = {}

    def _point(self, timestamp: datetime) -> AggregatedTimePoint:
        point = self._points.get(timestamp)
        if point is None:
            point = AggregatedTimePoint(timestamp=timestamp)
            self._points[timestamp] = point
        return point

    def add_workload(self, workload: Workload) -> "TimestampAccumulator":
        for sample in workload.load_a:
            if sample.timestamp is not None:
                self._point(sample.timestamp).total_a += sample.value
        for sample in workload.load_b:
            if sample.timestamp is not None:
                self._point(sample.timestamp).total_b += sample.value
        for sample in workload.load_c:
            if sample.timestamp is not None:
                self._point(sample.timestamp).total_c += sample.value
        return self

    def merge(self, other: "TimestampAccumulator") -> "TimestampAccumulator":
        """Fold ``other`` into this accumulator. ``other`` is left unchanged."""
        for timestamp, partial in other._points.items():
            point = self._point(timestamp)
            point.total_a += partial.total_a
            point.total_b += partial.total_b
            point.total_c += partial.total_c
        return self

    def points(self) -> List[AggregatedTimePoint]:
        """The accumulated points, sorted ascending by timestamp."""
        return [self._points[ts] for ts in sorted(self._points)]

    def __len__(self) -> int:
        return len(self._points)


def accumulate_workload(workload: Workload) -> TimestampAccumulator:
    """Build a partial accumulator for a single workload."""
    return TimestampAccumulator().add_workload(workload)


def merge_accumulators(partials: Iterable[TimestampAccumulator]) -> TimestampAccumulator:
    merged = TimestampAccumulator()
    for partial in partials:
        merged.merge(partial)
    return merged


def reduce_by_timestamp(
    workloads: Iterable[Workload], accumulator: Optional[TimestampAccumulator] = None
) -> List[AggregatedTimePoint]:
    """Sum every channel sample of every workload by timestamp, sorted ascending."""
    if accumulator is None:
        accumulator = TimestampAccumulator()
    for workload in workloads:
        accumulator.add_workload(workload)
    return accumulator.points()
