"""
Report assembly.

The ReportAssembler drives one analysis run over a workload collection:

1. Normalize each workload and compute its channel totals.
2. Compute grand totals, relative contributions and deviation statistics.
3. Run the volatility estimators and the interval change series per workload,
   building a partial timestamp accumulator alongside.
4. Merge the partial accumulators, then compute the rolling aggregate
   volatility and the peak usage instant with its contribution ranking.
5. Split workloads into volatility tiers.

Per-workload stages run on a managed thread pool when parallel execution is
enabled. A worker task only touches its own workload. Estimator results are
written back onto workload records, and the partial accumulators merged, on
the calling thread by collection position.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from ..executor import InlineExecutor, ManagedThreadPoolExecutor, ThreadPoolConfig
from ..models.config import TIER_METRICS, AnalyzerConfig
from ..models.results import AnalysisReport, IntervalChange, VolatilityResult, VolatilityTiers
from ..models.workload import Workload, WorkloadCollection
from ..validation import (
    EmptySeriesError,
    UndefinedRatioError,
    UnsynchronizedChannelsError,
)
from .aggregator import (
    TimestampAccumulator,
    accumulate_workload,
    apply_relative_contributions,
    compute_deviation_stats,
    compute_grand_totals,
    compute_workload_totals,
    merge_accumulators,
)
from .normalizer import normalize_workload
from .peak_usage import find_peak_usage, rank_contributions, top_contributors
from .volatility import (
    aggregate_volatility,
    interval_changes,
    interval_volatility,
    workload_range_volatility,
    workload_windowed_volatility,
)

logger = logging.getLogger(__name__)

# Errors that make a single estimator undefined for a workload without
# aborting the run.
ESTIMATOR_ERRORS = (EmptySeriesError, UndefinedRatioError, UnsynchronizedChannelsError)


@dataclass
class WorkloadAnalysis:
    """Results of the per-workload estimators for one workload."""

    windowed: Optional[VolatilityResult] = None
    range: Optional[VolatilityResult] = None
    interval: Optional[float] = None
    changes: List[IntervalChange] = field(default_factory=list)
    accumulator: TimestampAccumulator = field(default_factory=TimestampAccumulator)
    failures: List[str] = field(default_factory=list)


def prepare_workload(workload: Workload) -> Workload:
    """Normalize ``workload`` and compute its channel totals."""
    normalize_workload(workload)
    return compute_workload_totals(workload)


def analyze_workload(workload: Workload, config: AnalyzerConfig) -> WorkloadAnalysis:
    """
    Run every per-workload estimator on an already prepared workload.

    An estimator that is undefined for this workload leaves its result unset
    and records a failure message; the remaining estimators still run.
    """
    analysis = WorkloadAnalysis()

    try:
        analysis.windowed = workload_windowed_volatility(workload, config.window)
    except ESTIMATOR_ERRORS as e:
        analysis.failures.append(f"windowed volatility: {e}")

    try:
        analysis.range = workload_range_volatility(workload)
    except ESTIMATOR_ERRORS as e:
        analysis.failures.append(f"range volatility: {e}")

    try:
        analysis.interval = interval_volatility(workload, config.interval_size)
    except ESTIMATOR_ERRORS as e:
        analysis.failures.append(f"interval volatility: {e}")

    try:
        analysis.changes = interval_changes(workload, config.interval_size)
    except ESTIMATOR_ERRORS as e:
        analysis.failures.append(f"interval changes: {e}")

    analysis.accumulator = accumulate_workload(workload)
    return analysis


def apply_analysis(workload: Workload, analysis: WorkloadAnalysis) -> None:
    """Copy the estimator results onto the workload record."""
    if analysis.windowed is not None:
        workload.windowed_volatility_a = analysis.windowed.channel_a
        workload.windowed_volatility_b = analysis.windowed.channel_b
        workload.windowed_volatility_c = analysis.windowed.channel_c
    if analysis.range is not None:
        workload.range_volatility_a = analysis.range.channel_a
        workload.range_volatility_b = analysis.range.channel_b
        workload.range_volatility_c = analysis.range.channel_c
    workload.interval_volatility = analysis.interval


def tier_score(workload: Workload, metric: str) -> Optional[float]:
    """
    The volatility score used to rank ``workload`` into tiers.

    - ``windowed``: mean of the three channel windowed standard deviations
    - ``range``: largest of the three channel range figures
    - ``interval``: the interval volatility

    Returns None when the underlying figures are undefined.
    """
    if metric == "windowed":
        values = (workload.windowed_volatility_a, workload.windowed_volatility_b, workload.windowed_volatility_c)
        if any(v is None for v in values):
            return None
        return VolatilityResult(*values).average
    if metric == "range":
        values = (workload.range_volatility_a, workload.range_volatility_b, workload.range_volatility_c)
        if any(v is None for v in values):
            return None
        return VolatilityResult(*values).maximum
    if metric == "interval":
        return workload.interval_volatility
    raise ValueError(f"Unknown tier metric '{metric}', expected one of {TIER_METRICS}")


def build_tiers(workloads: Sequence[Workload], metric: str = "windowed") -> VolatilityTiers:
    """
    Split workloads into high, medium and low volatility thirds.

    Workloads are sorted by descending score, ties keeping collection order.
    The first ``n // 3`` are high, the next up to ``2n // 3`` medium and the
    remainder low. Workloads without a defined score are left out.
    """
    scored = []
    for workload in workloads:
        score = tier_score(workload, metric)
        if score is not None:
            scored.append((workload.name, score))
    scored.sort(key=lambda item: item[1], reverse=True)

    names = [name for name, _ in scored]
    n = len(names)
    return VolatilityTiers(
        metric=metric,
        high=names[: n // 3],
        medium=names[n // 3: 2 * n // 3],
        low=names[2 * n // 3:],
    )


class ReportAssembler:
    """
    Runs the statistics engine over a workload collection.

    Workload records in the collection are updated in place with their
    derived fields and are also referenced from the returned report.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def _create_executor(self, task_count: int) -> Union[ManagedThreadPoolExecutor, InlineExecutor]:
        if not self.config.parallel or task_count < 2:
            return InlineExecutor()
        return ManagedThreadPoolExecutor(
            ThreadPoolConfig(
                max_workers=self.config.max_workers,
                thread_name_prefix=self.config.thread_name_prefix,
                shutdown_timeout=self.config.shutdown_timeout,
            )
        )

    def assemble(self, collection: Union[WorkloadCollection, Sequence[Workload]]) -> AnalysisReport:
        """
        Produce the full analysis report for ``collection``.

        An empty collection yields ``AnalysisReport.empty()``.
        """
        workloads = list(collection)
        if not workloads:
            logger.warning("No workloads to analyze")
            return AnalysisReport.empty()

        config = self.config
        logger.info(f"Analyzing {len(workloads)} workloads")

        executor = self._create_executor(len(workloads))
        with executor:
            executor.map_ordered(prepare_workload, workloads)
            analyses = executor.map_ordered(
                lambda workload: analyze_workload(workload, config), workloads
            )
            if isinstance(executor, ManagedThreadPoolExecutor):
                logger.debug(f"Thread pool stats: {executor.get_stats()}")

        grand = compute_grand_totals(workloads)
        for workload in workloads:
            apply_relative_contributions(workload, grand)
        deviation = compute_deviation_stats(workloads, grand)

        failures: Dict[str, List[str]] = {}
        changes: List[IntervalChange] = []
        for workload, analysis in zip(workloads, analyses):
            apply_analysis(workload, analysis)
            changes.extend(analysis.changes)
            if analysis.failures:
                failures.setdefault(workload.name, []).extend(analysis.failures)
                for message in analysis.failures:
                    logger.warning(f"Workload '{workload.name}': {message}")

        points = merge_accumulators(a.accumulator for a in analyses).points()
        rolling = aggregate_volatility(points, config.aggregate_interval)

        peak = find_peak_usage(points)
        contributions = rank_contributions(workloads, peak.timestamp) if peak is not None else []
        top = top_contributors(contributions, config.top_divisor)

        tiers = build_tiers(workloads, config.tier_metric)

        if peak is not None:
            logger.info(f"Peak usage {peak.total_usage:.2f} at {peak.timestamp.isoformat()}")
        else:
            logger.info("No timestamped samples; peak usage is undefined")

        return AnalysisReport(
            workloads=workloads,
            grand_totals=grand,
            deviation=deviation,
            aggregated=points,
            aggregate_volatility=rolling,
            interval_changes=changes,
            peak_usage=peak,
            contributions=contributions,
            top_contributors=top,
            tiers=tiers,
            failures=failures,
        )
