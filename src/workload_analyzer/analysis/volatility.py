"""
Volatility estimators.

Four estimators answer different questions about how much a load moves, and
are not interchangeable:

- Windowed standard deviation: samples are grouped into wall-clock windows
  (5 minutes by default), each window is averaged, and the population standard
  deviation of the window averages is reported per channel.
- Range volatility: the worst-case swing of a channel's raw samples away from
  their mean, as a rounded percentage of the mean.
- Interval volatility: the three channels are summed element-wise into one
  merged series, grouped into fixed-size index windows, and the sample
  standard deviation (N-1) of the window averages is reported. The same
  windows, summed instead of averaged, give the interval change series.
- Aggregate volatility: a rolling per-channel population standard deviation
  over the collection-wide timestamp reduction.

All estimators are read-only over their inputs.
"""

import logging
import math
from datetime import timedelta
from typing import List, Optional, Sequence

from ..models.results import (
    AggregatedTimePoint,
    AggregateVolatilityPoint,
    IntervalChange,
    VolatilityResult,
)
from ..models.workload import TimedValue, Workload
from ..validation import EmptySeriesError, UndefinedRatioError
from .normalizer import validate_synchronization

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(minutes=5)
DEFAULT_INTERVAL_SIZE = 5


# ============================================================================
# Dispersion primitives
# ============================================================================


def mean(values: Sequence[float]) -> float:
    if not values:
        raise EmptySeriesError("cannot take the mean of no values")
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    """Standard deviation dividing by N."""
    if not values:
        raise EmptySeriesError("cannot take the standard deviation of no values")
    m = mean(values)
    return math.sqrt(sum((v - m) * (v - m) for v in values) / len(values))


def sample_std(values: Sequence[float]) -> float:
    """
    Standard deviation dividing by N-1.

    A single value has no observed spread and yields 0.0.
    """
    if not values:
        raise EmptySeriesError("cannot take the standard deviation of no values")
    if len(values) == 1:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) * (v - m) for v in values) / (len(values) - 1))


def round_half_away_from_zero(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


# ============================================================================
# Windowed standard deviation
# ============================================================================


def window_averages(samples: Sequence[TimedValue], window: timedelta = DEFAULT_WINDOW) -> List[float]:
    """
    Average the samples of each consecutive wall-clock window.

    A window starts at its first sample and keeps every following sample whose
    timestamp lies at most ``window`` after that start. Padded samples (no
    timestamp) stay in the current window; a timestamped sample following a
    window that started on a padded sample opens a new one.

    Raises:
        EmptySeriesError: If ``samples`` is empty
    """
    if not samples:
        raise EmptySeriesError("cannot window an empty channel")

    averages: List[float] = []
    start = samples[0].timestamp
    total = 0.0
    count = 0
    for sample in samples:
        ts = sample.timestamp
        in_window = ts is None or (start is not None and ts - start <= window)
        if in_window:
            total += sample.value
            count += 1
        else:
            averages.append(total / count)
            total = sample.value
            count = 1
            start = ts
    averages.append(total / count)
    return averages


def windowed_std(samples: Sequence[TimedValue], window: timedelta = DEFAULT_WINDOW) -> float:
    """Population standard deviation of the window averages of one channel."""
    return population_std(window_averages(samples, window))


def workload_windowed_volatility(
    workload: Workload, window: timedelta = DEFAULT_WINDOW
) -> VolatilityResult:
    """
    Windowed standard deviation of each channel of ``workload``.

    Raises:
        EmptySeriesError: If any channel has no samples
    """
    results = []
    for channel in ("a", "b", "c"):
        try:
            results.append(windowed_std(workload.channel(channel), window))
        except EmptySeriesError:
            raise EmptySeriesError(
                "windowed volatility is undefined for an empty channel",
                channel=f"{workload.name}.load_{channel}",
            )
    return VolatilityResult(*results)


# ============================================================================
# Range volatility
# ============================================================================


def range_volatility(samples: Sequence[TimedValue]) -> float:
    """
    Largest rounded percentage swing of the samples away from their mean.

    ``upward = round(100 * (max - mean) / mean)``,
    ``downward = round(100 * (mean - min) / mean)``; the larger is returned.

    Raises:
        EmptySeriesError: If ``samples`` is empty
        UndefinedRatioError: If the mean is zero or negative
    """
    if not samples:
        raise EmptySeriesError("range volatility is undefined for an empty channel")

    values = [s.value for s in samples]
    m = mean(values)
    if m <= 0:
        raise UndefinedRatioError(
            f"range volatility is undefined for a channel with mean {m}", denominator=m
        )
    upward = round_half_away_from_zero(100 * (max(values) - m) / m)
    downward = round_half_away_from_zero(100 * (m - min(values)) / m)
    return max(upward, downward)


def workload_range_volatility(workload: Workload) -> VolatilityResult:
    """
    Range volatility of each channel of ``workload``.

    Raises:
        EmptySeriesError: If any channel has no samples
        UndefinedRatioError: If any channel has a non-positive mean
    """
    results = []
    for channel in ("a", "b", "c"):
        label = f"{workload.name}.load_{channel}"
        try:
            results.append(range_volatility(workload.channel(channel)))
        except EmptySeriesError as e:
            raise EmptySeriesError(str(e), channel=label)
        except UndefinedRatioError as e:
            raise UndefinedRatioError(f"{label}: {e}", denominator=e.denominator)
    return VolatilityResult(*results)


# ============================================================================
# Interval volatility and interval changes
# ============================================================================


def merged_series(workload: Workload) -> List[TimedValue]:
    """
    Element-wise sum of the three channels of ``workload``.

    Each merged sample carries the first timestamp set among the three
    channels at that index, or none if all three are padded.

    Raises:
        UnsynchronizedChannelsError: If the channels differ in length
    """
    validate_synchronization(workload)
    merged = []
    for a, b, c in zip(workload.load_a, workload.load_b, workload.load_c):
        timestamp = next(
            (s.timestamp for s in (a, b, c) if s.timestamp is not None), None
        )
        merged.append(TimedValue(timestamp=timestamp, value=a.value + b.value + c.value))
    return merged


def index_windows(series: Sequence[TimedValue], size: int = DEFAULT_INTERVAL_SIZE) -> List[Sequence[TimedValue]]:
    """Split ``series`` into consecutive windows of ``size`` samples; the last may be shorter."""
    if size < 1:
        raise ValueError(f"interval size must be >= 1, got {size}")
    return [series[i:i + size] for i in range(0, len(series), size)]


def interval_volatility(workload: Workload, size: int = DEFAULT_INTERVAL_SIZE) -> float:
    """
    Sample standard deviation of the window averages of the merged series.

    Raises:
        EmptySeriesError: If the workload has no samples
        UnsynchronizedChannelsError: If the channels differ in length
    """
    windows = index_windows(merged_series(workload), size)
    if not windows:
        raise EmptySeriesError(
            "interval volatility is undefined for a workload without samples",
            channel=workload.name,
        )
    averages = [sum(s.value for s in window) / len(window) for window in windows]
    return sample_std(averages)


def interval_changes(workload: Workload, size: int = DEFAULT_INTERVAL_SIZE) -> List[IntervalChange]:
    """
    Change of each window's summed load against the previous window.

    The first window has no predecessor and produces no record. Each record
    is stamped with the timestamp of the last sample of its window.

    Raises:
        UnsynchronizedChannelsError: If the channels differ in length
    """
    changes: List[IntervalChange] = []
    previous_sum: Optional[float] = None
    for window in index_windows(merged_series(workload), size):
        window_sum = sum(s.value for s in window)
        if previous_sum is not None:
            changes.append(
                IntervalChange(
                    timestamp=window[-1].timestamp,
                    name=workload.name,
                    change=window_sum - previous_sum,
                )
            )
        previous_sum = window_sum
    return changes


# ============================================================================
# Aggregate volatility
# ============================================================================


def aggregate_volatility(
    points: Sequence[AggregatedTimePoint], interval: int = DEFAULT_INTERVAL_SIZE
) -> List[AggregateVolatilityPoint]:
    """
    Rolling per-channel population standard deviation over the timestamp reduction.

    For every index ``i = interval, 2*interval, ...`` below ``len(points)`` a
    record is emitted, stamped with the timestamp of ``points[i]`` and holding
    the dispersion of ``points[i - interval:i]``. Trailing points that do not
    complete a window before the end of the series produce no record.
    """
    if interval < 1:
        raise ValueError(f"interval must be >= 1, got {interval}")

    results: List[AggregateVolatilityPoint] = []
    for i in range(interval, len(points), interval):
        window = points[i - interval:i]
        results.append(
            AggregateVolatilityPoint(
                timestamp=points[i].timestamp,
                channel_a=population_std([p.total_a for p in window]),
                channel_b=population_std([p.total_b for p in window]),
                channel_c=population_std([p.total_c for p in window]),
            )
        )
    return results
