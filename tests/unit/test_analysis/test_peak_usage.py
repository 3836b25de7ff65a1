"""
Unit tests for peak usage detection and contribution ranking.
"""

import pytest

from workload_analyzer.analysis.aggregator import reduce_by_timestamp
from workload_analyzer.analysis.peak_usage import (
    find_peak_usage,
    load_at_timestamp,
    rank_contributions,
    top_contributors,
    workload_load_at,
)
from workload_analyzer.models.results import AggregatedTimePoint, WorkloadContribution


@pytest.mark.unit
class TestFindPeakUsage:
    """Test cases for locating the peak usage instant."""

    def test_peak_is_exact_sum_at_instant(self, test_utils):
        workloads = [
            test_utils.make_workload("W1", a=[1, 2, 9], b=[1, 1, 1], c=[0, 0, 0]),
            test_utils.make_workload("W2", a=[5, 6, 1], b=[0, 3, 0], c=[2, 2, 2]),
        ]

        peak = find_peak_usage(reduce_by_timestamp(workloads))

        assert peak.timestamp == test_utils.ts(1)
        assert peak.total_usage == 14.0

    def test_ties_keep_earliest_instant(self, test_utils):
        points = [
            AggregatedTimePoint(timestamp=test_utils.ts(3), total_a=5),
            AggregatedTimePoint(timestamp=test_utils.ts(1), total_b=5),
            AggregatedTimePoint(timestamp=test_utils.ts(2), total_c=1),
        ]

        peak = find_peak_usage(points)

        assert peak.timestamp == test_utils.ts(1)
        assert peak.total_usage == 5

    def test_no_points(self):
        assert find_peak_usage([]) is None


@pytest.mark.unit
class TestContributions:
    """Test cases for per-workload loads at an instant and their ranking."""

    def test_load_at_timestamp_exact_match_only(self, test_utils):
        samples = test_utils.series([3, 4, 5])

        assert load_at_timestamp(samples, test_utils.ts(1)) == 4.0
        assert load_at_timestamp(samples, test_utils.ts(1.5)) == 0.0
        assert load_at_timestamp([], test_utils.ts(0)) == 0.0

    def test_workload_load_at_sums_channels(self, test_utils):
        workload = test_utils.make_workload("W", a=[1, 2], b=[10, 20], c=[100, 200])

        assert workload_load_at(workload, test_utils.ts(1)) == 222.0

    def test_rank_contributions_descending_and_stable(self, test_utils):
        workloads = [
            test_utils.make_workload("low", a=[1]),
            test_utils.make_workload("tie_first", a=[2]),
            test_utils.make_workload("high", a=[9]),
            test_utils.make_workload("tie_second", a=[2]),
            test_utils.make_workload("absent", a=[50], start_minute=4),
        ]

        ranked = rank_contributions(workloads, test_utils.ts(0))

        assert [c.name for c in ranked] == ["high", "tie_first", "tie_second", "low", "absent"]
        assert ranked[0].load_at_peak == 27.0
        assert ranked[-1].load_at_peak == 0.0


@pytest.mark.unit
class TestTopContributors:
    """Test cases for the top 10% selection."""

    @staticmethod
    def _ranked(count):
        return [WorkloadContribution(name=f"W{i}", load_at_peak=float(count - i)) for i in range(count)]

    @pytest.mark.parametrize("count,expected", [(0, 0), (9, 0), (10, 1), (20, 2), (29, 2)])
    def test_count_rounds_down(self, count, expected):
        assert len(top_contributors(self._ranked(count))) == expected

    def test_takes_leading_entries(self):
        top = top_contributors(self._ranked(20))

        assert [c.name for c in top] == ["W0", "W1"]

    def test_custom_divisor(self):
        assert len(top_contributors(self._ranked(9), divisor=3)) == 3

    def test_rejects_non_positive_divisor(self):
        with pytest.raises(ValueError):
            top_contributors(self._ranked(5), divisor=0)
