"""
Unit tests for channel length normalization.
"""

import pytest

from workload_analyzer.analysis.normalizer import (
    channel_mean,
    normalize_channels,
    normalize_workload,
    pad_channel,
    validate_synchronization,
)
from workload_analyzer.models.workload import TimedValue, Workload
from workload_analyzer.validation import UnsynchronizedChannelsError


@pytest.mark.unit
class TestPadding:
    """Test cases for padding a single channel."""

    def test_channel_mean_of_empty_channel_is_zero(self):
        assert channel_mean([]) == 0.0

    def test_pad_channel_fills_with_pre_padding_mean(self, test_utils):
        samples = test_utils.series([2, 4, 6])

        padded = pad_channel(samples, 5)

        assert len(padded) == 5
        assert padded[:3] == samples
        assert all(s.value == pytest.approx(4.0) for s in padded[3:])
        assert all(s.timestamp is None for s in padded[3:])

    def test_pad_channel_leaves_long_enough_channel_unchanged(self, test_utils):
        samples = test_utils.series([1, 2, 3])

        assert pad_channel(samples, 3) == samples
        assert pad_channel(samples, 2) == samples

    def test_pad_empty_channel_uses_zero(self):
        padded = pad_channel([], 2)

        assert padded == [TimedValue(None, 0.0), TimedValue(None, 0.0)]


@pytest.mark.unit
class TestNormalizeChannels:
    """Test cases for equalizing the three channels."""

    def test_lengths_become_equal_to_longest(self, test_utils):
        a = test_utils.series([1, 2, 3, 4, 5])
        b = test_utils.series([10, 20])
        c = test_utils.series([7])

        na, nb, nc = normalize_channels(a, b, c)

        assert len(na) == len(nb) == len(nc) == 5
        assert na == a
        # Each channel pads with its own mean, not the longest channel's.
        assert [s.value for s in nb[2:]] == [15.0, 15.0, 15.0]
        assert [s.value for s in nc[1:]] == [7.0, 7.0, 7.0, 7.0]

    def test_normalize_workload_in_place_and_idempotent(self, test_utils):
        workload = Workload(
            name="W",
            load_a=test_utils.series([1, 2, 3]),
            load_b=test_utils.series([4]),
            load_c=test_utils.series([]),
        )

        result = normalize_workload(workload)
        assert result is workload
        assert workload.channel_lengths() == (3, 3, 3)
        assert [s.value for s in workload.load_c] == [0.0, 0.0, 0.0]

        snapshot = (list(workload.load_a), list(workload.load_b), list(workload.load_c))
        normalize_workload(workload)
        assert (workload.load_a, workload.load_b, workload.load_c) == snapshot

    def test_all_channels_empty_stay_empty(self):
        workload = normalize_workload(Workload(name="empty"))

        assert workload.channel_lengths() == (0, 0, 0)


@pytest.mark.unit
class TestSynchronization:
    """Test cases for the channel length check."""

    def test_equal_lengths_pass(self, test_utils):
        validate_synchronization(test_utils.make_workload("W", a=[1, 2]))

    def test_unequal_lengths_raise(self, test_utils):
        workload = Workload(
            name="W",
            load_a=test_utils.series([1, 2]),
            load_b=test_utils.series([1]),
            load_c=test_utils.series([1, 2]),
        )

        with pytest.raises(UnsynchronizedChannelsError) as exc_info:
            validate_synchronization(workload)

        assert "W" in str(exc_info.value)
        assert exc_info.value.lengths == (2, 1, 2)
