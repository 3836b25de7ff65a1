"""
Channel length normalization.

Downstream statistics index the three channels of a workload in lockstep, so
every channel must have the same number of samples. Shorter channels are
padded with their own mean, computed over the samples they had before
padding. Padded samples have no timestamp.

This is an approximation rather than a timestamp alignment: a padded sample
does not correspond to any instant observed on the other channels.
"""

import logging
from typing import List, Sequence, Tuple

from ..models.workload import TimedValue, Workload
from ..validation import UnsynchronizedChannelsError

logger = logging.getLogger(__name__)


def channel_mean(samples: Sequence[TimedValue]) -> float:
    """Arithmetic mean of sample values; 0.0 for an empty channel."""
    if not samples:
        return 0.0
    return sum(s.value for s in samples) / len(samples)


def pad_channel(samples: Sequence[TimedValue], length: int) -> List[TimedValue]:
    """
    Return ``samples`` extended to ``length`` with mean-valued, untimestamped samples.

    A channel that already has at least ``length`` samples is returned unchanged.
    """
    padded = list(samples)
    if len(padded) >= length:
        return padded
    fill = TimedValue(timestamp=None, value=channel_mean(samples))
    padded.extend([fill] * (length - len(padded)))
    return padded


def normalize_channels(
    load_a: Sequence[TimedValue],
    load_b: Sequence[TimedValue],
    load_c: Sequence[TimedValue],
) -> Tuple[List[TimedValue], List[TimedValue], List[TimedValue]]:
    """Pad the three channels to the length of the longest one."""
    length = max(len(load_a), len(load_b), len(load_c))
    return pad_channel(load_a, length), pad_channel(load_b, length), pad_channel(load_c, length)


def normalize_workload(workload: Workload) -> Workload:
    """
    Equalize the channel lengths of ``workload`` in place and return it.

    Calling this on an already normalized workload changes nothing.
    """
    before = workload.channel_lengths()
    workload.load_a, workload.load_b, workload.load_c = normalize_channels(
        workload.load_a, workload.load_b, workload.load_c
    )
    if len(set(before)) > 1:
        logger.debug(
            f"Normalized workload '{workload.name}' channel lengths {before} -> {workload.channel_lengths()}"
        )
    return workload


def validate_synchronization(workload: Workload) -> None:
    """
    Check that all three channels of ``workload`` have the same length.

    Raises:
        UnsynchronizedChannelsError: If the lengths differ
    """
    lengths = workload.channel_lengths()
    if len(set(lengths)) != 1:
        raise UnsynchronizedChannelsError(workload.name, lengths)
