"""
Synthetic workload generation.

Generates workloads with three load channels for exercising the analyzer.
A configurable share of workloads is volatile: their samples are drawn from
a wider range and perturbed with Gaussian noise, so they land in the upper
volatility tiers. Samples are spaced one minute apart starting at local
midnight of the current day.
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from ..models.workload import TimedValue, Workload
from ..validation import validate_positive_integer

logger = logging.getLogger(__name__)

STABLE_RANGE = 100.0
VOLATILE_RANGE = 200.0
SAMPLE_SPACING = timedelta(minutes=1)


def local_midnight() -> datetime:
    """Today's local midnight as a timezone-aware datetime."""
    now = datetime.now().astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def generate_channel(
    rng: np.random.Generator,
    samples: int,
    volatile: bool,
    start: datetime,
) -> List[TimedValue]:
    """
    Generate one channel of ``samples`` values.

    Stable channels are uniform over ``[0, 100)``. Volatile channels are
    uniform over ``[0, 200)`` plus ``N(0, 100)`` noise and may go negative.
    """
    value_range = VOLATILE_RANGE if volatile else STABLE_RANGE
    values = rng.random(samples) * value_range
    if volatile:
        values = values + rng.normal(0.0, value_range / 2, samples)
    return [
        TimedValue(timestamp=start + i * SAMPLE_SPACING, value=float(v))
        for i, v in enumerate(values)
    ]


def generate_workload(
    name: str,
    samples: int,
    volatile: bool,
    rng: Optional[np.random.Generator] = None,
    start: Optional[datetime] = None,
) -> Workload:
    rng = rng if rng is not None else np.random.default_rng()
    start = start or local_midnight()

    value_generated = int(rng.integers(1, 101))
    if volatile:
        value_generated += int(rng.integers(0, 200))

    return Workload(
        name=name,
        load_a=generate_channel(rng, samples, volatile, start),
        load_b=generate_channel(rng, samples, volatile, start),
        load_c=generate_channel(rng, samples, volatile, start),
        value_generated=float(value_generated),
    )


def generate_workloads(
    count: int,
    samples: int,
    volatile_percentage: int = 70,
    seed: Optional[int] = None,
    start: Optional[datetime] = None,
) -> List[Workload]:
    """
    Generate ``count`` workloads named ``Workload1`` .. ``Workload<count>``.

    ``count - int(count * (100 - volatile_percentage) / 100)`` workloads are
    volatile, picked at random.

    Args:
        count: Number of workloads
        samples: Samples per load channel
        volatile_percentage: Share of volatile workloads, 0 to 100
        seed: Seed for reproducible output
        start: Timestamp of the first sample, local midnight when omitted

    Raises:
        ValidationError: If an argument is out of range
    """
    count = validate_positive_integer(count, min_value=0, field_name="count")
    samples = validate_positive_integer(samples, min_value=1, field_name="samples")
    volatile_percentage = validate_positive_integer(
        volatile_percentage, min_value=0, max_value=100, field_name="volatile_percentage"
    )

    rng = np.random.default_rng(seed)
    start = start or local_midnight()

    stable_count = int(count * (100 - volatile_percentage) / 100)
    volatile_indices = set(rng.permutation(count)[: count - stable_count].tolist())

    workloads = [
        generate_workload(f"Workload{i + 1}", samples, i in volatile_indices, rng, start)
        for i in range(count)
    ]
    logger.info(
        f"Generated {count} workloads ({len(volatile_indices)} volatile) with {samples} samples per load"
    )
    return workloads


def workload_to_document(workload: Workload) -> dict:
    """The file document holding ``workload`` in the ingestion format."""

    def samples(channel: List[TimedValue]) -> list:
        return [{"timestamp": s.timestamp.isoformat(), "value": s.value} for s in channel]

    return {
        "workloads": [
            {
                "name": workload.name,
                "load1": samples(workload.load_a),
                "load2": samples(workload.load_b),
                "load3": samples(workload.load_c),
                "valueGenerated": workload.value_generated,
            }
        ]
    }


def write_workload_files(workloads: List[Workload], output_dir: Union[str, Path]) -> List[Path]:
    """
    Write each workload to ``<output_dir>/<name>.json``.

    Returns:
        Paths of the written files, in workload order.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for workload in workloads:
        path = output_dir / f"{workload.name}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(workload_to_document(workload), f, indent=4)
        logger.debug(f"Workload {workload.name} saved in {path}")
        written.append(path)
    logger.info(f"Wrote {len(written)} workload files to {output_dir}")
    return written
