"""
Workload file discovery and parsing.

Workload files are JSON documents of the form::

    {"workloads": [
        {"name": "W1",
         "load1": [{"timestamp": "2024-01-01T00:00:00Z", "value": 1.5}, ...],
         "load2": [...],
         "load3": [...],
         "valueGenerated": 42}
    ]}

``load1``/``load2``/``load3`` map to channels a/b/c. Sample keys are matched
case-insensitively, so files written with ``Timestamp``/``Value`` keys load
as well. Timestamps are RFC 3339; a timestamp without an offset is taken as
UTC so that every parsed instant is timezone-aware and comparable.
"""

import json
import logging
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models.workload import TimedValue, Workload, WorkloadCollection
from ..validation import MalformedInputError, handle_file_error, ErrorSeverity

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "Workload"
DEFAULT_SUFFIX = ".json"

# Channel keys in the file format, in channel order a, b, c.
CHANNEL_KEYS = ("load1", "load2", "load3")

# Fractional seconds longer than microseconds (e.g. nanosecond precision)
# are truncated before parsing.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an RFC 3339 timestamp into a timezone-aware UTC datetime.

    Raises:
        ValueError: If ``value`` is not a valid timestamp string
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"timestamp must be a non-empty string, got {value!r}")

    text = _FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"timestamp {value!r} is out of range in UTC") from e


def parse_number(value: Any, what: str) -> float:
    """
    Convert a JSON number to a finite float.

    Raises:
        ValueError: If ``value`` is not a number, is a boolean, or does not
            fit a finite float (NaN, Infinity, or an integer too large)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as e:
        raise ValueError(f"{what} is too large for a float") from e
    if not math.isfinite(number):
        raise ValueError(f"{what} must be finite, got {number!r}")
    return number


def _lower_keys(record: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in record.items()}


def parse_sample(raw: Any) -> TimedValue:
    """
    Parse one ``{"timestamp", "value"}`` sample.

    Raises:
        ValueError: If the sample is not an object or a field is missing or invalid
    """
    if not isinstance(raw, dict):
        raise ValueError(f"sample must be an object, got {type(raw).__name__}")
    fields = _lower_keys(raw)
    if "timestamp" not in fields or "value" not in fields:
        raise ValueError(f"sample needs 'timestamp' and 'value', got keys {sorted(raw)}")

    value = parse_number(fields["value"], "sample value")
    return TimedValue(timestamp=parse_timestamp(fields["timestamp"]), value=value)


def parse_workload(raw: Any) -> Workload:
    """
    Parse one workload record.

    A missing channel is read as an empty channel and a missing
    ``valueGenerated`` as zero.

    Raises:
        ValueError: If the record or any of its samples is invalid
    """
    if not isinstance(raw, dict):
        raise ValueError(f"workload must be an object, got {type(raw).__name__}")
    fields = _lower_keys(raw)

    name = fields.get("name")
    if not isinstance(name, str):
        raise ValueError(f"workload name must be a string, got {name!r}")

    channels: List[List[TimedValue]] = []
    for key in CHANNEL_KEYS:
        samples = fields.get(key, [])
        if not isinstance(samples, list):
            raise ValueError(f"workload '{name}' field '{key}' must be a list")
        channels.append([parse_sample(s) for s in samples])

    value_generated = parse_number(fields.get("valuegenerated", 0), f"workload '{name}' valueGenerated")

    return Workload(
        name=name,
        load_a=channels[0],
        load_b=channels[1],
        load_c=channels[2],
        value_generated=value_generated,
    )


def load_workload_file(path: Union[str, Path]) -> List[Workload]:
    """
    Load every workload record from one JSON file.

    Raises:
        MalformedInputError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedInputError(f"cannot read workload file: {e}", source=path) from e

    if not isinstance(data, dict):
        raise MalformedInputError("top level must be an object", source=path)
    records = _lower_keys(data).get("workloads")
    if records is None:
        logger.warning(f"{path}: no 'workloads' field, file contributes no workloads")
        return []
    if not isinstance(records, list):
        raise MalformedInputError("'workloads' must be a list", source=path)

    try:
        workloads = [parse_workload(record) for record in records]
    except (ValueError, OverflowError) as e:
        raise MalformedInputError(str(e), source=path) from e

    logger.debug(f"Loaded {len(workloads)} workloads from {path}")
    return workloads


def discover_workload_files(
    directory: Union[str, Path],
    prefix: str = DEFAULT_PREFIX,
    suffix: str = DEFAULT_SUFFIX,
) -> List[Path]:
    """
    List the regular files in ``directory`` named ``<prefix>*<suffix>``, sorted by name.

    Raises:
        FileNotFoundError: If ``directory`` does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")
    return sorted(
        (p for p in directory.iterdir()
         if p.is_file() and p.name.startswith(prefix) and p.name.endswith(suffix)),
        key=lambda p: p.name,
    )


def load_collection(
    directory: Union[str, Path],
    prefix: str = DEFAULT_PREFIX,
    suffix: str = DEFAULT_SUFFIX,
    files: Optional[List[Path]] = None,
) -> WorkloadCollection:
    """
    Load all workload files of ``directory`` into one collection.

    Records are concatenated in file order; workloads sharing a name are kept
    side by side. A malformed file is logged and skipped.

    Args:
        directory: Directory to scan for workload files
        prefix: Required file name prefix
        suffix: Required file name suffix
        files: Explicit file list, bypassing discovery

    Raises:
        FileNotFoundError: If ``directory`` does not exist and no files were given
    """
    if files is None:
        files = discover_workload_files(directory, prefix, suffix)
    if not files:
        logger.warning(f"No files matching '{prefix}*{suffix}' in {directory}")

    collection = WorkloadCollection()
    for path in files:
        try:
            collection.extend(load_workload_file(path))
        except MalformedInputError as e:
            handle_file_error(
                error=e,
                context=f"loading {path}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
    logger.info(f"Loaded {len(collection)} workloads from {len(files)} files")
    shared = [name for name, group in collection.by_name().items() if len(group) > 1]
    if shared:
        logger.info(f"Names shared by several workload records: {', '.join(shared)}")
    return collection
