"""
Pytest configuration and shared fixtures for the workload analyzer test suite.

This module provides common fixtures, workload builders and configuration
files for all test modules in the project.
"""

import json
import shutil
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from workload_analyzer.models.workload import TimedValue, Workload  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """Sample ``[analyzer]`` configuration table for testing."""
    return {
        "general": {
            "input_dir": "data",
            "output_dir": "out",
            "file_prefix": "Workload",
            "file_suffix": ".json",
            "skip_plots": True,
        },
        "volatility": {
            "window_minutes": 5,
            "interval_size": 5,
            "aggregate_interval": 5,
            "tier_metric": "windowed",
        },
        "peak": {"top_divisor": 10},
        "execution": {
            "parallel": False,
            "max_workers": 2,
            "thread_name_prefix": "TestWorker",
            "shutdown_timeout": 5.0,
        },
        "storage": {"format": "csv", "compression": "snappy"},
        "generation": {"volatile_percentage": 70, "samples_per_load": 12},
    }


# ============================================================================
# Workload Builders
# ============================================================================


class TestUtils:
    """Utility functions for building workloads and workload files."""

    @staticmethod
    def ts(minute: float) -> datetime:
        """The instant ``minute`` minutes after BASE_TIME."""
        return BASE_TIME + timedelta(minutes=minute)

    @staticmethod
    def series(values: Sequence[float], start_minute: float = 0, step_minutes: float = 1) -> List[TimedValue]:
        """Samples ``step_minutes`` apart starting ``start_minute`` after BASE_TIME."""
        return [
            TimedValue(timestamp=TestUtils.ts(start_minute + i * step_minutes), value=float(v))
            for i, v in enumerate(values)
        ]

    @staticmethod
    def make_workload(
        name: str,
        a: Sequence[float],
        b: Optional[Sequence[float]] = None,
        c: Optional[Sequence[float]] = None,
        value_generated: float = 0.0,
        start_minute: float = 0,
    ) -> Workload:
        """A workload with minute-spaced channels; missing channels copy ``a``."""
        b = a if b is None else b
        c = a if c is None else c
        return Workload(
            name=name,
            load_a=TestUtils.series(a, start_minute),
            load_b=TestUtils.series(b, start_minute),
            load_c=TestUtils.series(c, start_minute),
            value_generated=value_generated,
        )

    @staticmethod
    def workload_record(
        name: str,
        a: Sequence[float],
        b: Optional[Sequence[float]] = None,
        c: Optional[Sequence[float]] = None,
        value_generated: float = 0,
    ) -> Dict[str, Any]:
        """A workload record in the JSON file format."""

        def samples(values):
            return [
                {"timestamp": TestUtils.ts(i).isoformat().replace("+00:00", "Z"), "value": v}
                for i, v in enumerate(values)
            ]

        return {
            "name": name,
            "load1": samples(a),
            "load2": samples(a if b is None else b),
            "load3": samples(a if c is None else c),
            "valueGenerated": value_generated,
        }

    @staticmethod
    def write_workload_file(path: Path, records: List[Dict[str, Any]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"workloads": records}, f)
        return path


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture
def two_workloads():
    """
    Two workloads over the same three instants.

    W1 only loads channel a; W2 loads channels b and c.
    """
    return [
        TestUtils.make_workload("W1", a=[1, 2, 3], b=[0, 0, 0], c=[0, 0, 0], value_generated=10),
        TestUtils.make_workload("W2", a=[0, 0, 0], b=[1, 1, 1], c=[1, 1, 1], value_generated=30),
    ]


@pytest.fixture
def workload_dir(temp_dir):
    """A directory holding two valid workload files and one unrelated file."""
    data_dir = temp_dir / "data"
    TestUtils.write_workload_file(
        data_dir / "Workload1.json",
        [TestUtils.workload_record("W1", [1, 2, 3], [0, 0, 0], [0, 0, 0], value_generated=10)],
    )
    TestUtils.write_workload_file(
        data_dir / "Workload2.json",
        [TestUtils.workload_record("W2", [0, 0, 0], [1, 1, 1], [1, 1, 1], value_generated=30)],
    )
    (data_dir / "notes.json").write_text("{}", encoding="utf-8")
    return data_dir


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump({"analyzer": sample_config_data}, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield  # Run the test

    from workload_analyzer.config import reset_config_path

    reset_config_path()
