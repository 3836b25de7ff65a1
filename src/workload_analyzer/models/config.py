"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from ..config.storage_config import StorageConfig

TIER_METRICS = ("windowed", "range", "interval")


@dataclass
class AnalyzerConfig:
    """
    Configuration for the analyzer's global behavior, loaded from `config.toml`.
    """

    # [analyzer.general]
    input_dir: Path = Path(".")
    output_dir: Path = Path("analysis_output")
    file_prefix: str = "Workload"
    file_suffix: str = ".json"
    skip_plots: bool = False

    # [analyzer.volatility]
    window_minutes: float = 5.0
    interval_size: int = 5
    aggregate_interval: int = 5
    tier_metric: str = "windowed"

    # [analyzer.peak]
    top_divisor: int = 10

    # [analyzer.execution]
    parallel: bool = True
    max_workers: int = 4
    thread_name_prefix: str = "AnalysisWorker"
    shutdown_timeout: float = 10.0

    # [analyzer.generation]
    volatile_percentage: int = 70
    samples_per_load: int = 60

    # [analyzer.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def window(self) -> timedelta:
        """The wall-clock window of the windowed standard deviation."""
        return timedelta(minutes=self.window_minutes)


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    analyzer: AnalyzerConfig
    # Path of the file the configuration was loaded from, if any.
    source_path: Path = None
