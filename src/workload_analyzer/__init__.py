"""
Workload Analyzer: aggregate usage and volatility statistics for workload time series.

This package ingests workloads sampled over three load channels, reconciles
their channel lengths, and derives aggregate, peak usage and volatility
statistics used to rank and classify workload behavior over time.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- ingestion: Workload file discovery and parsing
- analysis: Normalization, aggregation, volatility and peak usage
- executor: Thread pool for per-workload analysis
- storage: Table export in CSV or Parquet format
- plotter: Interactive charts of the exported tables
- generation: Synthetic workload files
- cli: Command-line interface

Usage:
    From command line:
        workload-analyzer analyze --input-dir data/
        python -m workload_analyzer.cli.main analyze [options]

    Programmatically:
        from workload_analyzer import ReportAssembler, load_collection
        report = ReportAssembler().assemble(load_collection("data/"))
"""

# Configuration is imported first: its manager depends on the models, which
# in turn depend on the storage configuration module of this package.
from .config import get_config, clear_config_cache, set_config_path

from .analysis import ReportAssembler
from .cli import main_cli
from .ingestion import load_collection

# Model classes for external use
from .models import (
    AnalysisReport,
    AnalyzerConfig,
    AppConfig,
    TimedValue,
    Workload,
    WorkloadCollection,
)

# Validation utilities
from .validation import (
    AnalysisError,
    EmptySeriesError,
    MalformedInputError,
    NoDataError,
    UndefinedRatioError,
    UnsynchronizedChannelsError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "ReportAssembler",
    "load_collection",
    "main_cli",
    # Models
    "AnalysisReport",
    "AnalyzerConfig",
    "AppConfig",
    "TimedValue",
    "Workload",
    "WorkloadCollection",
    # Errors
    "AnalysisError",
    "EmptySeriesError",
    "MalformedInputError",
    "NoDataError",
    "UndefinedRatioError",
    "UnsynchronizedChannelsError",
    "ValidationError",
]
