"""
Report exporter for analysis results.

This module provides a high-level interface for writing an AnalysisReport
to disk as a set of tables in the configured storage format, plus a JSON
summary document, and for reading those tables back for plotting.

Tables written (file extension depends on the storage format):

- ``aggregated_workloads``: collection-wide channel totals per timestamp,
  full precision
- ``workload_volatility``: interval volatility per workload, two decimals
- ``workload_volatility_intervals``: interval change series, two decimals
- ``aggregate_volatility``: rolling aggregate volatility, two decimals
- ``workload_summary``: every derived field of every workload

The summary document ``analysis_summary.json`` holds the peak usage instant,
top contributors, grand totals, deviation statistics, tiers and failures.
"""

import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl

from ..config.storage_config import StorageConfig
from ..models.results import AnalysisReport
from .factory import create_storage

logger = logging.getLogger(__name__)

AGGREGATED_TABLE = "aggregated_workloads"
VOLATILITY_TABLE = "workload_volatility"
INTERVALS_TABLE = "workload_volatility_intervals"
AGGREGATE_VOLATILITY_TABLE = "aggregate_volatility"
SUMMARY_TABLE = "workload_summary"
SUMMARY_DOCUMENT = "analysis_summary.json"

TABLE_NAMES = (
    AGGREGATED_TABLE,
    VOLATILITY_TABLE,
    INTERVALS_TABLE,
    AGGREGATE_VOLATILITY_TABLE,
    SUMMARY_TABLE,
)

# Derived workload fields in workload_summary column order.
SUMMARY_FIELDS = (
    "value_generated",
    "total_a",
    "total_b",
    "total_c",
    "total_cost",
    "relative_load_a",
    "relative_load_b",
    "relative_load_c",
    "relative_cost",
    "relative_value_generated",
    "windowed_volatility_a",
    "windowed_volatility_b",
    "windowed_volatility_c",
    "range_volatility_a",
    "range_volatility_b",
    "range_volatility_c",
    "interval_volatility",
)


def format_timestamp(timestamp: Optional[datetime]) -> str:
    """ISO 8601 text of ``timestamp``; an unset timestamp becomes an empty string."""
    if timestamp is None:
        return ""
    return timestamp.isoformat()


def _round_columns(df: pl.DataFrame, columns: List[str]) -> pl.DataFrame:
    return df.with_columns([pl.col(c).round(2) for c in columns])


def aggregated_frame(report: AnalysisReport) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "timestamp": [format_timestamp(p.timestamp) for p in report.aggregated],
            "total_a": [p.total_a for p in report.aggregated],
            "total_b": [p.total_b for p in report.aggregated],
            "total_c": [p.total_c for p in report.aggregated],
        },
        schema={"timestamp": pl.Utf8, "total_a": pl.Float64, "total_b": pl.Float64, "total_c": pl.Float64},
    )


def volatility_frame(report: AnalysisReport) -> pl.DataFrame:
    """Interval volatility per workload; undefined figures are null."""
    df = pl.DataFrame(
        {
            "workload": [w.name for w in report.workloads],
            "volatility": [w.interval_volatility for w in report.workloads],
        },
        schema={"workload": pl.Utf8, "volatility": pl.Float64},
    )
    return _round_columns(df, ["volatility"])


def intervals_frame(report: AnalysisReport) -> pl.DataFrame:
    df = pl.DataFrame(
        {
            "timestamp": [format_timestamp(c.timestamp) for c in report.interval_changes],
            "workload": [c.name for c in report.interval_changes],
            "change": [c.change for c in report.interval_changes],
        },
        schema={"timestamp": pl.Utf8, "workload": pl.Utf8, "change": pl.Float64},
    )
    return _round_columns(df, ["change"])


def aggregate_volatility_frame(report: AnalysisReport) -> pl.DataFrame:
    points = report.aggregate_volatility
    df = pl.DataFrame(
        {
            "timestamp": [format_timestamp(p.timestamp) for p in points],
            "volatility_a": [p.channel_a for p in points],
            "volatility_b": [p.channel_b for p in points],
            "volatility_c": [p.channel_c for p in points],
        },
        schema={
            "timestamp": pl.Utf8,
            "volatility_a": pl.Float64,
            "volatility_b": pl.Float64,
            "volatility_c": pl.Float64,
        },
    )
    return _round_columns(df, ["volatility_a", "volatility_b", "volatility_c"])


def summary_frame(report: AnalysisReport) -> pl.DataFrame:
    """One row per workload with its sample count and every derived field."""
    columns: Dict[str, Any] = {
        "workload": [w.name for w in report.workloads],
        "samples": [len(w.load_a) for w in report.workloads],
    }
    schema: Dict[str, Any] = {"workload": pl.Utf8, "samples": pl.Int64}
    for name in SUMMARY_FIELDS:
        columns[name] = [getattr(w, name) for w in report.workloads]
        schema[name] = pl.Float64
    return pl.DataFrame(columns, schema=schema)


def summary_document(report: AnalysisReport) -> Dict[str, Any]:
    """JSON-serializable overview of ``report``."""
    peak = report.peak_usage
    return {
        "has_data": report.has_data,
        "workload_count": len(report.workloads),
        "peak_usage": (
            {"timestamp": format_timestamp(peak.timestamp), "total_usage": peak.total_usage}
            if peak is not None else None
        ),
        "top_contributors": [asdict(c) for c in report.top_contributors],
        "grand_totals": asdict(report.grand_totals) if report.grand_totals else None,
        "deviation": asdict(report.deviation) if report.deviation else None,
        "tiers": asdict(report.tiers) if report.tiers else None,
        "failures": report.failures,
    }


class ReportExporter:
    """
    Writes analysis reports to an output directory.

    The table format follows the storage configuration; the summary document
    is always JSON.
    """

    def __init__(self, output_dir: Path, storage_config: Optional[StorageConfig] = None):
        """
        Initialize the exporter.

        Args:
            output_dir: Directory where tables will be written
            storage_config: Table format selection, CSV when omitted
        """
        self.output_dir = Path(output_dir)
        storage_config = storage_config or StorageConfig()
        self.storage_format = storage_config.format
        self.compression = storage_config.compression
        self.storage = create_storage(self.storage_format, self.compression)
        logger.debug(f"Initialized ReportExporter with format: {self.storage_format}")

    def table_path(self, name: str) -> Path:
        return self.storage.table_path(self.output_dir, name)

    def export(self, report: AnalysisReport) -> Dict[str, Path]:
        """
        Write all tables and the summary document for ``report``.

        Returns:
            Mapping of table name (and summary document name) to written path

        Raises:
            Exception: If any storage operation fails
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            frames = {
                AGGREGATED_TABLE: aggregated_frame(report),
                VOLATILITY_TABLE: volatility_frame(report),
                INTERVALS_TABLE: intervals_frame(report),
                AGGREGATE_VOLATILITY_TABLE: aggregate_volatility_frame(report),
                SUMMARY_TABLE: summary_frame(report),
            }

            written: Dict[str, Path] = {}
            for name, df in frames.items():
                path = self.table_path(name)
                self.storage.save_dataframe(df, path)
                written[name] = path

            summary_path = self.output_dir / SUMMARY_DOCUMENT
            self.storage.save_dict(summary_document(report), summary_path)
            written[SUMMARY_DOCUMENT] = summary_path

            logger.info(f"Exported {len(frames)} tables to: {self.output_dir}")
            return written

        except Exception as e:
            logger.error(f"Error exporting analysis report: {e}", exc_info=True)
            raise

    def load_table(self, name: str, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Load a previously exported table.

        Raises:
            FileNotFoundError: If the table has not been exported to this directory
        """
        path = self.table_path(name)
        if not self.storage.file_exists(path):
            raise FileNotFoundError(f"Table '{name}' not found in {self.output_dir}")
        return self.storage.load_dataframe(path, columns)

    def load_summary(self) -> Dict[str, Any]:
        """
        Load the summary document of a previous export.

        Raises:
            FileNotFoundError: If no summary has been exported to this directory
        """
        path = self.output_dir / SUMMARY_DOCUMENT
        if not self.storage.file_exists(path):
            raise FileNotFoundError(f"Summary '{SUMMARY_DOCUMENT}' not found in {self.output_dir}")
        return self.storage.load_dict(path)

    def get_storage_info(self) -> Dict[str, Any]:
        """
        Describe the storage configuration and the tables present on disk.

        Returns:
            Dictionary with ``storage_format``, ``compression``, ``output_dir``
            and ``files`` (file name -> size in bytes)
        """
        info: Dict[str, Any] = {
            "storage_format": self.storage_format,
            "compression": self.compression,
            "output_dir": str(self.output_dir),
            "files": {},
        }
        for name in TABLE_NAMES:
            path = self.table_path(name)
            if path.exists():
                info["files"][path.name] = self.storage.get_file_size(path)
        return info
