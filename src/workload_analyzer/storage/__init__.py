"""
Storage module for analysis output.

This module provides the table storage backends and the report exporter:
- CSV tables (default), readable in any spreadsheet
- Parquet tables with configurable compression (Snappy, Gzip, Brotli, LZ4, Zstd)
- A JSON summary document alongside the tables

All backends share the DataStorage interface and use Polars for DataFrame
operations.
"""

from .base import DataStorage
from .csv_storage import CsvStorage
from .parquet_storage import ParquetStorage
from .factory import create_storage
from .report_exporter import (
    AGGREGATE_VOLATILITY_TABLE,
    AGGREGATED_TABLE,
    INTERVALS_TABLE,
    SUMMARY_DOCUMENT,
    SUMMARY_TABLE,
    TABLE_NAMES,
    VOLATILITY_TABLE,
    ReportExporter,
    format_timestamp,
)

__all__ = [
    "DataStorage",
    "CsvStorage",
    "ParquetStorage",
    "create_storage",
    "ReportExporter",
    "format_timestamp",
    "AGGREGATED_TABLE",
    "VOLATILITY_TABLE",
    "INTERVALS_TABLE",
    "AGGREGATE_VOLATILITY_TABLE",
    "SUMMARY_TABLE",
    "SUMMARY_DOCUMENT",
    "TABLE_NAMES",
]
