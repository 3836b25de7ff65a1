"""
Workload file ingestion.

This module discovers workload JSON files and parses them into a
WorkloadCollection.
"""

from .loader import (
    discover_workload_files,
    load_collection,
    load_workload_file,
    parse_sample,
    parse_timestamp,
    parse_workload,
)

__all__ = [
    "discover_workload_files",
    "load_collection",
    "load_workload_file",
    "parse_sample",
    "parse_timestamp",
    "parse_workload",
]
