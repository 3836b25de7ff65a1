"""
Synthetic workload generation for the workload_analyzer package.
"""

from .generator import (
    generate_channel,
    generate_workload,
    generate_workloads,
    local_midnight,
    workload_to_document,
    write_workload_files,
)

__all__ = [
    "generate_channel",
    "generate_workload",
    "generate_workloads",
    "local_midnight",
    "workload_to_document",
    "write_workload_files",
]
