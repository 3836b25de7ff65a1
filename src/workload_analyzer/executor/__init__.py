"""
Task execution for the workload_analyzer package.

This module provides the managed thread pool used to fan per-workload
analysis stages out across worker threads.
"""

from .thread_pool import (
    InlineExecutor,
    ManagedThreadPoolExecutor,
    ThreadPoolConfig,
    get_available_worker_count,
)

__all__ = [
    "InlineExecutor",
    "ManagedThreadPoolExecutor",
    "ThreadPoolConfig",
    "get_available_worker_count",
]
