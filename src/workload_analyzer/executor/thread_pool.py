"""
Thread pool management for per-workload analysis tasks.

Normalization, totals and the volatility estimators are pure functions of a
single workload, so the report assembler fans them out over a managed thread
pool and collects the results back by collection position. Stages that need
a shared accumulator receive per-task partial results and merge them on the
calling thread.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, TypeVar

import psutil

from ..validation import handle_error, ErrorSeverity

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ThreadPoolConfig:
    """Configuration for the analysis thread pool."""

    max_workers: int = 4
    thread_name_prefix: str = "AnalysisWorker"
    shutdown_timeout: float = 10.0


def get_available_worker_count() -> int:
    """Number of logical CPUs, falling back to 4 when it cannot be determined."""
    try:
        count = psutil.cpu_count(logical=True)
    except Exception as e:
        logger.warning(f"Failed to get CPU count: {e}")
        return 4
    return count or 4


class ManagedThreadPoolExecutor:
    """
    ThreadPoolExecutor wrapper with lifecycle management and task statistics.

    The worker count is capped by both the configured maximum and the number
    of logical CPUs available.
    """

    def __init__(self, config: ThreadPoolConfig):
        self.config = config
        self.executor: Optional[ThreadPoolExecutor] = None
        self.active_futures: Set[Future] = set()
        self.is_shutdown = False
        self._lock = threading.Lock()

        self.stats = {
            "tasks_submitted": 0,
            "tasks_completed": 0,
            "tasks_failed": 0,
        }

    @property
    def worker_count(self) -> int:
        return max(1, min(self.config.max_workers, get_available_worker_count()))

    def start(self) -> None:
        """
        Start the thread pool executor.

        Raises:
            RuntimeError: If already started
        """
        if self.executor is not None:
            raise RuntimeError("Thread pool already started")

        workers = self.worker_count
        self.executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        self.is_shutdown = False
        logger.debug(f"Started thread pool with {workers} workers")

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """
        Submit a task to the thread pool.

        Raises:
            RuntimeError: If executor is not started or is shutdown
        """
        if self.executor is None:
            raise RuntimeError("Thread pool not started")
        if self.is_shutdown:
            raise RuntimeError("Thread pool is shutdown")

        with self._lock:
            self.stats["tasks_submitted"] += 1

        future = self.executor.submit(fn, *args, **kwargs)
        with self._lock:
            self.active_futures.add(future)
        future.add_done_callback(self._task_completed)
        return future

    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """
        Run ``fn`` over ``items`` concurrently and return results in input order.

        The first exception raised by a task is propagated after all tasks
        have been waited for.
        """
        futures = [self.submit(fn, item) for item in items]
        results: List[R] = []
        first_error: Optional[BaseException] = None
        for future in futures:
            try:
                results.append(future.result())
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
        return results

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """
        Shutdown the thread pool executor.

        Args:
            wait: Whether to wait for completion
            cancel_futures: Whether to cancel pending futures
        """
        if self.executor is None or self.is_shutdown:
            return

        try:
            self.is_shutdown = True

            if cancel_futures:
                with self._lock:
                    for future in self.active_futures:
                        future.cancel()

            self.executor.shutdown(wait=wait)
            logger.debug("Thread pool shutdown completed" if wait else "Thread pool shutdown initiated")

        except Exception as e:
            handle_error(
                error=e,
                context="shutting down thread pool",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
        finally:
            self.executor = None
            with self._lock:
                self.active_futures.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get current thread pool statistics.

        Returns:
            Dictionary containing usage statistics
        """
        with self._lock:
            stats = self.stats.copy()
            stats["active_futures"] = len(self.active_futures)

        stats["is_shutdown"] = self.is_shutdown
        stats["success_rate"] = (
            stats["tasks_completed"] / max(1, stats["tasks_submitted"]) * 100
        )
        return stats

    def _task_completed(self, future: Future) -> None:
        with self._lock:
            self.active_futures.discard(future)

            if future.cancelled():
                return
            if future.exception() is not None:
                self.stats["tasks_failed"] += 1
            else:
                self.stats["tasks_completed"] += 1

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)


class InlineExecutor:
    """
    Sequential stand-in for ManagedThreadPoolExecutor.

    Used when parallel execution is disabled in configuration; offers the
    same ``map_ordered`` interface so callers need not branch.
    """

    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        return [fn(item) for item in items]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return None
