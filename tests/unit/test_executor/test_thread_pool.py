"""
Unit tests for the managed thread pool executor.
"""

import threading
from unittest.mock import patch

import pytest

from workload_analyzer.executor import (
    InlineExecutor,
    ManagedThreadPoolExecutor,
    ThreadPoolConfig,
    get_available_worker_count,
)


@pytest.mark.unit
class TestManagedThreadPoolExecutor:
    """Test cases for the executor lifecycle and ordered mapping."""

    @pytest.fixture
    def config(self):
        return ThreadPoolConfig(max_workers=3, thread_name_prefix="TestPool", shutdown_timeout=5.0)

    def test_map_ordered_preserves_input_order(self, config):
        with ManagedThreadPoolExecutor(config) as executor:
            results = executor.map_ordered(lambda x: x * x, list(range(20)))

        assert results == [x * x for x in range(20)]

    def test_threads_use_name_prefix(self, config):
        with ManagedThreadPoolExecutor(config) as executor:
            names = executor.map_ordered(lambda _: threading.current_thread().name, [1, 2])

        assert all(name.startswith("TestPool") for name in names)

    def test_map_ordered_propagates_first_error(self, config):
        def task(x):
            if x == 2:
                raise ValueError("task failed")
            return x

        with ManagedThreadPoolExecutor(config) as executor:
            with pytest.raises(ValueError, match="task failed"):
                executor.map_ordered(task, [1, 2, 3])

        assert executor.get_stats()["tasks_failed"] == 1

    def test_stats_after_shutdown(self, config):
        executor = ManagedThreadPoolExecutor(config)
        with executor:
            executor.map_ordered(str, [1, 2, 3, 4])

        stats = executor.get_stats()
        assert stats["tasks_submitted"] == 4
        assert stats["tasks_completed"] == 4
        assert stats["active_futures"] == 0
        assert stats["is_shutdown"] is True
        assert stats["success_rate"] == 100.0

    def test_submit_requires_start(self, config):
        executor = ManagedThreadPoolExecutor(config)

        with pytest.raises(RuntimeError, match="not started"):
            executor.submit(print)

    def test_double_start_raises(self, config):
        executor = ManagedThreadPoolExecutor(config)
        executor.start()
        try:
            with pytest.raises(RuntimeError, match="already started"):
                executor.start()
        finally:
            executor.shutdown()

    def test_shutdown_is_idempotent(self, config):
        executor = ManagedThreadPoolExecutor(config)
        executor.start()

        executor.shutdown()
        executor.shutdown()

        assert executor.executor is None

    def test_worker_count_capped_by_cpus(self, config):
        with patch("workload_analyzer.executor.thread_pool.get_available_worker_count", return_value=2):
            assert ManagedThreadPoolExecutor(config).worker_count == 2
        with patch("workload_analyzer.executor.thread_pool.get_available_worker_count", return_value=16):
            assert ManagedThreadPoolExecutor(config).worker_count == 3


@pytest.mark.unit
class TestHelpers:
    """Test cases for the inline executor and CPU detection."""

    def test_inline_executor(self):
        with InlineExecutor() as executor:
            assert executor.map_ordered(lambda x: x + 1, [1, 2]) == [2, 3]

    def test_available_worker_count_fallback(self):
        with patch("workload_analyzer.executor.thread_pool.psutil.cpu_count", return_value=None):
            assert get_available_worker_count() == 4
        with patch("workload_analyzer.executor.thread_pool.psutil.cpu_count", side_effect=OSError("no cpu info")):
            assert get_available_worker_count() == 4
        with patch("workload_analyzer.executor.thread_pool.psutil.cpu_count", return_value=8):
            assert get_available_worker_count() == 8
