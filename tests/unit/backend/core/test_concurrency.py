"""Unit tests for notelens.backend.core.concurrency."""

import contextvars
from unittest.mock import MagicMock, patch

import pytest
import structlog

import notelens.backend.core.concurrency as concurrency_module
from notelens.backend.core.concurrency import (
    TracedThreadPoolExecutor,
    _semaphore_capacities,
    get_io_pool,
    get_semaphore,
    pool_status,
    run_blocking,
    shutdown_pools,
)


@pytest.fixture(autouse=True)
def _reset_pools():
    """Reset global pool state before and after each test."""
    concurrency_module._io_pool = None
    concurrency_module._semaphores.clear()
    concurrency_module._semaphore_capacities.clear()
    yield
    if concurrency_module._io_pool is not None:
        concurrency_module._io_pool.shutdown(wait=False)
        concurrency_module._io_pool = None
    concurrency_module._semaphores.clear()
    concurrency_module._semaphore_capacities.clear()


def _mock_concurrency_config(thread_max=4, sem_llm=3):
    """Create a mock concurrency config."""
    mock_config = MagicMock()
    mock_config.concurrency.thread_pool.max_workers = thread_max
    mock_config.concurrency.semaphores.llm = sem_llm
    mock_config.concurrency.semaphores.external_api = 10
    return mock_config


class TestTracedThreadPoolExecutor:
    def test_propagates_contextvars(self):
        """Contextvars set in the caller should be visible in the worker thread."""
        test_var = contextvars.ContextVar("test_var", default="default")
        test_var.set("from_caller")

        executor = TracedThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(test_var.get)
            assert future.result(timeout=5) == "from_caller"
        finally:
            executor.shutdown(wait=True)

    def test_propagates_structlog_context(self):
        """Structlog contextvars should be available in worker threads."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="test-123")

        executor = TracedThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(structlog.contextvars.get_contextvars)
            assert future.result(timeout=5).get("request_id") == "test-123"
        finally:
            executor.shutdown(wait=True)
            structlog.contextvars.clear_contextvars()


class TestGetIoPool:
    @patch("notelens.backend.core.config.get_app_config")
    def test_creates_pool_lazily(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config(thread_max=4)

        pool1 = get_io_pool()
        pool2 = get_io_pool()
        assert pool1 is pool2
        assert isinstance(pool1, TracedThreadPoolExecutor)
        assert pool1._max_workers == 4


class TestRunBlocking:
    async def test_runs_in_pool_and_returns_result(self):
        assert await run_blocking(lambda a, b: a * b, 6, 7) == 42

    async def test_propagates_exceptions(self):
        def fail():
            raise OSError("disk gone")

        with pytest.raises(OSError, match="disk gone"):
            await run_blocking(fail)


class TestGetSemaphore:
    @patch("notelens.backend.core.config.get_app_config")
    def test_creates_with_config_capacity(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config(sem_llm=3)

        sem = get_semaphore("llm")
        assert sem._value == 3
        assert _semaphore_capacities["llm"] == 3

    def test_returns_same_instance(self):
        assert get_semaphore("external_api") is get_semaphore("external_api")

    def test_defaults_to_20_for_unknown(self):
        assert get_semaphore("unknown_dep")._value == 20


class TestShutdownPools:
    async def test_cleans_up(self):
        get_io_pool()
        get_semaphore("llm")

        await shutdown_pools()

        assert concurrency_module._io_pool is None
        assert len(concurrency_module._semaphores) == 0
        assert len(concurrency_module._semaphore_capacities) == 0


class TestPoolStatus:
    def test_empty_before_first_use(self):
        assert pool_status() == {}

    @patch("notelens.backend.core.config.get_app_config")
    async def test_reports_pool_and_semaphore_usage(self, mock_get_config):
        mock_get_config.return_value = _mock_concurrency_config(thread_max=2, sem_llm=3)
        get_io_pool()
        semaphore = get_semaphore("llm")

        async with semaphore:
            status = pool_status()

        assert status["thread_pool"] == {"max_workers": 2}
        assert status["semaphores"]["llm"] == {"capacity": 3, "available": 2}
