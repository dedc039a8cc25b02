"""
Concurrency Infrastructure.

One shared thread pool for blocking work, and named semaphores bounding
calls to outside services. Both are created on first use from
config/settings/concurrency.yaml and released by shutdown_pools() when the
application stops.

    text = await run_blocking(extract_text, path)   # pypdf, upload writes

    async with get_semaphore("llm"):                # model provider
        result = await agent.run(prompt)

    async with get_semaphore("external_api"):       # oEmbed lookups
        response = await client.get(url)

Worker threads see the caller's contextvars, so log lines written from the
pool still carry request_id and the rest of the bound request context.
"""

import asyncio
import contextvars
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from notelens.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_SEMAPHORE_CAPACITY = 20

_io_pool: ThreadPoolExecutor | None = None
_semaphores: dict[str, asyncio.Semaphore] = {}
_semaphore_capacities: dict[str, int] = {}


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor running each task inside a copy of the submitter's context."""

    def submit(self, fn, /, *args, **kwargs):
        return super().submit(contextvars.copy_context().run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """The shared pool, sized by `thread_pool.max_workers`."""
    global _io_pool
    if _io_pool is None:
        from notelens.backend.core.config import get_app_config

        workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=workers, thread_name_prefix="notelens-io")
        logger.info("Thread pool created", extra={"max_workers": workers})
    return _io_pool


async def run_blocking(fn: Callable[..., T], *args: Any) -> T:
    """Await `fn(*args)` on the shared pool. Exceptions propagate to the caller."""
    return await asyncio.get_running_loop().run_in_executor(get_io_pool(), fn, *args)


def get_semaphore(name: str) -> asyncio.Semaphore:
    """
    Semaphore for the dependency `name`.

    Capacity comes from `semaphores.<name>` in concurrency.yaml, or
    DEFAULT_SEMAPHORE_CAPACITY for names the file does not list.
    """
    semaphore = _semaphores.get(name)
    if semaphore is None:
        from notelens.backend.core.config import get_app_config

        capacity = getattr(get_app_config().concurrency.semaphores, name, DEFAULT_SEMAPHORE_CAPACITY)
        semaphore = _semaphores[name] = asyncio.Semaphore(capacity)
        _semaphore_capacities[name] = capacity
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return semaphore


def pool_status() -> dict[str, Any]:
    """Snapshot of the pool and of every semaphore created so far, for /health/ready."""
    status: dict[str, Any] = {}
    if _io_pool is not None:
        status["thread_pool"] = {"max_workers": _io_pool._max_workers}
    if _semaphores:
        status["semaphores"] = {
            name: {"capacity": _semaphore_capacities[name], "available": semaphore._value}
            for name, semaphore in _semaphores.items()
        }
    return status


async def shutdown_pools() -> None:
    """Wait for queued pool work, then forget the pool and all semaphores."""
    global _io_pool

    if _io_pool is not None:
        pool, _io_pool = _io_pool, None
        await asyncio.to_thread(pool.shutdown, wait=True)
        logger.info("Thread pool shut down")

    _semaphores.clear()
    _semaphore_capacities.clear()
