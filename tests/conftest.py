"""
Root Pytest Fixtures.

Shared fixtures available to all test types. Every test gets a fresh
in-memory entity store, so no test can see another test's records.
"""

from collections.abc import Generator

import pytest

from notelens.backend.core import concurrency
from notelens.backend.core.security import Principal
from notelens.backend.repositories.store import MemoryEntityStore


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store() -> MemoryEntityStore:
    """Provide an empty in-memory store for a single test."""
    return MemoryEntityStore()


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id="alice")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id="bob")


# =============================================================================
# Concurrency Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_semaphores() -> Generator[None, None, None]:
    """Semaphores bind to the running loop; each test runs on its own loop."""
    yield
    concurrency._semaphores.clear()
    concurrency._semaphore_capacities.clear()
