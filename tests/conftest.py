"""Shared test fixtures."""

import logging

import pytest
import structlog

from admin_core.config.schema import CacheConfig, MonitoringConfig
from admin_core.metrics.monitor import PerformanceMonitor


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMemory:
    """Memory probe returning preset (used, total) figures."""

    def __init__(self, used: int = 0, total: int = 0) -> None:
        self.used = used
        self.total = total
        self.fail_with: Exception | None = None

    def __call__(self) -> tuple[int, int]:
        if self.fail_with is not None:
            raise self.fail_with
        return self.used, self.total


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo any setup_logging() a test performed."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory():
    return FakeMemory()


@pytest.fixture
def monitor(clock, memory):
    return PerformanceMonitor(MonitoringConfig(), clock=clock, memory_probe=memory)


@pytest.fixture
def cache_config():
    return CacheConfig(enabled=True, ttl_seconds=300, max_size=2)
