"""Timing wrappers that feed call durations into a PerformanceMonitor."""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable
from typing import Any, TypeVar

from admin_core.metrics.monitor import PerformanceMonitor

F = TypeVar("F", bound=Callable[..., Any])


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def with_timing(fn: F, monitor: PerformanceMonitor, label: str) -> F:
    """Wrap *fn* so each call is recorded as an API request named *label*.

    A call that raises is recorded with ``is_error=True`` and the exception
    is re-raised. Coroutine functions get an async wrapper.
    """
    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await fn(*args, **kwargs)
            except Exception:
                monitor.record_api_request(label, _elapsed_ms(start), is_error=True)
                raise
            monitor.record_api_request(label, _elapsed_ms(start))
            return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = fn(*args, **kwargs)
        except Exception:
            monitor.record_api_request(label, _elapsed_ms(start), is_error=True)
            raise
        monitor.record_api_request(label, _elapsed_ms(start))
        return result

    return wrapper  # type: ignore[return-value]


def with_query_timing(fn: F, monitor: PerformanceMonitor, query: str) -> F:
    """Wrap *fn* so each call is recorded as a data-store query, failed or not."""
    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return await fn(*args, **kwargs)
            finally:
                monitor.record_query(query, _elapsed_ms(start))

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return fn(*args, **kwargs)
        finally:
            monitor.record_query(query, _elapsed_ms(start))

    return wrapper  # type: ignore[return-value]


def timed_method(monitor: PerformanceMonitor, owner: str) -> Callable[[F], F]:
    """Decorator factory labelling calls as ``"<owner>.<function name>"``."""

    def decorate(fn: F) -> F:
        return with_timing(fn, monitor, f"{owner}.{fn.__name__}")

    return decorate
