"""Pure metric computation functions — no state, no clock."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from admin_core.config.schema import HealthThresholds

HealthStatus = Literal["healthy", "warning", "critical"]


def hit_rate(hits: int, misses: int) -> float:
    """Cache hit rate as a percentage 0-100."""
    total = hits + misses
    if total <= 0:
        return 0.0
    return hits / total * 100


def error_rate(errors: int, requests: int) -> float:
    """Error rate as a percentage 0-100."""
    if requests <= 0:
        return 0.0
    return errors / requests * 100


def usage_percent(used: float, total: float) -> float:
    """Used / total as a percentage, 0 when *total* is unknown."""
    if total <= 0:
        return 0.0
    return used / total * 100


def running_average(old_avg: float, new_count: int, value: float) -> float:
    """Fold *value* into an average that now covers *new_count* samples."""
    return (old_avg * (new_count - 1) + value) / new_count


def weighted_mean(pairs: Iterable[tuple[float, int]], total: int) -> float:
    """Sum of ``avg * count`` over (avg, count) pairs, divided by *total*."""
    if total <= 0:
        return 0.0
    return sum(avg * count for avg, count in pairs) / total


def derive_status(
    error_rate_pct: float,
    slow_query_count: int,
    memory_usage_pct: float,
    thresholds: HealthThresholds | None = None,
) -> HealthStatus:
    """Coarse health verdict. Critical conditions override warning ones."""
    t = thresholds or HealthThresholds()
    status: HealthStatus = "healthy"
    if (
        error_rate_pct > t.error_rate_warning
        or slow_query_count > t.slow_queries_warning
        or memory_usage_pct > t.memory_warning
    ):
        status = "warning"
    if (
        error_rate_pct > t.error_rate_critical
        or slow_query_count > t.slow_queries_critical
        or memory_usage_pct > t.memory_critical
    ):
        status = "critical"
    return status
