"""Performance metrics: formulas, the in-process monitor and timing wrappers."""

from admin_core.metrics.formulas import (
    HealthStatus,
    derive_status,
    error_rate,
    hit_rate,
    running_average,
    usage_percent,
    weighted_mean,
)
from admin_core.metrics.instrument import timed_method, with_query_timing, with_timing
from admin_core.metrics.models import (
    CacheStats,
    EndpointPerformance,
    HealthCheck,
    PerformanceReport,
    SlowQuery,
)
from admin_core.metrics.monitor import PerformanceMonitor, process_memory

__all__ = [
    "CacheStats",
    "EndpointPerformance",
    "HealthCheck",
    "HealthStatus",
    "PerformanceMonitor",
    "PerformanceReport",
    "SlowQuery",
    "derive_status",
    "error_rate",
    "hit_rate",
    "process_memory",
    "running_average",
    "timed_method",
    "usage_percent",
    "weighted_mean",
    "with_query_timing",
    "with_timing",
]
