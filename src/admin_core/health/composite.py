"""Composite health of the data store, cache and performance monitor."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

from admin_core.cache.memory import MemoryCache
from admin_core.config.schema import HealthThresholds
from admin_core.health.datastore import DataStoreStatus
from admin_core.metrics.formulas import HealthStatus
from admin_core.metrics.models import HealthMetrics
from admin_core.metrics.monitor import PerformanceMonitor

CacheStatus = Literal["healthy", "disabled"]


class CacheService(BaseModel):
    status: CacheStatus
    enabled: bool
    size: int


class PerformanceService(BaseModel):
    status: HealthStatus
    memory_status: HealthStatus
    uptime_ms: float
    metrics: HealthMetrics


class HealthServices(BaseModel):
    datastore: DataStoreStatus
    cache: CacheService
    performance: PerformanceService


class HealthDocument(BaseModel):
    status: HealthStatus
    timestamp: str
    services: HealthServices


def compose_status(datastore_reachable: bool, *sub_statuses: str) -> HealthStatus:
    """Overall verdict.

    critical: data store unreachable, or any sub-status critical.
    warning:  any sub-status warning or error.
    healthy:  otherwise.
    """
    if not datastore_reachable or "critical" in sub_statuses:
        return "critical"
    if "warning" in sub_statuses or "error" in sub_statuses:
        return "warning"
    return "healthy"


def cache_status(stats: dict) -> CacheStatus:
    return "healthy" if stats.get("enabled") else "disabled"


def memory_status(memory_usage_percent: float, thresholds: HealthThresholds | None = None) -> HealthStatus:
    t = thresholds or HealthThresholds()
    if memory_usage_percent > t.memory_critical:
        return "critical"
    if memory_usage_percent > t.memory_warning:
        return "warning"
    return "healthy"


def build_health_document(
    datastore: DataStoreStatus,
    cache: MemoryCache,
    monitor: PerformanceMonitor,
) -> HealthDocument:
    perf = monitor.get_health_check()
    mem = memory_status(perf.metrics.memory_usage_percent, monitor.config.thresholds)
    stats = cache.get_stats()
    cache_svc = CacheService(status=cache_status(stats), enabled=stats["enabled"], size=stats["size"])

    return HealthDocument(
        status=compose_status(datastore.reachable, cache_svc.status, mem, perf.status),
        timestamp=datetime.now(timezone.utc).isoformat(),
        services=HealthServices(
            datastore=datastore,
            cache=cache_svc,
            performance=PerformanceService(
                status=perf.status,
                memory_status=mem,
                uptime_ms=perf.uptime_ms,
                metrics=perf.metrics,
            ),
        ),
    )


def http_status_for(status: str) -> int:
    return 503 if status == "critical" else 200


def exit_code_for(status: str) -> int:
    """0 healthy, 1 warning, 2 critical."""
    return {"healthy": 0, "warning": 1}.get(status, 2)
