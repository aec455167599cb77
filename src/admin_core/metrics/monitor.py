"""Performance monitor — in-process counters for queries, API calls and cache use."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import psutil

from admin_core.config.schema import MonitoringConfig
from admin_core.logging.setup import get_logger
from admin_core.metrics import formulas
from admin_core.metrics.models import (
    ApiStats,
    CacheCounters,
    CacheStats,
    EndpointPerformance,
    EndpointStats,
    HealthCheck,
    HealthMetrics,
    MemorySample,
    PerformanceReport,
    QueryStats,
    SlowQuery,
)

log = get_logger("performance")

MemoryProbe = Callable[[], tuple[int, int]]


def process_memory() -> tuple[int, int]:
    """(resident bytes of this process, total system memory bytes)."""
    return psutil.Process().memory_info().rss, psutil.virtual_memory().total


@dataclass
class _EndpointState:
    count: int = 0
    avg_time: float = 0.0
    errors: int = 0


class PerformanceMonitor:
    """Aggregates query, API and cache counters and derives a health verdict.

    Only running aggregates are stored: averages and rates are recomputed
    from the counters on every update. Nothing here raises; memory probe
    failures leave the previous sample in place.
    """

    def __init__(
        self,
        config: MonitoringConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        memory_probe: MemoryProbe | None = process_memory,
    ) -> None:
        self.config = config or MonitoringConfig()
        self._clock = clock
        self._memory_probe = memory_probe
        self._lock = threading.RLock()
        self._zero()

    def _zero(self) -> None:
        self._start = self._clock()
        self._query_count = 0
        self._query_total_time = 0.0
        self._slow_queries: deque[SlowQuery] = deque(maxlen=self.config.slow_query_limit)
        self._requests = 0
        self._errors = 0
        self._avg_response_time = 0.0
        self._endpoints: dict[str, _EndpointState] = {}
        self._hits = 0
        self._misses = 0
        self._hit_rate = 0.0
        self._memory = MemorySample()

    # --- recording ---

    def record_query(self, query: str, duration_ms: float) -> None:
        """Count a data-store query; keep it in the slow list if over the threshold."""
        with self._lock:
            self._query_count += 1
            self._query_total_time += duration_ms
            if duration_ms > self.config.slow_query_ms:
                self._slow_queries.append(SlowQuery(
                    query=query,
                    duration=duration_ms,
                    timestamp=datetime.now(timezone.utc).isoformat(),
                ))
                log.debug("slow_query_recorded", query=query, duration_ms=duration_ms)

    def record_api_request(self, endpoint: str, duration_ms: float, is_error: bool = False) -> None:
        """Count an API call and fold its duration into the endpoint and global averages."""
        with self._lock:
            self._requests += 1
            if is_error:
                self._errors += 1

            stats = self._endpoints.setdefault(endpoint, _EndpointState())
            stats.count += 1
            if is_error:
                stats.errors += 1
            stats.avg_time = formulas.running_average(stats.avg_time, stats.count, duration_ms)

            self._avg_response_time = formulas.weighted_mean(
                ((s.avg_time, s.count) for s in self._endpoints.values()),
                self._requests,
            )

    def record_cache_hit(self) -> None:
        with self._lock:
            self._hits += 1
            self._hit_rate = formulas.hit_rate(self._hits, self._misses)

    def record_cache_miss(self) -> None:
        with self._lock:
            self._misses += 1
            self._hit_rate = formulas.hit_rate(self._hits, self._misses)

    def update_memory_usage(self) -> None:
        """Sample process memory; keeps the previous sample if the probe fails."""
        if self._memory_probe is None:
            return
        try:
            used, total = self._memory_probe()
        except Exception as e:
            log.warning("memory_probe_failed", error=str(e))
            return
        with self._lock:
            self._memory = MemorySample(
                used=used,
                total=total,
                peak=max(self._memory.peak, used),
            )

    # --- reporting ---

    def get_report(self) -> PerformanceReport:
        """Snapshot of every counter, taken after a fresh memory sample."""
        self.update_memory_usage()
        with self._lock:
            return PerformanceReport(
                uptime_ms=(self._clock() - self._start) * 1000,
                queries=QueryStats(
                    count=self._query_count,
                    total_time=self._query_total_time,
                    slow_queries=[q.model_copy() for q in self._slow_queries],
                ),
                api=ApiStats(
                    requests=self._requests,
                    errors=self._errors,
                    avg_response_time=self._avg_response_time,
                    endpoints={
                        name: EndpointStats(count=s.count, avg_time=s.avg_time, errors=s.errors)
                        for name, s in self._endpoints.items()
                    },
                ),
                cache=CacheCounters(hits=self._hits, misses=self._misses, hit_rate=self._hit_rate),
                memory=self._memory.model_copy(),
            )

    def get_health_check(self) -> HealthCheck:
        """Derive the healthy / warning / critical verdict from a fresh report."""
        report = self.get_report()
        metrics = HealthMetrics(
            slow_query_count=len(report.queries.slow_queries),
            error_rate=formulas.error_rate(report.api.errors, report.api.requests),
            cache_hit_rate=report.cache.hit_rate,
            memory_usage_percent=formulas.usage_percent(report.memory.used, report.memory.total),
        )
        status = formulas.derive_status(
            metrics.error_rate,
            metrics.slow_query_count,
            metrics.memory_usage_percent,
            self.config.thresholds,
        )
        return HealthCheck(status=status, uptime_ms=report.uptime_ms, metrics=metrics)

    def get_endpoint_performance(self, endpoint: str) -> EndpointPerformance | None:
        with self._lock:
            stats = self._endpoints.get(endpoint)
            if stats is None:
                return None
            return EndpointPerformance(
                count=stats.count,
                avg_time=stats.avg_time,
                errors=stats.errors,
                error_rate=formulas.error_rate(stats.errors, stats.count),
            )

    def get_slow_queries(self, limit: int = 10) -> list[SlowQuery]:
        """Most recent *limit* slow queries, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            return [q.model_copy() for q in list(self._slow_queries)[-limit:]]

    def get_cache_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                hit_rate=self._hit_rate,
                total=self._hits + self._misses,
            )

    def reset(self) -> None:
        """Zero every counter and restart the uptime clock."""
        with self._lock:
            self._zero()
        log.info("performance_metrics_reset")
