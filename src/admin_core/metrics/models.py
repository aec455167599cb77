"""Snapshot models returned by the performance monitor."""

from __future__ import annotations

from pydantic import BaseModel, Field

from admin_core.metrics.formulas import HealthStatus


class SlowQuery(BaseModel):
    query: str
    duration: float
    timestamp: str  # ISO-8601 UTC


class EndpointStats(BaseModel):
    count: int = 0
    avg_time: float = 0.0
    errors: int = 0


class EndpointPerformance(EndpointStats):
    error_rate: float = 0.0


class QueryStats(BaseModel):
    count: int = 0
    total_time: float = 0.0
    slow_queries: list[SlowQuery] = Field(default_factory=list)


class ApiStats(BaseModel):
    requests: int = 0
    errors: int = 0
    avg_response_time: float = 0.0
    endpoints: dict[str, EndpointStats] = Field(default_factory=dict)


class CacheCounters(BaseModel):
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0


class CacheStats(CacheCounters):
    total: int = 0


class MemorySample(BaseModel):
    used: int = 0
    total: int = 0
    peak: int = 0


class PerformanceReport(BaseModel):
    uptime_ms: float
    queries: QueryStats
    api: ApiStats
    cache: CacheCounters
    memory: MemorySample


class HealthMetrics(BaseModel):
    slow_query_count: int
    error_rate: float
    cache_hit_rate: float
    memory_usage_percent: float


class HealthCheck(BaseModel):
    status: HealthStatus
    uptime_ms: float
    metrics: HealthMetrics
