"""FastAPI application exposing health, performance and cache endpoints."""

from __future__ import annotations

import time

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admin_core.cache.memory import MemoryCache
from admin_core.config.loader import load_config
from admin_core.config.schema import AppConfig
from admin_core.health.composite import build_health_document, http_status_for
from admin_core.health.datastore import DataStoreProbe
from admin_core.logging.setup import get_logger
from admin_core.metrics.models import (
    EndpointPerformance,
    HealthCheck,
    PerformanceReport,
    SlowQuery,
)
from admin_core.metrics.monitor import PerformanceMonitor

logger = get_logger("api")

# Requests to these paths are not fed into the performance monitor
UNTIMED_PATHS = frozenset({"/health"})

# Shared label for requests that match no route, so unknown paths add one entry
UNMATCHED_PATH = "<unmatched>"


def get_monitor(request: Request) -> PerformanceMonitor:
    return request.app.state.monitor


def get_cache(request: Request) -> MemoryCache:
    return request.app.state.cache


def get_probe(request: Request) -> DataStoreProbe:
    return request.app.state.probe


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None) or UNMATCHED_PATH
    return f"{request.method} {path}"


def create_app(
    config: AppConfig | None = None,
    *,
    cache: MemoryCache | None = None,
    monitor: PerformanceMonitor | None = None,
    probe: DataStoreProbe | None = None,
) -> FastAPI:
    """Build the API with one shared cache, monitor and data-store probe.

    Any instance not passed in is constructed from *config*.
    """
    config = config or load_config()
    monitor = monitor or PerformanceMonitor(config.monitoring)
    if cache is None:
        cache = MemoryCache(config.cache, recorder=monitor)
    probe = probe or DataStoreProbe(config.datastore.url, config.datastore.timeout_s)

    app = FastAPI(
        title="Admin Operations API",
        description="Health, performance and cache endpoints for the admin backend",
        version="0.1.0",
    )
    app.state.config = config
    app.state.monitor = monitor
    app.state.cache = cache
    app.state.probe = probe

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_timing(request: Request, call_next):
        if request.url.path in UNTIMED_PATHS:
            return await call_next(request)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            monitor.record_api_request(
                _endpoint_label(request), (time.perf_counter() - start) * 1000, is_error=True
            )
            raise
        monitor.record_api_request(
            _endpoint_label(request),
            (time.perf_counter() - start) * 1000,
            is_error=response.status_code >= 500,
        )
        return response

    @app.on_event("shutdown")
    async def shutdown_event():
        await probe.close()
        logger.info("Data store probe closed")

    # ═══════════════════════════════════════════════════════════════
    # Health
    # ═══════════════════════════════════════════════════════════════

    @app.get("/health")
    async def health(
        cache: MemoryCache = Depends(get_cache),
        monitor: PerformanceMonitor = Depends(get_monitor),
        probe: DataStoreProbe = Depends(get_probe),
    ):
        """Composite health document; 503 when critical."""
        datastore = await probe.check()
        document = build_health_document(datastore, cache, monitor)
        return JSONResponse(
            content=document.model_dump(mode="json"),
            status_code=http_status_for(document.status),
        )

    # ═══════════════════════════════════════════════════════════════
    # Performance
    # ═══════════════════════════════════════════════════════════════

    @app.get("/api/performance", response_model=PerformanceReport)
    def performance_report(monitor: PerformanceMonitor = Depends(get_monitor)):
        return monitor.get_report()

    @app.get("/api/performance/health", response_model=HealthCheck)
    def performance_health(monitor: PerformanceMonitor = Depends(get_monitor)):
        return monitor.get_health_check()

    @app.get("/api/performance/endpoints/{endpoint:path}", response_model=EndpointPerformance)
    def endpoint_performance(endpoint: str, monitor: PerformanceMonitor = Depends(get_monitor)):
        stats = monitor.get_endpoint_performance(endpoint)
        if stats is None:
            raise HTTPException(status_code=404, detail=f"No requests recorded for {endpoint!r}")
        return stats

    @app.get("/api/performance/slow-queries", response_model=list[SlowQuery])
    def slow_queries(
        limit: int = Query(10, ge=1, le=1000),
        monitor: PerformanceMonitor = Depends(get_monitor),
    ):
        return monitor.get_slow_queries(limit)

    @app.post("/api/performance/reset")
    def reset_performance(monitor: PerformanceMonitor = Depends(get_monitor)):
        monitor.reset()
        return {"reset": True}

    # ═══════════════════════════════════════════════════════════════
    # Cache
    # ═══════════════════════════════════════════════════════════════

    @app.get("/api/cache/stats")
    def cache_stats(
        cache: MemoryCache = Depends(get_cache),
        monitor: PerformanceMonitor = Depends(get_monitor),
    ):
        return {
            "cache": cache.get_stats(),
            "metrics": monitor.get_cache_stats().model_dump(),
        }

    @app.delete("/api/cache")
    def clear_cache(cache: MemoryCache = Depends(get_cache)):
        size = cache.get_stats()["size"]
        cache.clear()
        logger.info("Cache cleared", entries=size)
        return {"cleared": size}

    return app
