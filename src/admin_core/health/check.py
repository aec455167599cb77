"""One-shot health check that probes the data store and prints the health document."""

from __future__ import annotations

import asyncio

from admin_core.cache.memory import MemoryCache
from admin_core.config.loader import load_config
from admin_core.config.schema import AppConfig
from admin_core.health.composite import HealthDocument, build_health_document, exit_code_for
from admin_core.health.datastore import DataStoreProbe
from admin_core.logging.setup import configure_from, get_logger
from admin_core.metrics.monitor import PerformanceMonitor

log = get_logger("health")


async def run_check(
    config: AppConfig,
    *,
    probe: DataStoreProbe | None = None,
    cache: MemoryCache | None = None,
    monitor: PerformanceMonitor | None = None,
) -> HealthDocument:
    """Probe the data store and compose it with the cache and monitor state."""
    monitor = monitor or PerformanceMonitor(config.monitoring)
    if cache is None:
        cache = MemoryCache(config.cache, recorder=monitor)
    probe = probe or DataStoreProbe(config.datastore.url, config.datastore.timeout_s)
    try:
        datastore = await probe.check()
    finally:
        await probe.close()
    return build_health_document(datastore, cache, monitor)


def main(config_path: str | None = None) -> int:
    """Run the check, print the JSON document, return the process exit code."""
    config = load_config(config_path)
    configure_from(config.logging)

    document = asyncio.run(run_check(config))
    print(document.model_dump_json(indent=2))

    code = exit_code_for(document.status)
    if code:
        log.warning("health_check_degraded", status=document.status, exit_code=code)
    return code
