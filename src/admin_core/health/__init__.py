"""Composite health evaluation."""

from admin_core.health.composite import (
    HealthDocument,
    build_health_document,
    cache_status,
    compose_status,
    exit_code_for,
    http_status_for,
    memory_status,
)
from admin_core.health.datastore import DataStoreProbe, DataStoreStatus

__all__ = [
    "DataStoreProbe",
    "DataStoreStatus",
    "HealthDocument",
    "build_health_document",
    "cache_status",
    "compose_status",
    "exit_code_for",
    "http_status_for",
    "memory_status",
]
