"""Configuration system."""

from admin_core.config.loader import load_config
from admin_core.config.schema import (
    AppConfig,
    CacheConfig,
    DataStoreConfig,
    HealthThresholds,
    MonitoringConfig,
)

__all__ = [
    "AppConfig",
    "CacheConfig",
    "DataStoreConfig",
    "HealthThresholds",
    "MonitoringConfig",
    "load_config",
]
