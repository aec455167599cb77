"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CacheStrategies(BaseModel):
    """Which GraphQL operation kinds may be served from the cache."""

    query: bool = True
    mutation: bool = False
    subscription: bool = False


class CacheConfig(BaseModel):
    enabled: bool = True
    ttl_seconds: float = 300
    max_size: int = 1000
    strategies: CacheStrategies = Field(default_factory=CacheStrategies)

    def allows(self, operation: str) -> bool:
        """True if results of *operation* ("query", "mutation", ...) may be cached."""
        if operation not in CacheStrategies.model_fields:
            return False
        return bool(getattr(self.strategies, operation))


class HealthThresholds(BaseModel):
    # Percentages, except the slow query counts
    error_rate_warning: float = 5
    error_rate_critical: float = 10
    slow_queries_warning: int = 10
    slow_queries_critical: int = 50
    memory_warning: float = 80
    memory_critical: float = 95


class MonitoringConfig(BaseModel):
    slow_query_ms: float = 100
    slow_query_limit: int = Field(100, ge=0)
    thresholds: HealthThresholds = Field(default_factory=HealthThresholds)


class DataStoreConfig(BaseModel):
    url: str = "http://localhost:8090"
    timeout_s: float = 5.0


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    cache: CacheConfig = Field(default_factory=CacheConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    datastore: DataStoreConfig = Field(default_factory=DataStoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
