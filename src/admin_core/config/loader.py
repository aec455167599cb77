"""Config loader — reads YAML, applies ADMIN_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from admin_core.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "ADMIN_DATASTORE_URL": ("datastore", "url"),
    "ADMIN_LOG_LEVEL": ("logging", "level"),
    "ADMIN_LOG_FORMAT": ("logging", "format"),
    "ADMIN_CACHE_ENABLED": ("cache", "enabled"),
    "ADMIN_CACHE_TTL_SECONDS": ("cache", "ttl_seconds"),
    "ADMIN_CACHE_MAX_SIZE": ("cache", "max_size"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        ADMIN_DATASTORE_URL      -> datastore.url
        ADMIN_LOG_LEVEL          -> logging.level
        ADMIN_LOG_FORMAT         -> logging.format
        ADMIN_CACHE_ENABLED      -> cache.enabled
        ADMIN_CACHE_TTL_SECONDS  -> cache.ttl_seconds
        ADMIN_CACHE_MAX_SIZE     -> cache.max_size

    Override values are plain strings; pydantic coerces them on validation.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
