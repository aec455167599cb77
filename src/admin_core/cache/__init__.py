"""In-process query cache."""

from admin_core.cache.memory import HitMissRecorder, MemoryCache, make_key, read_through

__all__ = ["HitMissRecorder", "MemoryCache", "make_key", "read_through"]
