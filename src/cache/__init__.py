"""Calendar snapshot caches."""

from typing import Optional

from src.cache.base import SnapshotCache, window_key
from src.cache.memory import InMemorySnapshotCache
from src.cache.redis_cache import RedisSnapshotCache
from src.config import settings


def create_snapshot_cache(backend: Optional[str] = None) -> SnapshotCache:
    """Build the configured cache backend with the configured TTL."""
    backend = backend or settings.cache_backend
    if backend == "redis":
        return RedisSnapshotCache(settings.engine.cache_ttl_seconds)
    return InMemorySnapshotCache(settings.engine.cache_ttl_seconds)


__all__ = [
    "SnapshotCache",
    "InMemorySnapshotCache",
    "RedisSnapshotCache",
    "create_snapshot_cache",
    "window_key",
]
