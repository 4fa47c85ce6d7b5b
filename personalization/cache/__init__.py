"""Cache Module - TTL/LRU stores, persistence backends and the namespace registry."""
from personalization.cache.models import CacheEntry, CacheStats, MISS
from personalization.cache.backends import (
    KeyValueBackend,
    MemoryBackend,
    JsonFileBackend,
    RedisBackend,
    build_backend,
)
from personalization.cache.store import CacheStore
from personalization.cache.registry import CacheRegistry

__all__ = [
    'CacheEntry',
    'CacheStats',
    'MISS',
    'KeyValueBackend',
    'MemoryBackend',
    'JsonFileBackend',
    'RedisBackend',
    'build_backend',
    'CacheStore',
    'CacheRegistry',
]
