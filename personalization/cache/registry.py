#!/usr/bin/env python3
"""
Cache Registry - Namespaced CacheStore instances.

Callers hold one registry (built by AppContext) and address caches by
namespace, e.g. ``registry.cache_get("careers", "job_42")``. Stores are
created lazily; namespaces without explicit config use the default.
Reads never create a namespace that is neither configured nor written to.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from personalization.config_loader import CacheConfig
from personalization.cache.backends import KeyValueBackend
from personalization.cache.models import CacheStats, MISS
from personalization.cache.store import CacheStore

logger = logging.getLogger(__name__)


class CacheRegistry:
    """Owns every CacheStore in the process."""

    def __init__(
        self,
        namespaces: Optional[Dict[str, CacheConfig]] = None,
        default: Optional[CacheConfig] = None,
        backend: Optional[KeyValueBackend] = None,
        clock: Callable[[], float] = time.time,
        flush_delay_seconds: float = 0.0
    ):
        self.namespace_configs = dict(namespaces or {})
        self.default_config = default or CacheConfig()
        self.backend = backend
        self.flush_delay_seconds = flush_delay_seconds
        self._clock = clock
        self._stores: Dict[str, CacheStore] = {}
        self._janitor_interval: Optional[float] = None
        self._lock = threading.Lock()

    def store(self, namespace: str) -> CacheStore:
        """Return the store for ``namespace``, creating it on first use."""
        with self._lock:
            store = self._stores.get(namespace)
            if store is None:
                config = self.namespace_configs.get(namespace, self.default_config)
                store = CacheStore(
                    namespace,
                    config=config,
                    backend=self.backend,
                    clock=self._clock,
                    flush_delay_seconds=self.flush_delay_seconds,
                )
                self._stores[namespace] = store
                if self._janitor_interval is not None:
                    store.start_janitor(self._janitor_interval)
                logger.debug(
                    f"Created cache namespace '{namespace}' "
                    f"(ttl={config.ttl_seconds}s, max_size={config.max_size})"
                )
            return store

    def _existing(self, namespace: str) -> Optional[CacheStore]:
        """Store for a configured or already-created namespace, else None."""
        with self._lock:
            known = namespace in self._stores or namespace in self.namespace_configs
        return self.store(namespace) if known else None

    def cache_get(self, namespace: str, key: str, default: Any = MISS) -> Any:
        store = self._existing(namespace)
        if store is None:
            return default
        return store.get(key, default)

    def cache_set(self, namespace: str, key: str, value: Any) -> None:
        self.store(namespace).set(key, value)

    def get_stats(self, namespace: str) -> CacheStats:
        store = self._existing(namespace)
        return store.get_stats() if store is not None else CacheStats()

    def all_stats(self) -> Dict[str, CacheStats]:
        with self._lock:
            stores = dict(self._stores)
        return {name: store.get_stats() for name, store in stores.items()}

    def total_hit_rate(self) -> float:
        stats = self.all_stats().values()
        hits = sum(s.hits for s in stats)
        requests = hits + sum(s.misses for s in stats)
        return hits / requests if requests > 0 else 0.0

    def total_estimated_bytes(self) -> int:
        return sum(s.estimated_bytes for s in self.all_stats().values())

    def cleanup_all(self) -> int:
        with self._lock:
            stores = list(self._stores.values())
        return sum(store.cleanup() for store in stores)

    def clear_all(self) -> None:
        with self._lock:
            stores = list(self._stores.values())
        for store in stores:
            store.clear()

    def start_janitors(self, interval_seconds: float) -> None:
        """Sweep every store now and any created later."""
        with self._lock:
            self._janitor_interval = interval_seconds
            stores = list(self._stores.values())
        for store in stores:
            store.start_janitor(interval_seconds)

    def close(self) -> None:
        with self._lock:
            self._janitor_interval = None
            stores = list(self._stores.values())
        for store in stores:
            store.close()
        logger.info(f"Closed {len(stores)} cache namespace(s)")
