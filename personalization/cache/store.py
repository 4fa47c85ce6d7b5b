#!/usr/bin/env python3
"""
Cache Store - In-memory TTL + LRU store with hit-rate instrumentation.

One CacheStore owns one namespace. The entry map, eviction and stats are
guarded by a single re-entrant lock so no reader ever observes an entry
mid-eviction. Persistence goes through a KeyValueBackend:

- flush_delay_seconds == 0: the blob is written right after each mutation
- flush_delay_seconds > 0: writes are debounced on a timer thread

A crash between mutation and flush leaves a stale or cold cache, never a
corrupted one (backends replace the whole blob).

Usage:
    store = CacheStore("careers", CacheConfig(ttl_seconds=1800, max_size=100),
                       backend=JsonFileBackend(Path(".cache")))
    store.set("job_42", payload)
    value = store.get("job_42")
    if value is MISS:
        ...
    store.close()
"""

import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from personalization.config_loader import CacheConfig
from personalization.cache.backends import KeyValueBackend
from personalization.cache.models import CacheEntry, CacheStats, MISS

logger = logging.getLogger(__name__)


def _estimate_bytes(key: str, entry: CacheEntry) -> int:
    """Rough UTF-16 size of the serialized entry."""
    try:
        serialized = json.dumps(entry.to_dict(), default=str)
    except (TypeError, ValueError):
        serialized = repr(entry.value)
    return (len(key) + len(serialized)) * 2


class CacheStore:
    """Generic key -> value store with TTL expiry and LRU eviction."""

    def __init__(
        self,
        namespace: str,
        config: Optional[CacheConfig] = None,
        backend: Optional[KeyValueBackend] = None,
        clock: Callable[[], float] = time.time,
        flush_delay_seconds: float = 0.0
    ):
        self.namespace = namespace
        self.config = config or CacheConfig()
        self.backend = backend
        self.flush_delay_seconds = flush_delay_seconds
        self._clock = clock

        # Recency order: least recently used first
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._entry_bytes: Dict[str, int] = {}
        self._lock = threading.RLock()
        self._flush_lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._bytes_total = 0

        self._dirty = False
        self._flush_timer: Optional[threading.Timer] = None
        self._janitor: Optional[threading.Thread] = None
        self._janitor_stop = threading.Event()
        self._closed = False

        if self._persistence_enabled:
            self._load()

    @property
    def ttl_seconds(self) -> float:
        return self.config.ttl_seconds

    @property
    def max_size(self) -> int:
        return self.config.max_size

    @property
    def _persistence_enabled(self) -> bool:
        return self.backend is not None and self.config.persistent

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = MISS) -> Any:
        """
        Return the cached value, or ``default`` (MISS) when absent or expired.

        Expired entries are removed as a side effect and counted as misses.
        """
        expired = False
        with self._lock:
            entry = self._entries.get(key)
            now = self._clock()

            if entry is None:
                self._misses += 1
                logger.debug(f"[{self.namespace}] cache miss for {key}")
                return default

            if entry.is_expired(now, self.ttl_seconds):
                self._remove(key)
                self._misses += 1
                self._dirty = True
                expired = True
                logger.debug(f"[{self.namespace}] cache entry {key} expired")
            else:
                entry.access_count += 1
                entry.last_access_at = now
                self._entries.move_to_end(key)
                self._hits += 1
                logger.debug(f"[{self.namespace}] cache hit for {key}")
                return entry.value

        if expired:
            self._persist()
        return default

    def set(self, key: str, value: Any) -> None:
        """Insert or replace ``key``; evicts the LRU entry when full."""
        with self._lock:
            now = self._clock()
            if key in self._entries:
                self._remove(key)
            elif len(self._entries) >= self.max_size:
                self._evict_least_recently_used()

            entry = CacheEntry(value=value, inserted_at=now, last_access_at=now)
            self._entries[key] = entry
            size = _estimate_bytes(key, entry)
            self._entry_bytes[key] = size
            self._bytes_total += size
            self._dirty = True

        self._persist()

    def has(self, key: str) -> bool:
        """True when ``key`` is present and unexpired. Does not touch stats."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock(), self.ttl_seconds)

    def delete(self, key: str) -> bool:
        with self._lock:
            existed = key in self._entries
            if existed:
                self._remove(key)
                self._dirty = True

        if existed:
            self._persist()
        return existed

    def clear(self) -> None:
        """Drop every entry and reset all counters to zero."""
        with self._lock:
            self._entries.clear()
            self._entry_bytes.clear()
            self._bytes_total = 0
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            self._dirty = True

        logger.info(f"[{self.namespace}] cache cleared")
        self._persist()

    def cleanup(self) -> int:
        """Sweep expired entries. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._entries.items()
                if entry.is_expired(now, self.ttl_seconds)
            ]
            for key in expired_keys:
                self._remove(key)
            if expired_keys:
                self._dirty = True

        if expired_keys:
            logger.debug(f"[{self.namespace}] cleanup removed {len(expired_keys)} expired entries")
            self._persist()
        return len(expired_keys)

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                estimated_bytes=self._bytes_total,
            )

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # Batch operations

    def get_many(self, keys: Iterable[str]) -> Dict[str, Any]:
        return {key: self.get(key) for key in keys}

    def set_many(self, items: Mapping[str, Any]) -> None:
        for key, value in items.items():
            self.set(key, value)

    def preload(self, loader: Callable[[], Mapping[str, Any]]) -> int:
        """Warm the cache from ``loader()``. Returns the number of entries loaded."""
        items = loader()
        self.set_many(items)
        logger.info(f"[{self.namespace}] preloaded {len(items)} entries")
        return len(items)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_janitor(self, interval_seconds: Optional[float] = None) -> None:
        """Run cleanup() on a daemon thread every ``interval_seconds``."""
        if self._janitor is not None and self._janitor.is_alive():
            return
        interval = interval_seconds or self.ttl_seconds
        self._janitor_stop.clear()

        def _run():
            while not self._janitor_stop.wait(interval):
                try:
                    self.cleanup()
                except Exception as e:
                    logger.warning(f"[{self.namespace}] cleanup failed: {e}")

        self._janitor = threading.Thread(
            target=_run, name=f"cache-janitor-{self.namespace}", daemon=True
        )
        self._janitor.start()
        logger.info(f"[{self.namespace}] janitor started (every {interval}s)")

    def stop_janitor(self) -> None:
        self._janitor_stop.set()
        if self._janitor is not None:
            self._janitor.join(timeout=5)
            self._janitor = None

    def close(self) -> None:
        """Stop background work and write any pending changes."""
        if self._closed:
            return
        self._closed = True
        self.stop_janitor()
        with self._lock:
            timer, self._flush_timer = self._flush_timer, None
        if timer is not None:
            timer.cancel()
        if self._dirty:
            self.flush()

    def __enter__(self) -> "CacheStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def flush(self) -> bool:
        """
        Write the current entries to the backend.

        Failures are logged and swallowed; the in-memory cache stays
        authoritative. Returns True when the write succeeded.
        """
        if not self._persistence_enabled:
            return False

        with self._flush_lock:
            with self._lock:
                snapshot = {key: entry.to_dict() for key, entry in self._entries.items()}
                self._dirty = False
                self._flush_timer = None
            try:
                self.backend.save(self.namespace, snapshot)
                return True
            except Exception as e:
                logger.warning(f"[{self.namespace}] failed to persist cache: {e}")
                return False

    def _persist(self) -> None:
        if not self._persistence_enabled or self._closed:
            return
        if self.flush_delay_seconds <= 0:
            self.flush()
            return
        with self._lock:
            if self._flush_timer is not None:
                return
            timer = threading.Timer(self.flush_delay_seconds, self.flush)
            timer.daemon = True
            self._flush_timer = timer
        timer.start()

    def _load(self) -> None:
        """Restore persisted entries; corrupt state means a cold start."""
        try:
            raw = self.backend.load(self.namespace)
            entries = [(str(key), CacheEntry.from_dict(data)) for key, data in raw.items()]
        except Exception as e:
            logger.warning(
                f"[{self.namespace}] discarding unreadable persisted cache, starting cold: {e}"
            )
            return

        now = self._clock()
        live = [
            (key, entry) for key, entry in entries
            if not entry.is_expired(now, self.ttl_seconds)
        ]
        live.sort(key=lambda item: (item[1].last_access_at, item[1].inserted_at))
        if len(live) > self.max_size:
            live = live[-self.max_size:]

        with self._lock:
            for key, entry in live:
                self._entries[key] = entry
                size = _estimate_bytes(key, entry)
                self._entry_bytes[key] = size
                self._bytes_total += size

        logger.info(
            f"[{self.namespace}] restored {len(live)} cached entries "
            f"({len(entries) - len(live)} expired or over capacity)"
        )

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _remove(self, key: str) -> None:
        self._entries.pop(key, None)
        self._bytes_total -= self._entry_bytes.pop(key, 0)

    def _evict_least_recently_used(self) -> None:
        if not self._entries:
            return
        lru_key = next(iter(self._entries))
        self._remove(lru_key)
        self._evictions += 1
        logger.debug(f"[{self.namespace}] evicted least recently used entry {lru_key}")
