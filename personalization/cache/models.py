#!/usr/bin/env python3
"""
Cache Models - Entry, stats, and the miss sentinel.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


class _Miss:
    """Sentinel for cache misses; misses are control flow, not errors."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS = _Miss()


@dataclass
class CacheEntry:
    """A cached value and its access bookkeeping. Owned by one CacheStore."""
    value: Any
    inserted_at: float
    last_access_at: float
    access_count: int = 0

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.inserted_at > ttl_seconds

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(
            value=data["value"],
            inserted_at=float(data["inserted_at"]),
            last_access_at=float(data.get("last_access_at", data["inserted_at"])),
            access_count=int(data.get("access_count", 0)),
        )


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time snapshot of a store's counters."""
    size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    estimated_bytes: int = 0

    @property
    def hit_rate(self) -> float:
        requests = self.hits + self.misses
        return self.hits / requests if requests > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["hit_rate"] = self.hit_rate
        return data
