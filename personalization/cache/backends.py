"""Persistence backends - durable key-value blobs behind the cache store."""
import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from redis import Redis
from tenacity import retry, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class KeyValueBackend(ABC):
    """
    Opaque durable storage for one blob per namespace.

    The cache store hands over a mapping of key -> serialized CacheEntry
    and expects the same mapping back on load. Swapping implementations
    must not change cache semantics.
    """

    @abstractmethod
    def load(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        """Return the persisted entries for ``namespace`` ({} when none)."""

    @abstractmethod
    def save(self, namespace: str, entries: Dict[str, Dict[str, Any]]) -> None:
        """Replace the persisted entries for ``namespace``."""


class MemoryBackend(KeyValueBackend):
    """In-process backend; blobs are deep-copied so callers cannot alias them."""

    def __init__(self):
        self._blobs: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def load(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self._blobs.get(namespace, {}))

    def save(self, namespace: str, entries: Dict[str, Dict[str, Any]]) -> None:
        self._blobs[namespace] = copy.deepcopy(entries)

    def namespaces(self):
        return list(self._blobs.keys())


class JsonFileBackend(KeyValueBackend):
    """
    One JSON file per namespace.

    Layout:
      <base_dir>/
        cache_<namespace>.json -> { "<key>": {CacheEntry...}, ... }
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, namespace: str) -> Path:
        return self.base_dir / f"cache_{namespace}.json"

    def load(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        path = self._path(namespace)
        if not path.exists():
            return {}
        raw_text = path.read_text(encoding="utf-8").strip()
        if not raw_text:
            return {}
        data = json.loads(raw_text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
        return data

    def save(self, namespace: str, entries: Dict[str, Dict[str, Any]]) -> None:
        path = self._path(namespace)
        # Write to a sibling temp file then rename, so a crash mid-write
        # leaves the previous blob intact
        fd, tmp_path = tempfile.mkstemp(dir=self.base_dir, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, sort_keys=True)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


class RedisBackend(KeyValueBackend):
    """One JSON blob per namespace stored under ``<key_prefix><namespace>``."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        key_prefix: str = "cache:",
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._redis = client or Redis.from_url(
            redis_url,
            password=password,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        logger.info(f"Cache persistence using Redis at {_sanitize_url(redis_url)}")

    def _make_key(self, namespace: str) -> str:
        return f"{self.key_prefix}{namespace}"

    def load(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        data = self._redis.get(self._make_key(namespace))
        if not data:
            return {}
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError(f"Expected a JSON object for namespace '{namespace}'")
        return parsed

    @retry(stop=stop_after_attempt(3), wait=wait_fixed(0.1), reraise=True)
    def save(self, namespace: str, entries: Dict[str, Dict[str, Any]]) -> None:
        self._redis.set(self._make_key(namespace), json.dumps(entries, sort_keys=True))


def build_backend(persistence_config) -> KeyValueBackend:
    """Create the backend named by a PersistenceConfig."""
    kind = persistence_config.backend
    if kind == "file":
        return JsonFileBackend(Path(persistence_config.directory))
    if kind == "redis":
        return RedisBackend(
            redis_url=persistence_config.redis_url,
            password=persistence_config.password,
        )
    return MemoryBackend()
