"""Process-local, time-expiring read cache for repositories.

One TTLCache per entity namespace so a write can drop every entry of its
namespace at once. Construct one instance at startup and pass it to every
repository; it is never reset implicitly.
"""

import json
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TTLCache

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 1024

_MISSING = object()


def make_key(operation: str, params: dict[str, Any] | None = None) -> str:
    """Stable key from an operation name and its parameters (parameter order does not matter)."""
    return f"{operation}:{json.dumps(params or {}, sort_keys=True, default=str)}"


class CacheService:
    """Namespaced TTL cache. Safe to share between request threads."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._max_entries = max_entries
        self._timer = timer
        self._namespaces: dict[str, TTLCache] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def _namespace(self, namespace: str) -> TTLCache:
        cache = self._namespaces.get(namespace)
        if cache is None:
            cache = TTLCache(maxsize=self._max_entries, ttl=self._ttl, timer=self._timer)
            self._namespaces[namespace] = cache
        return cache

    def get(self, namespace: str, key: str) -> tuple[bool, Any]:
        """Return (hit, value). A hit may carry None: absent results are cached too."""
        with self._lock:
            value = self._namespace(namespace).get(key, _MISSING)
            if value is not _MISSING:
                self._hits += 1
                return True, value
            self._misses += 1
            return False, None

    def set(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            self._namespace(namespace)[key] = value

    def invalidate(self, namespace: str) -> None:
        """Drop every entry of the namespace."""
        with self._lock:
            cache = self._namespaces.get(namespace)
            if cache is not None:
                cache.clear()

    def clear(self) -> None:
        with self._lock:
            for cache in self._namespaces.values():
                cache.clear()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            entries = {}
            for name, cache in self._namespaces.items():
                cache.expire()
                entries[name] = len(cache)
            return {"entries": entries, "hits": self._hits, "misses": self._misses}
