"""
Response cache for listing and ranking endpoints.

In-memory, LRU-evicted, with a per-entry TTL. Any write that changes what
a listing would show clears the cache.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass
class CacheEntry:
    value: Any
    expires_at: datetime | None


class ResponseCache:
    """In-memory cache with LRU eviction and TTL."""

    def __init__(self, max_size: int = 256, default_ttl: int | None = 60):
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._cache: dict[str, CacheEntry] = {}  # insertion order doubles as LRU order

    def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None:
            return None

        if entry.expires_at and entry.expires_at < datetime.now():
            self.delete(key)
            return None

        # Move to the most-recently-used end
        self._cache[key] = self._cache.pop(key)
        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = ttl if ttl is not None else self.default_ttl
        self._cache.pop(key, None)
        while len(self._cache) >= self.max_size:
            oldest_key = next(iter(self._cache))
            del self._cache[oldest_key]

        expires_at = datetime.now() + timedelta(seconds=ttl) if ttl else None
        self._cache[key] = CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> int:
        """Drop every entry. Returns how many were dropped."""
        dropped = len(self._cache)
        self._cache.clear()
        return dropped

    @property
    def size(self) -> int:
        return len(self._cache)


def make_key(namespace: str, **params: Any) -> str:
    """Build a stable cache key from a namespace and query parameters."""
    parts = []
    for name in sorted(params):
        value = params[name]
        if isinstance(value, (list, tuple)):
            value = ",".join(sorted(str(v) for v in value))
        parts.append(f"{name}={value}")
    return f"{namespace}?{'&'.join(parts)}"


def create_cache(max_size: int = 256, default_ttl: int | None = 60) -> ResponseCache:
    """Factory function to create a ResponseCache instance."""
    return ResponseCache(max_size=max_size, default_ttl=default_ttl)
