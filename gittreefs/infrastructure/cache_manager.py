#!/usr/bin/env python3
"""Append-only path cache with per-key load de-duplication for GitTreeFS.

The objects behind a fixed revision never change, so cached values are
never evicted or invalidated. What this module adds over a plain dict is
coordination of concurrent loads:
- The first caller for a missing key runs the loader outside any lock
- Concurrent callers for the same key wait on that caller's Future
- Loads of different keys proceed in parallel
- A failed load is reported to every waiter and is not cached

Example:
    >>> cache = CacheManager()
    >>> tree = cache.get_or_load(CacheNamespace.TREES, "src", lambda: fetch_tree(url))
    >>> cache.get(CacheNamespace.TREES, "src") is tree
    True
"""

import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, TypeVar

from gittreefs.core.constants import CacheNamespace

T = TypeVar("T")


@dataclass
class CacheStats:
    """Counters for one cache namespace."""

    hits: int = 0
    misses: int = 0
    loads: int = 0
    failures: int = 0
    coalesced: int = 0  # callers that waited on another caller's load

    def as_dict(self) -> Dict[str, int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "loads": self.loads,
            "failures": self.failures,
            "coalesced": self.coalesced,
        }


class PathCache:
    """Thread-safe append-only mapping from path to loaded value."""

    def __init__(self, name: str = "cache"):
        """Initialize path cache.

        Args:
            name: Label used in statistics
        """
        self.name = name
        self._values: Dict[str, Any] = {}
        self._inflight: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self._stats = CacheStats()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def get(self, key: str) -> Optional[Any]:
        """Get a cached value without loading it.

        A value found counts as a hit; an absent one counts nothing, since
        the caller usually follows up with get_or_load().

        Args:
            key: Cache key

        Returns:
            Cached value or None if not loaded yet
        """
        with self._lock:
            value = self._values.get(key)
            if value is not None:
                self._stats.hits += 1
            return value

    def get_or_load(self, key: str, loader: Callable[[], T]) -> T:
        """Return the cached value for key, loading it at most once.

        Args:
            key: Cache key
            loader: Zero-argument callable producing the value

        Returns:
            Cached or freshly loaded value

        Raises:
            Whatever the loader raised, for the caller that ran it and for
            every caller that waited on it
        """
        with self._lock:
            if key in self._values:
                self._stats.hits += 1
                return self._values[key]

            future = self._inflight.get(key)
            if future is None:
                self._stats.misses += 1
                future = Future()
                self._inflight[key] = future
                owner = True
            else:
                self._stats.coalesced += 1
                owner = False

        if not owner:
            return future.result()

        try:
            value = loader()
        except BaseException as exc:
            with self._lock:
                self._stats.failures += 1
                del self._inflight[key]
            future.set_exception(exc)
            raise

        with self._lock:
            self._stats.loads += 1
            self._values[key] = value
            del self._inflight[key]
        future.set_result(value)
        return value

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Iterate over a snapshot of cached (key, value) pairs."""
        with self._lock:
            snapshot = list(self._values.items())
        return iter(snapshot)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Cache statistics
        """
        with self._lock:
            stats: Dict[str, Any] = self._stats.as_dict()
            stats["entries"] = len(self._values)
            stats["inflight"] = len(self._inflight)
            total_requests = self._stats.hits + self._stats.misses
            stats["hit_rate"] = self._stats.hits / total_requests if total_requests > 0 else 0
            return stats


class CacheManager:
    """Per-filesystem cache holding one PathCache per namespace."""

    def __init__(self):
        """Initialize cache manager with an empty cache for every namespace."""
        self.caches: Dict[CacheNamespace, PathCache] = {
            namespace: PathCache(namespace.value) for namespace in CacheNamespace
        }

    def get(self, namespace: CacheNamespace, key: str) -> Optional[Any]:
        """Get value from cache.

        Args:
            namespace: Cache namespace
            key: Cache key (canonical path)

        Returns:
            Cached value or None
        """
        return self.caches[namespace].get(key)

    def contains(self, namespace: CacheNamespace, key: str) -> bool:
        """Check whether a key has been loaded."""
        return key in self.caches[namespace]

    def get_or_load(self, namespace: CacheNamespace, key: str, loader: Callable[[], T]) -> T:
        """Get value from cache, loading it with loader on a miss.

        Args:
            namespace: Cache namespace
            key: Cache key (canonical path)
            loader: Zero-argument callable producing the value

        Returns:
            Cached or freshly loaded value
        """
        return self.caches[namespace].get_or_load(key, loader)

    def get_stats(self, namespace: Optional[CacheNamespace] = None) -> Dict[str, Any]:
        """Get cache statistics.

        Args:
            namespace: Specific namespace or None for all namespaces

        Returns:
            Cache statistics
        """
        if namespace:
            return self.caches[namespace].get_stats()

        stats: Dict[str, Any] = {
            ns.value: cache.get_stats() for ns, cache in self.caches.items()
        }
        stats["totals"] = {
            "total_entries": sum(s["entries"] for s in stats.values()),
            "total_hits": sum(s["hits"] for s in stats.values()),
            "total_misses": sum(s["misses"] for s in stats.values()),
        }
        return stats
