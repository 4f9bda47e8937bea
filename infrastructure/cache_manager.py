"""
infrastructure/cache_manager.py

Named result caches for the SixNine expression search.

A finished search is deterministic for a given operation budget and search
configuration, and N=5 already takes minutes, so results are kept in named
cachetools.TTLCache instances. Each name carries its own size/TTL policy and
hit/miss counters.

Usage:
    from infrastructure.cache_manager import get_cache_manager

    cache_mgr = get_cache_manager()
    cache_mgr.register_cache("expression_search_results", maxsize=16, ttl=3600)

    cache_mgr.set("expression_search_results", "n=3|power=1", result)
    result = cache_mgr.get("expression_search_results", "n=3|power=1")

    stats = cache_mgr.get_stats("expression_search_results")
    print(f"Hit rate: {stats['hit_rate']:.2%}")
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from cachetools import TTLCache

from component_5_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CacheStatistics:
    """Request counters of one named cache"""

    cache_name: str
    hits: int = 0
    misses: int = 0
    sets: int = 0
    invalidations: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Share of requests answered from the cache (0.0-1.0)"""
        if not self.total_requests:
            return 0.0
        return self.hits / self.total_requests


@dataclass
class CachePolicy:
    maxsize: int
    ttl: int  # seconds


@dataclass
class NamedCache:
    """A TTLCache together with its policy and counters"""

    store: TTLCache
    policy: CachePolicy
    stats: CacheStatistics

    @classmethod
    def create(cls, name: str, maxsize: int, ttl: int) -> "NamedCache":
        return cls(
            store=TTLCache(maxsize=maxsize, ttl=ttl),
            policy=CachePolicy(maxsize=maxsize, ttl=ttl),
            stats=CacheStatistics(cache_name=name),
        )

    def describe(self) -> Dict[str, Any]:
        return {
            "cache_name": self.stats.cache_name,
            "hits": self.stats.hits,
            "misses": self.stats.misses,
            "sets": self.stats.sets,
            "invalidations": self.stats.invalidations,
            "total_requests": self.stats.total_requests,
            "hit_rate": self.stats.hit_rate,
            "size": len(self.store),
            "maxsize": self.policy.maxsize,
            "ttl": self.policy.ttl,
            "created_at": self.stats.created_at.isoformat(),
        }


class CacheManager:
    """
    Process-wide registry of named caches (singleton).

    All operations take an RLock, so searches running in worker threads can
    share it.
    """

    _instance: Optional["CacheManager"] = None
    _lock = threading.RLock()

    def __new__(cls) -> "CacheManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._caches: Dict[str, NamedCache] = {}
        self._cache_lock = threading.RLock()
        self._initialized = True

        logger.info("CacheManager initialized")

    def _named(self, cache_name: str) -> NamedCache:
        named = self._caches.get(cache_name)
        if named is None:
            raise ValueError(f"Cache '{cache_name}' not registered")
        return named

    def register_cache(
        self, name: str, maxsize: int, ttl: int, overwrite: bool = False
    ) -> None:
        """
        Create a named cache.

        Raises:
            ValueError: for a non-positive maxsize/ttl, or if the name is taken
                and overwrite is False
        """
        if maxsize <= 0 or ttl <= 0:
            raise ValueError(
                f"maxsize and ttl must be positive, got maxsize={maxsize}, ttl={ttl}"
            )

        with self._cache_lock:
            replacing = name in self._caches
            if replacing and not overwrite:
                raise ValueError(
                    f"Cache '{name}' already registered. Use overwrite=True to replace."
                )
            self._caches[name] = NamedCache.create(name, maxsize, ttl)

        logger.info(
            "Cache %s: %s (maxsize=%d, ttl=%ds)",
            "replaced" if replacing else "registered",
            name,
            maxsize,
            ttl,
        )

    def is_registered(self, cache_name: str) -> bool:
        with self._cache_lock:
            return cache_name in self._caches

    def get_policy(self, cache_name: str) -> CachePolicy:
        with self._cache_lock:
            return self._named(cache_name).policy

    def get(self, cache_name: str, key: str) -> Optional[Any]:
        """Cached value, or None on a miss or after expiry"""
        with self._cache_lock:
            named = self._named(cache_name)
            value = named.store.get(key)
            if value is None:
                named.stats.misses += 1
                logger.debug("Cache MISS: %s[%s]", cache_name, key)
            else:
                named.stats.hits += 1
                logger.debug("Cache HIT: %s[%s]", cache_name, key)
            return value

    def set(self, cache_name: str, key: str, value: Any) -> None:
        with self._cache_lock:
            named = self._named(cache_name)
            named.store[key] = value
            named.stats.sets += 1
            logger.debug("Cache SET: %s[%s]", cache_name, key)

    def invalidate(self, cache_name: str, key: Optional[str] = None) -> int:
        """
        Drop one key, or the whole cache when key is None.

        Returns:
            Number of entries removed
        """
        with self._cache_lock:
            named = self._named(cache_name)
            if key is None:
                removed = len(named.store)
                named.store.clear()
            else:
                removed = 1 if named.store.pop(key, None) is not None else 0
            named.stats.invalidations += removed

        logger.info("Cache INVALIDATE: %s (%d entries)", cache_name, removed)
        return removed

    def get_stats(self, cache_name: Optional[str] = None) -> Dict[str, Any]:
        """Statistics of one cache, or {name: statistics} for all of them"""
        with self._cache_lock:
            if cache_name is None:
                return {name: named.describe() for name, named in self._caches.items()}
            return self._named(cache_name).describe()

    def list_caches(self) -> List[str]:
        with self._cache_lock:
            return sorted(self._caches)


_cache_manager_instance: Optional[CacheManager] = None
_instance_lock = threading.RLock()


def get_cache_manager() -> CacheManager:
    """Global CacheManager, created on first use"""
    global _cache_manager_instance

    if _cache_manager_instance is None:
        with _instance_lock:
            if _cache_manager_instance is None:
                _cache_manager_instance = CacheManager()

    return _cache_manager_instance


def reset_cache_manager() -> None:
    """
    Forget the global CacheManager and all of its caches.

    Only meant for tests.
    """
    global _cache_manager_instance

    with _instance_lock:
        if _cache_manager_instance is not None:
            with _cache_manager_instance._cache_lock:
                _cache_manager_instance._caches.clear()
            _cache_manager_instance = None
            CacheManager._instance = None
            logger.warning("CacheManager singleton reset")
