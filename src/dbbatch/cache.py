"""
Caching for batching metadata.

Binding tables are derived from function signatures, which do not change at
runtime, so they are held in LRU caches.
"""
import functools
import logging
import threading

import cachetools

logger = logging.getLogger(__name__)


class Cache:
    """Cache manager for the dbbatch module.

    Thread-safe singleton that manages all named caches.
    """

    _instance = None
    _caches: dict[str, cachetools.Cache] = {}
    _lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'Cache':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get_cache(self, name: str, maxsize: int = 100) -> cachetools.Cache:
        """Get or create a cache with the given name.

        Args:
            name: Name of the cache
            maxsize: Maximum cache size

        Returns
            Cache instance
        """
        if name not in self._caches:
            with self._lock:
                if name not in self._caches:
                    self._caches[name] = cachetools.LRUCache(maxsize=maxsize)
        return self._caches[name]

    def clear_all(self) -> None:
        """Clear all managed caches."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()

    def clear_cache(self, name: str) -> None:
        """Clear a specific cache by name."""
        with self._lock:
            if name in self._caches:
                self._caches[name].clear()


def cached_by_function(cache_name: str, maxsize: int = 256):
    """Decorator caching the result of a one-argument builder keyed by the
    function object it is given.

    Args:
        cache_name: Name of the managed cache
        maxsize: Maximum cache size
    """
    def decorator(builder):
        @functools.wraps(builder)
        def wrapper(func):
            cache = Cache.get_instance().get_cache(cache_name, maxsize=maxsize)
            key = getattr(func, '__func__', func)
            name = getattr(key, '__qualname__', repr(key))
            with Cache._lock:
                if key in cache:
                    logger.debug(f'Cache hit for {builder.__name__}({name})')
                    return cache[key]
            logger.debug(f'Cache miss for {builder.__name__}({name})')
            result = builder(key)
            with Cache._lock:
                cache[key] = result
            return result

        return wrapper
    return decorator
