"""Abstract base class for resolution cache data access objects (DAOs).

A resolution cache mirrors a subset of the short URL mappings so reads can
skip the data store. It is a best-effort accelerator: a miss never means the
mapping doesn't exist, callers always fall through to the data store.

Keys are produced by CacheKeySchema and come in two flavours:
    - shortcode keys, holding the target URL of a short code
    - target keys, holding the short code of a target URL

Example:
    >>> from shorturl.dao.cache import ResolutionCacheMemoryDAO
    >>> cache = ResolutionCacheMemoryDAO()
    >>> cache.put(cache.keys.shortcode_key('abc123'), 'https://example.com')
    >>> cache.get(cache.keys.shortcode_key('abc123'))
    'https://example.com'
    >>> cache.clear()
"""

from abc import ABC, abstractmethod


class ResolutionCacheBaseDAO(ABC):
    """Interface for resolution cache DAOs.

    Attributes:
        keys (CacheKeySchema):
            Helper class for generating namespaced cache keys.

    Methods:
        get(key: str) -> str:
            Return the cached value.
            Raises CacheMissError on miss.

        put(key: str, value: str) -> None:
            Store a value. Concurrent puts for the same key are last-write-wins.
            Raises CachePutError if the write fails.

        clear() -> None:
            Drop every entry owned by this cache (test/reset workflows only).

    NOTE:
        - Entries are never individually invalidated or expired: mappings are
          immutable once created.
    """

    @abstractmethod
    def get(self, key: str) -> str:
        """Return the cached value for `key`.

        Raises:
            CacheMissError:
                If `key` is not cached.
        """
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Cache `value` under `key`.

        Raises:
            CachePutError:
                If the value cannot be written.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Invalidate the whole cache."""
        pass
