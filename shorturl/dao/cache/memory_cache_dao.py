"""In-process resolution cache.

Entries live in a dictionary guarded by a lock, so the cache can be shared by
all request threads of one process. It is unbounded by default; pass
`max_entries` to evict the least recently used entries beyond that size.

Example:
    >>> cache = ResolutionCacheMemoryDAO(max_entries=10_000)
    >>> cache.put(cache.keys.shortcode_key('abc123'), 'https://example.com')
    >>> cache.get(cache.keys.shortcode_key('abc123'))
    'https://example.com'
    >>> cache.get(cache.keys.shortcode_key('zzz999'))
    Traceback (most recent call last):
        ...
    shorturl.dao.exceptions.CacheMissError: Cache entry 'cache:default:shortcodes:zzz999' not found.
"""

import threading
from collections import OrderedDict
from typing import Optional

from shorturl.dao.base import ResolutionCacheBaseDAO
from shorturl.dao.cache.cache_key_schema import CacheKeySchema
from shorturl.dao.exceptions import CacheMissError


class ResolutionCacheMemoryDAO(ResolutionCacheBaseDAO):
    """Thread-safe in-memory resolution cache with optional LRU bound

    Attributes:
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
        max_entries (Optional[int]):
            Maximum number of entries kept; None means unbounded.
    """

    def __init__(self, prefix: Optional[str] = None, max_entries: Optional[int] = None):
        if max_entries is not None and (not isinstance(max_entries, int) or max_entries < 1):
            raise ValueError(f'max_entries must be a positive integer or None (given value: {max_entries!r}).')

        self.keys = CacheKeySchema(prefix=prefix)
        self.max_entries = max_entries
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> str:
        with self._lock:
            try:
                value = self._entries[key]
            except KeyError:
                raise CacheMissError(f"Cache entry '{key}' not found.") from None
            if self.max_entries is not None:
                self._entries.move_to_end(key)
            return value

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._entries[key] = value
            if self.max_entries is not None:
                self._entries.move_to_end(key)
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
