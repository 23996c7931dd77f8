"""Redis-backed resolution cache shared between processes.

Keys (no TTL applied; mappings are immutable):
    cache:<prefix>:shortcodes:<shortcode>  -> target URL
    cache:<prefix>:targets:<target>        -> short code
    (<prefix> is "default" when none is given)

Classes:
    ResolutionCacheRedisDAO:
        Concrete resolution cache backed by Redis. Uses RedisClientMixin to
        initialize the Redis client, with CacheKeySchema as its key schema.

Example:
    >>> cache = ResolutionCacheRedisDAO(redis_host='localhost', prefix='shorturl:dev')
    >>> cache.put(cache.keys.target_key('https://example.com'), 'abc123')
    >>> cache.get(cache.keys.target_key('https://example.com'))
    'abc123'
"""

import logging

import redis
from beartype import beartype

from shorturl.dao.base import ResolutionCacheBaseDAO
from shorturl.dao.cache.cache_key_schema import CacheKeySchema
from shorturl.dao.exceptions import CacheMissError, CachePutError
from shorturl.dao.redis.helpers import handle_redis_connection_error
from shorturl.dao.redis.mixins import RedisClientMixin


logger = logging.getLogger(__name__)


class ResolutionCacheRedisDAO(RedisClientMixin, ResolutionCacheBaseDAO):
    """Redis-backed resolution cache

    Accepts the same keyword arguments as RedisClientMixin.

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
    """

    key_schema = CacheKeySchema

    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> str:
        """Return the cached value for `key`

        Raises:
            CacheMissError:
                If `key` is not cached.
            DataStoreError:
                If a Redis connectivity issue occurs (handled by decorator).
        """
        value = self.redis.get(key)
        if value is None:
            raise CacheMissError(f"Cache entry '{key}' not found.")
        return value.decode('utf-8') if isinstance(value, bytes) else value

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, value: str) -> None:
        """Cache `value` under `key` (last write wins)

        Raises:
            CachePutError:
                If Redis refuses the write (e.g. OOM with noeviction policy).
            DataStoreError:
                If a Redis connectivity issue occurs (handled by decorator).
        """
        try:
            stored = self.redis.set(key, value)
        except redis.exceptions.ResponseError as e:
            raise CachePutError(f"Failed to write cache entry '{key}'.") from e
        if not stored:
            raise CachePutError(f"Failed to write cache entry '{key}'.")

    @handle_redis_connection_error
    def clear(self) -> None:
        """Delete every cache key under this cache's prefix"""
        keys = list(self.redis.scan_iter(match=self.keys.all_keys_pattern()))
        if keys:
            self.redis.delete(*keys)
        logger.info('Cleared resolution cache.', extra={'deleted': len(keys)})
