"""Redis client plumbing shared by the Redis mapping store and the Redis resolution cache.

Responsibilities:
    - Build a Redis client from `redis_*` keyword arguments (or adopt a given one)
    - Attach the subclass's key schema under the configured prefix
    - PING Redis once at construction so misconfiguration fails fast

Classes:
    - RedisClientMixin: Base mixin for Redis-backed DAOs.

Example:
    Both Redis DAOs accept the `redis_*` section of the configuration document:

        >>> store = ShortURLRedisDAO(redis_host='localhost', prefix='shorturl:dev')
        >>> store.keys.link_url_key('abc123')
        'shorturl:dev:links:abc123:url'
        >>> cache = ResolutionCacheRedisDAO(redis_client=store.redis, prefix='shorturl:dev')
        >>> cache.keys.shortcode_key('abc123')
        'cache:shorturl:dev:shortcodes:abc123'
"""

from typing import Optional

import redis

from shorturl.dao.redis.redis_key_schema import RedisKeySchema
from shorturl.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client setup and healthcheck for Redis-backed DAOs.

    Subclasses choose their key layout through `key_schema`; the mapping store
    keeps RedisKeySchema, the resolution cache swaps in CacheKeySchema.

    Attributes:
        key_schema (type):
            Key schema class instantiated with the DAO's prefix.
        redis (redis.Redis):
            Active Redis client instance used by subclasses.
        keys:
            `key_schema` instance generating namespaced key names.
    """

    key_schema = RedisKeySchema

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a Redis-backed DAO

        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, as found under `backends.redis` in the
                configuration document (see `shorturl.utils.helpers.redis_kwargs`).
                Ports and db indexes given as strings are converted.
            redis_decode_responses (Optional[bool]):
                If True, Redis returns str instead of bytes. Defaults to True.
            redis_socket_timeout (Optional[float]):
                Seconds to wait on a socket read/write. None waits indefinitely.
            redis_client (Optional[redis.Redis]):
                Pre-initialized client; the connection parameters are ignored.
            prefix (Optional[str]):
                Namespace for all keys, usually `app_prefix()` ('<app>:<env>').

        Raises:
            DataStoreError:
                If Redis does not answer the initial PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = self.key_schema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool:
                True if Redis answered, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis is unreachable or the PING timed out and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(
                f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')}. "
                'Check the provided configuration parameters.'
            ) from e
        return True
