"""Data Access Object (DAO) implementation for managing short URL mappings in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
insert/lookup operations with ShortURLModel instances.

Responsibilities:
    - Insert short URL mappings with an atomic uniqueness check (SET NX);
    - Retrieve mappings by short code;
    - Maintain and query a target URL -> short code secondary index;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Keys:
    <prefix>:links:<shortcode>:url                  -> target URL
    <prefix>:targets:<xxh128(target)>:shortcode     -> first short code stored for the target

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from shorturl.models import ShortURLModel
    >>> from shorturl.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123"
    ... )
    >>> dao.insert(short_url)
    <ShortURLRedisDAO>

    >>> dao.get("abc123").target
    'https://example.com/page'
    >>> dao.find_by_target("https://example.com/page").shortcode
    'abc123'
"""

import logging

from beartype import beartype

from shorturl.models import ShortURLModel
from shorturl.dao.base import ShortURLBaseDAO
from shorturl.dao.redis.mixins import RedisClientMixin
from shorturl.dao.redis.helpers import handle_redis_connection_error
from shorturl.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


logger = logging.getLogger(__name__)


def _decode(value: str | bytes | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode('utf-8')
    return value


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Insert a short URL mapping and index it by target URL.
            Raises ShortURLAlreadyExistsError when a URL with the same shortcode exists.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a short URL mapping by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        find_by_target(target: str, **kwargs) -> ShortURLModel:
            Retrieve the indexed short URL mapping of a target URL.
            Raises ShortURLNotFoundError when no mapping targets the URL.
            Raises DataStoreError on connectivity issues with Redis.

        create_table(**kwargs) -> None:
            Redis needs no schema. Verifies connectivity only.

        drop_table(**kwargs) -> None:
            Delete every mapping and index key under the DAO's prefix.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The mapping key is written with SET NX, so the existence check and the
        write are a single atomic Redis command. Of two concurrent inserts with
        the same shortcode exactly one succeeds.

        The target index is written afterwards, also with SET NX, so the first
        mapping stored for a target keeps the index slot.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> short_url = ShortURLModel(
            ...     target='https://example.com',
            ...     shortcode='abc123'
            ... )
            >>> dao.insert(short_url)
            <ShortURLRedisDAO>
        """
        link_url_key = self.keys.link_url_key(short_url.shortcode)
        target_index_key = self.keys.target_index_key(short_url.target)

        if not self.redis.set(link_url_key, short_url.target, nx=True):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

        # NOTE: The mapping and the index are two separate commands. If the process
        #       dies in between, the mapping exists without an index entry:
        #
        #       (process 1): SET <app>:links:<shortcode>:url <target> NX  => OK
        #                    ... crash
        #       (process 2): GET <app>:targets:<hash>:shortcode            => nil
        #
        #       The mapping stays readable by shortcode. The next create for the
        #       same target without a shortcode allocates a new mapping and indexes it.
        self.redis.set(target_index_key, short_url.shortcode, nx=True)
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel:
                The retrieved ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123')
        """
        target = _decode(self.redis.get(self.keys.link_url_key(shortcode)))
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel(target=target, shortcode=shortcode)

    @handle_redis_connection_error
    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel:
        """Retrieve the indexed short URL mapping of a target URL

        The index entry is cross-checked against the mapping it points to,
        which guards against xxhash digest collisions between different targets.

        Args:
            target (str):
                The long URL to look up.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel:
                The mapping indexed for the target.

        Raises:
            ShortURLNotFoundError:
                If no mapping is indexed for the target.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        shortcode = _decode(self.redis.get(self.keys.target_index_key(target)))
        if shortcode is None:
            raise ShortURLNotFoundError(f"No short URL targets '{target}'.")

        stored_target = _decode(self.redis.get(self.keys.link_url_key(shortcode)))
        if stored_target != target:
            logger.warning(
                'Target index entry points to a mapping with a different target.',
                extra={'shortcode': shortcode},
            )
            raise ShortURLNotFoundError(f"No short URL targets '{target}'.")

        return ShortURLModel(target=target, shortcode=shortcode)

    @handle_redis_connection_error
    def create_table(self, **kwargs) -> None:
        """Redis is schemaless: only verify connectivity"""
        self._healthcheck()

    @handle_redis_connection_error
    def drop_table(self, **kwargs) -> None:
        """Delete all mapping and target index keys under this DAO's prefix"""
        deleted = 0
        for pattern in (self.keys.links_pattern(), self.keys.targets_pattern()):
            keys = list(self.redis.scan_iter(match=pattern))
            if keys:
                deleted += self.redis.delete(*keys)
        logger.info('Dropped short URL keys from Redis.', extra={'deleted': deleted})
