import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing short URL mappings.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shorturl:prod" or "shorturl:dev".

    Target URLs can be arbitrarily long, so the target index key embeds a
    128-bit xxhash digest of the URL instead of the URL itself.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:url'

    @prefix_key
    def target_index_key(self, target: str) -> str:
        digest = xxhash.xxh128_hexdigest(target.encode('utf-8'))
        return f'targets:{digest}:shortcode'

    @prefix_key
    def links_pattern(self) -> str:
        return 'links:*'

    @prefix_key
    def targets_pattern(self) -> str:
        return 'targets:*'
