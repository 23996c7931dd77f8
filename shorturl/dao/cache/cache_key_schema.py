import functools
from collections.abc import Callable


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports

# Namespace for unprefixed caches; keeps clear() away from 'cache:<app>:<env>:*'
DEFAULT_NAMESPACE = 'default'


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}'

    return wrapper


class CacheKeySchema:
    """Provide standardized keys for the resolution cache.

    Every key lives under the 'cache' namespace followed by a custom prefix,
    e.g. "cache:shorturl:prod", or by "default" when no prefix is given. This
    keeps cache entries apart from the short URL mappings even when both share
    one Redis database.

    NOTE: Yes, this class mirrors RedisKeySchema, but we don't want to spaghettify
    the caching layer with our Redis datastore backend.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else f'cache:{DEFAULT_NAMESPACE}'

    @prefix_key
    def shortcode_key(self, shortcode: str) -> str:
        return f'shortcodes:{shortcode}'

    @prefix_key
    def target_key(self, target: str) -> str:
        return f'targets:{target}'

    @prefix_key
    def all_keys_pattern(self) -> str:
        return '*'
