"""Helper utilities.

Functions:
    get_short_url(shortcode, prefix=SHORT_URL_PREFIX) -> str
        Get string representation of short URL for a given shortcode
    redis_kwargs(backend_config) -> dict
        Map a Redis backend config section onto RedisClientMixin keyword arguments

Example:
    >>> get_short_url('abc123')
    'http://localhost:3000/abc123'
    >>> get_short_url('abc123', prefix='https://sho.rt/')
    'https://sho.rt/abc123'
"""

from typing import Any

from shorturl.constants import SHORT_URL_PREFIX


def get_short_url(shortcode: str, prefix: str = SHORT_URL_PREFIX) -> str:
    """Get string representation of shortened URL

    The prefix is prepended verbatim, so it must carry its own trailing
    separator (e.g. 'https://sho.rt/').

    Args:
        shortcode (str): shortcode
        prefix (str): short URL prefix

    Returns:
        str: short url string representation
    """
    return f'{prefix}{shortcode}'


def redis_kwargs(backend_config: dict[str, Any]) -> dict[str, Any]:
    """Prefix every Redis config key with 'redis_'

    Example:
        >>> redis_kwargs({'host': 'redis', 'port': 6379})
        {'redis_host': 'redis', 'redis_port': 6379}
    """
    return {f'redis_{k}': v for k, v in backend_config.items()}
