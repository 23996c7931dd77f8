"""Wire DAOs and the allocator from a configuration document

Functions:
    create_short_url_dao(config) -> ShortURLBaseDAO
        Instantiate the mapping store selected by `active_backend`.

    create_resolution_cache(config) -> ResolutionCacheBaseDAO
        Instantiate the resolution cache selected by `cache.backend`.

    create_allocator(config) -> ShortURLAllocator
        Build an allocator on top of both.

Redis-backed DAOs are namespaced with `app_prefix()` (<APP_NAME>:<APP_ENV>).

Example:
    >>> from shorturl.utils import load_config
    >>> allocator = create_allocator(load_config())
    >>> allocator.create_short_url('https://example.com').ok
    True
"""

import logging
from typing import Any

from shorturl.allocator import ShortURLAllocator
from shorturl.constants import Backend
from shorturl.dao.base import ResolutionCacheBaseDAO, ShortURLBaseDAO
from shorturl.dao.cache import ResolutionCacheMemoryDAO, ResolutionCacheRedisDAO
from shorturl.dao.dynamodb import ShortURLDynamoDBDAO
from shorturl.dao.memory import ShortURLMemoryDAO
from shorturl.dao.redis import ShortURLRedisDAO
from shorturl.exceptions import BadConfigurationError
from shorturl.utils import app_prefix, redis_kwargs


logger = logging.getLogger(__name__)


def create_short_url_dao(config: dict[str, Any]) -> ShortURLBaseDAO:
    backend = config.get('active_backend')
    logger.debug('Creating short URL DAO.', extra={'backend': backend})

    match backend:
        case Backend.REDIS:
            return ShortURLRedisDAO(**redis_kwargs(config['backends']['redis']), prefix=app_prefix())
        case Backend.DYNAMODB:
            return ShortURLDynamoDBDAO(**config['backends']['dynamodb'])
        case Backend.MEMORY:
            return ShortURLMemoryDAO()
        case _:
            raise BadConfigurationError(f'Unknown active_backend {backend!r}.')


def create_resolution_cache(config: dict[str, Any]) -> ResolutionCacheBaseDAO:
    cache_config = config.get('cache') or {}
    backend = cache_config.get('backend', Backend.MEMORY)
    logger.debug('Creating resolution cache.', extra={'backend': backend})

    match backend:
        case Backend.MEMORY:
            return ResolutionCacheMemoryDAO(prefix=app_prefix(), max_entries=cache_config.get('max_entries'))
        case Backend.REDIS:
            return ResolutionCacheRedisDAO(**redis_kwargs(config['backends']['redis']), prefix=app_prefix())
        case _:
            raise BadConfigurationError(f'Unknown cache backend {backend!r}.')


def create_allocator(config: dict[str, Any]) -> ShortURLAllocator:
    shortener_config = config.get('shortener') or {}
    kwargs = {}
    if 'short_url_prefix' in shortener_config:
        kwargs['short_url_prefix'] = shortener_config['short_url_prefix']
    if 'max_allocation_attempts' in shortener_config:
        kwargs['max_attempts'] = shortener_config['max_allocation_attempts']

    return ShortURLAllocator(
        dao=create_short_url_dao(config),
        cache=create_resolution_cache(config),
        **kwargs,
    )
