from shorturl.dao.cache.cache_key_schema import CacheKeySchema
from shorturl.dao.cache.memory_cache_dao import ResolutionCacheMemoryDAO
from shorturl.dao.cache.redis_cache_dao import ResolutionCacheRedisDAO


__all__ = [
    'CacheKeySchema',
    'ResolutionCacheMemoryDAO',
    'ResolutionCacheRedisDAO',
]
