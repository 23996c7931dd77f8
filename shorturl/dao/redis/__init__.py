from shorturl.dao.redis.redis_key_schema import RedisKeySchema
from shorturl.dao.redis.mixins import RedisClientMixin
from shorturl.dao.redis.short_url_redis_dao import ShortURLRedisDAO


__all__ = [
    'RedisKeySchema',
    'ShortURLRedisDAO',
    'RedisClientMixin',
]
