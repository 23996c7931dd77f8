from shorturl.dao.base.short_url_base_dao import ShortURLBaseDAO
from shorturl.dao.base.resolution_cache_base_dao import ResolutionCacheBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'ResolutionCacheBaseDAO',
]
