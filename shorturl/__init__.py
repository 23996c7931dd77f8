from shorturl.allocator import ShortURLAllocator
from shorturl.models import CreateShortURLResult, ReadShortURLResult, ShortURLModel


__all__ = [
    'ShortURLAllocator',
    'CreateShortURLResult',
    'ReadShortURLResult',
    'ShortURLModel',
]
