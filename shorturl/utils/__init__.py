from shorturl.utils.config import app_env, app_name, app_prefix, config_dir, load_config
from shorturl.utils.helpers import get_short_url, redis_kwargs
from shorturl.utils.shortener import generate_shortcode
from shorturl.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'config_dir',
    'load_config',
    'get_short_url',
    'redis_kwargs',
    'initialize_logging',
]
